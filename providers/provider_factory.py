import os
from typing import Dict
import logging

from providers.base import BaseProvider
from providers.adzuna import AdzunaProvider
from providers.careeronestop import CareerOneStopProvider
from providers.usajobs import USAJobsProvider
from providers.mock_provider import MockProvider

# Invocation order: dedupe keeps the first provider's copy of a posting
PROVIDER_CLASSES = [AdzunaProvider, CareerOneStopProvider, USAJobsProvider]

class ProviderFactory:
    """Factory class for creating job API providers"""

    @staticmethod
    def create_providers() -> Dict[str, BaseProvider]:
        """
        Create and return all available providers

        Returns:
            Dictionary of providers keyed by id, in invocation order
        """
        use_mock = os.getenv("USE_MOCK_PROVIDERS", "False").lower() == "true"

        providers = {}

        if use_mock:
            logging.info("Using mock providers for job data")
            for provider_class in PROVIDER_CLASSES:
                providers[provider_class.id] = MockProvider(provider_class.id, provider_class.name)
        else:
            logging.info("Using real providers for job data")
            for provider_class in PROVIDER_CLASSES:
                provider = provider_class()
                if not provider.is_configured():
                    logging.warning(f"{provider.name} is not configured; missing {', '.join(provider.missing_credentials())}")
                providers[provider.id] = provider

        return providers

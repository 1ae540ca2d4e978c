from datetime import datetime, timedelta, timezone
from typing import List
import asyncio
import logging
import random

from providers.base import BaseProvider
from models.job import Job, ProviderResult
from models.request import SearchQuery
from utils.data_utils import format_salary_range

class MockProvider(BaseProvider):
    """Offline provider that fabricates listings, for working on the UI without API keys"""

    companies = [
        "Bay Area Health Partners",
        "Summit Medical Group",
        "Civic Works Department",
        "Harbor Logistics",
        "Northwind Technologies",
        "Golden Gate Services",
        "Pacific Crest Labs",
        "Oakridge Community Clinic"
    ]

    def __init__(self, provider_id: str = "mock", provider_name: str = "Mock", job_count: int = 10):
        self.id = provider_id
        self.name = provider_name
        self.job_count = job_count

    def build_request(self, query: SearchQuery, page: int, page_size: int):
        return "", None, {}

    def parse_response(self, data):
        return [], 0

    async def search(self, query: SearchQuery, page: int, page_size: int) -> ProviderResult:
        """
        Generate listings for the query

        The same query, page and provider always produce the same jobs.
        """
        logging.info(f"Generating mock jobs for {self.name} source: {query.title}")

        rng = random.Random(f"{self.id}|{query.title}|{query.zip}|{page}")

        # Simulate network delay
        await asyncio.sleep(rng.uniform(0.01, 0.05))

        related_titles = [
            query.title.title(),
            f"Senior {query.title.title()}",
            f"{query.title.title()} II",
            f"Lead {query.title.title()}"
        ]
        now = datetime.now(timezone.utc).replace(microsecond=0)

        jobs: List[Job] = []
        count = min(self.job_count, page_size)
        for i in range(count):
            index = (page - 1) * page_size + i
            low = rng.randrange(40, 120) * 1000
            posted = now - timedelta(days=rng.randint(0, max(query.days, 1)), hours=rng.randint(0, 23))

            jobs.append(Job(
                id=f"{self.id}-{index}",
                title=rng.choice(related_titles),
                company=rng.choice(self.companies),
                location=f"Near {query.zip}",
                posted=posted.isoformat(),
                url=f"https://{self.id}.example.com/jobs/{index}",
                snippet=f"Mock listing for {query.title} within {query.radiusMiles} miles of {query.zip}.",
                salaryText=format_salary_range(low, low + rng.randrange(0, 40) * 1000, currency="USD", unit="yr"),
                source=self.name
            ))

        return ProviderResult(source=self.name, jobs=jobs, total=self.job_count * 3)

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple
import asyncio
import logging
import os

import requests

from models.job import Job, ProviderResult
from models.request import SearchQuery
from utils.data_utils import to_number
from utils.errors import MissingCredentialsError
from utils.http_utils import fetch_json, DEFAULT_TIMEOUT

class BaseProvider(ABC):
    """Base class for job API providers"""

    id = "base"
    name = "Base"
    required_env: Tuple[str, ...] = ()

    @property
    def timeout(self) -> float:
        """Upstream timeout in seconds, overridable with <ID>_TIMEOUT"""
        try:
            return float(os.getenv(f"{self.id.upper()}_TIMEOUT", DEFAULT_TIMEOUT))
        except ValueError:
            return float(DEFAULT_TIMEOUT)

    def missing_credentials(self) -> List[str]:
        """Names of required environment variables that are not set"""
        return [key for key in self.required_env if not os.getenv(key)]

    def is_configured(self) -> bool:
        return not self.missing_credentials()

    @abstractmethod
    def build_request(self, query: SearchQuery, page: int, page_size: int) -> Tuple[str, Optional[Dict[str, str]], Dict[str, str]]:
        """
        Build the upstream request for a query

        Args:
            query: The validated search criteria
            page: 1-based page requested from this provider
            page_size: Results per page

        Returns:
            (url, query params, headers)
        """
        pass

    @abstractmethod
    def parse_response(self, data: Dict[str, Any]) -> Tuple[List[Job], int]:
        """
        Map a decoded upstream body to jobs and the provider's reported total

        Args:
            data: Decoded JSON body

        Returns:
            (jobs, total)
        """
        pass

    async def search(self, query: SearchQuery, page: int, page_size: int) -> ProviderResult:
        """
        Call the upstream API and map its response

        Raises:
            MissingCredentialsError: credentials are not configured
            UpstreamError: non-2xx status or unusable body
            asyncio.TimeoutError: the call took longer than `timeout`
            requests.RequestException: network failures
        """
        missing = self.missing_credentials()
        if missing:
            raise MissingCredentialsError(self.name, missing)

        url, params, headers = self.build_request(query, page, page_size)
        timeout = self.timeout

        # Run the blocking request in a thread so providers proceed concurrently
        data = await asyncio.wait_for(
            asyncio.to_thread(fetch_json, url, params, headers, timeout),
            timeout=timeout
        )

        jobs, total = self.parse_response(data)
        logging.info(f"{self.name} returned {len(jobs)} jobs (total {total})")
        return ProviderResult(source=self.name, jobs=jobs, total=total)

    async def fetch(self, query: SearchQuery, page: int, page_size: int) -> ProviderResult:
        """
        Same as search(), but never raises: failures come back as a
        ProviderResult with no jobs, a zero total and an error message
        """
        try:
            return await self.search(query, page, page_size)
        except MissingCredentialsError as e:
            logging.warning(str(e))
            return self.failed(str(e))
        except asyncio.TimeoutError:
            message = f"Timeout after {int(self.timeout * 1000)} ms"
            logging.error(f"{self.name}: {message}")
            return self.failed(message)
        except requests.Timeout:
            message = f"Timeout after {int(self.timeout * 1000)} ms"
            logging.error(f"{self.name}: {message}")
            return self.failed(message)
        except requests.RequestException as e:
            # The exception text carries the request URL, which may hold credentials
            message = f"Network error ({e.__class__.__name__})"
            logging.error(f"{self.name}: {message}")
            return self.failed(message)
        except Exception as e:
            logging.error(f"Error in {self.name} provider: {str(e)}")
            return self.failed(str(e) or e.__class__.__name__)

    def map_records(self, records: Any, to_job: Callable[[Dict[str, Any]], Job]) -> List[Job]:
        """
        Map upstream records to Jobs one at a time

        Records that are not objects, or that are too malformed to map, are
        skipped so they cannot take the rest of the page down with them.
        """
        if not isinstance(records, list):
            return []

        jobs = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                jobs.append(to_job(record))
            except (AttributeError, TypeError, ValueError) as e:
                logging.warning(f"Skipping malformed {self.name} record: {str(e)}")
        return jobs

    def failed(self, message: str) -> ProviderResult:
        return ProviderResult(source=self.name, jobs=[], total=0, error=message)

    @staticmethod
    def reported_total(value: Any, fallback: int) -> int:
        """Use the upstream match count when it is numeric, else the page's job count"""
        number = to_number(value)
        if number is None:
            return fallback
        return int(number)

from typing import Any, Dict, List, Tuple
import os

from providers.base import BaseProvider
from models.job import Job
from models.request import SearchQuery
from utils.data_utils import (
    clean_text,
    first_value,
    format_salary_range,
    posted_iso,
    salary_unit_from_interval,
    to_number,
)

class USAJobsProvider(BaseProvider):
    """USAJOBS federal jobs API"""

    id = "usajobs"
    name = "USAJOBS"
    required_env = ("USAJOBS_AUTH_KEY", "USAJOBS_USER_AGENT")

    def __init__(self):
        self.host = "data.usajobs.gov"
        self.base_url = f"https://{self.host}/api/Search"

    def build_request(self, query: SearchQuery, page: int, page_size: int):
        params = {
            "PositionTitle": query.title,
            "LocationName": query.zip,
            "Radius": str(query.radiusMiles),
            "ResultsPerPage": str(page_size),
            "Page": str(page)
        }
        if query.days > 0:
            params["DatePosted"] = str(query.days)

        # USAJOBS rejects requests without the registered user agent
        headers = {
            "Host": self.host,
            "User-Agent": os.getenv("USAJOBS_USER_AGENT"),
            "Authorization-Key": os.getenv("USAJOBS_AUTH_KEY"),
            "Accept": "application/json"
        }
        return self.base_url, params, headers

    def parse_response(self, data: Dict[str, Any]) -> Tuple[List[Job], int]:
        search_result = data.get("SearchResult")
        if not isinstance(search_result, dict):
            search_result = {}

        items = search_result.get("SearchResultItems")
        if not isinstance(items, list):
            items = []

        jobs = self.map_records(items, self._to_job)
        return jobs, self.reported_total(search_result.get("SearchResultCountAll"), len(jobs))

    def _to_job(self, item: Dict[str, Any]) -> Job:
        descriptor = item.get("MatchedObjectDescriptor")
        if not isinstance(descriptor, dict):
            descriptor = {}

        # First apply link, else the position page
        apply_uris = descriptor.get("ApplyURI")
        apply_uri = apply_uris[0] if isinstance(apply_uris, list) and apply_uris else None
        link = apply_uri or descriptor.get("PositionURI") or ""

        user_area = descriptor.get("UserArea")
        details = user_area.get("Details") if isinstance(user_area, dict) else None

        return Job(
            id=str(item.get("MatchedObjectId") or descriptor.get("PositionID") or link),
            title=clean_text(descriptor.get("PositionTitle")),
            company=clean_text(first_value(descriptor, "OrganizationName", "DepartmentName")),
            location=clean_text(descriptor.get("PositionLocationDisplay")),
            posted=posted_iso(first_value(descriptor, "PublicationStartDate", "OpenDate", "OpeningDate")),
            url=str(link),
            snippet=clean_text(details.get("JobSummary")) if isinstance(details, dict) else "",
            salaryText=self.extract_salary(descriptor.get("PositionRemuneration")),
            source=self.name
        )

    @staticmethod
    def extract_salary(remuneration: Any) -> str:
        """
        Collapse the remuneration entries into one range: the lowest minimum
        and the highest maximum. Currency and pay unit come from the first entry.

        The unit is matched on RateIntervalCode first. RateIntervalDescription
        is only consulted when the code carries no recognizable keyword, so a
        code of "Per Year" wins over a description of "Per Hour".
        """
        if not isinstance(remuneration, list):
            return ""
        entries = [entry for entry in remuneration if isinstance(entry, dict)]
        if not entries:
            return ""

        first = entries[0]
        currency = first.get("CurrencyCode") or "USD"
        unit = salary_unit_from_interval(first.get("RateIntervalCode"), first.get("RateIntervalDescription"))

        minimums = [n for n in (to_number(entry.get("MinimumRange")) for entry in entries) if n is not None]
        maximums = [n for n in (to_number(entry.get("MaximumRange")) for entry in entries) if n is not None]

        return format_salary_range(
            min(minimums) if minimums else None,
            max(maximums) if maximums else None,
            currency=currency,
            unit=unit
        )

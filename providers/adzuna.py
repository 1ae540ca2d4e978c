from typing import Any, Dict, List, Tuple
from urllib.parse import quote
import os

from providers.base import BaseProvider
from models.job import Job
from models.request import SearchQuery
from utils.data_utils import clean_text, first_value, format_salary_range, posted_iso, round_half_up

KM_PER_MILE = 1.60934

class AdzunaProvider(BaseProvider):
    """Adzuna commercial job board"""

    id = "adzuna"
    name = "Adzuna"
    required_env = ("ADZUNA_APP_ID", "ADZUNA_APP_KEY")

    def __init__(self):
        self.base_url = "https://api.adzuna.com/v1/api/jobs"

    @property
    def country(self) -> str:
        return (os.getenv("ADZUNA_COUNTRY") or "us").strip().lower()

    def build_request(self, query: SearchQuery, page: int, page_size: int):
        # Adzuna takes the radius in kilometres
        km = max(1, round_half_up(query.radiusMiles * KM_PER_MILE))

        params = {
            "app_id": os.getenv("ADZUNA_APP_ID"),
            "app_key": os.getenv("ADZUNA_APP_KEY"),
            "results_per_page": str(page_size),
            "what": query.title,
            "where": query.zip,
            "distance": str(km),
            "sort_by": "date",
            "content-type": "application/json"
        }
        if query.days > 0:
            params["max_days_old"] = str(query.days)

        url = f"{self.base_url}/{quote(self.country, safe='')}/search/{page}"
        return url, params, {"Accept": "application/json"}

    def parse_response(self, data: Dict[str, Any]) -> Tuple[List[Job], int]:
        jobs = self.map_records(data.get("results"), self._to_job)
        return jobs, self.reported_total(data.get("count"), len(jobs))

    def _to_job(self, item: Dict[str, Any]) -> Job:
        company = item.get("company") or {}
        location = item.get("location") or {}

        return Job(
            id=str(item.get("id") or ""),
            title=clean_text(item.get("title")),
            company=clean_text(company.get("display_name")) if isinstance(company, dict) else "",
            location=clean_text(location.get("display_name")) if isinstance(location, dict) else "",
            posted=posted_iso(item.get("created")),
            url=str(first_value(item, "redirect_url", "url") or ""),
            snippet=clean_text(item.get("description")),
            salaryText=format_salary_range(
                item.get("salary_min"),
                item.get("salary_max"),
                currency=item.get("salary_currency") or "USD"
            ),
            source=self.name
        )

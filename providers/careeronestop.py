from typing import Any, Dict, List, Tuple
from urllib.parse import quote
import os

from providers.base import BaseProvider
from models.job import Job
from models.request import SearchQuery
from utils.data_utils import clean_text, first_value, format_salary_range, posted_iso, to_number

# CareerOneStop salary fields are inconsistent across listings
MIN_SALARY_FIELDS = ["MinimumSalary", "SalaryMin", "WageMin"]
MAX_SALARY_FIELDS = ["MaximumSalary", "SalaryMax", "WageMax"]
TEXT_SALARY_FIELDS = ["Pay", "Wage", "Salary", "PayDescription"]

class CareerOneStopProvider(BaseProvider):
    """CareerOneStop labor-market job search API"""

    id = "cos"
    name = "CareerOneStop"
    required_env = ("COS_API_TOKEN", "COS_USER_ID")

    def __init__(self):
        self.base_url = "https://api.careeronestop.org/v2/jobsearch"
        self.sort_column = "acquisitiondate"
        self.sort_order = "desc"

    def build_request(self, query: SearchQuery, page: int, page_size: int):
        start_record = (page - 1) * page_size

        # Search criteria are positional path segments
        segments = [
            os.getenv("COS_USER_ID"),
            query.title,
            query.zip,
            query.radiusMiles,
            self.sort_column,
            self.sort_order,
            start_record,
            page_size,
            query.days
        ]
        path = "/".join(quote(str(segment), safe="") for segment in segments)

        params = {
            "enableJobDescriptionSnippet": "true",
            "enableMetaData": "false"
        }
        headers = {
            "Authorization": f"Bearer {os.getenv('COS_API_TOKEN')}",
            "Accept": "application/json"
        }
        return f"{self.base_url}/{path}", params, headers

    def parse_response(self, data: Dict[str, Any]) -> Tuple[List[Job], int]:
        jobs = self.map_records(data.get("Jobs"), self._to_job)
        total = self.reported_total(data.get("JobCount"), len(jobs)) or len(jobs)
        return jobs, total

    def _to_job(self, item: Dict[str, Any]) -> Job:
        return Job(
            id=str(item.get("JvId") or ""),
            title=clean_text(item.get("JobTitle")),
            company=clean_text(item.get("Company")),
            location=clean_text(item.get("Location")),
            posted=posted_iso(item.get("AcquisitionDate")),
            url=str(first_value(item, "URL", "Url") or ""),
            snippet=clean_text(item.get("DescriptionSnippet")),
            salaryText=self.extract_salary(item),
            source=self.name
        )

    @staticmethod
    def extract_salary(item: Dict[str, Any]) -> str:
        """
        Numeric salary candidates win; the lowest and highest of them form
        the range. Without any, a free-text pay field is used verbatim.
        """
        numbers = [to_number(item.get(field)) for field in MIN_SALARY_FIELDS + MAX_SALARY_FIELDS]
        numbers = [n for n in numbers if n is not None]
        if numbers:
            return format_salary_range(min(numbers), max(numbers), currency="USD")

        text = first_value(item, *TEXT_SALARY_FIELDS)
        return text if isinstance(text, str) else ""

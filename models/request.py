from pydantic import BaseModel, Field
from typing import List, Mapping, Optional
import re

from utils.errors import QueryValidationError
from utils.data_utils import unique_preserving_order

# Provider ids in invocation order
PROVIDER_IDS = ["adzuna", "cos", "usajobs"]

DEFAULT_RADIUS = 25
DEFAULT_DAYS = 7
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 50
MAX_DAYS = 60

def _parse_int(value: Optional[str], default: int) -> Optional[int]:
    """Parse an integer query param; missing -> default, garbage -> None"""
    if value is None or not str(value).strip():
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return None

class SearchQuery(BaseModel):
    title: str = Field(..., min_length=1, description="Job title to search for")
    zip: str = Field(..., pattern=r"^[0-9]{5}$", description="5-digit US ZIP code")
    radiusMiles: int = Field(DEFAULT_RADIUS, ge=1, description="Search radius in miles")
    days: int = Field(DEFAULT_DAYS, ge=0, le=MAX_DAYS, description="Max posting age in days, 0 for any")
    page: int = Field(DEFAULT_PAGE, ge=1)
    pageSize: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sources: List[str] = Field(default_factory=lambda: list(PROVIDER_IDS))
    titleStrict: bool = False

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "nurse",
                "zip": "94610",
                "radiusMiles": 25,
                "days": 7,
                "page": 1,
                "pageSize": 25,
                "sources": ["adzuna", "usajobs"],
                "titleStrict": True
            }
        }
    }

    @classmethod
    def from_params(cls, params: Mapping[str, str], check_sources: bool = True) -> "SearchQuery":
        """
        Build a query from raw request parameters

        Args:
            params: Query-string parameters (title, zip, radius, days, page,
                pageSize, sources, titleStrict)
            check_sources: Reject a `sources` list with no known provider.
                Single-provider callers pass False and any value is accepted.

        Returns:
            A validated SearchQuery

        Raises:
            QueryValidationError: with a one-line message for the client
        """
        title = (params.get("title") or "").strip()
        zip_code = (params.get("zip") or "").strip()
        radius = _parse_int(params.get("radius"), DEFAULT_RADIUS)
        days = _parse_int(params.get("days"), DEFAULT_DAYS)

        if not title:
            raise QueryValidationError("Missing 'title'.")
        if not re.fullmatch(r"[0-9]{5}", zip_code):
            raise QueryValidationError("ZIP must be 5 digits.")
        if radius is None or radius < 1:
            raise QueryValidationError("Invalid 'radius' (miles).")
        if days is None or days < 0 or days > MAX_DAYS:
            raise QueryValidationError("Invalid 'days' (0–60).")

        # Paging params are clamped rather than rejected
        page = _parse_int(params.get("page"), DEFAULT_PAGE)
        page_size = _parse_int(params.get("pageSize"), DEFAULT_PAGE_SIZE)
        if page is None:
            page = DEFAULT_PAGE
        if page_size is None:
            page_size = DEFAULT_PAGE_SIZE
        page = max(1, page)
        page_size = min(MAX_PAGE_SIZE, max(1, page_size))

        raw_sources = params.get("sources") or ",".join(PROVIDER_IDS)
        requested = [s.strip().lower() for s in raw_sources.split(",")]
        sources = [s for s in unique_preserving_order(requested) if s in PROVIDER_IDS]
        if not sources and not check_sources:
            sources = list(PROVIDER_IDS)
        if not sources:
            raise QueryValidationError(f"Invalid 'sources' (expected any of {','.join(PROVIDER_IDS)}).")

        title_strict = str(params.get("titleStrict") or "0").strip() == "1"

        return cls(
            title=title,
            zip=zip_code,
            radiusMiles=radius,
            days=days,
            page=page,
            pageSize=page_size,
            sources=sources,
            titleStrict=title_strict
        )

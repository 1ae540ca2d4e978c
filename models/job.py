from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

class Job(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    company: str = ""
    location: str = ""
    posted: str = ""  # ISO-8601, or empty when the upstream date is missing/unparsable
    url: str = ""
    snippet: str = ""
    salaryText: str = ""  # Formatted salary, never the raw numbers
    source: str  # Display name of the provider that produced the job

class ProviderResult(BaseModel):
    """Outcome of one provider call: jobs for the page plus the provider's own match count"""
    model_config = ConfigDict(frozen=True)

    source: str
    jobs: List[Job] = Field(default_factory=list)
    total: int = 0
    error: Optional[str] = None

class ProviderTotal(BaseModel):
    source: str
    total: int = 0

class ProviderError(BaseModel):
    source: str
    error: str

class AggregatedResponse(BaseModel):
    total: int  # Largest total reported by any provider, an upper-bound estimate
    page: int
    pageSize: int
    jobs: List[Job]
    providers: List[ProviderTotal]
    errors: List[ProviderError]
    source: str = "aggregated"

class LegacySearchResponse(BaseModel):
    total: int
    page: int
    pageSize: int
    jobs: List[Job]
    source: str

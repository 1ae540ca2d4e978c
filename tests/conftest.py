import json
import os
import sys

import pytest
import requests

# Add the parent directory to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

PROVIDER_ENV = [
    "ADZUNA_APP_ID", "ADZUNA_APP_KEY", "ADZUNA_COUNTRY", "ADZUNA_TIMEOUT",
    "COS_API_TOKEN", "COS_USER_ID", "COS_TIMEOUT",
    "USAJOBS_AUTH_KEY", "USAJOBS_USER_AGENT", "USAJOBS_TIMEOUT",
    "USE_MOCK_PROVIDERS",
]


class FakeResponse:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text


class FakeHttp:
    """Stands in for requests.get; answers by URL substring and records every call"""

    def __init__(self):
        self.routes = []
        self.calls = []

    def add(self, url_part, body=None, status=200, exc=None):
        self.routes.append((url_part, body, status, exc))

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params or {}, "headers": headers or {}, "timeout": timeout})
        for url_part, body, status, exc in self.routes:
            if url_part in url:
                if exc is not None:
                    raise exc
                text = body if isinstance(body, str) else json.dumps(body)
                return FakeResponse(status, text)
        raise AssertionError(f"Unexpected request to {url}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test with no provider credentials configured"""
    for key in PROVIDER_ENV:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(requests, "get", fake.get)
    return fake


@pytest.fixture
def adzuna_env(monkeypatch):
    monkeypatch.setenv("ADZUNA_APP_ID", "test-id")
    monkeypatch.setenv("ADZUNA_APP_KEY", "test-key")


@pytest.fixture
def cos_env(monkeypatch):
    monkeypatch.setenv("COS_API_TOKEN", "test-token")
    monkeypatch.setenv("COS_USER_ID", "user 1")


@pytest.fixture
def usajobs_env(monkeypatch):
    monkeypatch.setenv("USAJOBS_AUTH_KEY", "test-auth")
    monkeypatch.setenv("USAJOBS_USER_AGENT", "me@example.com")


@pytest.fixture
def adzuna_payload():
    return {
        "count": 132,
        "results": [
            {
                "id": "4001",
                "title": "Registered Nurse",
                "company": {"display_name": "Kaiser Permanente"},
                "location": {"display_name": "Oakland, Alameda County"},
                "created": "2024-05-02T10:00:00Z",
                "redirect_url": "https://www.adzuna.com/details/4001",
                "description": "Provide  patient care.",
                "salary_min": 90000,
                "salary_max": 120000,
            },
            {
                "id": 4002,
                "title": "Nurse Practitioner",
                "company": {"display_name": "Sutter Health"},
                "location": {"display_name": "Berkeley, Alameda County"},
                "created": "2024-05-03T08:30:00Z",
                "redirect_url": "https://www.adzuna.com/details/4002",
                "description": "Outpatient clinic.",
            },
        ],
    }


@pytest.fixture
def cos_payload():
    return {
        "JobCount": "57",
        "Jobs": [
            {
                "JvId": "COS-1",
                "JobTitle": "Charge Nurse",
                "Company": "Alameda Health System",
                "Location": "Oakland, CA",
                "AcquisitionDate": "2024-05-01T00:00:00",
                "URL": "https://jobs.example.org/cos-1",
                "DescriptionSnippet": "Night shift.",
                "SalaryMin": "38",
                "WageMax": 52,
            },
            {
                "JvId": "COS-2",
                "JobTitle": "School Nurse",
                "Company": "Oakland Unified",
                "Location": "Oakland, CA",
                "AcquisitionDate": "not a date",
                "URL": "https://jobs.example.org/cos-2",
                "Pay": "Depends on experience",
            },
        ],
    }


@pytest.fixture
def usajobs_payload():
    return {
        "SearchResult": {
            "SearchResultCountAll": 12,
            "SearchResultItems": [
                {
                    "MatchedObjectId": "780001",
                    "MatchedObjectDescriptor": {
                        "PositionTitle": "Clinical Nurse",
                        "OrganizationName": "Veterans Health Administration",
                        "DepartmentName": "Department of Veterans Affairs",
                        "PositionLocationDisplay": "Oakland, California",
                        "PublicationStartDate": "2024-05-04T00:00:00.0000",
                        "ApplyURI": ["https://www.usajobs.gov/job/780001"],
                        "PositionURI": "https://www.usajobs.gov/position/780001",
                        "UserArea": {"Details": {"JobSummary": "Serve our veterans."}},
                        "PositionRemuneration": [
                            {"MinimumRange": "85000", "MaximumRange": "110000", "RateIntervalCode": "Per Year", "CurrencyCode": "USD"},
                            {"MinimumRange": "80000", "MaximumRange": "125000", "RateIntervalCode": "Per Year", "CurrencyCode": "USD"},
                        ],
                    },
                }
            ],
        }
    }

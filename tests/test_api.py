import pytest
from fastapi.testclient import TestClient
import sys
import os

# Add the parent directory to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from main import app

SEARCH = "/api/search-aggregate"
NURSE_QUERY = {"title": "nurse", "zip": "94610", "radius": "25", "days": "7", "page": "1", "pageSize": "25"}

@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client

def test_root_endpoint(client):
    """Test the root endpoint returns the welcome message"""
    response = client.get("/")
    assert response.status_code == 200
    assert "Welcome to the Job Search Aggregator API" in response.json()["message"]

def test_get_sources(client, adzuna_env):
    """Test the sources endpoint lists the three providers and their configuration"""
    response = client.get("/api/sources")
    assert response.status_code == 200
    sources = response.json()["sources"]

    assert [source["id"] for source in sources] == ["adzuna", "cos", "usajobs"]
    assert [source["name"] for source in sources] == ["Adzuna", "CareerOneStop", "USAJOBS"]
    assert [source["configured"] for source in sources] == [True, False, False]

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.json()["providers"] == ["adzuna", "cos", "usajobs"]

@pytest.mark.parametrize("overrides, message", [
    ({"radius": "0"}, "Invalid 'radius' (miles)."),
    ({"radius": "far"}, "Invalid 'radius' (miles)."),
    ({"days": "-1"}, "Invalid 'days' (0–60)."),
    ({"days": "61"}, "Invalid 'days' (0–60)."),
    ({"zip": "123"}, "ZIP must be 5 digits."),
    ({"zip": "9461a"}, "ZIP must be 5 digits."),
    ({"title": "   "}, "Missing 'title'."),
    ({"sources": "indeed"}, "Invalid 'sources' (expected any of adzuna,cos,usajobs)."),
])
def test_search_validation_errors(client, fake_http, adzuna_env, cos_env, usajobs_env, overrides, message):
    """Invalid queries get a 400 and no upstream call is made"""
    params = dict(NURSE_QUERY, **overrides)
    response = client.get(SEARCH, params=params)

    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert response.headers["content-type"].startswith("application/json")
    assert fake_http.calls == []

def test_search_missing_title(client, fake_http, adzuna_env):
    params = {k: v for k, v in NURSE_QUERY.items() if k != "title"}
    response = client.get(SEARCH, params=params)

    assert response.status_code == 400
    assert response.json()["error"] == "Missing 'title'."
    assert fake_http.calls == []

def test_search_one_provider_ok_one_missing_credentials(client, fake_http, adzuna_env, adzuna_payload):
    """Adzuna answers with two jobs while USAJOBS has no credentials"""
    fake_http.add("api.adzuna.com", adzuna_payload)

    response = client.get(SEARCH, params=dict(NURSE_QUERY, sources="adzuna,usajobs"))

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "aggregated"
    assert len(data["jobs"]) <= 2
    assert len(data["errors"]) == 1
    assert data["errors"][0]["source"] == "USAJOBS"
    assert len(data["providers"]) == 2
    assert data["total"] == 132
    assert data["page"] == 1
    assert data["pageSize"] == 25

    # Newest first
    assert [job["id"] for job in data["jobs"]] == ["4002", "4001"]
    assert set(data["jobs"][0]) == {"id", "title", "company", "location", "posted", "url", "snippet", "salaryText", "source"}
    assert len(fake_http.calls) == 1

def test_search_merges_all_providers(client, fake_http, adzuna_env, cos_env, usajobs_env,
                                     adzuna_payload, cos_payload, usajobs_payload):
    fake_http.add("api.adzuna.com", adzuna_payload)
    fake_http.add("careeronestop", cos_payload)
    fake_http.add("usajobs.gov", usajobs_payload)

    response = client.get(SEARCH, params=dict(NURSE_QUERY, titleStrict="1"))

    assert response.status_code == 200
    data = response.json()
    assert data["errors"] == []
    assert [p["source"] for p in data["providers"]] == ["Adzuna", "CareerOneStop", "USAJOBS"]
    assert data["total"] == 132
    assert [job["source"] for job in data["jobs"]] == ["USAJOBS", "Adzuna", "Adzuna", "CareerOneStop", "CareerOneStop"]
    assert all("nurse" in job["title"].lower() for job in data["jobs"])
    assert data["jobs"][-1]["posted"] == ""

def test_search_all_providers_disabled(client, fake_http):
    response = client.get(SEARCH, params=NURSE_QUERY)

    assert response.status_code == 200
    data = response.json()
    assert data["jobs"] == []
    assert data["total"] == 0
    assert [e["source"] for e in data["errors"]] == ["Adzuna", "CareerOneStop", "USAJOBS"]
    assert fake_http.calls == []

def test_search_upstream_failure_is_partial(client, fake_http, adzuna_env, cos_env, adzuna_payload):
    fake_http.add("api.adzuna.com", adzuna_payload)
    fake_http.add("careeronestop", {"Message": "Unauthorized"}, status=401)

    response = client.get(SEARCH, params=dict(NURSE_QUERY, sources="adzuna,cos"))

    assert response.status_code == 200
    data = response.json()
    assert len(data["jobs"]) == 2
    assert data["errors"] == [{"source": "CareerOneStop", "error": "HTTP 401"}]
    assert {"source": "CareerOneStop", "total": 0} in data["providers"]

def test_search_internal_error_is_500(client, monkeypatch):
    async def broken_aggregate(query, providers):
        raise RuntimeError("x" * 1000)

    monkeypatch.setattr(main, "aggregate", broken_aggregate)

    response = client.get(SEARCH, params=NURSE_QUERY)

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Server error"
    assert len(data["details"]) == 400

def test_cors_allows_any_origin(client):
    response = client.get(SEARCH, params=NURSE_QUERY, headers={"Origin": "https://jobs.example.net"})
    assert response.headers["access-control-allow-origin"] == "*"

def test_legacy_search_jobs(client, fake_http, adzuna_env, adzuna_payload):
    fake_http.add("api.adzuna.com", adzuna_payload)

    response = client.get("/api/search-jobs", params=NURSE_QUERY)

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    data = response.json()
    assert data["source"] == "Adzuna"
    assert data["total"] == 132
    assert [job["id"] for job in data["jobs"]] == ["4001", "4002"]

def test_legacy_search_missing_credentials(client, fake_http):
    response = client.get("/api/search-jobs", params=NURSE_QUERY)

    assert response.status_code == 500
    assert response.json() == {"error": "Missing environment variable ADZUNA_APP_ID"}
    assert fake_http.calls == []

def test_legacy_search_upstream_error_passthrough(client, fake_http, cos_env):
    fake_http.add("careeronestop", "Service Unavailable", status=503)

    response = client.get("/api/providers/cos/search", params=NURSE_QUERY)

    assert response.status_code == 503
    assert response.json() == {"error": "Upstream error", "details": "Service Unavailable"}

def test_legacy_search_validation(client, fake_http, cos_env):
    response = client.get("/api/providers/cos/search", params=dict(NURSE_QUERY, zip="1234"))

    assert response.status_code == 400
    assert response.json() == {"error": "ZIP must be 5 digits."}
    assert fake_http.calls == []

def test_legacy_unknown_provider(client):
    response = client.get("/api/providers/monster/search", params=NURSE_QUERY)
    assert response.status_code == 404

def test_legacy_search_ignores_sources(client, fake_http, adzuna_env, adzuna_payload):
    """The single-provider endpoints do not read `sources`, so any value is accepted"""
    fake_http.add("api.adzuna.com", adzuna_payload)

    response = client.get("/api/search-jobs", params=dict(NURSE_QUERY, sources="legacy"))

    assert response.status_code == 200
    assert response.json()["source"] == "Adzuna"
    assert len(fake_http.calls) == 1

def test_legacy_search_invalid_json_is_500(client, fake_http, adzuna_env):
    fake_http.add("api.adzuna.com", "{not json")

    response = client.get("/api/search-jobs", params=NURSE_QUERY)

    assert response.status_code == 500
    assert response.json() == {"error": "Server error", "details": "Invalid JSON from upstream"}

@pytest.mark.parametrize("overrides, page, page_size", [
    ({"pageSize": "100"}, 1, 50),
    ({"pageSize": "0", "page": "0"}, 1, 1),
    ({"page": "abc"}, 1, 25),
])
def test_search_paging_is_clamped(client, fake_http, adzuna_env, adzuna_payload, overrides, page, page_size):
    fake_http.add("api.adzuna.com", adzuna_payload)

    response = client.get(SEARCH, params=dict(NURSE_QUERY, sources="adzuna", **overrides))

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == page
    assert data["pageSize"] == page_size
    assert fake_http.calls[0]["params"]["results_per_page"] == str(page_size)

@pytest.mark.parametrize("overrides", [{"days": "0"}, {"days": "60"}, {"radius": "1"}])
def test_search_accepts_boundary_values(client, fake_http, adzuna_env, adzuna_payload, overrides):
    fake_http.add("api.adzuna.com", adzuna_payload)

    response = client.get(SEARCH, params=dict(NURSE_QUERY, sources="adzuna", **overrides))

    assert response.status_code == 200
    assert response.json()["errors"] == []

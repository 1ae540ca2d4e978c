from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio
import uvicorn
import requests
import os
import logging
from dotenv import load_dotenv
import time
from contextlib import asynccontextmanager

from models.request import SearchQuery
from models.job import AggregatedResponse, LegacySearchResponse
from providers.provider_factory import ProviderFactory
from services.aggregator import aggregate
from utils.data_utils import truncate
from utils.errors import MissingCredentialsError, QueryValidationError, UpstreamError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Load environment variables
load_dotenv()

# Application state
app_state = {
    "health": "OK",
    "providers": {}
}

# Startup and shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: register providers
    logging.info("Starting application and registering providers...")
    try:
        app_state["providers"] = ProviderFactory.create_providers()
        app_state["health"] = "OK"
        logging.info("Application startup complete")
    except Exception as e:
        logging.error(f"Error during startup: {str(e)}")
        app_state["health"] = f"ERROR: {str(e)}"

    yield

    # Shutdown
    logging.info("Shutting down application...")
    app_state["providers"] = {}
    logging.info("Application shutdown complete")

# Initialize FastAPI
app = FastAPI(
    title="Job Search Aggregator API",
    description="Merges job listings from Adzuna, CareerOneStop and USAJOBS",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

def error_response(status_code: int, content: dict, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=headers)

@app.get("/")
async def root():
    """Root endpoint - returns API welcome message"""
    return {"message": "Welcome to the Job Search Aggregator API! Go to /docs for API documentation."}

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": app_state["health"],
        "time": time.time(),
        "providers": list(app_state["providers"].keys())
    }

@app.get("/api/sources")
async def get_sources():
    """Get available job providers and whether their credentials are set"""
    return {
        "sources": [
            {"id": provider_id, "name": provider.name, "configured": provider.is_configured()}
            for provider_id, provider in app_state["providers"].items()
        ]
    }

@app.get("/api/search-aggregate", response_model=AggregatedResponse)
async def search_aggregate(request: Request):
    """
    Search every requested provider and return one merged, deduplicated page

    Query params: title, zip, radius (miles), days (0 = any), page, pageSize,
    sources (csv of adzuna,cos,usajobs), titleStrict (0|1)
    """
    try:
        query = SearchQuery.from_params(request.query_params)
    except QueryValidationError as e:
        logging.info(f"Rejected search: {str(e)}")
        return error_response(400, {"error": str(e)})

    try:
        logging.info(f"Searching for jobs: {query.title} near {query.zip} from {','.join(query.sources)}")
        return await aggregate(query, app_state["providers"])
    except Exception as e:
        logging.error(f"Error searching jobs: {str(e)}")
        return error_response(500, {"error": "Server error", "details": truncate(str(e), 400)})

@app.get("/api/search-jobs", response_model=LegacySearchResponse)
async def search_jobs(request: Request):
    """Legacy Adzuna-only search, kept for older clients"""
    return await _single_provider_search("adzuna", request)

@app.get("/api/providers/{provider_id}/search", response_model=LegacySearchResponse)
async def search_provider(provider_id: str, request: Request):
    """Unmerged search against a single provider"""
    return await _single_provider_search(provider_id, request)

async def _single_provider_search(provider_id: str, request: Request):
    """Run one provider directly and pass its failures through as HTTP errors"""
    provider = app_state["providers"].get(provider_id)
    if provider is None:
        return error_response(404, {"error": f"Unknown provider '{provider_id}'."})

    missing = provider.missing_credentials()
    if missing:
        return error_response(500, {"error": f"Missing environment variable {missing[0]}"})

    try:
        query = SearchQuery.from_params(request.query_params, check_sources=False)
    except QueryValidationError as e:
        return error_response(400, {"error": str(e)})

    try:
        result = await provider.search(query, query.page, query.pageSize)
    except MissingCredentialsError as e:
        return error_response(500, {"error": f"Missing environment variable {e.missing[0]}"})
    except UpstreamError as e:
        logging.error(f"{provider.name} upstream error: {str(e)}")
        if not e.status or e.status < 400:
            # A 2xx answer whose body could not be used
            return error_response(500, {"error": "Server error", "details": truncate(str(e), 500)})
        return error_response(e.status, {"error": "Upstream error", "details": truncate(e.body, 1000)})
    except (asyncio.TimeoutError, requests.Timeout):
        logging.error(f"{provider.name} timed out after {provider.timeout} seconds")
        return error_response(504, {"error": "Upstream timeout"})
    except Exception as e:
        logging.error(f"Error in {provider.name} search: {e.__class__.__name__}")
        return error_response(500, {"error": "Server error", "details": truncate(e.__class__.__name__, 500)})

    body = LegacySearchResponse(
        total=result.total,
        page=query.page,
        pageSize=query.pageSize,
        jobs=result.jobs,
        source=result.source
    )
    return JSONResponse(content=body.model_dump(), headers={"Cache-Control": "no-store"})

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        reload=True
    )

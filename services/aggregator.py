"""
Merges the results of several job providers into one page of listings.

Every requested provider is called concurrently with the same query and
page. Their listings are concatenated in provider order, duplicates across
providers are dropped, an optional title filter is applied, and the rest is
sorted newest first. Provider failures never fail the search; they are
reported next to the jobs.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Sequence

from models.job import AggregatedResponse, Job, ProviderError, ProviderResult, ProviderTotal
from models.request import SearchQuery
from providers.base import BaseProvider
from utils.data_utils import host_from_url, normalize_key, parse_posted_timestamp

def dedupe_key(job: Job) -> str:
    """Identity of a posting across providers: title, company, URL host and location"""
    return "|".join([
        normalize_key(job.title),
        normalize_key(job.company),
        host_from_url(job.url),
        normalize_key(job.location)
    ])

def dedupe_jobs(jobs: Iterable[Job]) -> List[Job]:
    """Keep the first-seen job for each dedupe key"""
    seen = set()
    unique = []
    for job in jobs:
        key = dedupe_key(job)
        if key in seen:
            continue
        seen.add(key)
        unique.append(job)
    return unique

def filter_by_title(jobs: Iterable[Job], title: str) -> List[Job]:
    """Jobs whose title contains `title`, case-insensitively"""
    needle = title.lower()
    return [job for job in jobs if needle in (job.title or "").lower()]

def sort_by_posted(jobs: Iterable[Job]) -> List[Job]:
    """Newest first; jobs without a usable date go last, keeping their order"""
    return sorted(jobs, key=lambda job: parse_posted_timestamp(job.posted), reverse=True)

def collect_results(providers: Sequence[BaseProvider], outcomes: Sequence) -> tuple:
    """
    Split gathered provider outcomes into jobs, per-provider totals and errors

    Args:
        providers: Providers in invocation order
        outcomes: ProviderResult or exception for each provider, same order

    Returns:
        (all jobs in order, provider totals, provider errors)
    """
    all_jobs: List[Job] = []
    totals: List[ProviderTotal] = []
    errors: List[ProviderError] = []

    for provider, outcome in zip(providers, outcomes):
        if isinstance(outcome, BaseException):
            logging.error(f"Error in {provider.name} provider: {str(outcome)}")
            totals.append(ProviderTotal(source=provider.name, total=0))
            errors.append(ProviderError(source=provider.name, error=str(outcome) or outcome.__class__.__name__))
            continue

        result: ProviderResult = outcome
        totals.append(ProviderTotal(source=result.source, total=result.total))
        if result.error:
            errors.append(ProviderError(source=result.source, error=result.error))
        elif result.jobs:
            logging.info(f"Found {len(result.jobs)} jobs from {result.source}")
        else:
            logging.warning(f"No jobs found from {result.source}")
        all_jobs.extend(result.jobs)

    return all_jobs, totals, errors

async def aggregate(query: SearchQuery, providers: Dict[str, BaseProvider]) -> AggregatedResponse:
    """
    Run an aggregated search

    Args:
        query: Validated search criteria
        providers: Registered providers keyed by id, in invocation order

    Returns:
        The merged page with per-provider totals and errors
    """
    selected = [provider for provider_id, provider in providers.items() if provider_id in query.sources]

    # Each provider pages on its own with the same page/pageSize
    tasks = [
        asyncio.create_task(provider.fetch(query, query.page, query.pageSize))
        for provider in selected
    ]
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    all_jobs, totals, errors = collect_results(selected, outcomes)

    merged = dedupe_jobs(all_jobs)
    if query.titleStrict:
        merged = filter_by_title(merged, query.title)
    merged = sort_by_posted(merged)

    # Providers already returned page N, so the merged page starts at 0
    page_jobs = merged[:query.pageSize]

    approx_total = max((total.total for total in totals), default=0)

    logging.info(
        f"Aggregated {len(all_jobs)} jobs into {len(merged)} unique, "
        f"returning {len(page_jobs)} ({len(errors)} provider errors)"
    )

    return AggregatedResponse(
        total=approx_total,
        page=query.page,
        pageSize=query.pageSize,
        jobs=page_jobs,
        providers=totals,
        errors=errors
    )

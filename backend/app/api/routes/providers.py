"""Provider directory endpoints — no auth required (public registry data).

The directory is loaded from Airtable into process memory on first read and
again on every explicit refresh. Searches run against whatever is loaded at
the time of the request.
"""

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from app.api.dependencies import Directory, Source
from app.core.airtable import FetchError
from app.models.providers import (
    DirectoryResponse,
    DisasterCategory,
    EditQuery,
    ErrorEnvelope,
    ProviderSearchResponse,
    SearchQuery,
    SearchState,
    SubmitSearch,
)
from app.services.directory import DirectoryState
from app.services.providers import reduce_search

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/providers", tags=["providers"])


def _snapshot(state: DirectoryState) -> DirectoryResponse:
    return DirectoryResponse(
        providers=state.providers,
        total=len(state.providers),
        loading=state.loading,
        load_error=state.load_error,
        loaded_at=state.loaded_at,
    )


# ---------------------------------------------------------------------------
# GET /api/providers
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=DirectoryResponse,
    status_code=status.HTTP_200_OK,
    summary="List loaded providers",
    description=(
        "Returns every provider currently held in memory. Performs the initial "
        "Airtable load if nothing has been loaded yet."
    ),
)
async def list_providers(directory: Directory, source: Source) -> DirectoryResponse:
    state = await directory.ensure_loaded(source)
    return _snapshot(state)


# ---------------------------------------------------------------------------
# POST /api/providers/refresh
# ---------------------------------------------------------------------------


@router.post(
    "/refresh",
    response_model=DirectoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Reload providers from Airtable",
    description=(
        "Fetches and normalizes the full record set again. On failure the "
        "previously loaded providers are kept and load_error is set."
    ),
)
async def refresh_providers(directory: Directory, source: Source) -> DirectoryResponse:
    logger.info("Manual provider refresh requested (source=%s)", source.name)
    state = await directory.refresh(source)
    return _snapshot(state)


# ---------------------------------------------------------------------------
# GET /api/providers/search
# ---------------------------------------------------------------------------


@router.get(
    "/search",
    response_model=ProviderSearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search the registry",
    description=(
        "Search by disaster type and location. Location is a case-insensitive "
        "substring match against each provider's regions served. Disaster type "
        "is accepted but does not narrow results."
    ),
)
async def search_providers(
    directory: Directory,
    source: Source,
    disaster: DisasterCategory = Query(
        default=DisasterCategory.flood,
        description="Disaster type",
    ),
    location: str = Query(
        default="",
        description="City, State or region (e.g. Mid-Atlantic); blank matches all",
    ),
) -> ProviderSearchResponse:
    """Run one search submission against the in-memory directory.

    Each request is a single submit: the query is applied as the draft and
    evaluated once.
    """
    state = await directory.ensure_loaded(source)

    query = SearchQuery(disaster_category=disaster, location_text=location)
    search = reduce_search(SearchState(), EditQuery(query=query), state.providers)
    search = reduce_search(search, SubmitSearch(), state.providers)

    logger.info(
        "Provider search: disaster=%s location=%r loaded=%d results=%d",
        disaster.value,
        location,
        len(state.providers),
        len(search.results),
    )
    return ProviderSearchResponse(
        providers=search.results,
        total=len(search.results),
        disaster_category=disaster,
        location=location,
        load_error=state.load_error,
    )


# ---------------------------------------------------------------------------
# GET /api/providers/disaster-types
# ---------------------------------------------------------------------------


@router.get(
    "/disaster-types",
    response_model=list[str],
    status_code=status.HTTP_200_OK,
    summary="List disaster types",
    description="Disaster types offered by the search form, in display order.",
)
async def list_disaster_types() -> list[str]:
    return [category.value for category in DisasterCategory]


# ---------------------------------------------------------------------------
# GET /api/providers/raw
# ---------------------------------------------------------------------------


@router.get(
    "/raw",
    status_code=status.HTTP_200_OK,
    summary="Raw Airtable payload",
    description=(
        "Passes the upstream Airtable JSON through unchanged. On failure returns "
        "an error envelope with the upstream status and details when known."
    ),
    responses={502: {"model": ErrorEnvelope}, 500: {"model": ErrorEnvelope}},
)
async def raw_providers(source: Source):
    """Proxy the upstream payload.

    Raises nothing: FetchError becomes a 502 JSON envelope.
    """
    try:
        payload = await source.fetch_payload()
    except FetchError as exc:
        logger.error(
            "Raw provider fetch failed (source=%s status=%s): %s",
            source.name,
            exc.status,
            exc,
        )
        envelope = ErrorEnvelope(
            error="Failed to load providers", status=exc.status, details=exc.details
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=envelope.model_dump(exclude_none=True),
        )
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)

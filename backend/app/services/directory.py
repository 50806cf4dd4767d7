"""In-memory provider directory.

Holds the normalized provider list plus the loading/error flags for the
current process. Nothing is persisted; a restart starts from an empty
directory and the next read loads it again.

Refreshes are independent: there is no de-duplication or cancellation, so
when two refreshes overlap, whichever response resolves last wins.
"""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from app.core.airtable import FetchError, ProviderSource
from app.models.providers import Provider
from app.services.providers import normalize_providers

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = (
    "We couldn't load provider listings right now. Please try again in a moment."
)


class DirectoryState(BaseModel):
    model_config = ConfigDict(frozen=True)

    providers: list[Provider] = Field(default_factory=list)
    loading: bool = False
    load_error: str | None = None
    loaded_at: datetime | None = None


def begin_load(state: DirectoryState) -> DirectoryState:
    return state.model_copy(update={"loading": True, "load_error": None})


def load_succeeded(state: DirectoryState, providers: list[Provider]) -> DirectoryState:
    return state.model_copy(
        update={
            "providers": providers,
            "loading": False,
            "load_error": None,
            "loaded_at": datetime.now(tz=timezone.utc),
        }
    )


def load_failed(state: DirectoryState) -> DirectoryState:
    """Record a failed load. Previously loaded providers are kept."""
    return state.model_copy(update={"loading": False, "load_error": LOAD_ERROR_MESSAGE})


class ProviderDirectory:
    def __init__(self) -> None:
        self.state = DirectoryState()

    @property
    def has_loaded(self) -> bool:
        return self.state.loaded_at is not None

    async def refresh(self, source: ProviderSource) -> DirectoryState:
        """Fetch and normalize the full record set, replacing the current list.

        FetchError is caught here and turned into `load_error`; it is never
        retried. Any other exception propagates.
        """
        self.state = begin_load(self.state)
        try:
            records = await source.fetch_raw_records()
        except FetchError as exc:
            logger.error(
                "Airtable load error (source=%s status=%s): %s",
                source.name,
                exc.status,
                exc,
            )
            self.state = load_failed(self.state)
            return self.state
        except Exception:
            self.state = self.state.model_copy(update={"loading": False})
            raise

        providers = normalize_providers(records)
        logger.info(
            "Provider directory loaded: source=%s records=%d providers=%d",
            source.name,
            len(records),
            len(providers),
        )
        self.state = load_succeeded(self.state, providers)
        return self.state

    async def ensure_loaded(self, source: ProviderSource) -> DirectoryState:
        """Run the initial load if nothing has been loaded or attempted yet."""
        if not self.has_loaded and self.state.load_error is None and not self.state.loading:
            return await self.refresh(source)
        return self.state


_directory: ProviderDirectory | None = None


def get_directory() -> ProviderDirectory:
    global _directory
    if _directory is None:
        _directory = ProviderDirectory()
    return _directory

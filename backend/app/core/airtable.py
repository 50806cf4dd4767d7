"""Airtable provider sources.

Two read-only variants share one interface:

- PublicViewSource: the public shared view (`?format=json`), no credentials.
- ApiTableSource: the token-gated REST API, paginated with Airtable's
  `offset` cursor and merged into a single `{"records": [...]}` payload.

Sources are built from an explicit AirtableConfig and never read the process
environment. No timeout beyond the httpx default is applied and failures are
not retried; callers decide when to fetch again.
"""

import logging
from dataclasses import dataclass
from typing import Literal
from urllib.parse import quote

import httpx

from app.core.record_normalizer import extract_records

logger = logging.getLogger(__name__)

AIRTABLE_API_URL = "https://api.airtable.com/v0"

# Airtable caps list-records responses at 100 rows; stop following cursors
# well before a misbehaving upstream could loop forever.
_MAX_PAGES = 500

SourceMode = Literal["auto", "public", "api"]


class FetchError(Exception):
    """Upstream fetch failed: transport error, non-2xx status, or bad JSON."""

    def __init__(self, message: str, *, status: int | None = None, details: str | None = None):
        super().__init__(message)
        self.status = status
        self.details = details


class ConfigurationError(Exception):
    """Required Airtable settings are missing. Only the names are kept."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing Airtable configuration: {', '.join(missing)}")
        self.missing = missing


@dataclass(frozen=True)
class AirtableConfig:
    mode: SourceMode = "auto"
    public_view_url: str = ""
    api_key: str = ""
    base_id: str = ""
    table_name: str = ""
    view: str = ""

    @classmethod
    def from_settings(cls, settings) -> "AirtableConfig":
        return cls(
            mode=settings.AIRTABLE_SOURCE_MODE,
            public_view_url=settings.AIRTABLE_PUBLIC_VIEW_URL,
            api_key=settings.AIRTABLE_API_KEY,
            base_id=settings.AIRTABLE_BASE_ID,
            table_name=settings.AIRTABLE_TABLE_NAME,
            view=settings.AIRTABLE_VIEW,
        )


class ProviderSource:
    """Read-only access to the raw provider records."""

    name = "base"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        # Tests inject an httpx.MockTransport; production uses the default.
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    async def fetch_payload(self) -> object:
        """Return the upstream JSON payload unchanged. Raises FetchError."""
        raise NotImplementedError

    async def fetch_raw_records(self) -> list:
        """Return the raw records of the upstream payload. Raises FetchError."""
        return extract_records(await self.fetch_payload())


async def _get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> object:
    try:
        response = await client.get(url, headers=headers, params=params)
    except httpx.HTTPError as exc:
        raise FetchError(
            "Failed to reach Airtable", details=f"{type(exc).__name__}: {exc}"
        ) from exc

    if not response.is_success:
        raise FetchError(
            f"Airtable returned HTTP {response.status_code}",
            status=response.status_code,
            details=response.text[:500],
        )

    try:
        return response.json()
    except ValueError as exc:
        raise FetchError(
            "Airtable returned invalid JSON",
            status=response.status_code,
            details=str(exc),
        ) from exc


class PublicViewSource(ProviderSource):
    name = "public"

    def __init__(self, url: str, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(transport)
        self.url = url

    async def fetch_payload(self) -> object:
        async with self._client() as client:
            return await _get_json(
                client, self.url, headers={"Cache-Control": "no-store"}
            )


class ApiTableSource(ProviderSource):
    name = "api"

    def __init__(
        self,
        api_key: str,
        base_id: str,
        table_name: str,
        view: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(transport)
        self._api_key = api_key
        self.base_id = base_id
        self.table_name = table_name
        self.view = view

    @property
    def url(self) -> str:
        return f"{AIRTABLE_API_URL}/{quote(self.base_id, safe='')}/{quote(self.table_name, safe='')}"

    async def fetch_payload(self) -> dict:
        """Follow the `offset` cursor until Airtable stops returning one."""
        headers = {"Authorization": f"Bearer {self._api_key}"}
        records: list = []
        offset: str | None = None

        async with self._client() as client:
            for _ in range(_MAX_PAGES):
                params: dict[str, str] = {}
                if self.view:
                    params["view"] = self.view
                if offset:
                    params["offset"] = offset
                page = await _get_json(client, self.url, headers=headers, params=params)
                records.extend(extract_records(page))
                offset = page.get("offset") if isinstance(page, dict) else None
                if not offset:
                    break
            else:
                logger.warning(
                    "Airtable pagination stopped after %d pages (table=%s)",
                    _MAX_PAGES,
                    self.table_name,
                )

        return {"records": records}


def build_provider_source(
    config: AirtableConfig, transport: httpx.AsyncBaseTransport | None = None
) -> ProviderSource:
    """Pick the source variant for `config`.

    Raises:
        ConfigurationError: the API variant is selected but credentials are
            incomplete, or the public variant has no URL.
    """
    use_api = config.mode == "api" or (config.mode == "auto" and bool(config.api_key))

    if use_api:
        required = {
            "AIRTABLE_API_KEY": config.api_key,
            "AIRTABLE_BASE_ID": config.base_id,
            "AIRTABLE_TABLE_NAME": config.table_name,
        }
        missing = [key for key, value in required.items() if not value]
        if missing:
            raise ConfigurationError(missing)
        return ApiTableSource(
            config.api_key,
            config.base_id,
            config.table_name,
            view=config.view,
            transport=transport,
        )

    if not config.public_view_url:
        raise ConfigurationError(["AIRTABLE_PUBLIC_VIEW_URL"])
    return PublicViewSource(config.public_view_url, transport=transport)

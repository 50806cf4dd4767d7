from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Provider(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    category: str
    regions: str = ""
    mobilization_window: str = ""
    badges: list[str] = Field(default_factory=list)
    phone: str = ""
    email: str = ""
    website: str = ""


class DisasterCategory(str, Enum):
    flood = "Flood / Storm Surge"
    hurricane = "Hurricane / Tropical Storm"
    severe_storm = "Severe Storm / Tornado"
    wildfire = "Wildfire"
    winter_storm = "Winter Storm / Ice"
    earthquake = "Earthquake"
    landslide = "Landslide / Mudslide"
    extreme_heat = "Extreme Heat"
    extreme_cold = "Extreme Cold"
    other = "Other"


class SearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    disaster_category: DisasterCategory = DisasterCategory.flood
    location_text: str = ""


# ---------------------------------------------------------------------------
# Search interaction state
# ---------------------------------------------------------------------------


class SearchState(BaseModel):
    model_config = ConfigDict(frozen=True)

    # "idle" until the first submit; results are only shown once evaluated.
    status: Literal["idle", "evaluated"] = "idle"
    draft: SearchQuery = Field(default_factory=SearchQuery)
    results: list[Provider] = Field(default_factory=list)


class EditQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: SearchQuery


class SubmitSearch(BaseModel):
    model_config = ConfigDict(frozen=True)


SearchAction = EditQuery | SubmitSearch


# ---------------------------------------------------------------------------
# API responses
# ---------------------------------------------------------------------------


class DirectoryResponse(BaseModel):
    providers: list[Provider]
    total: int
    loading: bool
    load_error: str | None
    loaded_at: datetime | None


class ProviderSearchResponse(BaseModel):
    providers: list[Provider]
    total: int
    disaster_category: DisasterCategory
    location: str
    load_error: str | None


class ErrorEnvelope(BaseModel):
    error: str
    status: int | None = None
    details: str | None = None

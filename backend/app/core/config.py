from typing import List, Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Public (read-only) shared view of the VRN provider registry.
DEFAULT_PUBLIC_VIEW_URL = (
    "https://airtable.com/appqTkwG4v9gpDjl8/shrAUcmQU0GoSZYbu?format=json"
)


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Airtable: "auto" uses the token-gated API when a key is present,
    # otherwise the public shared view.
    AIRTABLE_SOURCE_MODE: Literal["auto", "public", "api"] = "auto"
    AIRTABLE_PUBLIC_VIEW_URL: str = DEFAULT_PUBLIC_VIEW_URL
    AIRTABLE_API_KEY: str = ""
    AIRTABLE_BASE_ID: str = ""
    AIRTABLE_TABLE_NAME: str = ""
    AIRTABLE_VIEW: str = ""

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]


settings = Settings()

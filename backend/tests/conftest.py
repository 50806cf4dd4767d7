"""Root conftest: pin env vars BEFORE any app module is imported.

pydantic-settings reads the environment at import time, so these must be set
here, at module level, before any `from app.*` import. Every Airtable
setting has a default; pinning them keeps a developer's .env from switching
tests onto the token-gated API.
"""
import os

os.environ.setdefault("AIRTABLE_SOURCE_MODE", "public")
os.environ.setdefault("AIRTABLE_API_KEY", "")
os.environ.setdefault("AIRTABLE_BASE_ID", "")
os.environ.setdefault("AIRTABLE_TABLE_NAME", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

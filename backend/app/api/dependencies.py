import logging
from typing import Annotated

from fastapi import Depends

from app.core.airtable import AirtableConfig, ProviderSource, build_provider_source
from app.core.config import settings
from app.services.directory import ProviderDirectory, get_directory

logger = logging.getLogger(__name__)


def get_airtable_config() -> AirtableConfig:
    return AirtableConfig.from_settings(settings)


def get_provider_source(
    config: Annotated[AirtableConfig, Depends(get_airtable_config)],
) -> ProviderSource:
    """Build the Airtable source selected by configuration.

    Raises:
        ConfigurationError: required credentials are missing. Handled by the
            app-level exception handler, which lists the missing names only.
    """
    source = build_provider_source(config)
    logger.debug("Using Airtable source: %s", source.name)
    return source


Source = Annotated[ProviderSource, Depends(get_provider_source)]
Directory = Annotated[ProviderDirectory, Depends(get_directory)]

from __future__ import annotations

from typing import Any

from pydantic import NonNegativeInt, PositiveFloat, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from palace import converter
from palace.converter.exceptions import CannotLoadConfiguration
from palace.converter.util.log import LogLevel

# In case a version is not present, we use this version in the user agent.
DEFAULT_USER_AGENT_VERSION = "x.x.x"


def get_user_agent() -> str:
    """
    Generate a User-Agent string for HTTP requests.
    """
    version = (
        converter.__version__ if converter.__version__ else DEFAULT_USER_AGENT_VERSION
    )
    return f"palace-opds-converter/{version}"


class ConverterConfiguration(BaseSettings):
    """
    Settings for the converter. The settings are loaded from environment
    variables prefixed with PALACE_CONVERTER_, or from a .env file in the
    current directory.
    """

    http_timeout: PositiveFloat = 20
    user_agent: str = get_user_agent()
    log_level: LogLevel = LogLevel.info

    # Pretty printed with a single space by default.
    indent: NonNegativeInt | None = 1

    model_config = SettingsConfigDict(
        env_prefix="PALACE_CONVERTER_",
        # Strip whitespace from all strings
        str_strip_whitespace=True,
        # Forbid mutation, settings should be loaded once from environment.
        frozen=True,
        env_file=".env",
        # Ignore extra fields in the environment
        extra="ignore",
    )

    def __init__(self, *args: Any, **kwargs: Any):
        try:
            super().__init__(*args, **kwargs)
        except ValidationError as error_exception:
            # The settings failed to validate, we capture the ValidationError and
            # raise a more specific CannotLoadConfiguration error.
            error_log_message = "Error loading settings from environment:"
            for error in error_exception.errors():
                pydantic_location = error["loc"]
                if pydantic_location:
                    env_var = f"{self.model_config.get('env_prefix')}{str(pydantic_location[0]).upper()}"
                    error_log_message += f"\n  {env_var}:  {error['msg']}"
                else:
                    error_log_message += f"\n  {error['msg']}"
            raise CannotLoadConfiguration(error_log_message) from error_exception

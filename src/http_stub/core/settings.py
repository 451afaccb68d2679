"""
Stub server configuration from environment variables and .env files.

Nothing in the package reads the environment on its own; call
``load_server_config_from_env()`` explicitly to opt in.
"""

from typing import Optional, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import StubServerConfig
from .exceptions import ConfigurationError
from .logging.config import LoggingConfig


class StubServerSettings(BaseSettings):
    """
    Stub server settings read from ``HTTP_STUB_*`` variables.

    Example .env file:
        HTTP_STUB_HOST=127.0.0.1
        HTTP_STUB_PORT=0
        HTTP_STUB_LOG_ENABLED=true
        HTTP_STUB_LOG_LEVEL=DEBUG
        HTTP_STUB_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_STUB_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    host: str = Field(default="127.0.0.1", min_length=1)
    port: int = Field(default=0, ge=0, le=65535)
    record_requests: bool = True
    max_journal_entries: Optional[int] = Field(default=None, gt=0)

    log_enabled: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text", "colored"] = "text"
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def _lower_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_file=self.log_file_path is not None,
            file_path=self.log_file_path,
        )

    def to_config(self) -> StubServerConfig:
        return StubServerConfig(
            host=self.host,
            port=self.port,
            record_requests=self.record_requests,
            max_journal_entries=self.max_journal_entries,
            logging=self.to_logging_config(),
        )


def load_server_config_from_env(env_file: Optional[str] = None, **overrides) -> StubServerConfig:
    """
    Load StubServerConfig from the environment.

    Priority (highest to lowest):
    1. **overrides
    2. Environment variables (HTTP_STUB_*)
    3. .env file
    4. Defaults

    Raises:
        ConfigurationError: a variable has an invalid value

    Example:
        >>> config = load_server_config_from_env(port=8089)
    """
    try:
        settings = StubServerSettings(_env_file=env_file or '.env', **overrides)
        return settings.to_config()
    except ValueError as e:
        raise ConfigurationError(f"Invalid stub server settings: {e}") from e

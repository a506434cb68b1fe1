"""Environment-based configuration using pydantic-settings.

Settings are read from ``PENG_*`` environment variables and an optional
``.env`` file in the working directory.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="PENG_", case_sensitive=False, extra="ignore"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Application log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # MCP handshake
    server_name: str = Field(default="claude-code-prompt-engineer")
    server_version: str = Field(default="2.0.0")

    @field_validator("log_format")
    def validate_log_format(cls, v):
        if v.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

    @field_validator("log_level")
    def validate_log_level(cls, v):
        return v.upper()

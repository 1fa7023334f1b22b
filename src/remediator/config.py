"""
Configuration management for Remediator.

This module handles environment variable configuration and application settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=7070, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Container runtime
    runtime_cli: str = Field(default="docker", description="Container runtime CLI used for restarts")

    @property
    def bind_address(self) -> str:
        """Get the full listening address."""
        return f"{self.host}:{self.port}"


# Global configuration instance
config = Config()

"""Service configuration — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
SIZEWATCH_* environment variables.  Per-repository thresholds are not
configured here; they come from each repository's own config file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceConfig(BaseSettings):
    """Process-level settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export SIZEWATCH_LOG_LEVEL=DEBUG
        export SIZEWATCH_SNAPSHOT_DB_PATH=/data/snapshots.db
        export SIZEWATCH_GITHUB_TOKEN=...

    Or via .env file::

        SIZEWATCH_ENVIRONMENT=production
        SIZEWATCH_MAX_FETCH_WORKERS=32
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SIZEWATCH_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Storage
    snapshot_db_path: Path = Path(".sizewatch/snapshots.db")

    # CircleCI
    circleci_api_base: str = "https://circleci.com/api/v1.1"
    circleci_token: str = ""

    # GitHub
    github_api_base: str = "https://api.github.com"
    github_token: str = ""
    config_file_path: str = ".github/angular-robot.yml"

    # HTTP
    http_timeout_seconds: float = 30.0
    max_fetch_workers: int = 16

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


def configure_logging(config: ServiceConfig) -> None:
    """Configure the root logger from *config*."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

"""Repository configuration file loader.

The size check reads the ``size:`` section of the repository's
``angular-robot.yml``.  Missing keys take their defaults from
``SizeConfig``.  All YAML reads use ``yaml.safe_load()``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from sizewatch.models.config import RepositoryConfig, SizeConfig

CONFIG_FILE = "angular-robot.yml"


class RepositoryConfigError(ValueError):
    """Raised when a repository config file is malformed or invalid."""


def parse_repository_config(text: str | None) -> RepositoryConfig:
    """Parse config file *text*; empty or absent text yields the defaults."""
    if not text or not text.strip():
        return RepositoryConfig()

    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RepositoryConfigError(f"Invalid YAML in {CONFIG_FILE}: {exc}") from exc

    if data is None:
        return RepositoryConfig()
    if not isinstance(data, dict):
        raise RepositoryConfigError(
            f"{CONFIG_FILE} must contain a mapping, got {type(data).__name__}"
        )
    if data.get("size") is None:
        data = {k: v for k, v in data.items() if k != "size"}

    try:
        return RepositoryConfig.model_validate(data)
    except ValidationError as exc:
        raise RepositoryConfigError(f"Invalid size config in {CONFIG_FILE}: {exc}") from exc


def load_size_config(path: Path) -> SizeConfig:
    """Read the size section from a config file on disk."""
    path = Path(path)
    if not path.exists():
        return SizeConfig()
    return parse_repository_config(path.read_text(encoding="utf-8")).size

"""Per-repository size check configuration.

Mirrors the ``size:`` section of the repository's config file, which uses
camelCase keys (``maxSizeIncrease``, ``circleCiStatusName``, ...).  Both
the file spelling and the Python attribute names are accepted.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StatusConfig(BaseModel):
    """Where the size check writes its commit status."""

    model_config = ConfigDict(frozen=True)

    context: str = "ci/angular: size"


class SizeConfig(BaseModel):
    """Thresholds and status contexts for one repository."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    disabled: bool = False
    max_size_increase: int = Field(default=1000, ge=0, alias="maxSizeIncrease")
    circle_ci_status_name: str = Field(
        default="ci/circleci: build", alias="circleCiStatusName"
    )
    status: StatusConfig = StatusConfig()


class RepositoryConfig(BaseModel):
    """Top-level repository config file; only the size section is read."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    size: SizeConfig = SizeConfig()

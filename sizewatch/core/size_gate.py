"""Apply the configured size threshold to a diff."""

from __future__ import annotations

from sizewatch.models.artifacts import BuildArtifactDiff
from sizewatch.models.config import SizeConfig
from sizewatch.models.status import CommitState, GateResult

NO_ARTIFACTS_DESCRIPTION = "no artifacts produced"
NO_CHANGE_DESCRIPTION = "no size change"


def is_failure(config: SizeConfig, increase: int) -> bool:
    """The threshold is exclusive: an increase equal to it still passes."""
    return increase > config.max_size_increase


def describe(result: BuildArtifactDiff) -> str:
    """Human-readable summary of a diff."""
    if result.artifact is None:
        return NO_ARTIFACTS_DESCRIPTION
    if result.increase == 0:
        return NO_CHANGE_DESCRIPTION
    direction = "increased" if result.increase > 0 else "decreased"
    return f"{result.artifact.full_path} {direction} by {abs(result.increase)} bytes"


def evaluate(result: BuildArtifactDiff, config: SizeConfig) -> GateResult:
    """Decide the commit status for *result*.

    Only an increase above ``config.max_size_increase`` fails; shrinkage
    and growth within the threshold both succeed.
    """
    state = CommitState.FAILURE if is_failure(config, result.increase) else CommitState.SUCCESS
    return GateResult(state=state, description=describe(result))

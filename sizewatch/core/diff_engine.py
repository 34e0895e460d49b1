"""Find the single largest size regression between two artifact lists."""

from __future__ import annotations

from collections.abc import Sequence

from sizewatch.models.artifacts import BuildArtifact, BuildArtifactDiff


def diff(
    baseline: Sequence[BuildArtifact], candidate: Sequence[BuildArtifact]
) -> BuildArtifactDiff:
    """Return the candidate artifact that grew the most against *baseline*.

    Artifacts missing from the baseline count as growing by their full
    size.  Artifacts missing from the candidate are not considered.  On a
    tie the earliest artifact in *candidate* order is reported.  An empty
    candidate yields ``BuildArtifactDiff(artifact=None, increase=0)``.
    """
    # First match wins.
    baseline_sizes: dict[str, int] = {}
    for artifact in baseline:
        baseline_sizes.setdefault(artifact.full_path, artifact.size_bytes)

    largest: BuildArtifact | None = None
    largest_increase = 0
    for artifact in candidate:
        increase = artifact.size_bytes - baseline_sizes.get(artifact.full_path, 0)
        if largest is None or increase > largest_increase:
            largest = artifact
            largest_increase = increase

    return BuildArtifactDiff(artifact=largest, increase=largest_increase)

"""Build artifact models — one measured output file and a size delta."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BuildArtifact(BaseModel):
    """A single measured build output.

    ``project_name`` is the first segment of the artifact's logical path;
    ``context_path`` holds the remaining segments in order.  ``full_path``
    is derived from both and is the artifact's identity within a snapshot.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str
    context_path: tuple[str, ...]
    size_bytes: int = Field(ge=0)

    @field_validator("context_path")
    @classmethod
    def _non_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("context_path must contain at least one segment")
        return value

    @property
    def full_path(self) -> str:
        return "/".join((self.project_name, *self.context_path))

    @classmethod
    def from_path(cls, path: str, size_bytes: int) -> BuildArtifact:
        """Build an artifact from a slash-separated logical path.

        >>> BuildArtifact.from_path("aio/gzip7/inline", 120).context_path
        ('gzip7', 'inline')
        """
        project_name, *context = path.split("/")
        return cls(
            project_name=project_name,
            context_path=tuple(context),
            size_bytes=size_bytes,
        )


class BuildArtifactDiff(BaseModel):
    """The candidate artifact with the largest signed size delta.

    ``artifact`` is ``None`` only when the candidate list was empty, in
    which case ``increase`` is 0.
    """

    model_config = ConfigDict(frozen=True)

    artifact: BuildArtifact | None = None
    increase: int = 0

"""Artifact sink interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from types import TracebackType

from triagekit.models.artifact import Artifact


class ArtifactWriter(ABC):
    """Sink that accepts artifacts in order."""

    @abstractmethod
    def write(self, artifact: Artifact) -> None:
        """Write a single artifact.

        Raises:
            ExportError: If the underlying file cannot be written
        """
        ...

    def write_many(self, artifacts: Iterable[Artifact]) -> None:
        """Write artifacts in iteration order."""
        for artifact in artifacts:
            self.write(artifact)

    @abstractmethod
    def close(self) -> None:
        """Flush and release the sink."""
        ...

    def __enter__(self) -> "ArtifactWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

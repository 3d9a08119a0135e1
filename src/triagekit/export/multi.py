"""Fan-out sink."""

from collections.abc import Iterable

from triagekit.export.base import ArtifactWriter
from triagekit.models.artifact import Artifact


class MultiWriter(ArtifactWriter):
    """Writes every artifact to each wrapped writer in order."""

    def __init__(self, *writers: ArtifactWriter) -> None:
        self.writers = list(writers)

    def write(self, artifact: Artifact) -> None:
        for writer in self.writers:
            writer.write(artifact)

    def write_many(self, artifacts: Iterable[Artifact]) -> None:
        artifacts = list(artifacts)
        for writer in self.writers:
            writer.write_many(artifacts)

    def close(self) -> None:
        """Close all writers, re-raising the first failure afterwards."""
        first_error: Exception | None = None
        for writer in self.writers:
            try:
                writer.close()
            except Exception as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

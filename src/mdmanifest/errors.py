"""Error taxonomy for building and querying the workspace manifest"""

from pathlib import Path


class MdManifestError(Exception):
    """Base error carrying the operation and path it concerns."""

    def __init__(self, message: str, path: Path | str | None = None, operation: str | None = None):
        super().__init__(message)
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        msg = super().__str__()
        context = [c for c in (self.operation, str(self.path) if self.path else None) if c]
        return f"{msg} ({', '.join(context)})" if context else msg


class FrontmatterError(MdManifestError, ValueError):
    """Frontmatter block is not valid YAML or not a mapping."""


class ManifestWriteError(MdManifestError):
    """The manifest could not be persisted; fatal to a build."""


class ManifestReadError(MdManifestError):
    """No usable manifest was found when one was required."""


class QueryError(MdManifestError):
    """A query could be served neither from the manifest nor a live scan."""


class NotFoundError(MdManifestError, LookupError):
    """No document or task group matches the requested slug."""

"""
Exceptions raised by the Snapshot Drift Detector.

Only FatalInputError aborts a run. The others are caught by the loaders,
logged, and surfaced as warnings in the report.
"""


class DriftDetectorError(Exception):
    """Base class for all drift detector errors."""


class FatalInputError(DriftDetectorError):
    """A snapshot root is missing, inaccessible or empty."""


class ParseError(DriftDetectorError):
    """A document could not be parsed into the document model."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class IdentityAmbiguity(DriftDetectorError):
    """More than one document on one side resolved to the same key."""

    def __init__(self, key: str, paths: list) -> None:
        super().__init__(
            f"Key '{key}' is claimed by {len(paths)} documents: {', '.join(paths)}"
        )
        self.key = key
        self.paths = paths

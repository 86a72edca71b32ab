"""Errors raised while building a status report."""


class StatusError(Exception):
    """Base class for errors that abort a status run."""

    pass


class ManifestError(StatusError):
    """Raised when the manifest stream cannot be read or parsed."""

    pass


class NoObjectsError(StatusError):
    """Raised when the manifest declares no resources to check."""

    def __init__(self, message: str = "no objects visited"):
        super().__init__(message)


class ObjectReferenceError(StatusError):
    """Raised when a fetched object lacks the metadata needed to group it."""

    pass


class PrintError(Exception):
    """Raised by a printer that cannot render an object."""

    pass


class ReportWriteError(StatusError):
    """Raised when writing to the report buffer fails."""

    pass


class ClientConstructionError(StatusError):
    """Raised when a namespace-scoped client cannot be created."""

    pass


class SelectorParseError(StatusError):
    """Raised when a label selector expression is malformed."""

    pass


class DependencyGraphError(StatusError):
    """Raised when the dependency graph cannot be built."""

    pass

"""Observer-related exceptions."""

from __future__ import annotations


class ObserverError(Exception):
    """General observer-related exception."""


class DuplicateIdentifierError(ObserverError):
    """Two observables would share one identifier."""


class NotFoundError(ObserverError, KeyError):
    """No observable is registered under the requested identifier or callable."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class InvocationError(ObserverError):
    """An observable cannot be invoked with the given update context."""

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.identifier = identifier


class DetachedObservableError(InvocationError):
    """Observable was restored from stored results and has no callable attached."""


class MisalignedResultsError(ObserverError, ValueError):
    """Result logs have different lengths and cannot be projected into rows."""


class StorageError(ObserverError):
    """Results could not be written to or read from storage."""

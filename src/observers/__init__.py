"""Observers: track metrics of iterative computations.

Register named callables, invoke all of them with a shared context at chosen
points of a loop and collect every return value per callable.
"""

from __future__ import annotations

from importlib.metadata import version

from observers.config import FileStorageConfig, UpdateConfig
from observers.exceptions import (
    DetachedObservableError,
    DuplicateIdentifierError,
    InvocationError,
    MisalignedResultsError,
    NotFoundError,
    ObserverError,
    StorageError,
)
from observers.naming import derive_identifier
from observers.observer import Observable, Observer, results, update
from observers.storage import ResultStore, load, save
from observers.table import column_lengths, is_aligned, to_rows, to_table
from observers.wrappers import tolerant

__version__ = version("observers")

__all__ = [
    "DetachedObservableError",
    "DuplicateIdentifierError",
    "FileStorageConfig",
    "InvocationError",
    "MisalignedResultsError",
    "NotFoundError",
    "Observable",
    "Observer",
    "ObserverError",
    "ResultStore",
    "StorageError",
    "UpdateConfig",
    "column_lengths",
    "derive_identifier",
    "is_aligned",
    "load",
    "results",
    "save",
    "to_rows",
    "to_table",
    "tolerant",
    "update",
]

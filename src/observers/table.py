"""Column and row projections of observer results.

Columns follow registration order and have the length of the respective
result log. `to_table` does not check that the columns line up: after a
failed update the observables registered before the failing one hold one
more value than the rest. Use `is_aligned` to detect that, or `to_rows`,
which refuses to build rows from misaligned columns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

from observers.exceptions import MisalignedResultsError
from observers.log import get_logger


if TYPE_CHECKING:
    from observers.observer import Observer


logger = get_logger(__name__)

Column: TypeAlias = tuple[str, list[Any]]


def to_table(observer: Observer) -> list[Column]:
    """Get one (identifier, values) column per observable, in registration order."""
    return [(name, list(obs.results)) for name, obs in observer.items()]


def column_lengths(observer: Observer) -> dict[str, int]:
    """Get the number of recorded results per identifier."""
    return {name: len(obs.results) for name, obs in observer.items()}


def is_aligned(observer: Observer) -> bool:
    """Check whether all result logs have the same length."""
    return len(set(column_lengths(observer).values())) <= 1


def to_rows(observer: Observer) -> list[dict[str, Any]]:
    """Project results into rows, one dict per update.

    Row ``i`` holds the ``i``-th result of every observable, keyed by identifier.

    Raises:
        MisalignedResultsError: If the result logs differ in length
    """
    lengths = column_lengths(observer)
    if len(set(lengths.values())) > 1:
        logger.warning("Cannot build rows from misaligned results: %s", lengths)
        msg = f"Result logs differ in length: {lengths}"
        raise MisalignedResultsError(msg)
    columns = to_table(observer)
    n_rows = next(iter(lengths.values()), 0)
    return [{name: values[i] for name, values in columns} for i in range(n_rows)]

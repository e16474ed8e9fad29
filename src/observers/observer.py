"""Registry of observables and the update engine driving them."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TypeAlias

from psygnal import Signal
from psygnal.containers import EventedDict

from observers.config import UpdateConfig
from observers.exceptions import (
    DetachedObservableError,
    DuplicateIdentifierError,
    NotFoundError,
    ObserverError,
)
from observers.invocation import accepted_kwargs, check_signature
from observers.log import get_logger
from observers.naming import derive_identifier, lookup_identifier
from observers.table import to_table


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from psygnal.containers._evented_dict import DictEvents

    from observers.table import Column


logger = get_logger(__name__)

ObservableSource: TypeAlias = (
    Mapping[str, Callable[..., Any]]
    | Iterable[tuple[str, Callable[..., Any]] | Callable[..., Any]]
)


@dataclass
class Observable:
    """A callable together with the results it produced so far."""

    func: Callable[..., Any] | None
    """Function invoked on every update. None for observables restored from storage."""

    results: list[Any] = field(default_factory=list)
    """Return values in update order."""

    @property
    def is_detached(self) -> bool:
        """Whether this observable only holds stored results."""
        return self.func is None


class Observer(MutableMapping[str, Observable]):
    """Ordered registry of observables sharing one update context.

    Every call to `update` invokes all observables, in registration order,
    with the same positional and named values and appends each return value
    to that observable's results.

    Updates are fail-fast: if an observable raises, its exception propagates
    unchanged and observables registered before it keep the value they
    already appended. Result logs are therefore one element apart after a
    failed update. Nothing is rolled back.

    Dict-like access:
    - observer["name"] -> Observable
    - observer["name"] = func (replaces the observable and clears its results)
    - del observer["name"]
    - len(observer), iteration over identifiers in registration order
    """

    @dataclass(frozen=True)
    class UpdateCompleted:
        """Emitted after every observable was invoked successfully."""

        observer: Observer
        update_count: int
        timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    update_completed = Signal(UpdateCompleted)

    def __init__(
        self,
        observables: ObservableSource | None = None,
        *,
        config: UpdateConfig | None = None,
    ):
        """Initialize observer.

        Args:
            observables: Mapping of identifier to callable, or an iterable of
                         (identifier, callable) pairs and/or bare callables.
                         Bare callables are named via `derive_identifier`.
            config: Update behavior configuration

        Raises:
            DuplicateIdentifierError: If two observables share an identifier
        """
        self._items: EventedDict[str, Observable] = EventedDict()
        self.config = config or UpdateConfig()
        self.update_count = 0
        match observables:
            case None:
                pass
            case Mapping():
                for name, func in observables.items():
                    self.register(name, func)
            case _:
                for item in observables:
                    match item:
                        case (str() as name, func):
                            self.register(name, func)
                        case _ if callable(item):
                            self.add(item)
                        case _:
                            msg = f"Expected callable or (name, callable), got {item!r}"
                            raise ObserverError(msg)

    @classmethod
    def from_callables(
        cls, *funcs: Callable[..., Any], config: UpdateConfig | None = None
    ) -> Observer:
        """Create an observer from bare callables named by their derived identifier."""
        return cls(funcs, config=config)

    @classmethod
    def from_pairs(
        cls, *pairs: tuple[str, Callable[..., Any]], config: UpdateConfig | None = None
    ) -> Observer:
        """Create an observer from (identifier, callable) pairs."""
        return cls(pairs, config=config)

    @classmethod
    def from_results(cls, data: Mapping[str, Sequence[Any]]) -> Observer:
        """Restore an observer from stored results.

        The restored observables have no callable attached, so the observer
        supports result access and table export but not `update`.

        Args:
            data: Mapping of identifier to stored result values
        """
        observer = cls()
        for name, values in data.items():
            observer._items[str(name)] = Observable(func=None, results=list(values))
        return observer

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"

    def __getitem__(self, key: str) -> Observable:
        try:
            return self._items[key]
        except KeyError as exc:
            msg = f"Observable not found: {key!r}"
            raise NotFoundError(msg) from exc

    def __setitem__(self, key: str, func: Callable[..., Any]):
        """Set the observable for `key`, discarding any previous results."""
        self._items[key] = Observable(func=self._validate_func(key, func))
        logger.debug("Set observable %r", key)

    def __delitem__(self, key: str):
        if key not in self._items:
            msg = f"Observable not found: {key!r}"
            raise NotFoundError(msg)
        del self._items[key]
        logger.debug("Removed observable %r", key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    @property
    def events(self) -> DictEvents:
        """Events emitted when observables are added, replaced or removed."""
        return self._items.events

    @property
    def identifiers(self) -> tuple[str, ...]:
        """Identifiers in registration order."""
        return tuple(self._items)

    @property
    def is_empty(self) -> bool:
        """Whether no observable is registered."""
        return not self._items

    def has_item(self, key: str) -> bool:
        """Check whether an identifier is registered."""
        return key in self._items

    def list_items(self) -> list[str]:
        """List identifiers in registration order."""
        return list(self._items)

    def functions(self) -> dict[str, Callable[..., Any] | None]:
        """Get the callable of every observable."""
        return {name: obs.func for name, obs in self._items.items()}

    def _validate_func(self, key: str, func: Any) -> Callable[..., Any]:
        if not isinstance(key, str):
            msg = f"Identifier must be a string, got {type(key).__name__}"
            raise ObserverError(msg)
        if not callable(func):
            msg = f"Observable {key!r} must be callable, got {type(func).__name__}"
            raise ObserverError(msg)
        return func

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        replace: bool = False,
    ) -> str:
        """Register a callable under an identifier.

        Args:
            name: Identifier to register under
            func: Callable to invoke on every update
            replace: Whether an existing observable may be replaced

        Returns:
            The identifier used

        Raises:
            DuplicateIdentifierError: If `name` is taken and `replace` is False
        """
        if name in self._items and not replace:
            msg = f"Observable already registered: {name!r}"
            raise DuplicateIdentifierError(msg)
        self[name] = func
        return name

    def add(self, func: Callable[..., Any], name: str | None = None) -> str:
        """Register a callable, deriving its identifier unless `name` is given.

        Returns:
            The identifier used
        """
        return self.register(name if name is not None else derive_identifier(func), func)

    def copy(self) -> Observer:
        """Create an observer with the same callables and empty results."""
        observer = type(self)(config=self.config)
        for name, obs in self._items.items():
            observer._items[name] = Observable(func=obs.func)
        return observer

    def update(self, *args: Any, **kwargs: Any) -> Observer:  # type: ignore[override]
        """Invoke every observable with the given context and record the results.

        All observables receive the same positional and named values. They
        are called in registration order; the first exception aborts the
        update and propagates unchanged, leaving already-appended results
        in place.

        Args:
            args: Positional values passed to every observable
            kwargs: Named values passed to every observable

        Returns:
            The observer itself

        Raises:
            DetachedObservableError: If an observable has no callable attached
            InvocationError: If signature checking is enabled and an observable
                             cannot accept the context
        """
        calls: list[tuple[str, Callable[..., Any], list[Any]]] = []
        for name, obs in self._items.items():
            if obs.func is None:
                msg = f"Observable {name!r} was restored from results and cannot update"
                raise DetachedObservableError(msg, identifier=name)
            calls.append((name, obs.func, obs.results))
        if self.config.check_signatures:
            for name, func, _ in calls:
                check_signature(name, func, args, kwargs)

        filter_kwargs = self.config.ignore_extra_kwargs
        for name, func, log in calls:
            call_kwargs = accepted_kwargs(func, kwargs) if filter_kwargs else kwargs
            try:
                value = func(*args, **call_kwargs)
            except Exception:
                msg = "Observable %r failed in update %d, aborting"
                logger.debug(msg, name, self.update_count + 1)
                raise
            log.append(value)

        self.update_count += 1
        msg = "Completed update %d of %d observables"
        logger.debug(msg, self.update_count, len(calls))
        self.update_completed.emit(self.UpdateCompleted(self, self.update_count))
        return self

    def clear_results(self):
        """Empty all result logs, keeping the registered callables."""
        for obs in self._items.values():
            obs.results.clear()
        self.update_count = 0

    def identifier_of(self, func: Callable[..., Any]) -> str:
        """Find the identifier a callable is registered under.

        Live observables match by reference (or equality, for bound methods).
        Observables restored from storage have no callable, so they match
        by the identifier the callable would derive.

        Raises:
            NotFoundError: If the callable is not registered
        """
        for name, obs in self._items.items():
            if obs.func is not None and obs.func == func:
                return name
        derived = lookup_identifier(func)
        if derived is not None and derived in self._items and self[derived].is_detached:
            return derived
        msg = f"No observable registered for callable {func!r}"
        raise NotFoundError(msg)

    def results(
        self, key: str | Callable[..., Any] | None = None
    ) -> dict[str, list[Any]] | list[Any]:
        """Get recorded results.

        Args:
            key: Identifier or registered callable. If omitted, results of
                 all observables are returned.

        Returns:
            The result log of the requested observable, or a mapping of
            identifier to a copy of each result log (registration order)

        Raises:
            NotFoundError: If `key` is not registered
        """
        if key is None:
            return {name: list(obs.results) for name, obs in self._items.items()}
        if isinstance(key, str):
            return self[key].results
        if callable(key):
            return self._items[self.identifier_of(key)].results
        msg = f"Expected identifier or callable, got {type(key).__name__}"
        raise ObserverError(msg)

    def to_dict(self) -> dict[str, list[Any]]:
        """Get the plain identifier -> results mapping used for persistence."""
        return self.results()  # type: ignore[return-value]

    def to_table(self) -> list[Column]:
        """Get results as (identifier, values) columns in registration order."""
        return to_table(self)


def update(observer: Observer, *args: Any, **kwargs: Any) -> Observer:
    """Invoke all observables of `observer` with the given context."""
    return observer.update(*args, **kwargs)


def results(
    observer: Observer, key: str | Callable[..., Any] | None = None
) -> dict[str, list[Any]] | list[Any]:
    """Get results of one or all observables of `observer`."""
    return observer.results(key)

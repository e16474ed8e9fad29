"""Signature helpers used by the update engine."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from observers.exceptions import InvocationError
from observers.log import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


logger = get_logger(__name__)

NAMED_KINDS = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


def get_signature(func: Callable[..., Any]) -> inspect.Signature | None:
    """Get the signature of a callable, None if it cannot be introspected."""
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        logger.debug("No signature available for %r", func)
        return None


def accepted_kwargs(
    func: Callable[..., Any],
    kwargs: Mapping[str, Any],
) -> dict[str, Any]:
    """Filter named values down to the ones a callable declares.

    Callables taking ``**kwargs`` (or without an inspectable signature)
    receive everything.
    """
    sig = get_signature(func)
    if sig is None:
        return dict(kwargs)
    params = sig.parameters.values()
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params):
        return dict(kwargs)
    names = {p.name for p in params if p.kind in NAMED_KINDS}
    return {k: v for k, v in kwargs.items() if k in names}


def check_signature(
    identifier: str,
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any],
) -> None:
    """Make sure a callable accepts the given arguments.

    Args:
        identifier: Identifier of the observable (used in the error)
        func: Callable to check
        args: Positional values of the update context
        kwargs: Named values of the update context

    Raises:
        InvocationError: If the arguments cannot be bound to the signature
    """
    sig = get_signature(func)
    if sig is None:
        return
    try:
        sig.bind(*args, **kwargs)
    except TypeError as e:
        msg = f"Observable {identifier!r} cannot be called with this context: {e}"
        raise InvocationError(msg, identifier=identifier) from e

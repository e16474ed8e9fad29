"""Default identifiers for observables registered without an explicit name.

Named functions (and anything else carrying a valid ``__name__``) are identified
by that name. Anonymous callables such as lambdas, ``functools.partial`` objects
or callable instances get a placeholder token ``#<n>`` that is handed out once
per callable and reused for the rest of the process.

Tokens only say "this is the n-th anonymous callable seen", so they carry no
meaning across sessions. Pass explicit identifiers when the names matter, e.g.
when results are persisted and compared later.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable


ANONYMOUS_PREFIX = "#"

_counter = itertools.count(1)
# id -> (callable, token). Holding the callable keeps its id from being reused.
_tokens: dict[int, tuple[Callable[..., Any], str]] = {}


def inherent_name(func: Callable[..., Any]) -> str | None:
    """Return the declared name of a callable, or None for anonymous ones."""
    name = getattr(func, "__name__", None)
    if isinstance(name, str) and name.isidentifier():
        return name
    return None


def anonymous_token(func: Callable[..., Any]) -> str:
    """Return the placeholder token of an anonymous callable, creating it once."""
    entry = _tokens.get(id(func))
    if entry is not None and entry[0] is func:
        return entry[1]
    token = f"{ANONYMOUS_PREFIX}{next(_counter)}"
    _tokens[id(func)] = (func, token)
    return token


def derive_identifier(func: Callable[..., Any]) -> str:
    """Derive the default identifier for a callable.

    Args:
        func: Callable to name

    Returns:
        The callable's declared name, or a per-process placeholder token

    Raises:
        TypeError: If ``func`` is not callable
    """
    if not callable(func):
        msg = f"Expected a callable, got {type(func).__name__}"
        raise TypeError(msg)
    return inherent_name(func) or anonymous_token(func)


def lookup_identifier(func: Callable[..., Any]) -> str | None:
    """Get the identifier `derive_identifier` gave or would give, without assigning one.

    Returns None for anonymous callables that never received a token.
    """
    if name := inherent_name(func):
        return name
    entry = _tokens.get(id(func))
    if entry is not None and entry[0] is func:
        return entry[1]
    return None

"""Caller-side wrappers for observables."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

from observers.log import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable


logger = get_logger(__name__)


def tolerant(func: Callable[..., Any], default: Any = None) -> Callable[..., Any]:
    """Wrap an observable so a failure records `default` instead of aborting the update.

    The exception is logged with traceback. The wrapper keeps the wrapped
    function's name, so the derived identifier does not change.

    Args:
        func: Observable to wrap
        default: Value recorded when `func` raises
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Observable %r failed, recording %r", func, default)
            return default

    return wrapper

"""Tests for default observable identifiers."""

from __future__ import annotations

import functools

import pytest

from observers.naming import ANONYMOUS_PREFIX, derive_identifier, inherent_name


def loss(x):
    return x


class Energy:
    def __call__(self, x):
        return x

    def kinetic(self, x):
        return x


def test_named_function_uses_its_name():
    assert derive_identifier(loss) == "loss"
    assert derive_identifier(Energy().kinetic) == "kinetic"
    assert derive_identifier(Energy) == "Energy"


def test_lambda_gets_stable_token():
    f = lambda x: x  # noqa: E731
    token = derive_identifier(f)
    assert token.startswith(ANONYMOUS_PREFIX)
    assert derive_identifier(f) == token


def test_distinct_anonymous_callables_get_distinct_tokens():
    f = lambda x: x  # noqa: E731
    g = lambda x: x  # noqa: E731
    assert derive_identifier(f) != derive_identifier(g)


def test_callables_without_name_are_anonymous():
    assert inherent_name(Energy()) is None
    assert inherent_name(functools.partial(loss, 1)) is None
    assert derive_identifier(Energy()).startswith(ANONYMOUS_PREFIX)


def test_non_callable_is_rejected():
    with pytest.raises(TypeError):
        derive_identifier(42)  # type: ignore[arg-type]


if __name__ == "__main__":
    pytest.main([__file__, "-vv"])

"""Test configuration and shared fixtures."""

from __future__ import annotations

import pytest

from observers import Observer


def square(x):
    return x * x


def increment(x):
    return x + 1


@pytest.fixture
def observer() -> Observer:
    """Observer tracking the square and the successor of its argument."""
    return Observer([("sq", square), ("inc", increment)])


@pytest.fixture
def stored_results() -> dict[str, list[float]]:
    """Results of a finished run, as loaded from storage."""
    return {"energy": [3.5, 2.25, 1.125], "step": [1, 2, 3]}

"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from flatframe import DataFrame, set_validation


@pytest.fixture(autouse=True)
def _reset_validation() -> Iterator[None]:
    # the validation level is process-wide; never leak an override between tests
    set_validation(None)
    yield
    set_validation(None)


@pytest.fixture
def abc_frame() -> DataFrame:
    """Columns a, b, c with rows (0,1,2), (3,4,5), (6,7,8), (9,10,11)."""
    return DataFrame(["a", "b", "c"], [(i, i + 1, i + 2) for i in range(0, 12, 3)])

"""Shared pytest fixtures for CSM tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from csm.core.context import BuildContext
from csm.core.fragments import MemoryFragmentStore

BUTTON_RECIPE = """
button,
base: {
    display: flex,
},
variants: {
    visual: {
        solid: { background-color: $danger, color: white },
        outline: { border-width: 1px, border-color: $danger },
    },
    size: {
        sm: { padding: 4, font-size: 12px },
        lg: { padding: 8, font-size: 24px },
    },
},
default: { visual: solid, size: sm },
"""


@pytest.fixture
def now() -> datetime:
    """A fixed point in time used as the build clock."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def memory_store(now: datetime) -> MemoryFragmentStore:
    return MemoryFragmentStore(clock=lambda: now)


@pytest.fixture
def ctx(memory_store: MemoryFragmentStore, now: datetime) -> BuildContext:
    """A started build context over an in-memory store."""
    return BuildContext(store=memory_store, clock=lambda: now).start()


@pytest.fixture
def button_source() -> str:
    return BUTTON_RECIPE

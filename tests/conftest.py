"""Test setup for richdoc."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from richdoc.schemas.content import CategoryLink  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (make real network calls)",
    )


@pytest.fixture
def categories() -> dict[str, CategoryLink]:
    """Category mapping with a single ``cat1`` -> ``/tech`` entry."""
    return {"cat1": CategoryLink(id="cat1", path="/tech", title="Tech", linked_article_count=3)}


@pytest.fixture
def fixed_instant() -> datetime:
    return datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

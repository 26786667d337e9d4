"""Pytest configuration and shared fixtures for cutplan tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cutplan.domain.value_objects import CuttingMethod, Sheet


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")
    config.addinivalue_line(
        "markers", "scenario: end-to-end cutting scenarios with known outcomes"
    )


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the JSON job fixtures."""
    return Path(__file__).parent / "fixtures" / "jobs"


@pytest.fixture
def machine_sheet() -> Sheet:
    """A 100x100 machine-cut sheet without kerf."""
    return Sheet(width=100, height=100)


@pytest.fixture
def manual_sheet() -> Sheet:
    """A 100x100 hand-snapped sheet without kerf."""
    return Sheet(width=100, height=100, cutting_method=CuttingMethod.MANUAL)

"""Pytest configuration and fixtures for gsheet_api tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from gsheet_api import GoogleSheetClient, LocalFileTransport

GOLDEN_DIR = Path(__file__).parent / "golden"


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop sinks added by a test so they do not outlive its captured streams."""
    yield
    logger.remove()


@pytest.fixture
def golden_dir() -> Path:
    """Return the path to the golden files directory."""
    return GOLDEN_DIR


@pytest.fixture
def local_transport(golden_dir: Path) -> LocalFileTransport:
    """Create a LocalFileTransport for testing."""
    return LocalFileTransport(golden_dir)


@pytest.fixture
def client(local_transport: LocalFileTransport) -> GoogleSheetClient:
    """Create a GoogleSheetClient backed by golden files."""
    return GoogleSheetClient(local_transport)

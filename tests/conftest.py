"""Pytest configuration and fixtures for naive_db tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from naive_db.domain.entities import DEFAULT_SCHEMA, Row
from naive_db.domain.services import RowCodec
from naive_db.infrastructure.config import Config, StorageConfig
from naive_db.infrastructure.metrics import MetricsRegistry

SEED_ROWS = [
    [1, "test", 100.0],
    [2, "test", 200.0],
    [3, "test", 300.0],
    [4, "foo", 808.0],
    [5, "foo", 25.5],
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary data directory."""
    return Config(storage=StorageConfig(data_dir=temp_dir / "data"))


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def seed_rows() -> list[list[object]]:
    """Plain values of the rows written by ``seeded_table``."""
    return [list(values) for values in SEED_ROWS]


@pytest.fixture
def row_codec() -> RowCodec:
    """Row codec for the default schema with default widths."""
    return RowCodec(DEFAULT_SCHEMA)


@pytest.fixture
def seeded_table(test_config: Config, row_codec: RowCodec) -> Path:
    """Write the five seed rows straight to a table file named ``t``."""
    path = test_config.table_path("t")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        b"".join(row_codec.encode(Row.from_python(values)).unwrap() for values in SEED_ROWS)
    )
    return path


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")

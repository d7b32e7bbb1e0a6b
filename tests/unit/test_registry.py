"""Unit tests for TableRegistry."""

from __future__ import annotations

import pytest

from naive_db.application import TableRegistry
from naive_db.domain.entities import DEFAULT_SCHEMA, TableSchema
from naive_db.domain.errors import TableNotConnectedError
from naive_db.infrastructure.config import Config
from naive_db.infrastructure.metrics import MetricsRegistry


@pytest.mark.unit
class TestTableRegistry:
    """Tests for the per-session table map."""

    @pytest.fixture
    def registry(self, test_config: Config, metrics_registry: MetricsRegistry):
        r = TableRegistry(test_config, metrics_registry)
        yield r
        r.close_all()

    def test_open_and_get(self, registry: TableRegistry) -> None:
        store = registry.open("debits")

        assert registry.get("debits") is store
        assert "debits" in registry
        assert len(registry) == 1
        assert list(registry) == [store]
        assert store.schema == DEFAULT_SCHEMA
        assert repr(store) == "FileTableStore('debits', 0 rows)"

    def test_get_unknown(self, registry: TableRegistry) -> None:
        with pytest.raises(TableNotConnectedError):
            registry.get("nope")

    def test_schema_conflict(self, registry: TableRegistry) -> None:
        """An open table cannot be reopened with a different schema."""
        registry.open("t")

        with pytest.raises(ValueError):
            registry.open("t", TableSchema.of(("id", "integer")))

    @pytest.mark.parametrize("name", ["", "..", "a/b", "a b"])
    def test_invalid_names(self, registry: TableRegistry, name: str) -> None:
        with pytest.raises(ValueError):
            registry.open(name)

    def test_close(self, registry: TableRegistry) -> None:
        store = registry.open("t")

        assert registry.close("t") is True
        assert registry.close("t") is False
        assert store.closed
        assert "t" not in registry

"""Tests for the composition root."""

from pathlib import Path

from esiti.infrastructure import container
from esiti.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from esiti.infrastructure.hierarchy_store import JsonHierarchyAssignmentStore
from esiti.infrastructure.record_store import SqlAlchemyRecordStore
from esiti.infrastructure.settings import EsitiSettings


def _settings(tmp_path: Path) -> EsitiSettings:
    return EsitiSettings(
        hierarchy_file=tmp_path / "hierarchy.json",
        owner_id="tester",
        table_name="esiti",
    )


def test_build_database_adapter_returns_sqlalchemy_adapter():
    adapter = container.build_database_adapter()

    assert isinstance(adapter, SqlAlchemyDatabaseEngineAdapter)


def test_build_record_store_uses_configured_table(tmp_path, monkeypatch):
    monkeypatch.setattr(container, "get_app_logger", lambda: "logger")

    store = container.build_record_store(
        db_port=object(),
        settings=_settings(tmp_path),
    )

    assert isinstance(store, SqlAlchemyRecordStore)
    assert store._table == "esiti"


def test_build_hierarchy_store_uses_configured_file(tmp_path, monkeypatch):
    monkeypatch.setattr(container, "get_app_logger", lambda: "logger")

    store = container.build_hierarchy_store(settings=_settings(tmp_path))

    assert isinstance(store, JsonHierarchyAssignmentStore)
    assert store.path == tmp_path / "hierarchy.json"


def test_build_settings_delegates_to_from_env(tmp_path, monkeypatch):
    expected = _settings(tmp_path)
    monkeypatch.setattr(
        container.EsitiSettings,
        "from_env",
        classmethod(lambda cls: expected),
    )

    assert container.build_settings() is expected

"""Tests for infrastructure settings."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from esiti.infrastructure import settings as settings_module
from esiti.infrastructure.settings import EsitiSettings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(settings_module, "get_app_logger", MagicMock)
    monkeypatch.setattr(
        settings_module,
        "get_project_root",
        lambda: tmp_path,
    )
    for name in ("ESITI_HIERARCHY_FILE", "ESITI_OWNER_ID", "ESITI_TABLE"):
        monkeypatch.delenv(name, raising=False)


def test_from_env_uses_defaults(tmp_path: Path) -> None:
    settings = EsitiSettings.from_env()

    assert settings.hierarchy_file == tmp_path / "data" / "hierarchy.json"
    assert settings.owner_id == "local"
    assert settings.table_name == "calculations"


def test_from_env_reads_overrides(monkeypatch, tmp_path: Path) -> None:
    """File paths should resolve to absolute Path instances."""
    target = tmp_path / "cache.json"
    monkeypatch.setenv("ESITI_HIERARCHY_FILE", str(target))
    monkeypatch.setenv("ESITI_OWNER_ID", " operator ")
    monkeypatch.setenv("ESITI_TABLE", "esiti_2024")

    settings = EsitiSettings.from_env()

    assert settings.hierarchy_file == target.resolve()
    assert settings.owner_id == "operator"
    assert settings.table_name == "esiti_2024"


def test_invalid_table_name_falls_back_with_warning() -> None:
    logger = MagicMock()

    name = EsitiSettings._table_name("calc; DROP TABLE x", logger=logger)

    assert name == "calculations"
    logger.warning.assert_called_once()

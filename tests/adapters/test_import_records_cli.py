"""Tests for the import_records_cli adapter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

from esiti.adapters import import_records_cli
from esiti.domain.errors import ValidationError


def _patch_wiring(monkeypatch, import_use_case):
    fake_logger = MagicMock()
    settings = SimpleNamespace(owner_id="owner-1", table_name="calculations")
    load_use_case = MagicMock()
    monkeypatch.setattr(
        import_records_cli,
        "get_app_logger",
        lambda: fake_logger,
    )
    monkeypatch.setattr(import_records_cli, "build_settings", lambda: settings)
    monkeypatch.setattr(
        import_records_cli,
        "build_record_store",
        lambda settings: "store",
    )
    monkeypatch.setattr(
        import_records_cli,
        "build_hierarchy_store",
        lambda settings: "hierarchy_store",
    )
    monkeypatch.setattr(
        import_records_cli,
        "LoadRecordsUseCase",
        lambda *args, **kwargs: load_use_case,
    )

    def _fake_import_use_case(store, hierarchy_store, state, owner_id, logger):
        assert store == "store"
        assert hierarchy_store == "hierarchy_store"
        assert owner_id == "owner-1"
        assert logger is fake_logger
        return import_use_case

    monkeypatch.setattr(
        import_records_cli,
        "ImportRecordsUseCase",
        _fake_import_use_case,
    )
    return load_use_case


def test_main_imports_file_and_prints_count(tmp_path, monkeypatch, capsys):
    """The CLI should load the state, import the file and print counts."""
    csv_path = tmp_path / "esiti.csv"
    csv_path.write_text("content", encoding="utf-8")
    import_use_case = MagicMock()
    import_use_case.execute.return_value = SimpleNamespace(
        inserted_count=3,
        source_count=4,
    )
    load_use_case = _patch_wiring(monkeypatch, import_use_case)

    exit_code = import_records_cli.main([str(csv_path)])

    assert exit_code == 0
    load_use_case.execute.assert_called_once()
    import_use_case.execute.assert_called_once_with("content")
    assert "Imported 3 of 4" in capsys.readouterr().out


def test_main_reports_validation_errors(tmp_path, monkeypatch, capsys):
    csv_path = tmp_path / "esiti.csv"
    csv_path.write_text("bad", encoding="utf-8")
    import_use_case = MagicMock()
    import_use_case.execute.side_effect = ValidationError("Header CSV")
    _patch_wiring(monkeypatch, import_use_case)

    exit_code = import_records_cli.main([str(csv_path)])

    assert exit_code == 1
    assert "Header CSV" in capsys.readouterr().err


def test_main_requires_exactly_one_argument(capsys):
    assert import_records_cli.main([]) == 2
    assert "Usage" in capsys.readouterr().err

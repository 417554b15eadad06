"""Tests for the Streamlit app helpers."""

import gc
from decimal import Decimal
from unittest.mock import MagicMock

from conftest import build_record, local_state
from esiti.adapters.interface.streamlit import app
from esiti.application.ports.hierarchy_store import LocalHierarchyCache
from esiti.application.use_cases.get_dashboard_rows import (
    GetDashboardRowsUseCase,
)
from esiti.domain.errors import ValidationError
from esiti.domain.models.records import Level
from esiti.domain.models.views import ViewState


def _state():
    return local_state(
        [
            build_record("m", name="Mario", negativo="-10", cauzione="3"),
            build_record("p", name="Pina", cauzione="1", vers="4"),
            build_record("u", name="Ugo", negativo="-2"),
        ],
        levels={"m": Level.MASTER, "p": Level.PVR},
        parents={"p": "m"},
        vers_include={"p": False},
    )


def test_format_amount_uses_two_decimals():
    assert app._format_amount(Decimal("-1234.5")) == "-1,234.50 €"


def test_rows_to_table_indents_children_and_marks_exclusions():
    rows = GetDashboardRowsUseCase(_state()).execute(
        ViewState(expanded=frozenset({"m"}))
    )

    table = app._rows_to_table(rows)

    assert [entry["Nome"] for entry in table] == [
        "▾ Mario",
        "      Pina",
        "  Ugo",
    ]
    assert table[0]["Totale"] == "-6.00 €"
    assert table[1]["Versamenti"] == "4.00 € (escluso)"
    assert table[1]["Risultato"] == "1.00 €"
    assert table[2]["Totale"] == ""


def test_prepare_chart_data_lists_root_totals():
    totals = GetDashboardRowsUseCase(_state()).root_totals()

    data = app._prepare_chart_data(totals)

    assert data == [
        {
            "name": "Mario",
            "level": "master",
            "result": -6.0,
            "result_label": "-6.00 €",
        },
        {
            "name": "Ugo",
            "level": "user",
            "result": -2.0,
            "result_label": "-2.00 €",
        },
    ]


def test_parent_options_only_offer_allowed_levels():
    state = _state()

    assert app._parent_options(state, Level.USER) == [None, "m", "p"]
    assert app._parent_options(state, Level.AGENTE) == [None, "m"]
    assert app._parent_options(state, Level.MASTER) == [None]
    assert app._parent_options(state, Level.PVR, exclude_id="m") == [None]


def test_option_label_names_record_and_level():
    state = _state()

    assert app._option_label(state, "p") == "Pina (pvr)"
    assert app._option_label(state, None) == "(nessuno)"
    assert app._option_label(state, "gone") == "(nessuno)"


def test_run_turns_domain_errors_into_notifications(monkeypatch):
    fake_st = MagicMock()
    monkeypatch.setattr(app, "st", fake_st)

    def _fail():
        raise ValidationError("Il nome utente non può essere vuoto")

    assert app._run(_fail, "ok") is False
    fake_st.error.assert_called_once_with(
        "Il nome utente non può essere vuoto"
    )
    assert app._run(lambda: None, "Salvato") is True
    fake_st.success.assert_called_once_with("Salvato")


def _stores(records):
    store = MagicMock()
    store.list_records.return_value = list(records)
    hierarchy_store = MagicMock()
    hierarchy_store.load.return_value = LocalHierarchyCache()
    return app.SharedStores(
        store=store,
        hierarchy_store=hierarchy_store,
        owner_id="owner-1",
    )


def test_build_stores_reads_settings(monkeypatch):
    store = MagicMock()
    hierarchy_store = MagicMock()
    settings = MagicMock(owner_id="owner-1")
    monkeypatch.setattr(app, "build_settings", lambda: settings)
    monkeypatch.setattr(app, "build_record_store", lambda settings: store)
    monkeypatch.setattr(
        app,
        "build_hierarchy_store",
        lambda settings: hierarchy_store,
    )

    stores = app._build_stores()

    assert stores.store is store
    assert stores.hierarchy_store is hierarchy_store
    assert stores.owner_id == "owner-1"


def test_build_services_loads_state_and_starts_watcher(monkeypatch):
    record = build_record("a")
    stores = _stores([record])
    monkeypatch.setattr(app, "get_app_logger", MagicMock)

    services = app._build_services(stores)

    assert services.state.records == [record]
    assert services.owner_id == "owner-1"
    stores.store.subscribe_changes.assert_called_once()


def test_each_session_gets_its_own_state(monkeypatch):
    stores = _stores([build_record("a")])
    monkeypatch.setattr(app, "get_app_logger", MagicMock)
    monkeypatch.setattr(app, "_load_stores", lambda: stores)
    first_session = {}
    second_session = {}

    first = app._session_services(first_session)
    again = app._session_services(first_session)
    second = app._session_services(second_session)

    assert again is first
    assert second is not first
    assert second.state is not first.state
    assert second.store is first.store
    assert stores.store.subscribe_changes.call_count == 2


def test_dropped_session_unsubscribes_its_watcher(monkeypatch):
    stores = _stores([])
    unsubscribe = MagicMock()
    stores.store.subscribe_changes.return_value = unsubscribe
    monkeypatch.setattr(app, "get_app_logger", MagicMock)
    monkeypatch.setattr(app, "_load_stores", lambda: stores)
    session = {}

    app._session_services(session)
    unsubscribe.assert_not_called()
    session.clear()
    gc.collect()

    unsubscribe.assert_called_once()

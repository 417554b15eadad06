"""Streamlit dashboard entry point."""

import weakref
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import streamlit as st
import altair as alt

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.application.use_cases import (
    AddRecordUseCase,
    DeleteRecordUseCase,
    EditHierarchyUseCase,
    GetDashboardRowsUseCase,
    ImportRecordsUseCase,
    LoadRecordsUseCase,
    ToggleVersIncludeUseCase,
    UpdateRecordFieldUseCase,
    WatchChangesUseCase,
)
from esiti.domain.constants import EDITABLE_FIELDS
from esiti.domain.errors import EsitiError
from esiti.domain.models.aggregates import NodeValues
from esiti.domain.models.records import Level, Record
from esiti.domain.models.views import DashboardRow, ViewState
from esiti.domain.policies.hierarchy import allowed_parent_levels
from esiti.domain.services.visibility import auto_expanded
from esiti.infrastructure.container import (
    build_hierarchy_store,
    build_record_store,
    build_settings,
)
from esiti.infrastructure.logging.logger import get_app_logger

FIELD_LABELS = {
    "name": "Nome",
    "negativo": "Negativo",
    "cauzione": "Cauzione",
    "versamenti_settimanali": "Versamenti Settimanali",
    "disponibilita": "Disponibilità Conti Gioco",
}


@dataclass(frozen=True)
class SharedStores:
    """Stores reused by every browser session of the process."""

    store: RecordStorePort
    hierarchy_store: HierarchyStorePort
    owner_id: str


@dataclass
class DashboardServices:
    """Stores plus the state and change feed owned by one session."""

    store: RecordStorePort
    hierarchy_store: HierarchyStorePort
    state: DashboardState
    watcher: WatchChangesUseCase
    owner_id: str


def _build_stores() -> SharedStores:
    """Wire the record and hierarchy stores from the settings."""
    settings = build_settings()
    return SharedStores(
        store=build_record_store(settings=settings),
        hierarchy_store=build_hierarchy_store(settings=settings),
        owner_id=settings.owner_id,
    )


@st.cache_resource(show_spinner=False)
def _load_stores() -> SharedStores:
    """Cached wrapper around _build_stores for Streamlit sessions."""
    return _build_stores()


def _build_services(stores: SharedStores) -> DashboardServices:
    """Load a fresh state and start its change feed."""
    logger = get_app_logger()
    state = DashboardState()
    LoadRecordsUseCase(
        stores.store,
        stores.hierarchy_store,
        state,
        logger=logger,
    ).execute()
    watcher = WatchChangesUseCase(stores.store, state, logger=logger)
    watcher.start()
    services = DashboardServices(
        store=stores.store,
        hierarchy_store=stores.hierarchy_store,
        state=state,
        watcher=watcher,
        owner_id=stores.owner_id,
    )
    weakref.finalize(services, watcher.stop)
    return services


def _session_services(session_state) -> DashboardServices:
    """Return the services of the current session, building them once."""
    if "services" not in session_state:
        session_state["services"] = _build_services(_load_stores())
    return session_state["services"]


def _format_amount(value: Decimal) -> str:
    """Format amounts for display."""
    return f"{value:,.2f} €"


def _indent_name(row: DashboardRow) -> str:
    """Return the name prefixed by its depth and expansion marker."""
    if row.has_children:
        marker = "▾ " if row.expanded else "▸ "
    else:
        marker = "  "
    return f"{'    ' * row.depth}{marker}{row.record.name}"


def _rows_to_table(rows: Sequence[DashboardRow]) -> list[dict[str, str]]:
    """Convert dashboard rows into dataframe records."""
    table = []
    for row in rows:
        values = row.values
        vers_label = _format_amount(row.record.versamenti_settimanali)
        if not row.vers_included:
            vers_label = f"{vers_label} (escluso)"
        table.append(
            {
                "Nome": _indent_name(row),
                "Livello": row.level.value,
                "Negativo": _format_amount(values.negativo),
                "Cauzione": _format_amount(values.cauzione),
                "Versamenti": vers_label,
                "Disponibilità": _format_amount(values.disponibilita),
                "Risultato": _format_amount(values.result),
                "Totale": _format_amount(row.totals.result)
                if row.has_children
                else "",
            }
        )
    return table


def _prepare_chart_data(
    root_totals: Sequence[tuple[Record, Level, NodeValues]],
) -> list[dict[str, str | float]]:
    """Prepare bar chart data for the subtree result of every root."""
    return [
        {
            "name": record.name,
            "level": level.value,
            "result": float(totals.result),
            "result_label": _format_amount(totals.result),
        }
        for record, level, totals in root_totals
    ]


def _record_label(record: Record, level: Level) -> str:
    return f"{record.name} ({level.value})"


def _parent_options(
    state: DashboardState,
    level: Level,
    exclude_id: str | None = None,
) -> list[str | None]:
    """Return candidate parent ids for a level, None first for a root."""
    allowed = set(allowed_parent_levels(level))
    candidates = [
        record.id
        for record in state.records
        if record.id != exclude_id and state.levels.get(record.id) in allowed
    ]
    return [None, *candidates]


def _option_label(state: DashboardState, record_id: str | None) -> str:
    if record_id is None or record_id not in state:
        return "(nessuno)"
    return _record_label(state.get(record_id), state.levels[record_id])


def _run(action, success_message: str | None = None) -> bool:
    """Run a use case call, turning domain errors into notifications."""
    try:
        action()
    except EsitiError as exc:
        st.error(str(exc))
        return False
    if success_message:
        st.success(success_message)
    return True


def _render_chart(root_totals) -> None:
    """Render the subtree result of every root as a bar chart."""
    if not root_totals:
        return
    data = _prepare_chart_data(root_totals)
    chart = alt.Chart(alt.Data(values=data)).mark_bar(
        cornerRadiusEnd=4,
    ).encode(
        x=alt.X("result:Q", title="Risultato"),
        y=alt.Y("name:N", sort=None, title=None),
        color=alt.condition(
            "datum.result < 0",
            alt.value("#e76f51"),
            alt.value("#2e7d32"),
        ),
        tooltip=[
            alt.Tooltip("name:N"),
            alt.Tooltip("level:N"),
            alt.Tooltip("result_label:N"),
        ],
    ).properties(
        height=max(120, 28 * len(data)),
    )
    st.subheader("Risultato per radice")
    st.altair_chart(chart, width="stretch")


def _render_add_form(services: DashboardServices) -> None:
    state = services.state
    with st.expander("Aggiungi utente"):
        level = Level(
            st.selectbox(
                "Livello",
                [item.value for item in Level],
                index=len(Level) - 1,
                key="add_level",
            )
        )
        parent_id = st.selectbox(
            "Superiore",
            _parent_options(state, level),
            format_func=lambda value: _option_label(state, value),
            key=f"add_parent_{level.value}",
        )
        with st.form("add_record", clear_on_submit=True):
            name = st.text_input("Nome")
            negativo = st.text_input("Negativo", value="0")
            cauzione = st.text_input("Cauzione", value="0")
            vers = st.text_input("Versamenti Settimanali", value="0")
            disponibilita = st.text_input(
                "Disponibilità Conti Gioco",
                value="0",
            )
            submitted = st.form_submit_button("Aggiungi")
        if submitted:
            use_case = AddRecordUseCase(
                services.store,
                services.hierarchy_store,
                state,
                owner_id=services.owner_id,
            )
            _run(
                lambda: use_case.execute(
                    name,
                    negativo=negativo,
                    cauzione=cauzione,
                    versamenti_settimanali=vers,
                    disponibilita=disponibilita,
                    level=level,
                    parent_id=parent_id,
                ),
                f"Utente {name.strip()} aggiunto",
            )


def _render_import(services: DashboardServices) -> None:
    with st.expander("Importa CSV"):
        uploaded = st.file_uploader("File CSV", type=["csv"])
        if uploaded is None or not st.button("Importa"):
            return
        try:
            text = uploaded.getvalue().decode("utf-8")
        except UnicodeDecodeError:
            st.error("Il file deve essere codificato in UTF-8")
            return
        use_case = ImportRecordsUseCase(
            services.store,
            services.hierarchy_store,
            services.state,
            owner_id=services.owner_id,
        )
        _run(lambda: use_case.execute(text), "Importazione completata")


def _render_record_editor(
    services: DashboardServices,
    record_id: str,
) -> None:
    state = services.state
    record = state.get(record_id)
    assignment = state.assignment_of(record_id)

    field_col, hierarchy_col = st.columns(2)
    with field_col:
        field = st.selectbox(
            "Campo",
            list(EDITABLE_FIELDS),
            format_func=lambda value: FIELD_LABELS[value],
            key="edit_field",
        )
        value = st.text_input(
            "Valore",
            value=str(getattr(record, field)),
            key=f"edit_value_{record_id}_{field}",
        )
        if st.button("Salva campo"):
            use_case = UpdateRecordFieldUseCase(
                services.store,
                services.hierarchy_store,
                state,
            )
            _run(
                lambda: use_case.execute(record_id, field, value),
                "Campo aggiornato",
            )
        include = st.checkbox(
            "Includi versamenti nel risultato",
            value=state.vers_include.get(record_id, True),
            key=f"vers_include_{record_id}",
        )
        if include != state.vers_include.get(record_id, True):
            ToggleVersIncludeUseCase(
                services.hierarchy_store,
                state,
            ).execute(record_id, include)

    with hierarchy_col:
        levels = [item.value for item in Level]
        level = Level(
            st.selectbox(
                "Livello",
                levels,
                index=levels.index(assignment.level.value),
                key=f"edit_level_{record_id}",
            )
        )
        options = _parent_options(state, level, exclude_id=record_id)
        current = (
            assignment.parent_id if assignment.parent_id in options else None
        )
        parent_id = st.selectbox(
            "Superiore",
            options,
            index=options.index(current),
            format_func=lambda value: _option_label(state, value),
            key=f"edit_parent_{record_id}_{level.value}",
        )
        if st.button("Salva gerarchia"):
            use_case = EditHierarchyUseCase(
                services.store,
                services.hierarchy_store,
                state,
            )
            _run(
                lambda: use_case.execute(record_id, level, parent_id),
                "Gerarchia aggiornata",
            )

        confirmed = st.checkbox(
            f"Confermo l'eliminazione di {record.name}",
            key=f"confirm_delete_{record_id}",
        )
        if st.button("Elimina", disabled=not confirmed):
            use_case = DeleteRecordUseCase(
                services.store,
                services.hierarchy_store,
                state,
            )
            _run(
                lambda: use_case.execute(record_id, confirmed),
                f"Utente {record.name} eliminato",
            )


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Esiti Settimanali", layout="wide")
    st.title("Esiti Settimanali")

    try:
        services = _session_services(st.session_state)
    except (EsitiError, RuntimeError) as exc:
        st.error(f"Impossibile caricare i dati: {exc}")
        return
    services.watcher.drain()
    state = services.state
    rows_use_case = GetDashboardRowsUseCase(state)

    if "expanded" not in st.session_state:
        st.session_state["expanded"] = sorted(
            auto_expanded(state.tree(), frozenset())
        )

    if st.sidebar.button("Ricarica"):
        _run(
            lambda: LoadRecordsUseCase(
                services.store,
                services.hierarchy_store,
                state,
            ).execute()
        )
    search = st.sidebar.text_input("Cerca per nome", placeholder="Nome")
    root_options = [None, *[record.id for record in state.records]]
    selected_root = st.sidebar.selectbox(
        "Mostra solo il ramo di",
        root_options,
        format_func=lambda value: _option_label(state, value),
    )
    everything = frozenset(record.id for record in state.records)
    expandable = [
        row.record.id
        for row in rows_use_case.execute(ViewState(expanded=everything))
        if row.has_children
    ]
    expanded = st.sidebar.multiselect(
        "Espandi",
        expandable,
        default=[
            record_id
            for record_id in st.session_state["expanded"]
            if record_id in expandable
        ],
        format_func=lambda value: _option_label(state, value),
    )
    st.session_state["expanded"] = expanded

    view = ViewState(
        expanded=frozenset(expanded),
        selected_root_id=selected_root,
        search_query=search,
    )
    rows = rows_use_case.execute(view)
    st.caption(f"{len(rows)} righe mostrate su {len(state)} utenti")
    if not state.records:
        st.warning("Nessun utente presente. Aggiungine uno o importa un CSV.")
    else:
        st.dataframe(
            _rows_to_table(rows),
            width="stretch",
            hide_index=True,
            height=460,
        )
        _render_chart(rows_use_case.root_totals())

    _render_add_form(services)
    _render_import(services)
    if state.records:
        st.subheader("Modifica utente")
        record_id = st.selectbox(
            "Utente",
            [record.id for record in state.records],
            format_func=lambda value: _option_label(state, value),
        )
        _render_record_editor(services, record_id)


if __name__ == "__main__":  # pragma: no cover
    main()

"""SQLAlchemy-backed record store with an in-process change feed.

Listeners registered through ``subscribe_changes`` are notified after each
write commits. The optional ``level`` and ``parent_id`` columns are read
when present and written only for drafts that carry a hierarchy.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone

from sqlalchemy import bindparam, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import DateTime, Numeric, String

from esiti.application.ports.database import DatabaseEnginePort
from esiti.application.ports.record_store import (
    DeleteCallback,
    RecordCallback,
    RecordStorePort,
    Unsubscribe,
)
from esiti.domain.constants import AMOUNT_FIELDS, DEFAULT_LEVEL
from esiti.domain.errors import PersistenceError
from esiti.domain.models.records import (
    HierarchyAssignment,
    Level,
    Record,
    RecordDraft,
)
from esiti.infrastructure.logging.logger import get_app_logger
from esiti.utils.decimal_utils import coerce_decimal


CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    negativo NUMERIC(14, 2) NOT NULL DEFAULT 0,
    cauzione NUMERIC(14, 2) NOT NULL DEFAULT 0,
    versamenti_settimanali NUMERIC(14, 2) NOT NULL DEFAULT 0,
    disponibilita NUMERIC(14, 2) NOT NULL DEFAULT 0,
    user_id TEXT,
    created_at TIMESTAMP NOT NULL{hierarchy_columns}
)
"""

HIERARCHY_COLUMNS_SQL = """,
    level TEXT NOT NULL DEFAULT 'user',
    parent_id TEXT"""

UPDATABLE_COLUMNS = ("name", *AMOUNT_FIELDS, "level", "parent_id")

_AMOUNT_TYPE = Numeric(14, 2)


class SqlAlchemyRecordStore(RecordStorePort):
    """Record store backed by a SQL table of weekly outcomes."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        table_name: str = "calculations",
        logger=None,
    ) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the record engine.
            table_name: Name of the record table, a plain identifier.
            logger: Optional logger compatible with logging.Logger-like API.

        Raises:
            ValueError: If the table name is not a plain identifier.
        """
        if not table_name.isidentifier():
            raise ValueError(f"Invalid table name: {table_name}")
        self._db_port = db_port
        self._table = table_name
        self._logger = logger or get_app_logger()
        self._listeners: list[
            tuple[RecordCallback, RecordCallback, DeleteCallback]
        ] = []

    def prepare_table(self, with_hierarchy: bool = True) -> None:
        """Create the record table if it does not exist.

        Args:
            with_hierarchy: Whether to add the level and parent_id columns.
        """
        ddl = CREATE_TABLE_SQL.format(
            table=self._table,
            hierarchy_columns=HIERARCHY_COLUMNS_SQL if with_hierarchy else "",
        )
        with self._guard("create table"):
            with self._db_port.get_engine().begin() as conn:
                conn.exec_driver_sql(ddl)

    def list_records(self) -> list[Record]:
        """Return every record, newest first."""
        query = text(f"SELECT * FROM {self._table} ORDER BY created_at DESC")
        with self._guard("list records"):
            with self._db_port.get_engine().connect() as conn:
                rows = conn.execute(query).all()
        records = [self._to_record(row._mapping) for row in rows]
        self._logger.info(f"Fetched {len(records)} records from {self._table}")
        return records

    def has_hierarchy_columns(self) -> bool:
        """Return whether the table declares level and parent_id.

        Raises:
            PersistenceError: If the table cannot be inspected.
        """
        with self._guard("inspect table"):
            columns = inspect(self._db_port.get_engine()).get_columns(
                self._table
            )
        names = {str(column["name"]).lower() for column in columns}
        return {"level", "parent_id"} <= names

    def insert(self, draft: RecordDraft) -> Record:
        """Insert one record and return it as stored."""
        return self.insert_many([draft])[0]

    def insert_many(self, drafts: list[RecordDraft]) -> list[Record]:
        """Insert records in one transaction, preserving their order.

        Args:
            drafts: Records to insert; the first one sorts as newest.

        Returns:
            list[Record]: Records as stored, in input order.
        """
        if not drafts:
            return []
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        with self._guard("insert records"):
            with self._db_port.get_engine().begin() as conn:
                for offset, draft in enumerate(drafts):
                    payload = self._insert_payload(draft)
                    payload["created_at"] = now - timedelta(
                        microseconds=offset
                    )
                    conn.execute(self._insert_statement(payload), payload)
        records = [draft.to_record() for draft in drafts]
        for record in records:
            for on_insert, _, _ in list(self._listeners):
                on_insert(record)
        return records

    def update(self, record_id: str, fields: Mapping[str, object]) -> None:
        """Update some columns of a record.

        Args:
            record_id: Id of the record to update.
            fields: Column values keyed by column name.

        Raises:
            ValueError: If a column is not updatable.
            PersistenceError: If the record does not exist or the database
                rejects the statement.
        """
        unknown = [name for name in fields if name not in UPDATABLE_COLUMNS]
        if unknown:
            raise ValueError(f"Columns not updatable: {', '.join(unknown)}")
        if not fields:
            return
        assignments = ", ".join(f"{name} = :{name}" for name in fields)
        statement = text(
            f"UPDATE {self._table} SET {assignments} WHERE id = :id"
        ).bindparams(
            *[
                bindparam(name, type_=_AMOUNT_TYPE)
                for name in fields
                if name in AMOUNT_FIELDS
            ]
        )
        params = {**fields, "id": record_id}
        with self._guard("update record"):
            with self._db_port.get_engine().begin() as conn:
                result = conn.execute(statement, params)
                if result.rowcount == 0:
                    raise PersistenceError(f"Record not found: {record_id}")
                row = conn.execute(
                    text(f"SELECT * FROM {self._table} WHERE id = :id"),
                    {"id": record_id},
                ).one()
        record = self._to_record(row._mapping)
        for _, on_update, _ in list(self._listeners):
            on_update(record)

    def delete(self, record_id: str) -> None:
        """Delete a record; children rows are left untouched."""
        statement = text(f"DELETE FROM {self._table} WHERE id = :id")
        with self._guard("delete record"):
            with self._db_port.get_engine().begin() as conn:
                conn.execute(statement, {"id": record_id})
        for _, _, on_delete in list(self._listeners):
            on_delete(record_id)

    def subscribe_changes(
        self,
        on_insert: RecordCallback,
        on_update: RecordCallback,
        on_delete: DeleteCallback,
    ) -> Unsubscribe:
        """Register change callbacks and return a handle removing them."""
        listener = (on_insert, on_update, on_delete)
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _insert_statement(self, payload: dict[str, object]):
        columns = ", ".join(payload)
        values = ", ".join(f":{name}" for name in payload)
        return text(
            f"INSERT INTO {self._table} ({columns}) VALUES ({values})"
        ).bindparams(
            *[bindparam(name, type_=_AMOUNT_TYPE) for name in AMOUNT_FIELDS],
            bindparam("created_at", type_=DateTime()),
            bindparam("id", type_=String()),
        )

    @staticmethod
    def _insert_payload(draft: RecordDraft) -> dict[str, object]:
        payload: dict[str, object] = {
            "id": draft.id,
            "name": draft.name,
            "negativo": draft.negativo,
            "cauzione": draft.cauzione,
            "versamenti_settimanali": draft.versamenti_settimanali,
            "disponibilita": draft.disponibilita,
            "user_id": draft.owner_id,
        }
        if draft.hierarchy is not None:
            payload["level"] = draft.hierarchy.level.value
            payload["parent_id"] = draft.hierarchy.parent_id
        return payload

    @staticmethod
    def _to_record(mapping: Mapping[str, object]) -> Record:
        hierarchy = None
        if "level" in mapping or "parent_id" in mapping:
            hierarchy = HierarchyAssignment(
                level=Level.parse(mapping.get("level"), DEFAULT_LEVEL),
                parent_id=mapping.get("parent_id") or None,
            )
        return Record(
            id=str(mapping["id"]),
            name=str(mapping.get("name") or ""),
            negativo=coerce_decimal(mapping.get("negativo")),
            cauzione=coerce_decimal(mapping.get("cauzione")),
            versamenti_settimanali=coerce_decimal(
                mapping.get("versamenti_settimanali")
            ),
            disponibilita=coerce_decimal(mapping.get("disponibilita")),
            owner_id=mapping.get("user_id"),
            hierarchy=hierarchy,
        )

    def _guard(self, action: str) -> "_PersistenceGuard":
        return _PersistenceGuard(action, self._logger)


class _PersistenceGuard:
    """Context manager turning database errors into PersistenceError."""

    def __init__(self, action: str, logger) -> None:
        self._action = action
        self._logger = logger

    def __enter__(self) -> None:
        return None

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None or not isinstance(exc, SQLAlchemyError):
            return False
        self._logger.error(f"Failed to {self._action}: {exc}")
        raise PersistenceError(f"Failed to {self._action}") from exc


__all__ = [
    "SqlAlchemyRecordStore",
    "CREATE_TABLE_SQL",
    "HIERARCHY_COLUMNS_SQL",
    "UPDATABLE_COLUMNS",
]

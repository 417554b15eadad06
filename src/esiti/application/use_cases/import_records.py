"""Use case for bulk importing records from CSV text.

Expected header (case-insensitive, any column order)::

    name,negativo,cauzione,versamenti_settimanali,disponibilita

Optional ``level`` and ``parent_id`` columns may follow.

Rows with a blank name are dropped. Amounts accept a comma as decimal
separator. Level and parent are honored only when the backend stores the
hierarchy; parents that break the allowed-parent table are dropped.
"""

import csv
import io
from dataclasses import dataclass
from uuid import uuid4

from esiti.application.dashboard_state import DashboardState, HierarchySource
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.domain.constants import DEFAULT_LEVEL, REQUIRED_IMPORT_HEADERS
from esiti.domain.errors import ImportPartialFailure, ValidationError
from esiti.domain.models.records import (
    HierarchyAssignment,
    Level,
    Record,
    RecordDraft,
)
from esiti.domain.services.normalization import (
    normalize_name,
    normalize_negativo,
)
from esiti.domain.services.validation import resolve_parent
from esiti.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from esiti.utils.decimal_utils import parse_amount


@dataclass(frozen=True)
class ImportRecordsResult:
    """Result of an import run.

    Attributes:
        source_count: Data rows read from the CSV body.
        inserted: Records inserted, in file order.
    """

    source_count: int
    inserted: list[Record]

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)


def parse_import_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text into rows keyed by lower-cased header.

    Args:
        text: Full CSV content, optionally starting with a UTF-8 BOM.

    Returns:
        list[dict[str, str]]: One mapping per non-blank data row.

    Raises:
        ValidationError: If there is no data line or a required header is
            missing.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff"), newline=""))
    lines = [
        columns
        for columns in reader
        if any(column.strip() for column in columns)
    ]
    if len(lines) < 2:
        raise ValidationError("File CSV vuoto o non valido")
    headers = [header.strip().lower() for header in lines[0]]
    if not all(header in headers for header in REQUIRED_IMPORT_HEADERS):
        raise ValidationError("Header CSV non valido")
    rows = []
    for columns in lines[1:]:
        rows.append(
            {
                header: columns[index] if index < len(columns) else ""
                for index, header in enumerate(headers)
            }
        )
    return rows


class ImportRecordsUseCase:
    """Validate CSV rows and insert them in a single store call."""

    def __init__(
        self,
        store: RecordStorePort,
        hierarchy_store: HierarchyStorePort,
        state: DashboardState,
        owner_id: str | None = None,
        logger=None,
        usage_logger=None,
    ) -> None:
        self._store = store
        self._hierarchy_store = hierarchy_store
        self._state = state
        self._owner_id = owner_id
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()

    def execute(self, text: str) -> ImportRecordsResult:
        """Import CSV text.

        Args:
            text: CSV content.

        Returns:
            ImportRecordsResult: Counts and inserted records.

        Raises:
            ValidationError: If the header is invalid or the body empty.
            ImportPartialFailure: If no row has a name.
            PersistenceError: If the store rejects the insert; nothing is
                applied to the state.
        """
        rows = parse_import_csv(text)
        valid_rows = [row for row in rows if normalize_name(row["name"])]
        if not valid_rows:
            raise ImportPartialFailure("Nessuna riga valida da importare")

        drafts, assignments = self._build_drafts(valid_rows)
        inserted = self._store.insert_many(drafts)

        for record in reversed(inserted):
            self._state.upsert_record(
                record,
                assignments.get(record.id, HierarchyAssignment()),
            )
        self._hierarchy_store.save(self._state.to_local_cache())

        dropped = len(rows) - len(valid_rows)
        if dropped:
            self._logger.warning(
                f"Dropped {dropped} import rows without name"
            )
        self._usage_logger.info(f"Imported {len(inserted)} records from CSV")
        return ImportRecordsResult(source_count=len(rows), inserted=inserted)

    def _build_drafts(
        self,
        rows: list[dict[str, str]],
    ) -> tuple[list[RecordDraft], dict[str, HierarchyAssignment]]:
        backend = self._state.hierarchy_source is HierarchySource.BACKEND
        levels = self._state.levels
        drafts = []
        assignments = {}
        for row in rows:
            record_id = str(uuid4())
            assignment = HierarchyAssignment()
            if backend:
                level = Level.parse(row.get("level"), DEFAULT_LEVEL)
                parent_id = resolve_parent(
                    record_id,
                    level,
                    normalize_name(row.get("parent_id")) or None,
                    levels,
                    self._logger,
                )
                assignment = HierarchyAssignment(
                    level=level,
                    parent_id=parent_id,
                )
            assignments[record_id] = assignment
            drafts.append(
                RecordDraft(
                    id=record_id,
                    name=normalize_name(row["name"]),
                    negativo=normalize_negativo(row["negativo"]),
                    cauzione=parse_amount(row["cauzione"]),
                    versamenti_settimanali=parse_amount(
                        row["versamenti_settimanali"]
                    ),
                    disponibilita=parse_amount(row["disponibilita"]),
                    owner_id=self._owner_id,
                    hierarchy=assignment if backend else None,
                )
            )
        return drafts, assignments


__all__ = ["ImportRecordsUseCase", "ImportRecordsResult", "parse_import_csv"]

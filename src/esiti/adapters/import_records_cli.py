"""CLI adapter to bulk import weekly outcome records from a CSV file.

The file must carry the header
``name,negativo,cauzione,versamenti_settimanali,disponibilita`` and may add
``level,parent_id`` columns, honored when the table stores the hierarchy.
"""

import sys
from pathlib import Path

from esiti.application.dashboard_state import DashboardState
from esiti.application.use_cases.import_records import ImportRecordsUseCase
from esiti.application.use_cases.load_records import LoadRecordsUseCase
from esiti.domain.errors import EsitiError
from esiti.infrastructure.container import (
    build_hierarchy_store,
    build_record_store,
    build_settings,
)
from esiti.infrastructure.logging.logger import get_app_logger


def main(argv: list[str] | None = None) -> int:
    """Import the CSV file given as first argument.

    Args:
        argv: Command-line arguments, ``sys.argv[1:]`` when None.

    Returns:
        int: Process exit code.
    """
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: esiti-import <file.csv>", file=sys.stderr)
        return 2
    logger = get_app_logger()
    settings = build_settings()
    store = build_record_store(settings=settings)
    hierarchy_store = build_hierarchy_store(settings=settings)
    state = DashboardState()

    try:
        text = Path(args[0]).read_text(encoding="utf-8")
        LoadRecordsUseCase(
            store,
            hierarchy_store,
            state,
            logger=logger,
        ).execute()
        result = ImportRecordsUseCase(
            store,
            hierarchy_store,
            state,
            owner_id=settings.owner_id,
            logger=logger,
        ).execute(text)
    except (OSError, EsitiError) as exc:
        logger.error(f"Import failed: {exc}")
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1

    print(
        f"Imported {result.inserted_count} of {result.source_count} rows "
        f"into {settings.table_name}."
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

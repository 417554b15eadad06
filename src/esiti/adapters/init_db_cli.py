"""CLI adapter creating the record table when it does not exist."""

import sys

from esiti.domain.errors import PersistenceError
from esiti.infrastructure.container import build_record_store, build_settings
from esiti.infrastructure.logging.logger import get_app_logger


def main(argv: list[str] | None = None) -> int:
    """Create the record table.

    Pass ``--no-hierarchy`` to leave out the level and parent_id columns,
    which makes the dashboard keep assignments in the local JSON file.
    """
    args = sys.argv[1:] if argv is None else argv
    with_hierarchy = "--no-hierarchy" not in args
    logger = get_app_logger()
    settings = build_settings()
    store = build_record_store(settings=settings)
    try:
        store.prepare_table(with_hierarchy=with_hierarchy)
    except PersistenceError as exc:
        print(f"Table creation failed: {exc}", file=sys.stderr)
        return 1
    logger.info(f"Prepared table {settings.table_name}")
    print(f"Table {settings.table_name} is ready.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

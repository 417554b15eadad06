"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from pathlib import Path

import dotenv

from esiti.infrastructure.logging.logger import get_app_logger
from esiti.utils.utils import get_project_root


@dataclass(frozen=True)
class EsitiSettings:
    """Settings for the record table and the local hierarchy cache.

    Attributes:
        hierarchy_file: JSON file holding locally persisted assignments.
        owner_id: Account recorded as creator of new records.
        table_name: Name of the record table.
    """

    hierarchy_file: Path
    owner_id: str = "local"
    table_name: str = "calculations"

    @classmethod
    def from_env(cls) -> "EsitiSettings":
        """Build settings from environment variables.

        Returns:
            EsitiSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        raw_file = os.getenv("ESITI_HIERARCHY_FILE")
        if raw_file:
            hierarchy_file = Path(raw_file).expanduser().resolve()
        else:
            hierarchy_file = get_project_root() / "data" / "hierarchy.json"
        owner_id = os.getenv("ESITI_OWNER_ID", "local").strip() or "local"
        table_name = cls._table_name(
            os.getenv("ESITI_TABLE", "calculations"),
            logger=logger,
        )
        return cls(
            hierarchy_file=hierarchy_file,
            owner_id=owner_id,
            table_name=table_name,
        )

    @staticmethod
    def _table_name(raw_name: str, logger) -> str:
        """Return the configured table name when it is a plain identifier.

        Args:
            raw_name: Raw table name.
            logger: Logger used for warnings.

        Returns:
            str: Valid identifier, the default name otherwise.
        """
        candidate = raw_name.strip()
        if candidate.isidentifier():
            return candidate
        logger.warning(
            f"Invalid ESITI_TABLE '{raw_name}', using 'calculations'"
        )
        return "calculations"


__all__ = ["EsitiSettings"]

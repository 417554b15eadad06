"""Engine factory for the weekly outcomes record database.

``ESITI_DB_URL`` selects the backend. Server databases (PostgreSQL) get a
small health-checked pool; SQLite files are opened so that the Streamlit
script threads can share the engine.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool

from esiti.application.ports.database import DatabaseEnginePort

DB_URL_VARIABLE = "ESITI_DB_URL"


def _get_env_var(name: str) -> str:
    """Return a required environment variable, loading ``.env`` first.

    Raises:
        RuntimeError: If the variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _engine_options(db_url: str) -> dict[str, object]:
    """Return create_engine keyword arguments suited to the URL backend.

    Args:
        db_url: Database URL, e.g. ``postgresql+psycopg://...`` or
            ``sqlite:///esiti.db``.

    Returns:
        dict[str, object]: Pooling and connection options.
    """
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return {
            "poolclass": QueuePool,
            "pool_size": 5,
            "max_overflow": 5,
            "pool_pre_ping": True,
        }
    options: dict[str, object] = {
        "connect_args": {"check_same_thread": False},
    }
    if url.database in (None, "", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty db.
        options["poolclass"] = StaticPool
    return options


def _create_engine(db_url: str) -> Engine:
    """Create the engine for ``db_url`` with backend specific options."""
    return create_engine(db_url, future=True, **_engine_options(db_url))


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use.

    Raises:
        RuntimeError: If ``ESITI_DB_URL`` is not configured.
    """
    global _engine
    if _engine is None:
        _engine = _create_engine(_get_env_var(DB_URL_VARIABLE))
    return _engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort returning the shared record engine."""

    def get_engine(self) -> Engine:
        return get_engine()


__all__ = [
    "DB_URL_VARIABLE",
    "get_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]

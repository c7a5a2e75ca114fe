"""Database engine setup for SQLite with WAL mode.

SQLite is the durable keyed store: WAL mode for concurrent reads, ACID
transactions so a failed ledger operation leaves no partial writes.
The DB is stored at {root}/.stockctl/stockctl.db.

Records are read as frozen snapshots through SQLAlchemy Core; there is no ORM.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from stockctl.domain.types import Namespace
from stockctl.infrastructure.database.schema import id_counters, metadata

logger = logging.getLogger(__name__)

DB_DIRNAME = ".stockctl"
DB_FILENAME = "stockctl.db"


def db_path_for(root: Path) -> Path:
    """Location of the ledger database under *root*."""
    return root / DB_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(
    root: Path,
    *,
    id_starts: Mapping[str, int] | None = None,
) -> Engine:
    """Initialize the ledger database at ``{root}/.stockctl/stockctl.db``.

    Creates the ``.stockctl/`` directory structure and all tables from
    :data:`schema.metadata`, and seeds ``id_counters`` with the starting
    value of each namespace.

    Idempotent, so it is safe to call on an existing ledger. Starting values only
    apply when a namespace's counter row does not exist yet.

    Returns the engine ready for use.
    """
    state_dir = root / DB_DIRNAME
    state_dir.mkdir(parents=True, exist_ok=True)
    db_path = state_dir / DB_FILENAME
    fresh = not db_path.exists()
    engine = create_db_engine(db_path)

    metadata.create_all(engine)
    _seed_counters(engine, id_starts or {})

    if fresh:
        logger.debug("Created ledger database at %s", db_path)
    return engine


def _seed_counters(engine: Engine, id_starts: Mapping[str, int]) -> None:
    """Insert initial counter rows for each namespace if they don't exist."""
    with engine.begin() as conn:
        for namespace in Namespace:
            row = conn.execute(
                select(id_counters.c.namespace).where(id_counters.c.namespace == namespace.value)
            ).first()
            if row is None:
                start = int(id_starts.get(namespace.value, 0))
                conn.execute(insert(id_counters).values(namespace=namespace.value, next_value=start))

"""SQLite database engine, schema, and identifier pools via SQLAlchemy Core."""

from stockctl.infrastructure.database.counters import allocate_id, pool_state, release_id
from stockctl.infrastructure.database.engine import create_db_engine, db_path_for, init_database
from stockctl.infrastructure.database.schema import (
    id_counters,
    metadata,
    recycled_ids,
    stock_items,
    warehouses,
)

__all__ = [
    "allocate_id",
    "create_db_engine",
    "db_path_for",
    "id_counters",
    "init_database",
    "metadata",
    "pool_state",
    "recycled_ids",
    "release_id",
    "stock_items",
    "warehouses",
]

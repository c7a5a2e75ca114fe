"""SQLAlchemy Core table definitions for the stockctl database.

Record tables are keyed by 64-bit integers and hold one row per live
record. There are no foreign keys between ``stock_items`` and
``warehouses``: cascading deletion is performed by the service layer
inside the same transaction as the warehouse removal.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

warehouses = Table(
    "warehouses",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
    Column("created_at", Integer, nullable=False),  # ns since epoch
)

stock_items = Table(
    "stock_items",
    metadata,
    Column("item_id", Integer, primary_key=True, autoincrement=False),
    Column("warehouse_id", Integer, nullable=False),
    Column("item_name", Text, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("created_at", Integer, nullable=False),
    Column("updated_at", Integer),
)

Index("ix_stock_items_warehouse", stock_items.c.warehouse_id)
Index("ix_stock_items_warehouse_name", stock_items.c.warehouse_id, stock_items.c.item_name)

# ---------------------------------------------------------------------------
# Identifier pools: one counter row and a recycled set per namespace
# ---------------------------------------------------------------------------

id_counters = Table(
    "id_counters",
    metadata,
    Column("namespace", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=0, server_default="0"),
)

recycled_ids = Table(
    "recycled_ids",
    metadata,
    # Release order; the highest seq is the most recently released id.
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("namespace", Text, nullable=False),
    Column("value", Integer, nullable=False),
    UniqueConstraint("namespace", "value"),
)

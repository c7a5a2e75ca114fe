"""Ledger: transactional access to the keyed stores and identifier pools.

The Ledger is the single dependency injected into every service. It owns
the database engine, the record clock, and the optional plugin hooks. The
:meth:`transaction` context manager yields a :class:`LedgerTransaction`
whose stores and identifier pools share one database transaction, so a
multi-step mutation (cascading delete, transfer) commits or rolls back
as a unit.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from stockctl.domain.models import MAX_ID, StockItem, Warehouse
from stockctl.domain.types import Namespace
from stockctl.infrastructure.clock import MonotonicClock
from stockctl.infrastructure.database.counters import allocate_id, pool_state, release_id
from stockctl.infrastructure.database.engine import db_path_for, init_database
from stockctl.infrastructure.database.schema import stock_items, warehouses
from stockctl.infrastructure.store import KeyedStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from stockctl.config.settings import StockSettings
    from stockctl.plugins.hooks import LedgerHooks


# ---------------------------------------------------------------------------
# LedgerTransaction, yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class LedgerTransaction:
    """Active transaction context with bound stores and identifier pools.

    All record writes must go through :attr:`warehouses` and :attr:`items`
    so they share the transaction of :attr:`conn`.
    """

    conn: Connection
    _ledger: Ledger
    warehouses: KeyedStore[Warehouse] = field(init=False, repr=False)
    items: KeyedStore[StockItem] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.warehouses = KeyedStore(self.conn, warehouses, "id", Warehouse)
        self.items = KeyedStore(self.conn, stock_items, "item_id", StockItem)

    def now(self) -> int:
        """Timestamp for a record written in this transaction."""
        return self._ledger.clock()

    # ------------------------------------------------------------------
    # Identifier pools
    # ------------------------------------------------------------------

    def allocate(self, namespace: Namespace) -> int:
        return allocate_id(self.conn, namespace)

    def release(self, namespace: Namespace, value: int) -> bool:
        return release_id(self.conn, namespace, value)

    def pool(self, namespace: Namespace) -> tuple[int, list[int]]:
        return pool_state(self.conn, namespace)

    # ------------------------------------------------------------------
    # Stock lookups
    # ------------------------------------------------------------------

    def items_in(self, warehouse_id: int) -> list[StockItem]:
        """All stock items held by *warehouse_id*, ascending item id."""
        if not 0 <= warehouse_id <= MAX_ID:
            return []
        return list(self.items.iterate(stock_items.c.warehouse_id == warehouse_id))

    def find_item(self, warehouse_id: int, item_name: str) -> StockItem | None:
        """The live item named *item_name* in *warehouse_id*, if any."""
        if not 0 <= warehouse_id <= MAX_ID:
            return None
        return next(
            self.items.iterate(
                stock_items.c.warehouse_id == warehouse_id,
                stock_items.c.item_name == item_name,
            ),
            None,
        )


# ---------------------------------------------------------------------------
# Ledger repository
# ---------------------------------------------------------------------------


class Ledger:
    """The warehouse and stock stores behind one SQLite file.

    Services take a Ledger in their constructor and open a
    :meth:`transaction` per operation. Plugin hooks are optional; without
    them mutations simply notify nobody.
    """

    def __init__(
        self,
        settings: StockSettings,
        *,
        clock: Callable[[], int] | None = None,
        hooks: LedgerHooks | None = None,
    ) -> None:
        self._settings = settings
        self._clock: Callable[[], int] = clock or MonotonicClock()
        self._hooks = hooks
        self._engine: Engine = init_database(
            settings.root,
            id_starts={
                Namespace.WAREHOUSE.value: settings.ids.warehouse_start,
                Namespace.ITEM.value: settings.ids.item_start,
            },
        )

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def db_path(self) -> Path:
        return db_path_for(self._settings.root)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def settings(self) -> StockSettings:
        return self._settings

    @property
    def clock(self) -> Callable[[], int]:
        """Source of record ``created_at`` / ``updated_at`` values."""
        return self._clock

    @property
    def hooks(self) -> LedgerHooks | None:
        return self._hooks

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """Commit everything done in the block, or nothing if it raises.

        Identifier allocation and release share the block's connection,
        so a rolled-back operation neither consumes nor recycles an id::

            with ledger.transaction() as txn:
                wid = txn.allocate(Namespace.WAREHOUSE)
                txn.warehouses.insert(wid, Warehouse(...))
        """
        with self._engine.begin() as conn:
            yield LedgerTransaction(conn=conn, _ledger=self)

    @contextmanager
    def snapshot(self) -> Iterator[LedgerTransaction]:
        """Read-only view for queries; nothing written here is committed."""
        with self._engine.connect() as conn:
            yield LedgerTransaction(conn=conn, _ledger=self)

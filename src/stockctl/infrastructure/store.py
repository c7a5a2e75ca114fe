"""KeyedStore — ordered map from integer key to a frozen record.

One store wraps one table whose primary key is a 64-bit integer. The
store is bound to a connection, so every read and write happens inside
the transaction that connection belongs to.

Contract::

    get(key)              -> record | None   (None for keys outside 0..MAX_ID)
    insert(key, record)   -> previous record | None
    remove(key)           -> removed record | None
    iterate(*criteria)    -> records in ascending key order
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, insert, select, update

from stockctl.domain.models import MAX_ID

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Connection, Table

R = TypeVar("R", bound=BaseModel)


class KeyedStore(Generic[R]):
    """Integer-keyed record store over a single SQLAlchemy table."""

    def __init__(self, conn: Connection, table: Table, key: str, record_type: type[R]) -> None:
        self._conn = conn
        self._table = table
        self._key = table.c[key]
        self._record_type = record_type

    def _to_record(self, row: Any) -> R:
        return self._record_type.model_validate(dict(row._mapping))

    @staticmethod
    def _storable(key: int) -> bool:
        return 0 <= key <= MAX_ID

    def get(self, key: int) -> R | None:
        if not self._storable(key):
            return None
        row = self._conn.execute(select(self._table).where(self._key == key)).first()
        return None if row is None else self._to_record(row)

    def contains(self, key: int) -> bool:
        if not self._storable(key):
            return False
        row = self._conn.execute(select(self._key).where(self._key == key)).first()
        return row is not None

    def insert(self, key: int, record: R) -> R | None:
        """Write *record* under *key*, replacing any existing row.

        Returns the previous record, or None if the key was vacant.
        """
        values = record.model_dump()
        values[self._key.name] = key
        previous = self.get(key)
        if previous is None:
            self._conn.execute(insert(self._table).values(**values))
        else:
            self._conn.execute(update(self._table).where(self._key == key).values(**values))
        return previous

    def remove(self, key: int) -> R | None:
        """Delete the row under *key*. Returns the removed record, if any."""
        previous = self.get(key)
        if previous is not None:
            self._conn.execute(delete(self._table).where(self._key == key))
        return previous

    def iterate(self, *criteria: ColumnElement[bool]) -> Iterator[R]:
        """Yield records matching *criteria* in ascending key order."""
        stmt = select(self._table).where(*criteria).order_by(self._key.asc())
        for row in self._conn.execute(stmt).all():
            yield self._to_record(row)

    def count(self) -> int:
        return int(
            self._conn.execute(select(func.count()).select_from(self._table)).scalar_one()
        )

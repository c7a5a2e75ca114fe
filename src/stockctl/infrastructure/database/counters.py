"""Identifier pools for the warehouse and item namespaces.

Each namespace has a monotonically increasing counter (``id_counters``)
and a set of recycled identifiers (``recycled_ids``). ``allocate_id``
prefers a recycled id, chosen by the namespace's reuse policy, and only
extends the counter when the recycled set is empty.

The caller owns the transaction: pass a ``Connection`` obtained from
``engine.begin()`` so allocation and release commit or roll back
together with the record writes they belong to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update

from stockctl.domain.models import MAX_ID
from stockctl.domain.types import REUSE_POLICIES, Namespace, ReusePolicy
from stockctl.infrastructure.database.schema import id_counters, recycled_ids

if TYPE_CHECKING:
    from sqlalchemy import Connection


def _namespace(namespace: str) -> Namespace:
    try:
        return Namespace(namespace)
    except ValueError:
        msg = (
            f"Unknown identifier namespace: {namespace!r}. "
            f"Expected one of {sorted(n.value for n in Namespace)}"
        )
        raise ValueError(msg) from None


def allocate_id(conn: Connection, namespace: str) -> int:
    """Claim the next identifier for *namespace*.

    Recycled identifiers are reused before the counter grows. The
    warehouse namespace hands out its smallest recycled id; the item
    namespace hands out the most recently released one.

    Raises:
        ValueError: If *namespace* is not a known namespace.
        OverflowError: If the counter has exhausted the 64-bit range.
    """
    ns = _namespace(namespace)

    if REUSE_POLICIES[ns] is ReusePolicy.LOWEST_FIRST:
        order = recycled_ids.c.value.asc()
    else:
        order = recycled_ids.c.seq.desc()

    recycled = conn.execute(
        select(recycled_ids.c.seq, recycled_ids.c.value)
        .where(recycled_ids.c.namespace == ns.value)
        .order_by(order)
        .limit(1)
    ).first()
    if recycled is not None:
        conn.execute(delete(recycled_ids).where(recycled_ids.c.seq == recycled.seq))
        return int(recycled.value)

    current_value: int = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.namespace == ns.value)
    ).scalar_one()
    if current_value >= MAX_ID:
        msg = f"Identifier space exhausted for namespace {ns.value!r}"
        raise OverflowError(msg)

    conn.execute(
        update(id_counters)
        .where(id_counters.c.namespace == ns.value)
        .values(next_value=current_value + 1)
    )
    return current_value


def release_id(conn: Connection, namespace: str, value: int) -> bool:
    """Return *value* to the recycled set of *namespace*.

    Idempotent: releasing an id that is already recycled is a no-op, and
    so is releasing one the counter has not handed out yet.
    Returns True if the id was added to the recycled set.
    """
    ns = _namespace(namespace)
    next_value: int = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.namespace == ns.value)
    ).scalar_one()
    if not 0 <= value < next_value:
        return False
    existing = conn.execute(
        select(recycled_ids.c.seq).where(
            recycled_ids.c.namespace == ns.value,
            recycled_ids.c.value == value,
        )
    ).first()
    if existing is not None:
        return False
    conn.execute(insert(recycled_ids).values(namespace=ns.value, value=value))
    return True


def pool_state(conn: Connection, namespace: str) -> tuple[int, list[int]]:
    """Return ``(next_value, recycled ids in release order)`` for *namespace*."""
    ns = _namespace(namespace)
    next_value: int = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.namespace == ns.value)
    ).scalar_one()
    recycled = conn.execute(
        select(recycled_ids.c.value)
        .where(recycled_ids.c.namespace == ns.value)
        .order_by(recycled_ids.c.seq)
    ).scalars()
    return next_value, [int(v) for v in recycled]

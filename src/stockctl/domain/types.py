"""Identifier namespaces, reuse policies, and error codes.

Each namespace owns an independent identifier pool. The reuse policy is
fixed per namespace so allocation order stays deterministic across runs.
"""

from __future__ import annotations

from enum import StrEnum


class Namespace(StrEnum):
    """Independent identifier namespaces."""

    WAREHOUSE = "warehouse"
    ITEM = "item"


class ReusePolicy(StrEnum):
    """Which recycled identifier ``allocate()`` hands out first."""

    LOWEST_FIRST = "lowest_first"
    LAST_RELEASED_FIRST = "last_released_first"


REUSE_POLICIES: dict[Namespace, ReusePolicy] = {
    Namespace.WAREHOUSE: ReusePolicy.LOWEST_FIRST,
    Namespace.ITEM: ReusePolicy.LAST_RELEASED_FIRST,
}


class ErrorCode(StrEnum):
    """Error codes carried by ``ServiceError.code``."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_ENOUGH_STOCK = "NOT_ENOUGH_STOCK"

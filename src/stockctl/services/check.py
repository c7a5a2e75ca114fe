"""CheckService — ledger integrity checking.

Read-only linter over the stores and identifier pools. Each issue is a
dict with ``category``, ``severity``, ``message`` and the ids involved.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from stockctl.domain.types import Namespace
from stockctl.services.base import BaseService
from stockctl.services.result import ServiceResult
from stockctl.services.telemetry import stage, traced

if TYPE_CHECKING:
    from stockctl.domain.models import StockItem, Warehouse
    from stockctl.infrastructure.ledger import LedgerTransaction


SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_ORPHANED_STOCK = "orphaned_stock"
CAT_NON_POSITIVE = "non_positive_quantity"
CAT_LIVE_RECYCLED = "live_id_recycled"
CAT_BEYOND_COUNTER = "id_beyond_counter"
CAT_DUPLICATE_NAME = "duplicate_item_name"

_SEVERITY_RANK = {SEVERITY_WARNING: 0, SEVERITY_ERROR: 1}


def _issue(category: str, severity: str, message: str, **ids: Any) -> dict[str, Any]:
    return {"category": category, "severity": severity, "message": message, **ids}


class CheckService(BaseService):
    """Read-only integrity checks over the ledger."""

    @traced
    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Report integrity issues without modifying anything."""
        issues: list[dict[str, Any]] = []
        with self._ledger.snapshot() as view:
            all_warehouses = list(view.warehouses.iterate())
            all_items = list(view.items.iterate())
            with stage("stock_consistency"):
                issues.extend(self._check_stock(all_warehouses, all_items))
            with stage("identifier_pools"):
                issues.extend(
                    self._check_pool(
                        view, Namespace.WAREHOUSE, [w.id for w in all_warehouses]
                    )
                )
                issues.extend(
                    self._check_pool(view, Namespace.ITEM, [i.item_id for i in all_items])
                )

        threshold = _SEVERITY_RANK.get(min_severity, 0)
        issues = [i for i in issues if _SEVERITY_RANK[i["severity"]] >= threshold]

        warnings: list[str] = []
        self._notify("post_check", warnings, issues_found=len(issues))

        return ServiceResult(
            ok=True,
            op="check",
            data={
                "ledger": self._ledger.settings.ledger.name,
                "issues": issues,
                "count": len(issues),
                "warehouses": len(all_warehouses),
                "stock_items": len(all_items),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    @staticmethod
    def _check_stock(
        all_warehouses: list[Warehouse], all_items: list[StockItem]
    ) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        known = {w.id for w in all_warehouses}

        for item in all_items:
            if item.warehouse_id not in known:
                issues.append(
                    _issue(
                        CAT_ORPHANED_STOCK,
                        SEVERITY_ERROR,
                        f"Item id={item.item_id} references missing warehouse "
                        f"id={item.warehouse_id}",
                        item_id=item.item_id,
                        warehouse_id=item.warehouse_id,
                    )
                )
            if item.quantity <= 0:
                issues.append(
                    _issue(
                        CAT_NON_POSITIVE,
                        SEVERITY_ERROR,
                        f"Item id={item.item_id} has quantity {item.quantity}",
                        item_id=item.item_id,
                    )
                )

        names = Counter((item.warehouse_id, item.item_name) for item in all_items)
        for (warehouse_id, item_name), count in sorted(names.items()):
            if count > 1:
                issues.append(
                    _issue(
                        CAT_DUPLICATE_NAME,
                        SEVERITY_WARNING,
                        f"Warehouse id={warehouse_id} holds {count} records named {item_name!r}",
                        warehouse_id=warehouse_id,
                        item_name=item_name,
                    )
                )
        return issues

    @staticmethod
    def _check_pool(
        view: LedgerTransaction, namespace: Namespace, live_ids: list[int]
    ) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        next_value, recycled = view.pool(namespace)
        live = set(live_ids)

        for value in recycled:
            if value in live:
                issues.append(
                    _issue(
                        CAT_LIVE_RECYCLED,
                        SEVERITY_ERROR,
                        f"Live {namespace.value} id={value} is in the recycled set",
                        namespace=namespace.value,
                        id=value,
                    )
                )
        for value in sorted(live):
            if value >= next_value:
                issues.append(
                    _issue(
                        CAT_BEYOND_COUNTER,
                        SEVERITY_ERROR,
                        f"Live {namespace.value} id={value} is not below the counter "
                        f"({next_value})",
                        namespace=namespace.value,
                        id=value,
                    )
                )
        return issues

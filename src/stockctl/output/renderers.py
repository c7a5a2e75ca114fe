"""Human-readable output: one Rich renderer per service operation.

:func:`render_result` looks the renderer up by ``result.op`` and falls back
to a plain key/value listing for anything it does not know.
"""

from __future__ import annotations

import json
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from stockctl.output.console import create_console, get_output
from stockctl.services._helpers import ns_to_iso

if TYPE_CHECKING:
    from rich.console import Console

    from stockctl.services.result import ServiceResult

_TIMESTAMP_KEYS = frozenset({"created_at", "updated_at"})
_SEVERITY_STYLES = {"error": "stock.error", "warning": "stock.warning"}


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* as text; styling is dropped when stdout is not a terminal."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per listed id, or a bare OK/ERROR line."""
    if not result.ok:
        reason = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {reason}"
    listed = result.data.get("items")
    if not isinstance(listed, list):
        return f"OK: {result.op}"
    return "\n".join(filter(None, map(_extract_id, listed)))


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(record: Any) -> str:
    if not isinstance(record, dict):
        return ""
    key = "item_id" if "item_id" in record else "id"
    return "" if record.get(key) is None else str(record[key])


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="stock.ok")
    op = Text(f"  {result.op}", style="stock.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="stock.key")
    if key in _TIMESTAMP_KEYS:
        v = Text(str(ns_to_iso(value) if isinstance(value, int) else value), style="dim")
    elif key == "id" or key.endswith("_id"):
        v = Text(str(value), style="stock.id")
    elif key in ("name", "item_name"):
        v = Text(str(value), style="stock.name")
    elif key == "quantity":
        v = Text(str(value), style="stock.qty")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, laying out stage timings when present."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_timings(console, value)
        else:
            console.print(f"    {key}: {value}")


def _timing_style(duration_ms: float) -> str:
    if duration_ms > 1000:
        return "bold red"
    return "yellow" if duration_ms > 100 else "dim"


def _render_timings(console: Console, timing: dict[str, Any]) -> None:
    total = timing.get("duration_ms", 0.0)
    style = _timing_style(total)
    console.print(f"    [{style}]{total:>8.2f}ms[/{style}]  {timing.get('operation', '?')}")
    for entry in timing.get("stages", []):
        ms = entry.get("duration_ms", 0.0)
        style = _timing_style(ms)
        console.print(f"      [{style}]{ms:>8.2f}ms[/{style}]  {entry.get('name', '?')}")


def _stock_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of stock items."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Item ID", style="stock.id", no_wrap=True, justify="right")
    table.add_column("Name", style="stock.name")
    table.add_column("Quantity", style="stock.qty", justify="right")
    if verbose:
        table.add_column("Created", style="dim")
        table.add_column("Updated", style="dim")

    for item in items:
        row = [
            str(item.get("item_id", "")),
            str(item.get("item_name", "")),
            str(item.get("quantity", "")),
        ]
        if verbose:
            row.append(ns_to_iso(item.get("created_at")) or "")
            row.append(ns_to_iso(item.get("updated_at")) or "-")
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    error = result.error
    console.print(
        Text("ERROR", style="stock.error"),
        Text(f"  {result.op}", style="stock.op"),
        Text(" — "),
        error.message if error else "Unknown error",
    )
    if verbose and error is not None and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            console.print(f"    {key}: {value}")


# ── Warehouse renderers ───────────────────────────────────────────────


def _render_warehouse(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get/add warehouse results."""
    _status_line(console, result)
    for key in ("id", "name", "created_at"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_delete_warehouse(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, "name", d.get("name"))
    _field(console, "removed_count", d.get("removed_count", 0))
    removed = d.get("removed_items", [])
    if removed and verbose:
        console.print()
        console.print(_stock_table(removed))
    if verbose:
        _render_meta(console, result)


def _render_warehouse_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render every warehouse with its stock, one block per warehouse."""
    entries = result.data.get("items", [])
    if not entries:
        console.print("[stock.empty]No warehouses.[/stock.empty]")
        return

    for entry in entries:
        header = Text.assemble(
            (str(entry.get("id", "")), "stock.id"),
            "  ",
            (str(entry.get("name", "")), "stock.name"),
            ("  total=", "stock.key"),
            (str(entry.get("total_quantity", 0)), "stock.qty"),
        )
        console.print(header)
        stock = entry.get("stock", [])
        if stock:
            console.print(_stock_table(stock, verbose=verbose))
        else:
            console.print("  [stock.empty]no stock[/stock.empty]")
        console.print()

    console.print(f"{result.data.get('count', len(entries))} warehouses")


# ── Stock renderers ───────────────────────────────────────────────────


def _render_stock_item(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get/add/decrement stock results."""
    d = result.data
    _status_line(console, result)
    for key in ("item_id", "warehouse_id", "item_name", "quantity"):
        if key in d:
            _field(console, key, d[key])
    if d.get("merged"):
        _field(console, "merged", True)
    if d.get("removed"):
        _field(console, "removed", True)
    if verbose:
        for key in ("created_at", "updated_at"):
            if d.get(key) is not None:
                _field(console, key, d[key])
        _render_meta(console, result)


def _render_transfer(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    source = d.get("source", {})
    destination = d.get("destination", {})
    _status_line(console, result)
    _field(console, "item_name", source.get("item_name", ""))
    _field(console, "quantity", d.get("quantity"))
    src_note = " (removed)" if d.get("source_removed") else ""
    dst_note = " (merged)" if d.get("merged") else ""
    console.print(
        f"  [stock.key]from:[/stock.key] warehouse "
        f"[stock.id]{source.get('warehouse_id')}[/stock.id] item "
        f"[stock.id]{source.get('item_id')}[/stock.id] -> "
        f"[stock.qty]{source.get('quantity')}[/stock.qty]{src_note}"
    )
    console.print(
        f"  [stock.key]to:[/stock.key]   warehouse "
        f"[stock.id]{destination.get('warehouse_id')}[/stock.id] item "
        f"[stock.id]{destination.get('item_id')}[/stock.id] -> "
        f"[stock.qty]{destination.get('quantity')}[/stock.qty]{dst_note}"
    )
    if verbose:
        _render_meta(console, result)


def _render_stock_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(
            f"[stock.empty]Warehouse {result.data.get('warehouse_id')} holds no stock.[/stock.empty]"
        )
        return
    console.print(_stock_table(items, verbose=verbose))
    console.print(
        f"\n{result.data.get('count', len(items))} items, "
        f"total quantity {result.data.get('total_quantity', 0)}"
    )


# ── Maintenance renderers ─────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """List issues under a heading per category, then a severity tally."""
    issues: list[dict[str, Any]] = result.data.get("issues", [])
    count = result.data.get("count", len(issues))
    if result.data.get("ledger"):
        console.print(
            Text.assemble(("ledger: ", "stock.key"), (str(result.data["ledger"]), "stock.name"))
        )
    if not count:
        console.print("[stock.ok]OK[/stock.ok]  No issues found.")
        return

    categories: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for issue in issues:
        categories[str(issue.get("category", "unknown"))].append(issue)

    for category, grouped in categories.items():
        console.print(f"\n[bold]{category}[/bold]")
        for issue in grouped:
            severity = str(issue.get("severity", "warning"))
            style = _SEVERITY_STYLES.get(severity)
            label = f"[{style}]{severity}[/{style}]" if style else severity
            console.print(f"  {label}: {issue.get('message', '')}")

    errors = sum(issue.get("severity") == "error" for issue in issues)
    console.print(f"\n{count} issues ({errors} errors, {count - errors} warnings)")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Warehouses
    "get_warehouse": _render_warehouse,
    "add_warehouse": _render_warehouse,
    "delete_warehouse": _render_delete_warehouse,
    "list_warehouses_with_stock": _render_warehouse_list,
    # Stock
    "get_stock_item": _render_stock_item,
    "add_stock_item": _render_stock_item,
    "decrement_stock_item": _render_stock_item,
    "transfer_stock_item": _render_transfer,
    "list_stock_by_warehouse": _render_stock_list,
    # Maintenance
    "check": _render_check,
}

"""Common base class for stockctl services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stockctl.infrastructure.ledger import Ledger


class BaseService:
    """Holds the :class:`Ledger` a service reads and writes through.

    Services open their own transactions with ``self._ledger.transaction()``
    and report committed changes to plugins through :meth:`_notify`.
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    def _notify(self, hook_name: str, warnings: list[str], **payload: Any) -> None:
        """Fire *hook_name* on registered plugins, collecting their failures."""
        hooks = self._ledger.hooks
        if hooks is not None:
            warnings.extend(hooks.notify(hook_name, **payload))

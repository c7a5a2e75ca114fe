"""LedgerHooks: post-commit plugin notifications through pluggy.

Implementations are called one at a time instead of through the hook
relay, so a plugin that raises neither stops the remaining plugins nor
affects the ledger operation that fired the hook. Its error comes back
as a warning for the operation's ServiceResult.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pluggy

from stockctl.plugins.hookspecs import PROJECT_NAME, StockctlHookSpec

if TYPE_CHECKING:
    from stockctl.config.models import HooksConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "stockctl.plugins"


class LedgerHooks:
    """Registry of plugins implementing :class:`StockctlHookSpec`."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(StockctlHookSpec)

    @classmethod
    def from_config(cls, config: HooksConfig) -> LedgerHooks | None:
        """Build the hooks for a CLI run, or None under ``[hooks] enabled = false``."""
        if not config.enabled:
            return None
        hooks = cls()
        if config.entry_points:
            count = hooks._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
            logger.debug("Loaded %d plugin(s) from %s", count, ENTRY_POINT_GROUP)
        return hooks

    def register(self, plugin: object, name: str | None = None) -> str | None:
        """Register *plugin*; returns its name, or None if the name is blocked."""
        return self._pm.register(plugin, name=name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def plugin_names(self) -> list[str]:
        return sorted(name for name, _ in self._pm.list_name_plugin())

    def notify(self, hook_name: str, **payload: Any) -> list[str]:
        """Run every implementation of *hook_name* with *payload*.

        Returns one message per implementation that raised. Unknown hook
        names raise AttributeError: they are programming errors.
        """
        caller = getattr(self._pm.hook, hook_name)
        failures: list[str] = []
        # Last registered runs first, as with a regular pluggy hook call.
        for impl in reversed(caller.get_hookimpls()):
            try:
                impl.function(**{arg: payload[arg] for arg in impl.argnames})
            except Exception as exc:
                logger.warning(
                    "Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True
                )
                failures.append(f"Plugin {impl.plugin_name!r} failed in {hook_name}: {exc}")
        return failures

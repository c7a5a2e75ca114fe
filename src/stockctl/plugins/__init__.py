"""Plugin hooks fired after ledger mutations commit.

Plugins are discovered through the ``stockctl.plugins`` entry-point group
or registered directly on :class:`LedgerHooks`. A failing plugin produces
a warning on the operation's result, never an error.
"""

from stockctl.plugins.hooks import LedgerHooks
from stockctl.plugins.hookspecs import hookimpl

__all__ = ["LedgerHooks", "hookimpl"]

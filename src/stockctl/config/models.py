"""Section models for ``stockctl.toml``.

Every field has a code default, so a config file only lists what it
overrides. Unknown sections are rejected by :class:`StockSettings`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LedgerConfig(BaseModel):
    """[ledger] section: a display name shown by ``stockctl check``."""

    model_config = {"frozen": True}

    name: str = "my-ledger"


class IdsConfig(BaseModel):
    """[ids] section.

    First value handed out by each namespace counter. Read only when the
    ledger database is created; changing it later has no effect.
    """

    model_config = {"frozen": True}

    warehouse_start: int = Field(default=0, ge=0)
    item_start: int = Field(default=0, ge=0)


class HooksConfig(BaseModel):
    """[hooks] section: post-commit plugin notifications."""

    model_config = {"frozen": True}

    enabled: bool = True
    entry_points: bool = True  # load plugins published under ``stockctl.plugins``

"""Locate ``stockctl.toml`` the way git locates ``.git/``."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "stockctl.toml"
CONFIG_ENV_VAR = "STOCKCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), if any.

    ``$STOCKCTL_CONFIG`` wins outright; when it names a missing file no
    config is used at all. Otherwise the nearest ``stockctl.toml`` in
    *start* or one of its ancestors is returned.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        pinned = Path(override)
        return pinned if pinned.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None

"""StockSettings: one frozen object built from flags, env and TOML.

Sources, strongest first:

* keyword arguments (the global CLI flags),
* ``STOCKCTL_*`` environment variables (``__`` separates section and key),
* the ``stockctl.toml`` found by :func:`find_config` or named by ``--config``,
* the defaults in :mod:`stockctl.config.models`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

from stockctl.config.discovery import find_config
from stockctl.config.models import HooksConfig, IdsConfig, LedgerConfig

# The TOML file chosen by from_cli(), read back while sources are assembled.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class StockSettings(BaseSettings):
    """Resolved configuration for one stockctl invocation.

    Attributes:
        root: Directory holding ``.stockctl/stockctl.db``. The config file's
            directory when one was found, else the working directory.
        config_path: The TOML file that was applied, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STOCKCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    hooks: HooksConfig = Field(default_factory=HooksConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_path = _active_toml.get()
        if toml_path is None:
            return init_settings, env_settings
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **flags: Any,
    ) -> StockSettings:
        """Resolve the config file and ledger root, then build settings.

        An explicit *config_path* that does not exist is ignored rather
        than treated as an error, so ``--config`` can point at an optional
        per-machine file.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _active_toml.reset(token)

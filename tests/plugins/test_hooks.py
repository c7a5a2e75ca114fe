"""Tests for LedgerHooks registration and failure isolation."""

from __future__ import annotations

import pytest

from stockctl.config.models import HooksConfig
from stockctl.plugins import LedgerHooks, hookimpl


class _Recorder:
    def __init__(self) -> None:
        self.seen: list[int] = []

    @hookimpl
    def post_check(self, issues_found: int) -> None:
        self.seen.append(issues_found)


class _Raising:
    @hookimpl
    def post_check(self, issues_found: int) -> None:
        raise ValueError("bad plugin")


class _AddOnly:
    @hookimpl
    def post_add_warehouse(self, warehouse_id: int) -> None:
        self.warehouse_id = warehouse_id


class TestRegistration:
    def test_starts_empty(self) -> None:
        assert LedgerHooks().plugin_names() == []

    def test_register_and_list(self) -> None:
        hooks = LedgerHooks()
        assert hooks.register(_Recorder(), name="zeta") == "zeta"
        hooks.register(_Raising(), name="alpha")
        assert hooks.plugin_names() == ["alpha", "zeta"]

    def test_unregister(self) -> None:
        hooks = LedgerHooks()
        plugin = _Recorder()
        hooks.register(plugin, name="rec")
        hooks.unregister(plugin)
        assert hooks.plugin_names() == []
        assert hooks.notify("post_check", issues_found=1) == []
        assert plugin.seen == []


class TestNotify:
    def test_passes_payload(self) -> None:
        hooks = LedgerHooks()
        plugin = _Recorder()
        hooks.register(plugin, name="rec")
        assert hooks.notify("post_check", issues_found=3) == []
        assert plugin.seen == [3]

    def test_implementation_may_take_subset_of_arguments(self) -> None:
        hooks = LedgerHooks()
        plugin = _AddOnly()
        hooks.register(plugin, name="adds")
        hooks.notify("post_add_warehouse", warehouse_id=4, name="North")
        assert plugin.warehouse_id == 4

    def test_failure_is_reported_and_isolated(self) -> None:
        hooks = LedgerHooks()
        plugin = _Recorder()
        hooks.register(plugin, name="rec")
        hooks.register(_Raising(), name="raiser")
        failures = hooks.notify("post_check", issues_found=0)
        assert failures == ["Plugin 'raiser' failed in post_check: bad plugin"]
        assert plugin.seen == [0]

    def test_unknown_hook_raises(self) -> None:
        with pytest.raises(AttributeError):
            LedgerHooks().notify("post_nothing")


class TestFromConfig:
    def test_disabled_returns_none(self) -> None:
        assert LedgerHooks.from_config(HooksConfig(enabled=False)) is None

    def test_without_entry_points_is_empty(self) -> None:
        hooks = LedgerHooks.from_config(HooksConfig(entry_points=False))
        assert hooks is not None
        assert hooks.plugin_names() == []

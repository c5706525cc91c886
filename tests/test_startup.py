from __future__ import annotations

from dataclasses import replace

import pytest

import negotiator.core.startup as startup_module


def test_startup_skips_raise_when_db_optional_and_unreachable(monkeypatch, test_config):
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda engine: False)
    assert startup_module.validate_startup(replace(test_config, DB_CONNECTIVITY_REQUIRED=False), engine=None) is False


def test_startup_raises_when_db_required_and_unreachable(monkeypatch, test_config):
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda engine: False)
    with pytest.raises(RuntimeError, match="Database connectivity check failed"):
        startup_module.validate_startup(replace(test_config, DB_CONNECTIVITY_REQUIRED=True), engine=None)


def test_startup_passes_with_reachable_database(test_config, engine):
    assert startup_module.validate_startup(replace(test_config, DB_CONNECTIVITY_REQUIRED=True), engine) is True

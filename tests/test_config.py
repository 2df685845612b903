from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from trade_scope.config import LogFormat, Settings, reload_settings
from trade_scope.types import RiskMode


def test_settings_defaults() -> None:
    settings = Settings(export_dir="exports")
    assert settings.export_dir == Path("exports")
    assert settings.default_risk_mode is RiskMode.RISK_CASH
    assert settings.default_stop_percent == 0.3
    assert settings.log_format is LogFormat.CONSOLE


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRADE_SCOPE_DEFAULT_LOT_STEP", "0.5")
    monkeypatch.setenv("TRADE_SCOPE_DEFAULT_RISK_MODE", "notional")
    monkeypatch.setenv("TRADE_SCOPE_LOG_FORMAT", "json")
    settings = reload_settings()
    assert settings.default_lot_step == 0.5
    assert settings.default_risk_mode is RiskMode.NOTIONAL
    assert settings.log_format is LogFormat.JSON
    monkeypatch.undo()
    reload_settings()


def test_settings_bounds() -> None:
    with pytest.raises(ValidationError):
        Settings(default_lot_step=0)


def test_ensure_directories(tmp_path: Path) -> None:
    settings = Settings(export_dir=tmp_path / "nested" / "exports")
    settings.ensure_directories()
    assert settings.export_dir.is_dir()

from __future__ import annotations

import math

import pytest

from trade_scope.config import Settings
from trade_scope.grid import (
    MIN_LOT_ADJUSTED_MESSAGE,
    TradeForm,
    build_result_rows,
    build_trade_input,
    collect_messages,
    first_fatal_error,
    pick_summary_row,
    validate_form,
)
from trade_scope.types import (
    AtrMultipleStop,
    Direction,
    FixedPercentStop,
    NotionalProfile,
    RiskMode,
    SetupType,
    StopType,
)


def _form() -> TradeForm:
    form = TradeForm.from_settings(Settings(export_dir="exports"))
    form.level = 100.0
    form.atr = 2.0
    return form


def test_default_form_is_valid() -> None:
    assert validate_form(_form()) == {}


def test_validate_form_reports_missing_fields() -> None:
    form = TradeForm()
    form.setups = []
    errors = validate_form(form)
    assert errors["setups"] == "Select at least one setup"
    assert errors["level"] == "Level must be greater than zero"
    assert errors["risk_cash"] == "Risk per trade required"
    assert first_fatal_error(errors) == "Select at least one setup"


def test_validate_form_checks_active_risk_mode_only() -> None:
    form = _form()
    form.risk.mode = RiskMode.RISK_PERCENT
    form.risk.risk_cash = None
    form.risk.account_size = None
    errors = validate_form(form)
    assert "risk_cash" not in errors
    assert errors["account_size"] == "Account size required"


def test_grid_covers_every_setup_and_stop() -> None:
    rows = build_result_rows(_form())
    assert [row.row_id for row in rows] == [
        "breakout_fixed_percent",
        "breakout_atr_multiple",
        "breakout_fixed_points",
        "false_breakout_fixed_percent",
        "false_breakout_atr_multiple",
        "false_breakout_fixed_points",
    ]
    assert all(row.ok for row in rows)


def test_grid_follows_enabled_setups() -> None:
    form = _form()
    form.setups = [SetupType.FALSE_BREAKOUT]
    rows = build_result_rows(form)
    assert len(rows) == 3
    assert {row.setup for row in rows} == {SetupType.FALSE_BREAKOUT}

    form.setups = []
    assert build_result_rows(form) == []


def test_fatal_form_error_marks_every_row() -> None:
    form = _form()
    form.level = None
    rows = build_result_rows(form)
    assert len(rows) == 6
    assert all(row.error == "Level must be greater than zero" for row in rows)
    assert not any(row.ok for row in rows)


def test_missing_stop_value_only_fails_its_rows() -> None:
    form = _form()
    form.stops.points = None
    rows = build_result_rows(form)
    failed = [row for row in rows if not row.ok]
    assert [row.stop_type for row in failed] == [StopType.FIXED_POINTS, StopType.FIXED_POINTS]
    assert all(row.error == "Stop parameters missing" for row in failed)


def test_calculation_error_becomes_row_error() -> None:
    form = _form()
    form.instrument.fee_per_unit = -10.0
    rows = build_result_rows(form)
    assert all(row.error == "unit cost must be positive and finite" for row in rows)


def test_infinite_risk_cash_becomes_row_error() -> None:
    form = _form()
    form.stops.points = 0.5
    form.risk.risk_cash = math.inf
    rows = build_result_rows(form)
    assert rows
    assert not any(row.ok for row in rows)
    assert all(row.error == "position size must be finite" for row in rows)
    assert pick_summary_row(rows) is None


def test_build_trade_input_maps_form() -> None:
    form = _form()
    form.direction = Direction.SHORT
    form.risk.mode = RiskMode.NOTIONAL
    form.risk.notional = 20_000.0

    trade_input = build_trade_input(form, SetupType.BREAKOUT, StopType.ATR_MULTIPLE)
    assert trade_input.direction is Direction.SHORT
    assert trade_input.stop == AtrMultipleStop(atr_multiple=0.5)
    assert trade_input.risk_profile == NotionalProfile(notional=20_000.0)
    assert trade_input.instrument.fee_per_unit == pytest.approx(0.2)

    percent_input = build_trade_input(form, SetupType.BREAKOUT, StopType.FIXED_PERCENT)
    assert percent_input.stop == FixedPercentStop(percent=0.3)


def test_collect_messages_prefixes_and_dedupes() -> None:
    form = _form()
    form.instrument.min_lot = 1_000.0
    form.range_passed = 0.5
    rows = build_result_rows(form)
    messages = collect_messages(rows)

    assert "Breakout / Fixed %: Range/Stop < 4" in messages
    assert "False Breakout / Fixed points: Qty is below minimum lot" in messages
    assert messages.count(MIN_LOT_ADJUSTED_MESSAGE) == 1
    assert len(messages) == len(set(messages))


def test_pick_summary_row_prefers_breakout_fixed_percent() -> None:
    rows = build_result_rows(_form())
    summary = pick_summary_row(rows)
    assert summary is not None
    assert summary.row_id == "breakout_fixed_percent"

    form = _form()
    form.setups = [SetupType.FALSE_BREAKOUT]
    summary = pick_summary_row(build_result_rows(form))
    assert summary is not None
    assert summary.row_id == "false_breakout_fixed_percent"

    form.level = None
    assert pick_summary_row(build_result_rows(form)) is None

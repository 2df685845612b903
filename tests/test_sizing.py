from __future__ import annotations

import math

import pytest

from trade_scope.calc.errors import InvalidDerivedStateError
from trade_scope.calc.formulas import PriceLevels
from trade_scope.calc.sizing import (
    compute_unit_cost,
    min_lot_threshold,
    project_pnl,
    raw_quantity,
    round_down_to_step,
    round_up_to_step,
)
from trade_scope.types import (
    Direction,
    Instrument,
    NotionalProfile,
    RiskCashProfile,
    RiskPercentProfile,
)


def _instrument(**overrides: float) -> Instrument:
    values: dict[str, float] = {
        "contract_multiplier": 1.0,
        "lot_step": 1.0,
        "min_lot": 0.0,
        "fee_per_unit": 0.0,
    }
    values.update(overrides)
    return Instrument(symbol="TEST", **values)


def test_round_down_absorbs_float_noise() -> None:
    # 0.3 / 0.1 is 2.9999999999999996 in binary floating point
    assert round_down_to_step(0.3, 0.1) == pytest.approx(0.3)
    assert round_down_to_step(0.39, 0.1) == pytest.approx(0.3)
    assert round_down_to_step(7.0, 2.0) == 6.0


def test_round_up_absorbs_float_noise() -> None:
    assert round_up_to_step(0.3, 0.1) == pytest.approx(0.3)
    assert round_up_to_step(0.31, 0.1) == pytest.approx(0.4)
    assert round_up_to_step(25.0, 1.0) == 25.0


def test_rounding_clamps_negative_and_non_finite() -> None:
    assert round_down_to_step(-3.0, 1.0) == 0.0
    assert round_up_to_step(-3.0, 1.0) == 0.0
    assert round_down_to_step(5.0, 0.0) == 5.0


def test_rounded_values_are_step_multiples() -> None:
    for qty in (0.0, 1.3, 17.77, 1234.5678):
        for step in (0.01, 0.1, 0.25, 5.0):
            rounded = round_down_to_step(qty, step)
            steps = rounded / step
            assert abs(steps - round(steps)) < 1e-8
            assert rounded <= qty + 1e-9


def test_min_lot_threshold() -> None:
    assert min_lot_threshold(0.0, 1.0) == 0.0
    assert min_lot_threshold(25.0, 1.0) == 25.0
    assert min_lot_threshold(0.3, 0.25) == pytest.approx(0.5)


def test_unit_cost_includes_fee_and_multiplier() -> None:
    assert compute_unit_cost(40.0, _instrument(contract_multiplier=100.0, fee_per_unit=5.0)) == 4005.0


@pytest.mark.parametrize("fee", [-1.0, math.inf])
def test_unit_cost_rejects_unusable_values(fee: float) -> None:
    with pytest.raises(InvalidDerivedStateError):
        compute_unit_cost(0.5, _instrument(fee_per_unit=fee))


def test_raw_quantity_by_mode() -> None:
    assert raw_quantity(RiskCashProfile(risk_cash=100.0), 0.7, 100.0, 1.0) == 142
    assert raw_quantity(RiskCashProfile(), 0.7, 100.0, 1.0) == 0
    assert raw_quantity(RiskCashProfile(risk_cash=-50.0), 0.7, 100.0, 1.0) == 0
    assert raw_quantity(
        RiskPercentProfile(account_size=20_000.0, risk_percent=0.5), 4.0, 100.0, 1.0
    ) == 25
    assert raw_quantity(NotionalProfile(notional=500_000.0), 4005.0, 2500.0, 100.0) == 2
    assert raw_quantity(NotionalProfile(notional=100.0), 1.0, 2500.0, 100.0) == 0


def test_project_pnl_is_signed_by_direction() -> None:
    long_levels = PriceLevels(stop=1.0, buffer=0.2, tvx=100.2, sl_price=99.0, tp_price=102.2)
    short_levels = PriceLevels(stop=1.0, buffer=0.2, tvx=99.8, sl_price=101.0, tp_price=97.8)

    long_pnl = project_pnl(Direction.LONG, long_levels, 10.0, 2.0)
    short_pnl = project_pnl(Direction.SHORT, short_levels, 10.0, 2.0)

    assert long_pnl.pnl_at_tp == pytest.approx(40.0)
    assert long_pnl.pnl_at_sl == pytest.approx(-24.0)
    assert short_pnl.pnl_at_tp == pytest.approx(40.0)
    assert short_pnl.pnl_at_sl == pytest.approx(-24.0)


def test_rounding_maps_non_finite_to_zero() -> None:
    assert round_down_to_step(math.inf, 1.0) == 0.0
    assert round_up_to_step(math.nan, 0.25) == 0.0
    assert round_down_to_step(1e300, 1e-10) == 0.0


@pytest.mark.parametrize(
    "profile",
    [
        RiskCashProfile(risk_cash=math.inf),
        RiskCashProfile(risk_cash=math.nan),
        RiskPercentProfile(account_size=10_000.0, risk_percent=math.nan),
        RiskCashProfile(risk_cash=1e300),
    ],
)
def test_raw_quantity_rejects_non_finite_size(
    profile: RiskCashProfile | RiskPercentProfile,
) -> None:
    with pytest.raises(InvalidDerivedStateError, match="position size must be finite"):
        raw_quantity(profile, 1e-10, 100.0, 1.0)


def test_raw_quantity_notional_rejects_infinite_budget() -> None:
    with pytest.raises(InvalidDerivedStateError, match="position size must be finite"):
        raw_quantity(NotionalProfile(notional=math.inf), 1.0, 100.0, 1.0)


@pytest.mark.parametrize("min_lot", [math.nan, math.inf])
def test_min_lot_threshold_rejects_non_finite(min_lot: float) -> None:
    with pytest.raises(InvalidDerivedStateError, match="min lot must be finite"):
        min_lot_threshold(min_lot, 1.0)

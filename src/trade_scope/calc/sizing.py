"""Position sizing from a risk budget under instrument lot constraints."""

from __future__ import annotations

import math
from dataclasses import dataclass

from trade_scope.calc.errors import InvalidDerivedStateError
from trade_scope.calc.formulas import PriceLevels
from trade_scope.types import (
    Direction,
    Instrument,
    NotionalProfile,
    RiskCashProfile,
    RiskPercentProfile,
    RiskProfile,
    TradeInput,
)

STEP_EPSILON = 1e-9
QTY_DECIMALS = 8


@dataclass(frozen=True, slots=True)
class SizedPosition:
    """Quantity and cash figures for one sized position."""

    quantity: float
    unit_cost: float
    used_risk_cash: float
    notional: float
    est_fees: float
    below_min_lot: bool


@dataclass(frozen=True, slots=True)
class PnlProjection:
    """P&L if the trade reaches its target or its stop."""

    pnl_at_tp: float
    pnl_at_sl: float


def _normalize(qty: float) -> float:
    if not math.isfinite(qty):
        return 0.0
    normalized = round(qty, QTY_DECIMALS)
    return 0.0 if normalized < 0 else normalized


def round_down_to_step(qty: float, step: float) -> float:
    """Round a quantity down to a multiple of step, absorbing float noise."""
    if step <= 0:
        return max(qty, 0.0)
    scaled = qty / step + STEP_EPSILON
    if not math.isfinite(scaled):
        return 0.0
    return _normalize(math.floor(scaled) * step)


def round_up_to_step(qty: float, step: float) -> float:
    """Round a quantity up to a multiple of step, absorbing float noise."""
    if step <= 0:
        return max(qty, 0.0)
    scaled = qty / step - STEP_EPSILON
    if not math.isfinite(scaled):
        return 0.0
    return _normalize(math.ceil(scaled) * step)


def compute_unit_cost(stop: float, instrument: Instrument) -> float:
    """Cash lost per unit when the stop is hit, fees included."""
    stop_value_per_unit = stop * instrument.contract_multiplier
    unit_cost = stop_value_per_unit + instrument.fee_per_unit
    if not math.isfinite(unit_cost) or unit_cost <= 0:
        raise InvalidDerivedStateError("unit cost must be positive and finite")
    return unit_cost


def _whole_units(budget: float, per_unit: float) -> int:
    ratio = budget / per_unit
    # inf/nan budgets and overflowing ratios
    if not math.isfinite(ratio):
        raise InvalidDerivedStateError("position size must be finite")
    return max(math.floor(ratio), 0)


def raw_quantity(
    risk_profile: RiskProfile,
    unit_cost: float,
    level: float,
    contract_multiplier: float,
) -> float:
    """Whole units the risk budget affords, before lot alignment."""
    if isinstance(risk_profile, RiskCashProfile):
        return _whole_units(risk_profile.risk_cash or 0.0, unit_cost)
    if isinstance(risk_profile, RiskPercentProfile):
        account_size = risk_profile.account_size or 0.0
        risk_cash = account_size * (risk_profile.risk_percent or 0.0) / 100
        return _whole_units(risk_cash, unit_cost)
    if isinstance(risk_profile, NotionalProfile):
        denom = level * contract_multiplier
        return _whole_units(risk_profile.notional or 0.0, denom) if denom > 0 else 0
    raise TypeError(f"unsupported_risk_profile: {type(risk_profile).__name__}")


def min_lot_threshold(min_lot: float, step: float) -> float:
    """Smallest tradable quantity, aligned up to the lot step. Zero means no floor."""
    if not math.isfinite(min_lot):
        raise InvalidDerivedStateError("min lot must be finite")
    if min_lot <= 0:
        return 0.0
    return max(round_up_to_step(min_lot, step), min_lot)


def size_position(trade_input: TradeInput, stop: float) -> SizedPosition:
    """Convert the risk budget into a lot-aligned quantity."""
    instrument = trade_input.instrument
    unit_cost = compute_unit_cost(stop, instrument)
    qty_raw = raw_quantity(
        trade_input.risk_profile,
        unit_cost,
        trade_input.level,
        instrument.contract_multiplier,
    )

    step = instrument.lot_step if instrument.lot_step > 0 else 1.0
    rounded_qty = round_down_to_step(qty_raw, step)
    threshold = min_lot_threshold(instrument.min_lot, step)
    quantity = max(rounded_qty, threshold) if threshold > 0 else rounded_qty
    quantity = _normalize(quantity)
    below_min_lot = threshold > 0 and rounded_qty < threshold and quantity > 0

    return SizedPosition(
        quantity=quantity,
        unit_cost=unit_cost,
        used_risk_cash=quantity * unit_cost,
        notional=quantity * trade_input.level * instrument.contract_multiplier,
        est_fees=quantity * instrument.fee_per_unit,
        below_min_lot=below_min_lot,
    )


def project_pnl(
    direction: Direction,
    levels: PriceLevels,
    quantity: float,
    contract_multiplier: float,
) -> PnlProjection:
    """Signed P&L at the target and at the stop, measured from the trigger."""
    if direction is Direction.LONG:
        tp_distance = levels.tp_price - levels.tvx
        sl_distance = levels.tvx - levels.sl_price
    else:
        tp_distance = levels.tvx - levels.tp_price
        sl_distance = levels.sl_price - levels.tvx
    return PnlProjection(
        pnl_at_tp=tp_distance * quantity * contract_multiplier,
        pnl_at_sl=-sl_distance * quantity * contract_multiplier,
    )

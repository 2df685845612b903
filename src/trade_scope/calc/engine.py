"""Single entry point of the calculation core."""

from __future__ import annotations

from trade_scope.calc.formulas import compute_diagnostics, compute_price_levels
from trade_scope.calc.sizing import project_pnl, size_position
from trade_scope.calc.validation import validate_trade_input
from trade_scope.calc.warnings import collect_warnings
from trade_scope.types import (
    NotionalProfile,
    PositionSummary,
    TradeCalculation,
    TradeInput,
    TradeMeta,
    TradeResult,
)


def calculate(trade_input: TradeInput) -> TradeCalculation:
    """Turn one trade idea into a sized trade plan.

    Validation, price formulas, sizing and warnings run in that order. Any
    failure raises a ``TradeCalcError`` and nothing partial is returned.
    """
    validate_trade_input(trade_input)

    levels = compute_price_levels(trade_input)
    diagnostics = compute_diagnostics(trade_input, levels)
    sized = size_position(trade_input, levels.stop)
    pnl = project_pnl(
        trade_input.direction,
        levels,
        sized.quantity,
        trade_input.instrument.contract_multiplier,
    )

    result = TradeResult(
        direction=trade_input.direction,
        setup=trade_input.setup,
        level=trade_input.level,
        stop=levels.stop,
        buffer=levels.buffer,
        tvx=levels.tvx,
        sl_price=levels.sl_price,
        tp_price=levels.tp_price,
        rr_multiple=trade_input.rr_multiple,
        atr_over_stop=diagnostics.atr_over_stop,
        range_over_stop=diagnostics.range_over_stop,
        has_four_stops=diagnostics.has_four_stops,
        stop_within_atr_filter=diagnostics.stop_within_atr_filter,
        warnings=collect_warnings(diagnostics, sized.below_min_lot),
        quantity=sized.quantity,
        notional=sized.notional,
        below_min_lot=sized.below_min_lot,
        position_summary=PositionSummary(
            risk_cash=sized.used_risk_cash,
            est_fees=sized.est_fees,
            pnl_at_tp=pnl.pnl_at_tp,
            pnl_at_sl=pnl.pnl_at_sl,
        ),
        stop_atr_percent=diagnostics.stop_atr_percent,
        current_price_to_tvx=diagnostics.current_price_to_tvx,
    )

    used_notional = (
        sized.notional if isinstance(trade_input.risk_profile, NotionalProfile) else None
    )
    return TradeCalculation(
        result=result,
        meta=TradeMeta(used_risk_cash=sized.used_risk_cash, used_notional=used_notional),
    )

"""Price and risk formulas: stop distance, trigger, targets and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

from trade_scope.calc.errors import InvalidDerivedStateError
from trade_scope.types import (
    AtrMultipleStop,
    Direction,
    FixedPercentStop,
    FixedPointsStop,
    StopMethod,
    TradeInput,
)

DEFAULT_STOP_PERCENT = 0.3
DEFAULT_STOP_ATR_MULTIPLE = 0.5
DEFAULT_STOP_POINTS = 0.0

MIN_STOPS_IN_RANGE = 4.0
ATR_FILTER_RATIO = 0.2


@dataclass(frozen=True, slots=True)
class PriceLevels:
    """Distances and prices derived from the level."""

    stop: float
    buffer: float
    tvx: float
    sl_price: float
    tp_price: float


@dataclass(frozen=True, slots=True)
class Diagnostics:
    """Sanity ratios for the chosen stop."""

    atr_over_stop: float
    range_over_stop: float | None
    has_four_stops: bool
    stop_within_atr_filter: bool
    stop_atr_percent: float
    current_price_to_tvx: float | None

    @property
    def atr_check_failed(self) -> bool:
        return self.atr_over_stop < MIN_STOPS_IN_RANGE

    @property
    def range_check_failed(self) -> bool:
        return self.range_over_stop is not None and self.range_over_stop < MIN_STOPS_IN_RANGE


def compute_stop(stop: StopMethod, level: float, atr: float) -> float:
    """Compute the stop distance for one stop method."""
    if isinstance(stop, FixedPercentStop):
        percent = stop.percent if stop.percent is not None else DEFAULT_STOP_PERCENT
        return (percent / 100) * level
    if isinstance(stop, AtrMultipleStop):
        multiple = (
            stop.atr_multiple if stop.atr_multiple is not None else DEFAULT_STOP_ATR_MULTIPLE
        )
        return multiple * atr
    if isinstance(stop, FixedPointsStop):
        return stop.points if stop.points is not None else DEFAULT_STOP_POINTS
    raise TypeError(f"unsupported_stop_method: {type(stop).__name__}")


def compute_price_levels(trade_input: TradeInput) -> PriceLevels:
    """Derive stop, buffer, trigger and target prices."""
    stop = compute_stop(trade_input.stop, trade_input.level, trade_input.atr)
    if not stop > 0:
        raise InvalidDerivedStateError("computed stop must be positive")

    level = trade_input.level
    buffer = stop * trade_input.buffer_ratio
    reward = trade_input.rr_multiple * stop

    if trade_input.direction is Direction.LONG:
        tvx = level + buffer
        sl_price = level - stop
        tp_price = tvx + reward
    else:
        tvx = level - buffer
        sl_price = level + stop
        tp_price = tvx - reward

    return PriceLevels(
        stop=stop,
        buffer=buffer,
        tvx=tvx,
        sl_price=sl_price,
        tp_price=tp_price,
    )


def compute_diagnostics(trade_input: TradeInput, levels: PriceLevels) -> Diagnostics:
    """Compute stop sanity ratios against ATR and the passed range."""
    stop = levels.stop
    atr_over_stop = trade_input.atr / stop
    range_over_stop = (
        trade_input.range_passed / stop if trade_input.range_passed is not None else None
    )

    # exactly 4 passes
    has_four_stops = atr_over_stop >= MIN_STOPS_IN_RANGE and (
        range_over_stop is None or range_over_stop >= MIN_STOPS_IN_RANGE
    )
    stop_within_atr_filter = (
        not trade_input.enable_atr_filter or stop <= ATR_FILTER_RATIO * trade_input.atr
    )
    current_price_to_tvx = (
        trade_input.current_price - levels.tvx
        if trade_input.current_price is not None
        else None
    )

    return Diagnostics(
        atr_over_stop=atr_over_stop,
        range_over_stop=range_over_stop,
        has_four_stops=has_four_stops,
        stop_within_atr_filter=stop_within_atr_filter,
        stop_atr_percent=(stop / trade_input.atr) * 100,
        current_price_to_tvx=current_price_to_tvx,
    )

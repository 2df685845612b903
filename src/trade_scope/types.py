"""Shared domain types for the trade calculation core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Trade direction."""

    LONG = "long"
    SHORT = "short"


class SetupType(str, Enum):
    """Setup tag. Informational only, formulas do not depend on it."""

    BREAKOUT = "breakout"
    FALSE_BREAKOUT = "false_breakout"


class StopType(str, Enum):
    """Stop sizing method."""

    FIXED_PERCENT = "fixed_percent"
    ATR_MULTIPLE = "atr_multiple"
    FIXED_POINTS = "fixed_points"


class RiskMode(str, Enum):
    """Position sizing mode."""

    RISK_CASH = "risk_cash"
    RISK_PERCENT = "risk_percent"
    NOTIONAL = "notional"


# ==================== Stop methods ====================


@dataclass(frozen=True, slots=True)
class FixedPercentStop:
    """Stop as a percent of the level."""

    percent: float | None = None


@dataclass(frozen=True, slots=True)
class AtrMultipleStop:
    """Stop as a multiple of ATR."""

    atr_multiple: float | None = None


@dataclass(frozen=True, slots=True)
class FixedPointsStop:
    """Stop as an absolute price distance."""

    points: float | None = None


StopMethod = FixedPercentStop | AtrMultipleStop | FixedPointsStop


# ==================== Risk profiles ====================


@dataclass(frozen=True, slots=True)
class RiskCashProfile:
    """Fixed cash amount at risk per trade."""

    risk_cash: float | None = None


@dataclass(frozen=True, slots=True)
class RiskPercentProfile:
    """Percent of account size at risk per trade."""

    account_size: float | None = None
    risk_percent: float | None = None


@dataclass(frozen=True, slots=True)
class NotionalProfile:
    """Target position value."""

    notional: float | None = None


RiskProfile = RiskCashProfile | RiskPercentProfile | NotionalProfile


# ==================== Input ====================


@dataclass(frozen=True, slots=True)
class Instrument:
    """Instrument lot and cost constraints."""

    symbol: str
    contract_multiplier: float
    lot_step: float
    min_lot: float
    fee_per_unit: float = 0.0
    price_tick: float | None = None


@dataclass(frozen=True, slots=True)
class TradeInput:
    """Snapshot of everything one calculation needs."""

    direction: Direction
    setup: SetupType
    level: float
    atr: float
    rr_multiple: float
    stop: StopMethod
    buffer_ratio: float
    instrument: Instrument
    risk_profile: RiskProfile
    range_passed: float | None = None
    current_price: float | None = None
    enable_atr_filter: bool = True


# ==================== Output ====================


@dataclass(frozen=True, slots=True)
class PositionSummary:
    """Cash view of the sized position."""

    risk_cash: float
    est_fees: float
    pnl_at_tp: float
    pnl_at_sl: float


@dataclass(frozen=True, slots=True)
class TradeResult:
    """Fully derived trade plan."""

    direction: Direction
    setup: SetupType
    level: float
    stop: float
    buffer: float
    tvx: float
    sl_price: float
    tp_price: float
    rr_multiple: float
    atr_over_stop: float
    range_over_stop: float | None
    has_four_stops: bool
    stop_within_atr_filter: bool
    warnings: tuple[str, ...]
    quantity: float
    notional: float
    below_min_lot: bool
    position_summary: PositionSummary
    stop_atr_percent: float
    current_price_to_tvx: float | None = None

    @property
    def range_known(self) -> bool:
        """Whether a range measure was supplied for the range diagnostic."""
        return self.range_over_stop is not None


@dataclass(frozen=True, slots=True)
class TradeMeta:
    """Sizing metadata reported next to the result."""

    used_risk_cash: float
    used_notional: float | None = None


@dataclass(frozen=True, slots=True)
class TradeCalculation:
    """Return value of one calculation."""

    result: TradeResult
    meta: TradeMeta

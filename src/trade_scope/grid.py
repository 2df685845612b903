"""Fan a trade form out over setups and stop methods.

A form holds raw, possibly incomplete user input. Each enabled setup is
combined with every stop method and calculated independently; a row that
cannot be calculated carries an error message instead of a result.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from trade_scope.calc import TradeCalcError, calculate
from trade_scope.config import Settings
from trade_scope.types import (
    AtrMultipleStop,
    Direction,
    FixedPercentStop,
    FixedPointsStop,
    Instrument,
    NotionalProfile,
    RiskCashProfile,
    RiskMode,
    RiskPercentProfile,
    RiskProfile,
    SetupType,
    StopMethod,
    StopType,
    TradeCalculation,
    TradeInput,
)
from trade_scope.utils.logging import get_logger, log_calculation, log_row_error

logger = get_logger(__name__)

SETUP_ORDER = (SetupType.BREAKOUT, SetupType.FALSE_BREAKOUT)
STOP_ORDER = (StopType.FIXED_PERCENT, StopType.ATR_MULTIPLE, StopType.FIXED_POINTS)

SETUP_LABELS = {
    SetupType.BREAKOUT: "Breakout",
    SetupType.FALSE_BREAKOUT: "False Breakout",
}
STOP_LABELS = {
    StopType.FIXED_PERCENT: "Fixed %",
    StopType.ATR_MULTIPLE: "ATR * k",
    StopType.FIXED_POINTS: "Fixed points",
}

MIN_LOT_ADJUSTED_MESSAGE = "Quantity adjusted to match minimum lot constraints"

# first error in this order blocks every row
_FATAL_ERROR_ORDER = (
    "setups",
    "level",
    "atr",
    "rr_multiple",
    "buffer_ratio",
    "contract_multiplier",
    "lot_step",
    "risk_cash",
    "risk_percent",
    "account_size",
    "notional",
)


@dataclass(slots=True)
class StopSettings:
    """Values for every stop method; each row picks its own."""

    percent: float | None = None
    atr_multiple: float | None = None
    points: float | None = None

    def value_for(self, stop_type: StopType) -> float | None:
        if stop_type is StopType.FIXED_PERCENT:
            return self.percent
        if stop_type is StopType.ATR_MULTIPLE:
            return self.atr_multiple
        return self.points

    def method_for(self, stop_type: StopType) -> StopMethod:
        if stop_type is StopType.FIXED_PERCENT:
            return FixedPercentStop(percent=self.percent or 0.0)
        if stop_type is StopType.ATR_MULTIPLE:
            return AtrMultipleStop(atr_multiple=self.atr_multiple or 0.0)
        return FixedPointsStop(points=self.points or 0.0)


@dataclass(slots=True)
class RiskSettings:
    """Risk inputs for all modes; only the active mode's fields matter."""

    mode: RiskMode = RiskMode.RISK_CASH
    risk_cash: float | None = None
    risk_percent: float | None = None
    account_size: float | None = None
    notional: float | None = None

    def to_profile(self) -> RiskProfile:
        if self.mode is RiskMode.RISK_PERCENT:
            return RiskPercentProfile(
                account_size=self.account_size,
                risk_percent=self.risk_percent,
            )
        if self.mode is RiskMode.NOTIONAL:
            return NotionalProfile(notional=self.notional)
        return RiskCashProfile(risk_cash=self.risk_cash)


@dataclass(slots=True)
class InstrumentSettings:
    """Instrument inputs as entered."""

    symbol: str = "TICKER"
    contract_multiplier: float | None = None
    lot_step: float | None = None
    min_lot: float | None = None
    fee_per_unit: float | None = None
    price_tick: float | None = None

    def to_instrument(self) -> Instrument:
        return Instrument(
            symbol=self.symbol,
            contract_multiplier=(
                self.contract_multiplier if self.contract_multiplier is not None else 1.0
            ),
            lot_step=self.lot_step if self.lot_step is not None else 1.0,
            min_lot=self.min_lot if self.min_lot is not None else 0.0,
            fee_per_unit=self.fee_per_unit if self.fee_per_unit is not None else 0.0,
            price_tick=self.price_tick,
        )


@dataclass(slots=True)
class TradeForm:
    """Raw trade inputs before validation."""

    direction: Direction = Direction.LONG
    setups: list[SetupType] = field(default_factory=lambda: list(SETUP_ORDER))
    level: float | None = None
    atr: float | None = None
    rr_multiple: float | None = None
    buffer_ratio: float | None = None
    range_passed: float | None = None
    current_price: float | None = None
    enable_atr_filter: bool = True
    stops: StopSettings = field(default_factory=StopSettings)
    risk: RiskSettings = field(default_factory=RiskSettings)
    instrument: InstrumentSettings = field(default_factory=InstrumentSettings)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TradeForm":
        """Build a form pre-filled with configured defaults."""
        return cls(
            direction=settings.default_direction,
            rr_multiple=settings.default_rr_multiple,
            buffer_ratio=settings.default_buffer_ratio,
            enable_atr_filter=settings.enable_atr_filter,
            stops=StopSettings(
                percent=settings.default_stop_percent,
                atr_multiple=settings.default_stop_atr_multiple,
                points=settings.default_stop_points,
            ),
            risk=RiskSettings(
                mode=settings.default_risk_mode,
                risk_cash=settings.default_risk_cash,
                risk_percent=settings.default_risk_percent,
                account_size=settings.default_account_size,
                notional=settings.default_notional,
            ),
            instrument=InstrumentSettings(
                symbol=settings.default_symbol,
                contract_multiplier=settings.default_contract_multiplier,
                lot_step=settings.default_lot_step,
                min_lot=settings.default_min_lot,
                fee_per_unit=settings.default_fee_per_unit,
                price_tick=settings.default_price_tick,
            ),
        )


@dataclass(slots=True)
class ResultRow:
    """One setup x stop method cell of the result grid."""

    setup: SetupType
    stop_type: StopType
    calculation: TradeCalculation | None = None
    error: str | None = None

    @property
    def row_id(self) -> str:
        return f"{self.setup.value}_{self.stop_type.value}"

    @property
    def label(self) -> str:
        return f"{SETUP_LABELS[self.setup]} / {STOP_LABELS[self.stop_type]}"

    @property
    def ok(self) -> bool:
        return self.calculation is not None


def _is_positive(value: float | None) -> bool:
    return value is not None and value > 0


def _is_non_negative(value: float | None) -> bool:
    return value is not None and value >= 0


def validate_form(form: TradeForm) -> dict[str, str]:
    """Check required fields. Returns field name -> message."""
    errors: dict[str, str] = {}
    if not form.setups:
        errors["setups"] = "Select at least one setup"
    if not _is_positive(form.level):
        errors["level"] = "Level must be greater than zero"
    if not _is_positive(form.atr):
        errors["atr"] = "ATR must be greater than zero"
    if not _is_positive(form.rr_multiple):
        errors["rr_multiple"] = "RR must be greater than zero"
    if not _is_non_negative(form.buffer_ratio):
        errors["buffer_ratio"] = "Buffer ratio must be >= 0"
    if not _is_positive(form.stops.percent):
        errors["stop_percent"] = "Provide stop % value"
    if not _is_positive(form.stops.atr_multiple):
        errors["stop_atr_multiple"] = "Provide ATR multiple"
    if not _is_positive(form.stops.points):
        errors["stop_points"] = "Provide stop points"
    if not _is_positive(form.instrument.contract_multiplier):
        errors["contract_multiplier"] = "Contract multiplier must be > 0"
    if not _is_positive(form.instrument.lot_step):
        errors["lot_step"] = "Lot step must be > 0"
    if not _is_non_negative(form.instrument.min_lot):
        errors["min_lot"] = "Min lot must be >= 0"
    if not _is_non_negative(form.instrument.fee_per_unit):
        errors["fee_per_unit"] = "Fee must be >= 0"

    risk = form.risk
    if risk.mode is RiskMode.RISK_CASH and not _is_positive(risk.risk_cash):
        errors["risk_cash"] = "Risk per trade required"
    if risk.mode is RiskMode.RISK_PERCENT:
        if not _is_positive(risk.risk_percent):
            errors["risk_percent"] = "Risk % required"
        if not _is_positive(risk.account_size):
            errors["account_size"] = "Account size required"
    if risk.mode is RiskMode.NOTIONAL and not _is_positive(risk.notional):
        errors["notional"] = "Notional required"
    return errors


def first_fatal_error(errors: dict[str, str]) -> str | None:
    """Return the error that blocks the whole grid, if any."""
    for key in _FATAL_ERROR_ORDER:
        if key in errors:
            return errors[key]
    return None


def build_trade_input(form: TradeForm, setup: SetupType, stop_type: StopType) -> TradeInput:
    """Assemble the calculation input for one grid cell."""
    return TradeInput(
        direction=form.direction,
        setup=setup,
        level=form.level if form.level is not None else 0.0,
        atr=form.atr if form.atr is not None else 0.0,
        rr_multiple=form.rr_multiple if form.rr_multiple is not None else 0.0,
        stop=form.stops.method_for(stop_type),
        buffer_ratio=form.buffer_ratio if form.buffer_ratio is not None else 0.0,
        instrument=form.instrument.to_instrument(),
        risk_profile=form.risk.to_profile(),
        range_passed=form.range_passed,
        current_price=form.current_price,
        enable_atr_filter=form.enable_atr_filter,
    )


def compute_row(
    form: TradeForm,
    setup: SetupType,
    stop_type: StopType,
    fatal_error: str | None = None,
) -> ResultRow:
    """Calculate one grid cell, turning failures into a row error."""
    row = ResultRow(setup=setup, stop_type=stop_type)
    if fatal_error is not None:
        row.error = fatal_error
        return row
    if not _is_positive(form.stops.value_for(stop_type)):
        row.error = "Stop parameters missing"
        log_row_error(logger, setup=setup.value, stop_type=stop_type.value, error=row.error)
        return row

    try:
        row.calculation = calculate(build_trade_input(form, setup, stop_type))
    except TradeCalcError as exc:
        row.error = str(exc)
        log_row_error(logger, setup=setup.value, stop_type=stop_type.value, error=row.error)
        return row

    result = row.calculation.result
    log_calculation(
        logger,
        setup=setup.value,
        stop_type=stop_type.value,
        quantity=result.quantity,
        warnings=list(result.warnings),
    )
    return row


def build_result_rows(form: TradeForm) -> list[ResultRow]:
    """Calculate every enabled setup against every stop method."""
    active_setups = [setup for setup in SETUP_ORDER if setup in form.setups]
    if not active_setups:
        return []

    fatal_error = first_fatal_error(validate_form(form))
    if fatal_error is not None:
        logger.warning("trade_form_invalid", error=fatal_error)
    return [
        compute_row(form, setup, stop_type, fatal_error)
        for setup in active_setups
        for stop_type in STOP_ORDER
    ]


def collect_messages(rows: list[ResultRow]) -> list[str]:
    """Flatten row errors and warnings into unique, ordered messages."""
    messages: list[str] = []

    def _add(message: str) -> None:
        if message not in messages:
            messages.append(message)

    for row in rows:
        if row.error:
            _add(f"{row.label}: {row.error}")
        if row.calculation is None:
            continue
        result = row.calculation.result
        for warning in result.warnings:
            _add(f"{row.label}: {warning}")
        if result.below_min_lot:
            _add(MIN_LOT_ADJUSTED_MESSAGE)
    return messages


def pick_summary_row(rows: list[ResultRow]) -> ResultRow | None:
    """Row shown in the position summary: breakout / fixed % first."""
    for row in rows:
        if row.ok and row.setup is SetupType.BREAKOUT and row.stop_type is StopType.FIXED_PERCENT:
            return row
    return next((row for row in rows if row.ok), None)

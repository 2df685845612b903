"""Trade calculation core exports."""

from trade_scope.calc.engine import calculate
from trade_scope.calc.errors import (
    InvalidDerivedStateError,
    InvalidTradeInputError,
    TradeCalcError,
)
from trade_scope.calc.warnings import (
    ATR_FILTER_WARNING,
    ATR_STOP_WARNING,
    MIN_LOT_WARNING,
    RANGE_STOP_WARNING,
)

__all__ = [
    "ATR_FILTER_WARNING",
    "ATR_STOP_WARNING",
    "InvalidDerivedStateError",
    "InvalidTradeInputError",
    "MIN_LOT_WARNING",
    "RANGE_STOP_WARNING",
    "TradeCalcError",
    "calculate",
]

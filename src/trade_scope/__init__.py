"""trade-scope: position sizing and risk metrics for a single trade idea."""

from trade_scope.calc import (
    InvalidDerivedStateError,
    InvalidTradeInputError,
    TradeCalcError,
    calculate,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidDerivedStateError",
    "InvalidTradeInputError",
    "TradeCalcError",
    "__version__",
    "calculate",
]

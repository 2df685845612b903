"""Fail-fast checks on base trade inputs."""

from __future__ import annotations

from trade_scope.calc.errors import InvalidTradeInputError
from trade_scope.types import TradeInput


def validate_trade_input(trade_input: TradeInput) -> None:
    """Reject inputs that no formula can work with.

    Checks run in a fixed order and the first failure wins. Comparisons are
    written so that NaN fails them as well.
    """
    if not trade_input.level > 0:
        raise InvalidTradeInputError("level", "level must be greater than zero")
    if not trade_input.atr > 0:
        raise InvalidTradeInputError("atr", "atr must be greater than zero")
    if not trade_input.rr_multiple > 0:
        raise InvalidTradeInputError(
            "rr_multiple", "rr multiple must be greater than zero"
        )
    if not trade_input.buffer_ratio >= 0:
        raise InvalidTradeInputError("buffer_ratio", "buffer ratio must be non-negative")
    if not trade_input.instrument.contract_multiplier > 0:
        raise InvalidTradeInputError(
            "contract_multiplier", "contract multiplier must be greater than zero"
        )

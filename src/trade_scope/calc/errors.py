"""Typed errors raised by the trade calculation core."""

from __future__ import annotations


class TradeCalcError(ValueError):
    """Base error for a calculation that cannot produce a result."""


class InvalidTradeInputError(TradeCalcError):
    """Raised when a base input is outside its domain."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidDerivedStateError(TradeCalcError):
    """Raised when a derived value (stop, unit cost) is unusable."""

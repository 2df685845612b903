"""Informational warnings attached to a successful calculation."""

from __future__ import annotations

from trade_scope.calc.formulas import Diagnostics

ATR_STOP_WARNING = "ATR/Stop < 4"
RANGE_STOP_WARNING = "Range/Stop < 4"
ATR_FILTER_WARNING = "Stop exceeds 20% ATR limit"
MIN_LOT_WARNING = "Qty is below minimum lot"


def collect_warnings(diagnostics: Diagnostics, below_min_lot: bool) -> tuple[str, ...]:
    """Return failing checks in their fixed reporting order."""
    warnings: list[str] = []
    if diagnostics.atr_check_failed:
        warnings.append(ATR_STOP_WARNING)
    if diagnostics.range_check_failed:
        warnings.append(RANGE_STOP_WARNING)
    if not diagnostics.stop_within_atr_filter:
        warnings.append(ATR_FILTER_WARNING)
    if below_min_lot:
        warnings.append(MIN_LOT_WARNING)
    return tuple(warnings)

"""CSV and JSON export of result rows."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Literal

import pandas as pd

from trade_scope.grid import SETUP_LABELS, STOP_LABELS, ResultRow
from trade_scope.types import TradeCalculation

ExportFormat = Literal["csv", "json"]

RANGE_UNKNOWN = "UNKNOWN"

DEFAULT_FILE_NAMES: dict[str, str] = {
    "csv": "trade-scope-results.csv",
    "json": "trade-scope-results.json",
}

CSV_COLUMNS = [
    "Direction",
    "Setup",
    "Stop type",
    "Level",
    "Stop",
    "Buffer",
    "TVX",
    "SL",
    "TP",
    "RR",
    "ATR/Stop",
    "Range/Stop",
    "FourStops",
    "StopFilter",
    "Qty",
    "Notional",
]


def _fmt(value: float, decimals: int) -> str:
    return f"{value:.{decimals}f}"


def _fmt_qty(quantity: float) -> str:
    if float(quantity).is_integer():
        return str(int(quantity))
    return f"{quantity:.8f}".rstrip("0").rstrip(".")


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def calculation_as_dict(calculation: TradeCalculation) -> dict[str, Any]:
    """Plain dict view of a calculation with the range sentinel spelled out."""
    result = asdict(calculation.result)
    result["direction"] = calculation.result.direction.value
    result["setup"] = calculation.result.setup.value
    result["warnings"] = list(calculation.result.warnings)
    if calculation.result.range_over_stop is None:
        result["range_over_stop"] = RANGE_UNKNOWN
    if calculation.result.current_price_to_tvx is None:
        result.pop("current_price_to_tvx")

    meta: dict[str, Any] = {"used_risk_cash": calculation.meta.used_risk_cash}
    if calculation.meta.used_notional is not None:
        meta["used_notional"] = calculation.meta.used_notional
    return {"result": result, "meta": meta}


def rows_as_csv_records(rows: list[ResultRow]) -> list[dict[str, str]]:
    """One formatted record per successful row."""
    records: list[dict[str, str]] = []
    for row in rows:
        if row.calculation is None:
            continue
        r = row.calculation.result
        values = [
            r.direction.value.capitalize(),
            SETUP_LABELS[row.setup],
            STOP_LABELS[row.stop_type],
            _fmt(r.level, 4),
            _fmt(r.stop, 6),
            _fmt(r.buffer, 6),
            _fmt(r.tvx, 4),
            _fmt(r.sl_price, 4),
            _fmt(r.tp_price, 4),
            _fmt(r.rr_multiple, 2),
            _fmt(r.atr_over_stop, 4),
            "" if r.range_over_stop is None else _fmt(r.range_over_stop, 4),
            _yes_no(r.has_four_stops),
            _yes_no(r.stop_within_atr_filter),
            _fmt_qty(r.quantity),
            _fmt(r.notional, 2),
        ]
        records.append(dict(zip(CSV_COLUMNS, values)))
    return records


def rows_as_json_payload(rows: list[ResultRow]) -> list[dict[str, Any]]:
    """JSON-ready list of successful rows."""
    payload: list[dict[str, Any]] = []
    for row in rows:
        if row.calculation is None:
            continue
        payload.append(
            {
                "direction": row.calculation.result.direction.value,
                "setup": row.setup.value,
                "stop_type": row.stop_type.value,
                **calculation_as_dict(row.calculation),
            }
        )
    return payload


def render_csv(rows: list[ResultRow]) -> str:
    """Render successful rows as CSV text with a header line."""
    frame = pd.DataFrame(rows_as_csv_records(rows), columns=CSV_COLUMNS, dtype=str)
    return frame.to_csv(index=False, lineterminator="\n")


def render_json(rows: list[ResultRow]) -> str:
    """Render successful rows as indented JSON."""
    return json.dumps(rows_as_json_payload(rows), ensure_ascii=True, indent=2)


def write_export(path: Path, rows: list[ResultRow], fmt: ExportFormat) -> int:
    """Write successful rows to a file. Returns the number of rows written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "csv":
        content = render_csv(rows)
    elif fmt == "json":
        content = render_json(rows)
    else:
        raise ValueError(f"unsupported_export_format: {fmt}")
    path.write_text(content, encoding="utf-8")
    return sum(1 for row in rows if row.ok)

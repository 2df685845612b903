"""Trade form payload schemas and loading helpers."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from trade_scope.grid import TradeForm
from trade_scope.types import Direction, RiskMode, SetupType


class StopPayload(BaseModel):
    """Stop method values."""

    model_config = ConfigDict(extra="forbid")

    percent: float | None = None
    atr_multiple: float | None = None
    points: float | None = None


class RiskPayload(BaseModel):
    """Risk budget values."""

    model_config = ConfigDict(extra="forbid")

    mode: RiskMode | None = None
    risk_cash: float | None = None
    risk_percent: float | None = None
    account_size: float | None = None
    notional: float | None = None


class InstrumentPayload(BaseModel):
    """Instrument constraints."""

    model_config = ConfigDict(extra="forbid")

    symbol: str | None = Field(default=None, min_length=1)
    contract_multiplier: float | None = None
    lot_step: float | None = None
    min_lot: float | None = None
    fee_per_unit: float | None = None
    price_tick: float | None = None


class TradeFormPayload(BaseModel):
    """A trade form document. Absent fields keep the form defaults."""

    model_config = ConfigDict(extra="forbid")

    direction: Direction | None = None
    setups: list[SetupType] | None = None
    level: float | None = None
    atr: float | None = None
    rr_multiple: float | None = None
    buffer_ratio: float | None = None
    range_passed: float | None = None
    current_price: float | None = None
    enable_atr_filter: bool | None = None
    stop: StopPayload = Field(default_factory=StopPayload)
    risk: RiskPayload = Field(default_factory=RiskPayload)
    instrument: InstrumentPayload = Field(default_factory=InstrumentPayload)

    def to_form(self, defaults: TradeForm | None = None) -> TradeForm:
        """Overlay the payload onto a copy of the default form."""
        form = copy.deepcopy(defaults) if defaults is not None else TradeForm()
        _overlay(form, self.model_dump(exclude_none=True, exclude={"stop", "risk", "instrument"}))
        _overlay(form.stops, self.stop.model_dump(exclude_none=True))
        _overlay(form.risk, self.risk.model_dump(exclude_none=True))
        _overlay(form.instrument, self.instrument.model_dump(exclude_none=True))
        return form


def _overlay(target: object, values: dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(target, key, value)


def parse_form_payload(payload: dict[str, Any], defaults: TradeForm | None = None) -> TradeForm:
    """Validate a raw dict into a form. Raises ValueError on bad content."""
    try:
        parsed = TradeFormPayload.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValueError(f"invalid_trade_form: {location}: {first['msg']}") from exc
    return parsed.to_form(defaults)


def load_form_file(path: Path, defaults: TradeForm | None = None) -> TradeForm:
    """Read a JSON trade form document from disk."""
    try:
        decoded = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"trade_form_not_json: {exc.msg}") from exc
    if not isinstance(decoded, dict):
        raise ValueError("trade_form_json_not_object")
    return parse_form_payload(decoded, defaults)

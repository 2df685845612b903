"""Configuration loading from environment variables and a .env file."""

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trade_scope.types import Direction, RiskMode


class LogFormat(str, Enum):
    """Log output format."""

    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """Application settings.

    Values come from ``TRADE_SCOPE_*`` environment variables or a .env file.
    The form defaults seed the command line when a value is not supplied.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRADE_SCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Trade defaults ====================
    default_direction: Direction = Field(default=Direction.LONG, description="Trade direction")
    default_rr_multiple: float = Field(default=3.0, gt=0, description="Reward/risk multiple")
    default_buffer_ratio: float = Field(
        default=0.2,
        ge=0,
        le=5.0,
        description="Entry buffer as a fraction of the stop",
    )
    enable_atr_filter: bool = Field(default=True, description="Check stop <= 20% ATR")

    # ==================== Stop defaults ====================
    default_stop_percent: float = Field(default=0.3, gt=0, description="Fixed stop, percent of level")
    default_stop_atr_multiple: float = Field(default=0.5, gt=0, description="Stop in ATR multiples")
    default_stop_points: float = Field(default=1.0, gt=0, description="Fixed stop in points")

    # ==================== Risk defaults ====================
    default_risk_mode: RiskMode = Field(default=RiskMode.RISK_CASH, description="Sizing mode")
    default_risk_cash: float = Field(default=100.0, ge=0, description="Cash at risk per trade")
    default_risk_percent: float = Field(
        default=1.0,
        ge=0,
        le=100.0,
        description="Percent of account at risk per trade",
    )
    default_account_size: float = Field(default=10_000.0, ge=0, description="Account size")
    default_notional: float = Field(default=50_000.0, ge=0, description="Target notional")

    # ==================== Instrument defaults ====================
    default_symbol: str = Field(default="TICKER", description="Instrument symbol")
    default_contract_multiplier: float = Field(default=1.0, gt=0, description="Contract multiplier")
    default_lot_step: float = Field(default=1.0, gt=0, description="Quantity increment")
    default_min_lot: float = Field(default=1.0, ge=0, description="Minimum quantity")
    default_fee_per_unit: float = Field(default=0.2, ge=0, description="Fee per unit")
    default_price_tick: float | None = Field(default=0.01, gt=0, description="Price increment hint")

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log output format",
    )

    # ==================== Export ====================
    export_dir: Path = Field(
        default=Path("exports"),
        description="Directory for exported result files",
    )

    @field_validator("export_dir", mode="before")
    @classmethod
    def parse_export_dir(cls, v: str | Path) -> Path:
        """Convert a string to a Path."""
        return Path(v) if isinstance(v, str) else v

    def ensure_directories(self) -> None:
        """Make sure the export directory exists."""
        self.export_dir.mkdir(parents=True, exist_ok=True)


# lazily created
_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the shared settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Rebuild settings from the environment."""
    global _settings
    _settings = Settings()
    return _settings

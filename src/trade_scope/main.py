"""CLI entry point for trade-scope."""

import sys
from pathlib import Path
from typing import Any

import click

from trade_scope import __version__
from trade_scope.config import get_settings
from trade_scope.export import (
    DEFAULT_FILE_NAMES,
    RANGE_UNKNOWN,
    render_csv,
    render_json,
    write_export,
)
from trade_scope.grid import (
    SETUP_LABELS,
    STOP_LABELS,
    ResultRow,
    TradeForm,
    build_result_rows,
    collect_messages,
    pick_summary_row,
)
from trade_scope.schemas import load_form_file
from trade_scope.types import Direction, RiskMode, SetupType
from trade_scope.utils.logging import get_logger, log_export, setup_logging

_FORM_OPTIONS = {
    "level": "level",
    "atr": "atr",
    "rr_multiple": "rr_multiple",
    "buffer_ratio": "buffer_ratio",
    "range_passed": "range_passed",
    "current_price": "current_price",
}
_STOP_OPTIONS = {
    "stop_percent": "percent",
    "stop_atr_multiple": "atr_multiple",
    "stop_points": "points",
}
_RISK_OPTIONS = {
    "risk_cash": "risk_cash",
    "risk_percent": "risk_percent",
    "account_size": "account_size",
    "notional": "notional",
}
_INSTRUMENT_OPTIONS = {
    "symbol": "symbol",
    "contract_multiplier": "contract_multiplier",
    "lot_step": "lot_step",
    "min_lot": "min_lot",
    "fee_per_unit": "fee_per_unit",
    "price_tick": "price_tick",
}


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show the version and exit")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """trade-scope - position sizing and risk metrics for one trade idea.

    Calculates every enabled setup against every stop method and reports
    trigger, stop-loss and target prices, lot-aligned quantity and P&L.
    """
    if version:
        click.echo(f"trade-scope version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _apply_options(form: TradeForm, options: dict[str, Any]) -> TradeForm:
    for option, attr in _FORM_OPTIONS.items():
        if options[option] is not None:
            setattr(form, attr, options[option])
    for option, attr in _STOP_OPTIONS.items():
        if options[option] is not None:
            setattr(form.stops, attr, options[option])
    for option, attr in _RISK_OPTIONS.items():
        if options[option] is not None:
            setattr(form.risk, attr, options[option])
    for option, attr in _INSTRUMENT_OPTIONS.items():
        if options[option] is not None:
            setattr(form.instrument, attr, options[option])

    if options["direction"] is not None:
        form.direction = Direction(options["direction"])
    if options["setups"]:
        form.setups = [SetupType(value) for value in options["setups"]]
    if options["risk_mode"] is not None:
        form.risk.mode = RiskMode(options["risk_mode"])
    if options["no_atr_filter"]:
        form.enable_atr_filter = False
    return form


def _echo_table(rows: list[ResultRow]) -> None:
    for row in rows:
        click.echo(f"[{row.label}]")
        if row.calculation is None:
            click.echo(f"   Error: {row.error}")
            continue
        r = row.calculation.result
        range_text = RANGE_UNKNOWN if r.range_over_stop is None else f"{r.range_over_stop:.2f}"
        click.echo(f"   Stop: {r.stop:.4f}  Buffer: {r.buffer:.4f}  TVX: {r.tvx:.4f}")
        click.echo(f"   SL: {r.sl_price:.4f}  TP: {r.tp_price:.4f}  RR: {r.rr_multiple:.2f}")
        click.echo(f"   ATR/Stop: {r.atr_over_stop:.2f}  Range/Stop: {range_text}")
        click.echo(
            f"   >=4 stops: {'Yes' if r.has_four_stops else 'No'}"
            f"  Stop <= 0.2*ATR: {'Yes' if r.stop_within_atr_filter else 'No'}"
        )
        click.echo(f"   Qty: {r.quantity:g}  Notional: {r.notional:.2f}")
    click.echo()


def _echo_summary(rows: list[ResultRow]) -> None:
    row = pick_summary_row(rows)
    click.echo("[Position summary]")
    if row is None or row.calculation is None:
        click.echo("   Enter trade data to review the position.")
        return
    r = row.calculation.result
    summary = r.position_summary
    cp_to_tvx = "-" if r.current_price_to_tvx is None else f"{r.current_price_to_tvx:.4f}"
    click.echo(f"   Source: {SETUP_LABELS[row.setup]} / {STOP_LABELS[row.stop_type]}")
    click.echo(f"   Risk / trade: {summary.risk_cash:.2f}")
    click.echo(f"   Quantity: {r.quantity:g}")
    click.echo(f"   Notional: {r.notional:.2f}")
    click.echo(f"   Estimated fees: {summary.est_fees:.2f}")
    click.echo(f"   P&L at TP: {summary.pnl_at_tp:.2f}")
    click.echo(f"   P&L at SL: {summary.pnl_at_sl:.2f}")
    click.echo(f"   Current -> TVX: {cp_to_tvx}")
    click.echo(f"   Stop / ATR %: {r.stop_atr_percent:.2f}%")


@cli.command()
@click.option(
    "--input",
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON trade form; options given on the command line override it",
)
@click.option("--direction", type=click.Choice([d.value for d in Direction]), default=None)
@click.option(
    "--setup",
    "setups",
    type=click.Choice([s.value for s in SetupType]),
    multiple=True,
    help="Setup to calculate (repeatable, default: all)",
)
@click.option("--level", type=float, default=None, help="Reference price")
@click.option("--atr", type=float, default=None, help="Average true range")
@click.option("--rr", "rr_multiple", type=float, default=None, help="Reward/risk multiple")
@click.option("--buffer-ratio", type=float, default=None, help="Entry buffer, fraction of stop")
@click.option("--range-passed", type=float, default=None, help="Range already passed")
@click.option("--current-price", type=float, default=None, help="Live reference price")
@click.option("--no-atr-filter", is_flag=True, default=False, help="Skip the stop <= 20% ATR check")
@click.option("--stop-percent", type=float, default=None, help="Fixed % stop value")
@click.option("--stop-atr-multiple", type=float, default=None, help="ATR * k stop value")
@click.option("--stop-points", type=float, default=None, help="Fixed points stop value")
@click.option("--risk-mode", type=click.Choice([m.value for m in RiskMode]), default=None)
@click.option("--risk-cash", type=float, default=None)
@click.option("--risk-percent", type=float, default=None)
@click.option("--account-size", type=float, default=None)
@click.option("--notional", type=float, default=None)
@click.option("--symbol", type=str, default=None)
@click.option("--contract-multiplier", type=float, default=None)
@click.option("--lot-step", type=float, default=None)
@click.option("--min-lot", type=float, default=None)
@click.option("--fee-per-unit", type=float, default=None)
@click.option("--price-tick", type=float, default=None)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "csv", "json"]),
    default="table",
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write csv/json output to this file",
)
@click.option(
    "--export",
    "export_default",
    is_flag=True,
    default=False,
    help="Write csv/json output into the configured export directory",
)
def calc(
    input_path: Path | None,
    output_format: str,
    output_path: Path | None,
    export_default: bool,
    **options: Any,
) -> None:
    """Calculate the setup x stop method grid.

    Defaults come from settings, then the --input file, then options.
    """
    setup_logging()
    logger = get_logger("trade_scope.main")
    settings = get_settings()

    form = TradeForm.from_settings(settings)
    if input_path is not None:
        try:
            form = load_form_file(input_path, defaults=form)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--input") from e
    form = _apply_options(form, options)

    rows = build_result_rows(form)
    logger.info(
        "calculation_completed",
        rows=len(rows),
        succeeded=sum(1 for row in rows if row.ok),
        direction=form.direction.value,
    )

    if output_format == "table":
        _echo_table(rows)
        _echo_summary(rows)
        messages = collect_messages(rows)
        if messages:
            click.echo()
            click.echo("[Warnings]")
            for message in messages:
                click.echo(f"   - {message}")
    else:
        if export_default and output_path is None:
            settings.ensure_directories()
            output_path = settings.export_dir / DEFAULT_FILE_NAMES[output_format]
        if output_path is not None:
            written = write_export(output_path, rows, output_format)  # type: ignore[arg-type]
            log_export(logger, fmt=output_format, rows=written, path=str(output_path))
            click.echo(f"Wrote {written} rows to {output_path}")
        else:
            content = render_csv(rows) if output_format == "csv" else render_json(rows)
            click.echo(content)

    if not any(row.ok for row in rows):
        sys.exit(1)


@cli.command()
def status() -> None:
    """Show configured defaults and logging setup."""
    setup_logging()
    settings = get_settings()

    click.echo("=" * 50)
    click.echo("trade-scope - Status")
    click.echo("=" * 50)
    click.echo()

    click.echo("[Trade Defaults]")
    click.echo(f"   Direction: {settings.default_direction.value}")
    click.echo(f"   RR multiple: {settings.default_rr_multiple}")
    click.echo(f"   Buffer ratio: {settings.default_buffer_ratio}")
    click.echo(f"   ATR filter: {'On' if settings.enable_atr_filter else 'Off'}")
    click.echo(
        f"   Stops: {settings.default_stop_percent}% / "
        f"{settings.default_stop_atr_multiple} ATR / {settings.default_stop_points} pts"
    )
    click.echo()

    click.echo("[Risk Defaults]")
    click.echo(f"   Mode: {settings.default_risk_mode.value}")
    click.echo(f"   Risk cash: {settings.default_risk_cash}")
    click.echo(
        f"   Risk percent: {settings.default_risk_percent}% of {settings.default_account_size}"
    )
    click.echo(f"   Notional: {settings.default_notional}")
    click.echo()

    click.echo("[Instrument Defaults]")
    click.echo(f"   Symbol: {settings.default_symbol}")
    click.echo(f"   Contract multiplier: {settings.default_contract_multiplier}")
    click.echo(f"   Lot step: {settings.default_lot_step}")
    click.echo(f"   Min lot: {settings.default_min_lot}")
    click.echo(f"   Fee per unit: {settings.default_fee_per_unit}")
    click.echo()

    click.echo("[Logging]")
    click.echo(f"   Log level: {settings.log_level}")
    click.echo(f"   Log format: {settings.log_format.value}")
    click.echo(f"   Export dir: {settings.export_dir}")
    click.echo()
    click.echo("=" * 50)


# python -m trade_scope.main
if __name__ == "__main__":
    cli()

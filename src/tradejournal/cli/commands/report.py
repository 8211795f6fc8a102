"""Performance report command."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from tradejournal.cli.ui.formatters import (
    create_daily_pnl_table,
    create_metrics_table,
    create_recent_trades_table,
    create_segment_table,
    format_currency,
)
from tradejournal.journal.models import Trade
from tradejournal.journal.repository import InMemoryJournalRepository, load_snapshot
from tradejournal.journal.service import JournalService, PortfolioSummary
from tradejournal.libraries.performance.filters import sort_trades
from tradejournal.libraries.performance.metrics import compute_performance_metrics
from tradejournal.system.config import ReportConfig, reload_system_config
from tradejournal.system.log_system import LoggerFactory

console = Console()


def _print_summary(summary: PortfolioSummary, trades: list[Trade], report: ReportConfig) -> None:
    portfolio = summary.portfolio
    currency = portfolio.currency or report.currency
    hide = report.hide_amounts

    console.rule(f"[bold blue]{portfolio.name}[/bold blue]")
    console.print(f"  Initial Balance: [yellow]{format_currency(portfolio.initial_balance, currency, hide)}[/yellow]")
    console.print(f"  Current Balance: [yellow]{format_currency(summary.balance, currency, hide)}[/yellow]")
    console.print()

    console.print(create_metrics_table(summary.metrics, currency=currency, hide_amounts=hide))

    if summary.daily_pnl:
        console.print(create_daily_pnl_table(summary.daily_pnl, currency=currency, hide_amounts=hide))
    if summary.tag_performance:
        console.print(create_segment_table("By Tag", summary.tag_performance, currency=currency, hide_amounts=hide))
    if summary.asset_performance:
        console.print(
            create_segment_table("By Asset Class", summary.asset_performance, currency=currency, hide_amounts=hide)
        )

    closed = [t for t in trades if t.is_closed]
    if closed and report.recent_trades:
        recent = sort_trades(closed, "date", ascending=False)[: report.recent_trades]
        console.print(
            create_recent_trades_table(recent, currency=currency, hide_amounts=hide, date_format=report.date_format)
        )
    console.print()


@click.command("report")
@click.option(
    "--file",
    "-f",
    "snapshot_file",
    type=click.Path(path_type=Path),
    help="Journal snapshot (JSON). Defaults to journal.snapshot_path from system config",
)
@click.option(
    "--portfolio",
    "-p",
    "portfolio_id",
    help="Only report this portfolio id",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="System configuration file (YAML)",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level",
)
def report_command(
    snapshot_file: Optional[Path],
    portfolio_id: Optional[str],
    config_file: Optional[Path],
    log_level: Optional[str],
):
    """
    Print a performance report from a journal snapshot.

    Cached P&L values in the snapshot are recomputed before reporting, so
    snapshots written by older versions report correctly.

    \b
    Examples:
        # All portfolios in the default snapshot
        tradejournal report

        # One portfolio from a specific snapshot
        tradejournal report --file exports/journal.json --portfolio p-main

        # Debug logging
        tradejournal report -f exports/journal.json -l debug
    """
    try:
        system_config = reload_system_config(config_file)

        # Apply log level override if specified
        if log_level:
            from typing import Literal, cast

            level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level.upper())
            system_config.logging.level = level
        LoggerFactory.configure(system_config.logging.to_logger_config())
        logger = LoggerFactory.get_logger()

        path = snapshot_file or Path(system_config.journal.snapshot_path)
        snapshot = load_snapshot(path)
        service = JournalService(InMemoryJournalRepository.from_snapshot(snapshot))
        service.refresh_trades()

        portfolios = service.repository.list_portfolios()
        if portfolio_id is not None:
            portfolios = [service.get_portfolio(portfolio_id)]

        logger.info("report.started", path=str(path), portfolio_id=portfolio_id, trades=len(snapshot.trades))

        console.rule("[bold blue]Trade Journal Report[/bold blue]")
        console.print()

        if not portfolios:
            # Snapshot without portfolio records: report every trade together
            trades = service.repository.list_trades()
            console.print(
                create_metrics_table(
                    compute_performance_metrics(trades),
                    title="All Trades",
                    currency=system_config.report.currency,
                    hide_amounts=system_config.report.hide_amounts,
                )
            )

        for portfolio in portfolios:
            summary = service.portfolio_summary(portfolio.portfolio_id)
            _print_summary(summary, service.portfolio_trades(portfolio.portfolio_id), system_config.report)

        logger.info("report.completed", path=str(path), portfolio_id=portfolio_id)

    except Exception as e:
        console.print()
        console.print(f"[bold red]✗ Report failed:[/bold red] {e}")
        sys.exit(1)

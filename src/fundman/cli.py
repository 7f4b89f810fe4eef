"""
Command-line interface for fundman.

Provides commands for:
- watch: Refresh valuations on a fixed interval and print each update
- once: Run a single refresh and optionally export the results
- axis: Print the intraday time axis
"""

import asyncio
import sys
from typing import Optional

import click

from fundman import __version__
from fundman.config import (
    ConfigurationError,
    DEFAULT_CONFIG_FILE,
    Settings,
    load_holdings,
    load_settings,
)
from fundman.charts import build_time_axis
from fundman.data import JDValuationProvider, ValuationFetcher
from fundman.formatting import render_tags
from fundman.logging_setup import setup_logging
from fundman.models import CycleOutcome, Holding
from fundman.portfolio import RefreshCycle
from fundman.reporting import TABLE_HEADERS, save_results, summary_lines, table_rows
from fundman.scheduler import Scheduler
from fundman.session import Session


@click.group()
@click.version_option(version=__version__, prog_name="fundman")
def main():
    """
    Terminal fund valuation monitor.

    Periodically fetches intraday valuation estimates for your fund
    holdings and reports today's and cumulative income.
    """
    pass


def _load(config: str, log_level: Optional[str]) -> tuple[Settings, list[Holding]]:
    try:
        settings = load_settings(config)
        holdings = load_holdings(config)
    except ConfigurationError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    setup_logging(log_level or settings.log_level, settings.log_file)

    if not holdings:
        click.echo("No holdings configured.", err=True)
        sys.exit(1)

    return settings, holdings


def _build_scheduler(
    settings: Settings,
    session: Session,
    interval: Optional[float] = None,
) -> Scheduler:
    provider = JDValuationProvider(
        base_url=settings.base_url,
        timeout=settings.request_timeout,
    )
    fetcher = ValuationFetcher(provider, max_attempts=settings.max_attempts)

    def on_progress(completed: int, total: int) -> None:
        click.echo(f"\rLoading {completed}/{total}", nl=completed == total, err=True)

    def on_cycle(outcome: CycleOutcome, applied: bool) -> None:
        if applied:
            _print_session(session)

    return Scheduler(
        session,
        RefreshCycle(fetcher, on_progress=on_progress),
        interval=interval or settings.interval,
        on_cycle=on_cycle,
    )


def _print_session(session: Session) -> None:
    if session.summary is None:
        return

    click.echo()
    click.echo(" | ".join(TABLE_HEADERS))
    for row in table_rows(session.results):
        click.echo(render_tags(" | ".join(row)))

    click.echo()
    for line in summary_lines(session.summary, session.extremes):
        click.echo(render_tags(line))

    series = session.charts.current_series()
    if series is not None and series.y_values:
        click.echo(
            f"Chart: {series.title} {len(series.y_values)} points, "
            f"low {series.min_y}, last {series.y_values[-1]}"
        )


@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    default=str(DEFAULT_CONFIG_FILE),
    show_default=True,
    help="Path to holdings configuration (YAML or JSON)",
)
@click.option(
    "--interval", "-i",
    type=click.FloatRange(min=0.1),
    default=None,
    help="Seconds between refreshes. Defaults to the configured interval.",
)
@click.option(
    "--select", "-s",
    "selected",
    default=None,
    help="Fund code whose intraday chart summary is shown",
)
@click.option("--log-level", default=None, help="Logging level, e.g. DEBUG")
def watch(config: str, interval: Optional[float], selected: Optional[str], log_level: Optional[str]):
    """
    Refresh valuations until interrupted.
    """
    settings, holdings = _load(config, log_level)

    session = Session()
    if selected:
        session.charts.select_identifier(selected)
    scheduler = _build_scheduler(settings, session, interval)

    click.echo(f"Loading {len(holdings)} holding(s), please wait...")
    try:
        asyncio.run(scheduler.start(holdings))
    except KeyboardInterrupt:
        click.echo("Stopped.")


@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    default=str(DEFAULT_CONFIG_FILE),
    show_default=True,
    help="Path to holdings configuration (YAML or JSON)",
)
@click.option(
    "--csv", "csv_path",
    type=click.Path(),
    default=None,
    help="Write the holding results to this CSV file",
)
@click.option("--log-level", default=None, help="Logging level, e.g. DEBUG")
def once(config: str, csv_path: Optional[str], log_level: Optional[str]):
    """
    Run a single refresh and print the results.
    """
    settings, holdings = _load(config, log_level)

    session = Session()
    scheduler = _build_scheduler(settings, session)
    asyncio.run(scheduler.start(holdings, max_cycles=1))

    if session.summary is None:
        click.echo("Refresh failed, see log for details.", err=True)
        sys.exit(1)

    if csv_path:
        path = save_results(session.results, csv_path)
        click.echo(f"Results saved: {path}")


@main.command()
@click.option(
    "--count", "-n",
    type=int,
    default=240,
    show_default=True,
    help="Number of labels (at most 240)",
)
def axis(count: int):
    """
    Print the intraday time axis labels.
    """
    click.echo(" ".join(build_time_axis(count)))


if __name__ == "__main__":
    main()

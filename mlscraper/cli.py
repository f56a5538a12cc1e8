"""mlscraper CLI: harvest Music League submissions into a CSV file.

Usage:
    mlscraper run                          # Every submitter in every league
    mlscraper run --user 21efc313fb23...   # One submitter's entries only
    MUSICLEAGUE_USER_ID=... mlscraper run  # Same, from the environment
    mlscraper run -o out.csv --headless    # Reuse a logged-in profile
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click

from mlscraper.config import (
    DEFAULT_HOST,
    DEFAULT_OUTPUT,
    DEFAULT_USER_DATA_DIR,
    RunConfig,
)
from mlscraper.data_types import RunMode, RunSummary
from mlscraper.driver.callbacks import CsvRecordSink
from mlscraper.engine import TraversalEngine

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="mlscraper")
def cli() -> None:
    """mlscraper: Music League submission harvester."""


@cli.command()
@click.option(
    "--user",
    "user_id",
    envvar="MUSICLEAGUE_USER_ID",
    default=None,
    help=(
        "Submitter id from your profile URL (/user/<id>/). "
        "Omit to collect every submitter."
    ),
)
@click.option(
    "--host",
    default=DEFAULT_HOST,
    show_default=True,
    help="Music League host.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="CSV file to write (overwritten each run).",
)
@click.option(
    "--headless/--headed",
    default=False,
    show_default=True,
    help="Hide the browser window. Logging in needs --headed.",
)
@click.option(
    "--user-data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_USER_DATA_DIR,
    show_default=True,
    help="Browser profile directory; keeps the login between runs.",
)
@click.option(
    "--timeout",
    "timeout_ms",
    type=click.IntRange(min=1000),
    default=30000,
    show_default=True,
    help="Navigation timeout in milliseconds.",
)
@click.option(
    "--rate",
    "navigations_per_minute",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum page navigations per minute.",
)
@click.option(
    "--hold-browser",
    is_flag=True,
    help="Wait for Enter before closing the browser.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def run(
    user_id: str | None,
    host: str,
    output: Path,
    headless: bool,
    user_data_dir: Path,
    timeout_ms: int,
    navigations_per_minute: int | None,
    hold_browser: bool,
    verbose: bool,
) -> None:
    """Walk every league and round and write submissions to a CSV file.

    \b
    Examples:
        mlscraper run
        mlscraper run --user 21efc313fb234af18f094d644f5980ac
        mlscraper run -o leagues.csv --rate 30 -v
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = RunConfig(
        user_id=user_id,
        host=host,
        output_path=output,
        headless=headless,
        user_data_dir=user_data_dir,
        navigation_timeout_ms=timeout_ms,
        navigations_per_minute=navigations_per_minute,
        hold_browser=hold_browser,
    )

    if config.mode is RunMode.SINGLE_USER:
        click.echo(f"Mode:   single user ({config.identity})")
    else:
        click.echo("Mode:   all submitters")
    click.echo(f"Output: {config.output_path}")

    summary = _run_playwright(config)

    if summary.aborted:
        raise click.ClickException(
            f"Traversal aborted ({summary.error}). "
            f"{summary.records_written} submissions; "
            f"partial results saved to: {summary.output_path}"
        )

    click.echo(f"Total submissions found: {summary.records_written}")
    click.echo(f"Submissions saved to: {summary.output_path}")


def _run_playwright(config: RunConfig) -> RunSummary:
    try:
        from mlscraper.driver.playwright_driver import PlaywrightPageAccessor
    except ImportError as e:
        raise click.ClickException(
            f"Missing dependency: {e}. "
            "Install playwright and its browsers: "
            "pip install playwright && playwright install chromium"
        ) from e

    with CsvRecordSink.create(config.output_path) as sink:

        async def _go() -> RunSummary:
            async with PlaywrightPageAccessor.open(config) as accessor:
                engine = TraversalEngine(config, accessor, on_record=sink)
                return await engine.run()

        try:
            return asyncio.run(_go())
        except KeyboardInterrupt:
            logger.warning("Interrupted by operator")
            error = "interrupted"
        except OSError as e:
            logger.error(f"Writing {config.output_path} failed: {e}")
            error = f"write failed: {e}"

        return RunSummary(
            records_written=sink.rows_written,
            aborted=True,
            error=error,
            output_path=config.output_path,
        )


def main() -> None:
    """Entry point for the ``mlscraper`` console script."""
    cli()

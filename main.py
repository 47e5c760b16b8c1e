import sys
import asyncio

# --- Settings/Logging ---
from mhr_scraper.logging.setup import setup_logging
from mhr_scraper.config.settings import settings

setup_logging()

from apify import Actor
from loguru import logger

from mhr_scraper.config.run_input import RunInputError, load_run_input
from mhr_scraper.scrapers.myhockeyrankings_scraper import (
    MyHockeyRankingsScraper,
    RunResult,
)

from rich import print
from rich.panel import Panel
from rich.table import Table

SUMMARY_ROWS = 25


def print_summary(result: RunResult) -> None:
    """Prints run totals and the first few records."""
    items = result.items
    print(
        Panel(
            f"Ranked teams found: {result.stub_count}\n"
            f"Records written: {result.record_count}\n"
            f"Requests handled: {result.stats.requests_handled}  "
            f"failed: {result.stats.requests_failed}  "
            f"retries: {result.stats.retries}",
            title="MyHockeyRankings scrape",
        )
    )
    if not items:
        return

    table = Table(show_lines=False)
    for column in ("rank", "teamName", "rating", "location", "logoUrl"):
        table.add_column(column)
    for item in items[:SUMMARY_ROWS]:
        table.add_row(
            str(item.get("rank") or "-"),
            str(item.get("teamName") or "-"),
            str(item.get("rating") or "-"),
            str(item.get("location") or "-"),
            "found" if item.get("logoUrl") else "-",
        )
    print(table)
    if len(items) > SUMMARY_ROWS:
        print(f"... and {len(items) - SUMMARY_ROWS} more in the default dataset")


async def main() -> int:
    """Main entry point for the application."""
    # Logging stays with loguru; the actor only provides input and storage.
    async with Actor(configure_logging=False, exit_process=False):
        try:
            run_input = await load_run_input(settings)
        except RunInputError as e:
            logger.critical(f"{e}")
            return 1

        scraper = MyHockeyRankingsScraper(run_input, settings)
        result = await scraper.run()

        if result.stats.requests_failed:
            logger.warning(
                f"{result.stats.requests_failed} request(s) failed: {result.stats.failed_urls}"
            )

        if settings.export_path:
            try:
                await scraper.export(settings.export_path)
            except (IOError, ValueError) as e:
                logger.error(f"Failed to export dataset to {settings.export_path}: {e}")

        print_summary(result)
        return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)

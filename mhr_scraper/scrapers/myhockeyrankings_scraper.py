from typing import Any, Dict, List, Optional

from crawlee.crawlers import BasicCrawler, PlaywrightCrawlingContext
from crawlee.router import Router
from loguru import logger
from pydantic import BaseModel

from mhr_scraper.config.run_input import RunInput
from mhr_scraper.config.settings import AppSettings
from mhr_scraper.models.enums import RequestLabel
from mhr_scraper.scrapers.crawler import (
    CrawlStatistics,
    build_playwright_crawler,
    register_failed_request_logger,
)
from mhr_scraper.scrapers.rankings_scraper import handle_rankings_page
from mhr_scraper.scrapers.team_detail_scraper import (
    PageHook,
    handle_team_detail,
    screenshot_hook,
)
from mhr_scraper.storage.stub_store import StubStore


class RunResult(BaseModel):
    stats: CrawlStatistics
    stub_count: int
    items: List[Dict[str, Any]]

    @property
    def record_count(self) -> int:
        return len(self.items)


def build_router(
    stubs: StubStore,
    app_settings: AppSettings,
    max_teams: int,
    page_hook: Optional[PageHook] = None,
) -> Router[PlaywrightCrawlingContext]:
    """Team detail requests go to the detail handler; everything else is a rankings page."""
    router = Router[PlaywrightCrawlingContext]()

    @router.handler(RequestLabel.TEAM_DETAIL.value)
    async def team_detail(context: PlaywrightCrawlingContext) -> None:
        await handle_team_detail(context, stubs, app_settings, page_hook)

    @router.handler(RequestLabel.RANKINGS_PAGE.value)
    async def next_rankings_page(context: PlaywrightCrawlingContext) -> None:
        await handle_rankings_page(context, stubs, app_settings, max_teams)

    @router.default_handler
    async def rankings_page(context: PlaywrightCrawlingContext) -> None:
        await handle_rankings_page(context, stubs, app_settings, max_teams)

    return router


class MyHockeyRankingsScraper:
    """Runs one rankings crawl: rankings pages first, then every team page found."""

    def __init__(
        self,
        run_input: RunInput,
        app_settings: AppSettings,
        page_hook: Optional[PageHook] = None,
    ):
        self.run_input = run_input
        self.settings = app_settings
        self.stubs = StubStore()
        if page_hook is None and app_settings.save_debug_screenshot:
            page_hook = screenshot_hook(app_settings.debug_screenshot_path)
        self.router = build_router(self.stubs, app_settings, run_input.max_teams, page_hook)
        self.crawler: Optional[BasicCrawler] = None

    def create_crawler(self) -> BasicCrawler:
        return build_playwright_crawler(self.router, self.settings)

    async def run(self, crawler: Optional[BasicCrawler] = None) -> RunResult:
        logger.info("Starting MyHockeyRankings scraper...")
        logger.info(f"Target URL: {self.run_input.ranking_url}")
        logger.info(
            "Max teams to scrape: "
            f"{'unlimited' if self.run_input.max_teams == 0 else self.run_input.max_teams}"
        )

        self.crawler = crawler or self.create_crawler()
        failed_urls: List[str] = []
        register_failed_request_logger(self.crawler, failed_urls)

        final = await self.crawler.run([self.run_input.ranking_url])
        items = (await self.crawler.get_data()).items

        logger.success(
            f"Scraping completed! {len(items)} records from {len(self.stubs)} ranked teams."
        )
        return RunResult(
            stats=CrawlStatistics.from_final(final, failed_urls),
            stub_count=len(self.stubs),
            items=items,
        )

    async def export(self, path: str) -> None:
        """Writes the run's dataset to ``path`` (format from the file suffix)."""
        if self.crawler is None:
            raise RuntimeError("Nothing to export before the crawl has run.")
        await self.crawler.export_data(path)
        logger.info(f"Exported dataset to {path}")

from datetime import timedelta
from typing import List, Optional

from crawlee import ConcurrencySettings
from crawlee.crawlers import BasicCrawler, BasicCrawlingContext, PlaywrightCrawler
from crawlee.statistics import FinalStatistics
from loguru import logger
from pydantic import BaseModel, Field

from mhr_scraper.config.settings import AppSettings


class CrawlStatistics(BaseModel):
    """Run totals reported back to the caller."""

    requests_handled: int = 0
    requests_failed: int = 0
    retries: int = 0
    failed_urls: List[str] = Field(default_factory=list)

    @classmethod
    def from_final(
        cls, final: FinalStatistics, failed_urls: Optional[List[str]] = None
    ) -> "CrawlStatistics":
        # retry_histogram[n] counts requests that needed n retries
        retries = sum(n * count for n, count in enumerate(final.retry_histogram))
        return cls(
            requests_handled=final.requests_finished,
            requests_failed=final.requests_failed,
            retries=retries,
            failed_urls=list(failed_urls or []),
        )


def build_playwright_crawler(router, app_settings: AppSettings) -> PlaywrightCrawler:
    """Headless Chromium crawler configured from settings.

    crawlee owns the request queue (deduplicated by normalized URL), the
    page pool, handler timeouts and retries. Its stdlib log records reach
    loguru through the intercept handler, so its own log setup is off.
    """
    max_concurrency = app_settings.max_concurrency
    return PlaywrightCrawler(
        request_handler=router,
        browser_type="chromium",
        headless=app_settings.headless,
        max_requests_per_crawl=app_settings.max_requests_per_crawl,
        max_request_retries=app_settings.max_request_retries,
        request_handler_timeout=timedelta(
            seconds=app_settings.request_handler_timeout_secs
        ),
        concurrency_settings=ConcurrencySettings(
            max_concurrency=max_concurrency, desired_concurrency=max_concurrency
        ),
        configure_logging=False,
    )


def register_failed_request_logger(crawler: BasicCrawler, failed_urls: List[str]) -> None:
    """Logs requests whose retries are exhausted and collects their URLs."""

    @crawler.failed_request_handler
    async def log_failed_request(context: BasicCrawlingContext, error: Exception) -> None:
        failed_urls.append(context.request.url)
        logger.error(f"Request {context.request.url} failed multiple times: {error}")

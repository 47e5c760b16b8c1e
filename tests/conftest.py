import pytest
from crawlee import service_locator

from mhr_scraper.config.settings import AppSettings


@pytest.fixture(autouse=True)
def _fresh_crawlee_storages():
    # crawlee caches opened storages process-wide; isolate each test's crawl
    service_locator.storage_instance_manager.clear_cache()
    yield
    service_locator.storage_instance_manager.clear_cache()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        settle_timeout_secs=0,
        settle_poll_interval_secs=0.01,
        max_request_retries=1,
        request_handler_timeout_secs=5,
        save_debug_screenshot=False,
        max_concurrency=2,
    )

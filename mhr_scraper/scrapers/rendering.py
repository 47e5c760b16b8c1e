import asyncio
import time
from typing import Any

from loguru import logger

from mhr_scraper.models.page import ImageInfo, RenderedPage

# Collected in the browser because natural sizes only exist after decoding.
IMAGES_JS = """
() => Array.from(document.querySelectorAll('img')).map(img => ({
    src: img.src || '',
    naturalWidth: img.naturalWidth || 0,
    naturalHeight: img.naturalHeight || 0,
}))
"""


async def wait_until_stable(
    page: Any, timeout_secs: float, poll_interval_secs: float
) -> bool:
    """Polls the rendered HTML until two consecutive samples match.

    Returns False if ``timeout_secs`` elapses first; callers carry on with
    whatever has rendered by then.
    """
    deadline = time.monotonic() + timeout_secs
    previous = await page.content()
    while time.monotonic() < deadline:
        await asyncio.sleep(poll_interval_secs)
        current = await page.content()
        if current == previous:
            return True
        previous = current
    logger.debug(f"Page did not settle within {timeout_secs}s; continuing.")
    return False


async def capture_page(page: Any) -> RenderedPage:
    html = await page.content()
    images = [ImageInfo.model_validate(raw) for raw in await page.evaluate(IMAGES_JS)]
    body_text = await page.inner_text("body")
    return RenderedPage(url=page.url, html=html, images=images, body_text=body_text)

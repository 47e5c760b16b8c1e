"""Team profile page processing: logo and location heuristics plus the stub join.

Both heuristics are ordered chains of small matcher functions. A matcher
returns a value on success or None, and the first success ends the chain.
"""

import re
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from crawlee.crawlers import PlaywrightCrawlingContext
from loguru import logger
from pydantic import BaseModel, ConfigDict

from mhr_scraper.config.settings import AppSettings
from mhr_scraper.models.page import RenderedPage
from mhr_scraper.models.team import TeamDetail, TeamRecord
from mhr_scraper.scrapers.rendering import capture_page, wait_until_stable
from mhr_scraper.storage.stub_store import StubStore
from mhr_scraper.utils.misc_utils import absolute_url, truncate

LOGO_SELECTORS = [
    'img[class*="logo"]',
    'img[class*="team"]',
    'img[alt*="logo"]',
    'img[alt*="team"]',
    ".logo img",
    ".team-logo img",
    ".team-info img",
    'meta[property="og:image"]',
]

LOGO_MIN_SIZE = 50
LOGO_MAX_SIZE = 500

LOCATION_HINT_SELECTORS = [
    '[class*="location"]',
    '[class*="address"]',
    '[class*="city"]',
    '[class*="team-info"]',
    'meta[property="og:locality"]',
    'meta[property="og:region"]',
    "h1",
    "h2",
    "h3",
    ".info",
    ".details",
    ".profile",
]

LOCATION_PATTERNS = [
    re.compile(r"([A-Z][a-z\s]+),\s*([A-Z]{2})\b"),  # City, ST
    re.compile(r"([A-Z][a-z\s]+),\s*([A-Z][a-z]+)\b"),  # City, State
]
LOCATION_CANDIDATE_TAGS = ["td", "div", "span"]
LOCATION_CANDIDATE_MAX_LENGTH = 99

PAGE_TEXT_SAMPLE_LENGTH = 1000
LOGGED_TEXT_SAMPLE_LENGTH = 200

LogoMatcher = Callable[[RenderedPage], Optional[Tuple[str, str]]]


def selector_logo_matcher(selector: str) -> LogoMatcher:
    """Matcher for the first element hitting ``selector``.

    An <img> yields its absolute src, a <meta> its content attribute.
    """

    def match(page: RenderedPage) -> Optional[Tuple[str, str]]:
        element = page.soup.select_one(selector)
        if element is None:
            return None
        if element.name == "img":
            url = absolute_url(page.url, element.get("src"))
            if url:
                return url, f"Found logo at {selector}: {url}"
        elif element.name == "meta":
            content = (element.get("content") or "").strip()
            if content:
                return content, f"Found logo in meta tag: {content}"
        return None

    return match


def sized_image_logo_matcher(page: RenderedPage) -> Optional[Tuple[str, str]]:
    """First image sized like a logo: not an icon, not a banner."""
    for image in page.images:
        if (
            LOGO_MIN_SIZE <= image.natural_width <= LOGO_MAX_SIZE
            and LOGO_MIN_SIZE <= image.natural_height <= LOGO_MAX_SIZE
            and image.src
        ):
            return (
                image.src,
                f"Found logo by size heuristic: {image.src} "
                f"({image.natural_width}x{image.natural_height})",
            )
    return None


LOGO_MATCHERS: List[LogoMatcher] = [
    *(selector_logo_matcher(selector) for selector in LOGO_SELECTORS),
    sized_image_logo_matcher,
]


def resolve_logo(
    page: RenderedPage, debug_info: Optional[List[str]] = None
) -> Optional[str]:
    for matcher in LOGO_MATCHERS:
        found = matcher(page)
        if found:
            url, note = found
            if debug_info is not None:
                debug_info.append(note)
            return url
    return None


def collect_location_hints(page: RenderedPage) -> List[str]:
    """Debug breadcrumbs of location-ish elements. Never used as the value."""
    hints = []
    for selector in LOCATION_HINT_SELECTORS:
        element = page.soup.select_one(selector)
        if element is None:
            continue
        text = element.get_text().strip() or (element.get("content") or "").strip()
        if not text:
            continue
        hints.append(f"Found {selector}: {truncate(text, 100)}")
    return hints


class LocationMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_location: str
    city: str
    state: str
    source_text: str


def match_location(text: str) -> Optional[LocationMatch]:
    """Tests "City, ST" before "City, State" against one candidate string."""
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(text)
        if match:
            return LocationMatch(
                full_location=match.group(0),
                city=match.group(1),
                state=match.group(2),
                source_text=text,
            )
    return None


def location_candidates(page: RenderedPage) -> List[str]:
    """Trimmed text of every td/div/span in document order, short ones only."""
    candidates = []
    for element in page.soup.find_all(LOCATION_CANDIDATE_TAGS):
        text = element.get_text().strip()
        if 0 < len(text) <= LOCATION_CANDIDATE_MAX_LENGTH:
            candidates.append(text)
    return candidates


def resolve_location(page: RenderedPage) -> Optional[LocationMatch]:
    for text in location_candidates(page):
        found = match_location(text)
        if found:
            return found
    return None


def extract_team_detail(
    page: RenderedPage, debug_info: Optional[List[str]] = None
) -> TeamDetail:
    notes: List[str] = [] if debug_info is None else debug_info

    logo_url = resolve_logo(page, notes)
    notes.extend(collect_location_hints(page))

    location = resolve_location(page)
    if location:
        notes.append(f'Matched pattern in: "{location.source_text}"')

    return TeamDetail(
        city=location.city if location else None,
        state=location.state if location else None,
        full_location=location.full_location if location else None,
        logo_url=logo_url,
    )


PageHook = Callable[[Any], Awaitable[None]]


def screenshot_hook(path: str) -> PageHook:
    """Saves a viewport screenshot to ``path``, overwriting the previous one."""

    async def take_screenshot(page: Any) -> None:
        await page.screenshot(path=path, full_page=False)

    return take_screenshot


async def handle_team_detail(
    context: PlaywrightCrawlingContext,
    stubs: StubStore,
    app_settings: AppSettings,
    page_hook: Optional[PageHook] = None,
) -> None:
    log = logger.bind(url=context.request.url)
    page = context.page
    request_url = context.request.url
    log.info("Processing team detail page...")

    await page.wait_for_selector(
        "body", timeout=app_settings.body_wait_timeout_secs * 1000
    )
    await wait_until_stable(
        page, app_settings.settle_timeout_secs, app_settings.settle_poll_interval_secs
    )

    if page_hook is not None:
        try:
            await page_hook(page)
        except Exception as e:
            log.warning(f"Debug page hook failed for {request_url}: {e}")

    rendered = await capture_page(page)
    debug_info: List[str] = []
    detail = extract_team_detail(rendered, debug_info)
    page_text_sample = truncate(rendered.body_text, PAGE_TEXT_SAMPLE_LENGTH)

    log.info(
        f"Team page debug info: url={request_url} "
        f"foundLocation={detail.full_location} foundLogo={detail.logo_url}"
    )
    for note in debug_info:
        log.debug(note)
    log.debug(
        f"Page text sample: {truncate(page_text_sample, LOGGED_TEXT_SAMPLE_LENGTH)!r}"
    )

    stub = stubs.get(request_url)
    if stub is None:
        log.warning(f"No rankings entry for {request_url}; using defaults.")

    record = TeamRecord.join(request_url, stub, detail)
    log.info(
        f"Scraped: {record.team_name} - {record.city}, {record.state} "
        f"(logo: {'found' if record.logo_url else 'not found'})"
    )
    await context.push_data(record.to_output())

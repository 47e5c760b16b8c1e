import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from crawlee import Request
from crawlee.crawlers import PlaywrightCrawlingContext
from loguru import logger

from mhr_scraper.config.settings import AppSettings
from mhr_scraper.models.enums import RequestLabel
from mhr_scraper.models.page import RenderedPage
from mhr_scraper.models.team import TeamStub
from mhr_scraper.scrapers.rendering import capture_page, wait_until_stable
from mhr_scraper.storage.stub_store import StubStore
from mhr_scraper.utils.misc_utils import absolute_url

TEAM_LINK_SELECTOR = 'a[href*="team"]'
RANK_PATTERN = re.compile(r"[0-9]+")
RATING_PATTERN = re.compile(r"[0-9]+\.[0-9]+")
NEXT_TEXT_PATTERN = re.compile(r"^\s*next\b", re.IGNORECASE)


def parse_team_row(row: Tag, base_url: str) -> Optional[TeamStub]:
    """Builds a stub from one table row, or None if the row has no team link."""
    link = row.select_one(TEAM_LINK_SELECTOR)
    if link is None:
        return None

    team_url = absolute_url(base_url, link.get("href"))
    if not team_url:
        return None

    rank = None
    rating = None
    for index, cell in enumerate(row.select("td")):
        text = cell.get_text().strip()
        if RATING_PATTERN.fullmatch(text):
            rating = text  # Last matching cell wins
        if index == 0 and RANK_PATTERN.fullmatch(text):
            rank = text

    return TeamStub(
        team_name=link.get_text().strip(),
        team_url=team_url,
        rating=rating,
        rank=rank,
    )


def extract_team_stubs(page: RenderedPage) -> List[TeamStub]:
    """All team rows of every table on the page, in document order."""
    stubs = []
    for row in page.soup.select("table tr"):
        stub = parse_team_row(row, page.url)
        if stub is not None:
            stubs.append(stub)
    return stubs


def limit_teams(stubs: List[TeamStub], max_teams: int) -> List[TeamStub]:
    return stubs[:max_teams] if max_teams > 0 else list(stubs)


def _is_next_link(tag: Tag) -> bool:
    # Team links are never pagination, whatever the team is called
    if tag.name != "a" or tag.css.match(TEAM_LINK_SELECTOR):
        return False
    return "next" in (tag.get("class") or []) or bool(
        NEXT_TEXT_PATTERN.match(tag.get_text())
    )


def find_next_page_url(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    """URL of the first "Next" pagination link, if any."""
    for link in soup.find_all(_is_next_link):
        url = absolute_url(base_url, link.get("href"))
        if url:
            return url

    for button in soup.find_all("button"):
        if NEXT_TEXT_PATTERN.match(button.get_text()):
            logger.debug("Found a 'Next' button without a link target; not following it.")
            break
    return None


async def handle_rankings_page(
    context: PlaywrightCrawlingContext,
    stubs: StubStore,
    app_settings: AppSettings,
    max_teams: int,
) -> None:
    log = logger.bind(url=context.request.url)
    page = context.page
    log.info("Processing rankings page...")

    await page.wait_for_selector(
        "table", timeout=app_settings.table_wait_timeout_secs * 1000
    )
    await wait_until_stable(
        page, app_settings.settle_timeout_secs, app_settings.settle_poll_interval_secs
    )

    rendered = await capture_page(page)
    teams = extract_team_stubs(rendered)
    log.info(f"Found {len(teams)} teams on this page")

    teams_to_process = limit_teams(teams, max_teams)
    log.info(
        f"Processing {len(teams_to_process)} teams "
        f"(limit: {'none' if max_teams == 0 else max_teams})"
    )

    # Stubs must be stored before their detail requests exist.
    for team in teams_to_process:
        stubs.add(team)

    await context.add_requests(
        [
            Request.from_url(team.team_url, label=RequestLabel.TEAM_DETAIL.value)
            for team in teams_to_process
        ]
    )
    log.debug(f"Enqueued {len(teams_to_process)} team detail request(s)")

    next_url = find_next_page_url(rendered.soup, rendered.url)
    if next_url:
        log.info(f"Found next rankings page: {next_url}")
        await context.add_requests(
            [Request.from_url(next_url, label=RequestLabel.RANKINGS_PAGE.value)]
        )

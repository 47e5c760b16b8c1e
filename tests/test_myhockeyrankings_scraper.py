"""End-to-end run against a fake site: rankings page -> team pages -> dataset."""
import pytest

from mhr_scraper.config.run_input import RunInput
from mhr_scraper.scrapers.myhockeyrankings_scraper import MyHockeyRankingsScraper
from tests.fakes import FakeSite, FakeSitePage

RANKING_URL = "https://myhockeyrankings.com/rank.php?y=2025&v=123"
PAGE_2_URL = "https://myhockeyrankings.com/rank.php?y=2025&v=123&p=2"
TEAM_A = "https://myhockeyrankings.com/team-info.php?t=1"
TEAM_B = "https://myhockeyrankings.com/team-info.php?t=2"
TEAM_C = "https://myhockeyrankings.com/team-info.php?t=3"

RANKINGS_HTML = f"""
<html><body>
<table>
  <tr><th>Rank</th><th>Team</th><th>Rating</th></tr>
  <tr><td>1</td><td><a href="/team-info.php?t=1">Team A</a></td><td>9.50</td></tr>
  <tr><td>2</td><td><a href="/team-info.php?t=2">Team B</a></td><td>--</td></tr>
</table>
<a href="{PAGE_2_URL}">Next</a>
</body></html>
"""

PAGE_2_HTML = """
<html><body>
<table>
  <tr><td>3</td><td><a href="/team-info.php?t=3">Team C</a></td><td>7.25</td></tr>
  <tr><td>4</td><td><a href="/team-info.php?t=1">Team A (again)</a></td><td>1.00</td></tr>
</table>
</body></html>
"""

TEAM_A_HTML = """
<html><head><meta property="og:image" content="https://cdn.example.com/a.png"></head>
<body><h1>Team A</h1><table><tr><td>Anchorage, AK</td></tr></table></body></html>
"""

TEAM_B_HTML = """
<html><body><div class="logo"><img src="/logos/b.png"></div>
<span>Portland, Oregon</span></body></html>
"""

TEAM_C_HTML = "<html><body><p>No details yet</p></body></html>"


def site():
    return {
        RANKING_URL: FakeSitePage(html=RANKINGS_HTML),
        PAGE_2_URL: FakeSitePage(html=PAGE_2_HTML),
        TEAM_A: FakeSitePage(html=TEAM_A_HTML),
        TEAM_B: FakeSitePage(html=TEAM_B_HTML),
        TEAM_C: FakeSitePage(html=TEAM_C_HTML),
    }


async def run_scraper(app_settings, max_teams=0, pages=None):
    fake_site = FakeSite(pages or site())
    scraper = MyHockeyRankingsScraper(
        RunInput(ranking_url=RANKING_URL, max_teams=max_teams), app_settings
    )
    result = await scraper.run(fake_site.crawler(scraper.router, app_settings))
    return result, fake_site


@pytest.mark.asyncio
async def test_full_run_merges_stubs_with_detail_pages(app_settings):
    result, fake_site = await run_scraper(app_settings)

    items = {item["teamUrl"]: item for item in result.items}
    assert set(items) == {TEAM_A, TEAM_B, TEAM_C}
    assert result.record_count == 3
    assert result.stub_count == 3
    assert result.stats.requests_handled == 5
    assert result.stats.requests_failed == 0

    assert items[TEAM_A] == {
        "teamName": "Team A",
        "rank": "1",
        "rating": "9.50",
        "city": "Anchorage",
        "state": "AK",
        "location": "Anchorage, AK",
        "logoUrl": "https://cdn.example.com/a.png",
        "teamUrl": TEAM_A,
    }
    assert items[TEAM_B]["rating"] is None
    assert items[TEAM_B]["rank"] == "2"
    assert items[TEAM_B]["location"] == "Portland, Oregon"
    assert items[TEAM_B]["logoUrl"] == "https://myhockeyrankings.com/logos/b.png"
    assert items[TEAM_C]["location"] is None
    assert items[TEAM_C]["logoUrl"] is None

    # Team A is listed twice but visited once
    assert fake_site.visited.count(TEAM_A) == 1


@pytest.mark.asyncio
async def test_team_named_next_does_not_hide_the_next_page(app_settings):
    pages = site()
    pages[RANKING_URL] = FakeSitePage(
        html=RANKINGS_HTML.replace(">Team A<", ">Next Gen Hockey 10U<")
    )
    result, fake_site = await run_scraper(app_settings, pages=pages)

    assert PAGE_2_URL in fake_site.visited
    assert TEAM_C in fake_site.visited
    names = {item["teamUrl"]: item["teamName"] for item in result.items}
    assert names[TEAM_A] == "Next Gen Hockey 10U"


@pytest.mark.asyncio
async def test_max_teams_limits_each_rankings_page(app_settings):
    result, fake_site = await run_scraper(app_settings, max_teams=1)

    urls = [item["teamUrl"] for item in result.items]
    assert sorted(urls) == [TEAM_A, TEAM_C]
    assert TEAM_B not in fake_site.visited


@pytest.mark.asyncio
async def test_failed_team_page_does_not_stop_the_run(app_settings):
    pages = site()
    pages[TEAM_B] = FakeSitePage(html="", missing_selectors=("body",))
    result, fake_site = await run_scraper(app_settings, pages=pages)

    urls = {item["teamUrl"] for item in result.items}
    assert urls == {TEAM_A, TEAM_C}
    assert result.stats.requests_failed == 1
    assert result.stats.failed_urls == [TEAM_B]
    # One attempt plus max_request_retries (1)
    assert fake_site.visited.count(TEAM_B) == 2


@pytest.mark.asyncio
async def test_debug_screenshot_hook_runs_on_detail_pages_only(app_settings):
    app_settings.save_debug_screenshot = True
    app_settings.debug_screenshot_path = "debug.png"
    _, fake_site = await run_scraper(app_settings)

    shots = {page.url: page.screenshots for page in fake_site.pages}
    assert shots[TEAM_A] == ["debug.png"]
    assert shots[RANKING_URL] == []

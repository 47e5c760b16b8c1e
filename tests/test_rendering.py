import pytest

from mhr_scraper.scrapers.rendering import capture_page, wait_until_stable
from tests.fakes import ChangingPage, FakePage, FakeSitePage


@pytest.mark.asyncio
async def test_settles_once_two_samples_match():
    page = ChangingPage(changes=3)
    assert await wait_until_stable(page, timeout_secs=5, poll_interval_secs=0.001)
    # Three changing reads, then two identical ones
    assert page.reads == 5


@pytest.mark.asyncio
async def test_gives_up_at_the_deadline_when_page_keeps_changing():
    page = ChangingPage(changes=None)
    assert not await wait_until_stable(page, timeout_secs=0.05, poll_interval_secs=0.005)
    assert page.reads > 2


@pytest.mark.asyncio
async def test_zero_timeout_does_not_poll():
    page = ChangingPage(changes=None)
    assert not await wait_until_stable(page, timeout_secs=0, poll_interval_secs=0.01)
    assert page.reads == 1


@pytest.mark.asyncio
async def test_capture_page_snapshots_html_images_and_text():
    url = "https://example.com/team"
    site = {
        url: FakeSitePage(
            html="<body><h1>Team</h1><img src='/l.png'></body>",
            images=[{"src": "https://example.com/l.png", "naturalWidth": 120, "naturalHeight": 80}],
        )
    }
    snapshot = await capture_page(FakePage(site, url=url))
    assert snapshot.url == url
    assert snapshot.body_text == "Team"
    (image,) = snapshot.images
    assert (image.natural_width, image.natural_height) == (120, 80)

# mhr_scraper/storage/stub_store.py
from typing import Dict, Iterator, Optional

from loguru import logger

from mhr_scraper.models.team import TeamStub
from mhr_scraper.utils.misc_utils import normalize_url


class StubStore:
    """Run-scoped mapping of team URL -> stub captured from the rankings pages.

    Owned by the run orchestrator and handed to both page processors. The first
    stub stored for a URL wins; later duplicates (a team listed twice) are ignored.
    """

    def __init__(self) -> None:
        self._stubs: Dict[str, TeamStub] = {}

    def add(self, stub: TeamStub) -> bool:
        key = normalize_url(stub.team_url)
        if key in self._stubs:
            logger.debug(f"Stub for {stub.team_url} already stored; keeping the first.")
            return False
        self._stubs[key] = stub
        return True

    def get(self, team_url: str) -> Optional[TeamStub]:
        return self._stubs.get(normalize_url(team_url))

    def __contains__(self, team_url: str) -> bool:
        return normalize_url(team_url) in self._stubs

    def __len__(self) -> int:
        return len(self._stubs)

    def __iter__(self) -> Iterator[TeamStub]:
        return iter(self._stubs.values())

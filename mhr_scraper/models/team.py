# mhr_scraper/models/team.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_TEAM_NAME = "Unknown"


class TeamStub(BaseModel):
    """Partial team record captured from a rankings table row."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    team_name: str = Field(..., alias="teamName")
    team_url: str = Field(..., alias="teamUrl")  # Absolute URL, unique key
    rating: Optional[str] = None  # Decimal text, e.g. "92.45"
    rank: Optional[str] = None  # Integer text, e.g. "12"


class TeamDetail(BaseModel):
    """Fields resolved from a team's profile page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    city: Optional[str] = None
    state: Optional[str] = None
    full_location: Optional[str] = Field(None, alias="fullLocation")
    logo_url: Optional[str] = Field(None, alias="logoUrl")


class TeamRecord(BaseModel):
    """Output record: a stub joined with its detail page fields."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    team_name: str = Field(UNKNOWN_TEAM_NAME, alias="teamName")
    rank: Optional[str] = None
    rating: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    location: Optional[str] = None
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    team_url: str = Field(..., alias="teamUrl")

    @classmethod
    def join(
        cls, team_url: str, stub: Optional[TeamStub], detail: TeamDetail
    ) -> "TeamRecord":
        """Merges a (possibly missing) stub with detail fields for ``team_url``."""
        return cls(
            team_name=stub.team_name if stub and stub.team_name else UNKNOWN_TEAM_NAME,
            rank=stub.rank if stub else None,
            rating=stub.rating if stub else None,
            city=detail.city,
            state=detail.state,
            location=detail.full_location,
            logo_url=detail.logo_url,
            team_url=team_url,
        )

    def to_output(self) -> dict:
        """Serializes with the dataset's camelCase field names."""
        return self.model_dump(by_alias=True)

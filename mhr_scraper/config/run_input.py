from typing import Any, Optional

from apify import Actor
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mhr_scraper.config.settings import AppSettings


class RunInputError(Exception):
    """Raised when the run input cannot be validated."""

    pass


class RunInput(BaseModel):
    """Per-run input, in the shape the actor input record uses."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ranking_url: str = Field(..., alias="rankingUrl", min_length=1)
    max_teams: int = Field(0, alias="maxTeams", ge=0)  # 0 = unlimited


def parse_run_input(raw: Optional[Any], app_settings: AppSettings) -> RunInput:
    """Validates a raw input record, falling back to settings per key.

    Keys missing from the record (or a missing record) fall back to the
    ``ranking_url`` / ``max_teams`` settings.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RunInputError(f"Run input must be a JSON object, got {type(raw).__name__}")

    defaults = {
        "rankingUrl": app_settings.ranking_url,
        "maxTeams": app_settings.max_teams,
    }
    merged = {**defaults, **{k: v for k, v in raw.items() if v is not None}}
    try:
        return RunInput.model_validate(merged)
    except ValidationError as e:
        raise RunInputError(f"Invalid run input: {e}") from e


async def load_run_input(app_settings: AppSettings) -> RunInput:
    """Reads the actor input record (INPUT in the default key-value store).

    Must be called inside an initialized ``Actor`` context.
    """
    raw = await Actor.get_input()
    if raw is None:
        logger.debug("No actor input record; using settings defaults.")
    else:
        logger.info("Loaded actor input record.")
    return parse_run_input(raw, app_settings)

from functools import cached_property
from typing import List

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field


class ImageInfo(BaseModel):
    """An <img> as the browser rendered it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    src: str = ""  # Already resolved to absolute by the browser
    natural_width: int = Field(0, alias="naturalWidth")
    natural_height: int = Field(0, alias="naturalHeight")


class RenderedPage(BaseModel):
    """Snapshot of a rendered page that the extraction functions work on.

    Everything that needs a live browser (natural image sizes, visible text)
    is captured up front so extraction stays pure and testable on plain HTML.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    html: str
    images: List[ImageInfo] = []  # Document order
    body_text: str = ""

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

from enum import Enum


class RequestLabel(str, Enum):
    RANKINGS_PAGE = "RANKINGS_PAGE"
    TEAM_DETAIL = "TEAM_DETAIL"

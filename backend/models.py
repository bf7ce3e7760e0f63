from dataclasses import dataclass
from datetime import date
from datetime import datetime
from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ActivityType(str, Enum):
    COMMIT = "commit"
    PULL_REQUEST = "pull_request"
    REVIEW = "review"
    STAR_GIVEN = "star_given"
    REPO_CREATION = "repo_creation"
    FORK_MADE = "fork_made"
    ISSUE = "issue"
    OTHER = "other"


class CategoryType(str, Enum):
    HEATMAP = "Heatmap"
    STREAK = "Streak"
    BOTH = "Both"


class Activity(BaseModel):
    """One classified GitHub event."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    type: ActivityType
    repo: str


class HeatmapEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=0, le=11)
    day: int = Field(ge=1, le=31)
    category: str
    count: int = Field(ge=0)


class StreakEntry(BaseModel):
    """Day inside a streak run; `streak_count` is 1 on the last day of the run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int
    month: int = Field(ge=0, le=11)
    day: int = Field(ge=1, le=31)
    category: str
    streak_count: int = Field(ge=1, alias="streakCount")


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: CategoryType
    color: str


class Contribution(BaseModel):
    date: date
    count: int = Field(ge=0)


class UserProfile(BaseModel):
    login: str
    name: str | None = None
    avatar_url: str
    bio: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    created_at: str


class Repository(BaseModel):
    id: int
    name: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    updated_at: str = ""
    url: str


@dataclass(frozen=True)
class ActivityWindow:
    """Inclusive calendar-date range that activities are kept in."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("window start must be before or equal to end")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class DayActivity(BaseModel):
    category: str
    count: int


class DayStreak(BaseModel):
    """Streak shown on a day and whether it joins the previous/next day."""

    category: str
    streak_count: int
    continues_backward: bool
    continues_forward: bool


class CalendarDay(BaseModel):
    day: int
    count: int
    level: int = Field(ge=0, le=4)
    activities: list[DayActivity]
    streak: DayStreak | None = None


class CalendarMonth(BaseModel):
    month: int = Field(ge=0, le=11)
    name: str
    days_in_month: int
    first_weekday: int
    days: list[CalendarDay]


class CalendarYear(BaseModel):
    """Per-day rendering data of the 12-month grid of a Shamsi year."""

    year: int
    total: int
    months: list[CalendarMonth]

from datetime import date
from typing import Any

from pydantic import BaseModel

from backend.models import Repository
from backend.models import UserProfile


class RecentActivity(BaseModel):
    type: str
    repo: str
    repo_url: str
    created_at: str
    payload: dict[str, Any] | None = None


class ContributionDay(BaseModel):
    date: date
    count: int


class UserDataResponse(BaseModel):
    """Everything the story carousel renders for one GitHub user."""

    profile: UserProfile
    top_repositories: list[Repository]
    recent_activity: list[RecentActivity]
    contributions: list[ContributionDay]
    languages: dict[str, int]
    seasons: dict[str, int]
    performance_score: int
    score_category: str

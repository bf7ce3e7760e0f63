from backend.models import CalendarYear
from backend.models import Category


class CalendarResponse(CalendarYear):
    """Shamsi year grid with heatmap levels and streak bands."""

    username: str | None = None
    categories: list[Category]

import random

from backend.models import Category
from backend.models import CategoryType
from backend.models import HeatmapEntry
from backend.models import StreakEntry
from backend.services.calendar_service import streak_run
from backend.shamsi import days_in_month


SAMPLE_CATEGORIES: tuple[Category, ...] = (
    Category(name="Learning", type=CategoryType.BOTH, color="green"),
    Category(name="Exercise", type=CategoryType.BOTH, color="blue"),
    Category(name="Meditation", type=CategoryType.STREAK, color="purple"),
    Category(name="Reading", type=CategoryType.STREAK, color="amber"),
    Category(name="Coding", type=CategoryType.BOTH, color="rose"),
    Category(name="Writing", type=CategoryType.HEATMAP, color="indigo"),
    Category(name="Language", type=CategoryType.HEATMAP, color="cyan"),
)


def _heatmap_categories() -> list[Category]:
    kinds = {CategoryType.BOTH, CategoryType.HEATMAP}
    return [category for category in SAMPLE_CATEGORIES if category.type in kinds]


def _streak_categories() -> list[Category]:
    kinds = {CategoryType.BOTH, CategoryType.STREAK}
    return [category for category in SAMPLE_CATEGORIES if category.type in kinds]


def generate_heatmap_data(year: int, rng: random.Random) -> list[HeatmapEntry]:
    """Random activities on roughly 70% of the days, 1-3 per day, 1-15 items each."""

    categories = _heatmap_categories()
    data: list[HeatmapEntry] = []
    for month in range(12):
        for day in range(1, days_in_month(year, month) + 1):
            if rng.random() > 0.7:
                continue
            for _ in range(rng.randint(1, 3)):
                data.append(
                    HeatmapEntry(
                        year=year,
                        month=month,
                        day=day,
                        category=rng.choice(categories).name,
                        count=rng.randint(1, 15),
                    )
                )
    return data


def generate_streak_data(year: int, rng: random.Random) -> list[StreakEntry]:
    """Random streak runs of 3-12 days that always fit inside their month."""

    data: list[StreakEntry] = []
    for category in _streak_categories():
        for month in range(12):
            if rng.random() > 0.7:
                continue
            for _ in range(rng.randint(1, 3)):
                length = rng.randint(3, 12)
                max_start_day = days_in_month(year, month) - length + 1
                start_day = rng.randint(1, max_start_day)
                data.extend(streak_run(year, month, start_day, length, category.name))
    return data


def generate_sample_data(year: int, seed: int | None = None) -> dict[str, list]:
    rng = random.Random(seed)
    return {
        "categories": list(SAMPLE_CATEGORIES),
        "heatmap": generate_heatmap_data(year, rng),
        "streaks": generate_streak_data(year, rng),
    }

from collections import defaultdict
from collections.abc import Collection
from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import asdict
from dataclasses import dataclass
from datetime import date
from datetime import timedelta
from typing import TypeVar

from backend.models import Activity
from backend.models import ActivityType
from backend.models import ActivityWindow
from backend.models import CalendarDay
from backend.models import CalendarMonth
from backend.models import CalendarYear
from backend.models import Category
from backend.models import CategoryType
from backend.models import DayActivity
from backend.models import DayStreak
from backend.models import HeatmapEntry
from backend.models import StreakEntry
from backend.shamsi import MONTH_NAMES
from backend.shamsi import days_in_month
from backend.shamsi import first_weekday_of_month
from backend.shamsi import shamsi_date_from_offset


DayKey = tuple[int, int, int]
EntryT = TypeVar("EntryT", HeatmapEntry, StreakEntry)

ACTIVITY_CATEGORY_COLORS: dict[ActivityType, tuple[CategoryType, str]] = {
    ActivityType.COMMIT: (CategoryType.BOTH, "green"),
    ActivityType.PULL_REQUEST: (CategoryType.BOTH, "blue"),
    ActivityType.REVIEW: (CategoryType.BOTH, "purple"),
    ActivityType.STAR_GIVEN: (CategoryType.HEATMAP, "amber"),
    ActivityType.REPO_CREATION: (CategoryType.HEATMAP, "rose"),
    ActivityType.FORK_MADE: (CategoryType.HEATMAP, "indigo"),
    ActivityType.ISSUE: (CategoryType.BOTH, "cyan"),
    ActivityType.OTHER: (CategoryType.HEATMAP, "slate"),
}

ACTIVITY_CATEGORIES: tuple[Category, ...] = tuple(
    Category(name=kind.value, type=category_type, color=color)
    for kind, (category_type, color) in ACTIVITY_CATEGORY_COLORS.items()
)


@dataclass(frozen=True)
class StreakInfo:
    """Streak shown on one day and whether it joins its neighbours visually."""

    category: str
    streak_count: int
    continues_backward: bool
    continues_forward: bool


def intensity_level(total: int) -> int:
    """Map a daily activity total to a heatmap level in range 0..4."""

    if total <= 0:
        return 0
    if total <= 2:
        return 1
    if total <= 5:
        return 2
    if total <= 10:
        return 3
    return 4


def filter_by_categories(
    entries: Iterable[EntryT],
    include: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
) -> list[EntryT]:
    """Keep entries whose category is in `include` and not in `exclude`.

    A missing `include` keeps every category.
    """

    return [
        entry
        for entry in entries
        if (include is None or entry.category in include)
        and (exclude is None or entry.category not in exclude)
    ]


def group_by_day(entries: Iterable[EntryT]) -> dict[DayKey, list[EntryT]]:
    """Index entries by (year, month, day), keeping input order per day."""

    grouped: dict[DayKey, list[EntryT]] = defaultdict(list)
    for entry in entries:
        grouped[(entry.year, entry.month, entry.day)].append(entry)
    return grouped


def day_intensity(
    heatmap: Sequence[HeatmapEntry], year: int, month: int, day: int
) -> int:
    total = sum(
        entry.count
        for entry in heatmap
        if (entry.year, entry.month, entry.day) == (year, month, day)
    )
    return intensity_level(total)


def _resolve_streak(
    streaks_by_day: dict[DayKey, list[StreakEntry]], year: int, month: int, day: int
) -> StreakInfo | None:
    candidates = streaks_by_day.get((year, month, day), [])
    if not candidates:
        return None

    # max() returns the first maximal item, so ties keep input order.
    longest = max(candidates, key=lambda entry: entry.streak_count)

    previous_day = day - 1
    previous = (
        streaks_by_day.get((year, month, previous_day), [])
        if previous_day > 0
        else []
    )
    continues_backward = any(
        entry.category == longest.category
        and entry.streak_count == longest.streak_count + 1
        for entry in previous
    )

    next_day = day + 1
    following = (
        streaks_by_day.get((year, month, next_day), [])
        if next_day <= days_in_month(year, month)
        else []
    )
    continues_forward = any(
        entry.category == longest.category
        and entry.streak_count == longest.streak_count - 1
        for entry in following
    )

    return StreakInfo(
        category=longest.category,
        streak_count=longest.streak_count,
        continues_backward=continues_backward,
        continues_forward=continues_forward,
    )


def resolve_streak(
    streaks: Iterable[StreakEntry], year: int, month: int, day: int
) -> StreakInfo | None:
    """Return the longest streak on a day and how it connects to its neighbours.

    Neighbours in another month are never joined.
    """

    return _resolve_streak(group_by_day(streaks), year, month, day)


def streak_run(
    year: int, month: int, start_day: int, length: int, category: str
) -> list[StreakEntry]:
    """Build the entries of one run; counts go from `length` down to 1."""

    return [
        StreakEntry(
            year=year,
            month=month,
            day=start_day + index,
            category=category,
            streak_count=length - index,
        )
        for index in range(length)
    ]


def _active_days_by_category(
    activities: Iterable[Activity], window: ActivityWindow
) -> dict[str, dict[date, int]]:
    by_category: dict[str, dict[date, int]] = defaultdict(lambda: defaultdict(int))
    for activity in activities:
        day = activity.date.date()
        if not window.contains(day):
            continue
        by_category[activity.type.value][day] += 1
    return by_category


def heatmap_entries_from_activities(
    activities: Iterable[Activity], window: ActivityWindow, shamsi_year: int
) -> list[HeatmapEntry]:
    """Count activities per Shamsi day and activity type."""

    entries: list[HeatmapEntry] = []
    by_category = _active_days_by_category(activities, window)
    for category in sorted(by_category):
        for day, count in sorted(by_category[category].items()):
            shamsi_day = shamsi_date_from_offset(day, window.start, shamsi_year)
            if shamsi_day is None:
                continue
            year, month, month_day = shamsi_day
            entries.append(
                HeatmapEntry(
                    year=year,
                    month=month,
                    day=month_day,
                    category=category,
                    count=count,
                )
            )
    return entries


def _consecutive_runs(days: Iterable[date]) -> list[list[date]]:
    runs: list[list[date]] = []
    for day in sorted(days):
        if runs and day - runs[-1][-1] == timedelta(days=1):
            runs[-1].append(day)
        else:
            runs.append([day])
    return runs


def streak_entries_from_activities(
    activities: Iterable[Activity],
    window: ActivityWindow,
    shamsi_year: int,
    min_length: int = 2,
) -> list[StreakEntry]:
    """Turn runs of consecutive active days into streak entries per category.

    Runs may cross month boundaries; rendering still breaks the band there.
    """

    entries: list[StreakEntry] = []
    by_category = _active_days_by_category(activities, window)
    for category in sorted(by_category):
        for run in _consecutive_runs(by_category[category]):
            if len(run) < min_length:
                continue
            for index, day in enumerate(run):
                shamsi_day = shamsi_date_from_offset(day, window.start, shamsi_year)
                if shamsi_day is None:
                    continue
                year, month, month_day = shamsi_day
                entries.append(
                    StreakEntry(
                        year=year,
                        month=month,
                        day=month_day,
                        category=category,
                        streak_count=len(run) - index,
                    )
                )
    return entries


def build_calendar(
    year: int,
    heatmap: Iterable[HeatmapEntry],
    streaks: Iterable[StreakEntry],
    include: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
) -> CalendarYear:
    """Build per-day rendering data for the 12-month grid of a Shamsi year."""

    heatmap_by_day = group_by_day(filter_by_categories(heatmap, include, exclude))
    streaks_by_day = group_by_day(filter_by_categories(streaks, include, exclude))

    months: list[CalendarMonth] = []
    total = 0
    for month in range(12):
        length = days_in_month(year, month)
        days: list[CalendarDay] = []
        for day in range(1, length + 1):
            activities = heatmap_by_day.get((year, month, day), [])
            count = sum(entry.count for entry in activities)
            total += count
            streak = _resolve_streak(streaks_by_day, year, month, day)
            days.append(
                CalendarDay(
                    day=day,
                    count=count,
                    level=intensity_level(count),
                    activities=[
                        DayActivity(category=entry.category, count=entry.count)
                        for entry in activities
                    ],
                    streak=DayStreak(**asdict(streak)) if streak else None,
                )
            )
        months.append(
            CalendarMonth(
                month=month,
                name=MONTH_NAMES[month],
                days_in_month=length,
                first_weekday=first_weekday_of_month(year, month),
                days=days,
            )
        )

    return CalendarYear(year=year, total=total, months=months)

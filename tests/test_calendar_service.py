from datetime import date
from datetime import datetime
from datetime import UTC

import pytest

from backend.models import Activity
from backend.models import ActivityType
from backend.models import ActivityWindow
from backend.models import DayActivity
from backend.models import DayStreak
from backend.models import HeatmapEntry
from backend.models import StreakEntry
from backend.services.calendar_service import StreakInfo
from backend.services.calendar_service import build_calendar
from backend.services.calendar_service import day_intensity
from backend.services.calendar_service import filter_by_categories
from backend.services.calendar_service import heatmap_entries_from_activities
from backend.services.calendar_service import intensity_level
from backend.services.calendar_service import resolve_streak
from backend.services.calendar_service import streak_entries_from_activities
from backend.services.calendar_service import streak_run
from backend.services.sample_data import SAMPLE_CATEGORIES
from backend.services.sample_data import generate_sample_data


YEAR = 1403
WINDOW = ActivityWindow(date(2024, 3, 21), date(2025, 3, 20))


def activity(day: date, kind: ActivityType = ActivityType.COMMIT) -> Activity:
    return Activity(
        date=datetime(day.year, day.month, day.day, 12, tzinfo=UTC),
        type=kind,
        repo="octocat/hello",
    )


def heat(day: int, count: int, category: str = "Coding", month: int = 0) -> HeatmapEntry:
    return HeatmapEntry(year=YEAR, month=month, day=day, category=category, count=count)


def streak(day: int, count: int, category: str = "Coding", month: int = 0) -> StreakEntry:
    return StreakEntry(year=YEAR, month=month, day=day, category=category, streak_count=count)


@pytest.mark.parametrize(
    ("total", "level"),
    [(0, 0), (1, 1), (2, 1), (3, 2), (5, 2), (6, 3), (10, 3), (11, 4)],
)
def test_intensity_level_thresholds(total: int, level: int) -> None:
    assert intensity_level(total) == level


def test_day_intensity_sums_entries_of_the_same_day() -> None:
    heatmap = [heat(3, 2), heat(3, 2, "Reading"), heat(4, 20), heat(3, 20, month=1)]

    assert day_intensity(heatmap, YEAR, 0, 3) == 2
    assert day_intensity(heatmap, YEAR, 0, 5) == 0


def test_streak_run_counts_down_to_one() -> None:
    run = streak_run(YEAR, 2, 10, 5, "Reading")

    assert [(e.day, e.streak_count) for e in run] == [
        (10, 5), (11, 4), (12, 3), (13, 2), (14, 1),
    ]
    assert {e.category for e in run} == {"Reading"}


def test_resolve_streak_joins_inside_a_run() -> None:
    run = streak_run(YEAR, 0, 10, 3, "Coding")

    assert resolve_streak(run, YEAR, 0, 10) == StreakInfo("Coding", 3, False, True)
    assert resolve_streak(run, YEAR, 0, 11) == StreakInfo("Coding", 2, True, True)
    assert resolve_streak(run, YEAR, 0, 12) == StreakInfo("Coding", 1, True, False)
    assert resolve_streak(run, YEAR, 0, 13) is None


def test_resolve_streak_picks_longest_and_keeps_first_on_ties() -> None:
    entries = [streak(5, 2, "Reading"), streak(5, 4, "Coding"), streak(5, 4, "Exercise")]

    info = resolve_streak(entries, YEAR, 0, 5)

    assert info is not None
    assert info.category == "Coding"
    assert info.streak_count == 4


def test_resolve_streak_requires_matching_category_and_delta() -> None:
    entries = [streak(5, 2, "Coding"), streak(4, 3, "Reading"), streak(6, 2, "Coding")]

    info = resolve_streak(entries, YEAR, 0, 5)

    assert info == StreakInfo("Coding", 2, False, False)


def test_resolve_streak_does_not_join_across_months() -> None:
    entries = [streak(31, 2, month=0), streak(1, 1, month=1)]

    assert resolve_streak(entries, YEAR, 0, 31) == StreakInfo("Coding", 2, False, False)
    assert resolve_streak(entries, YEAR, 1, 1) == StreakInfo("Coding", 1, False, False)


def test_filter_by_categories_include_and_exclude() -> None:
    entries = [heat(1, 1, "Coding"), heat(1, 1, "Reading"), heat(2, 1, "Writing")]

    included = filter_by_categories(entries, include={"Coding", "Writing"})
    excluded = filter_by_categories(entries, exclude={"Coding"})

    assert [e.category for e in included] == ["Coding", "Writing"]
    assert [e.category for e in excluded] == ["Reading", "Writing"]
    assert filter_by_categories(entries) == entries


def test_filter_by_categories_is_idempotent() -> None:
    data = generate_sample_data(YEAR, seed=7)
    include = {"Coding", "Meditation"}

    for entries in (data["heatmap"], data["streaks"]):
        once = filter_by_categories(entries, include=include)
        assert filter_by_categories(once, include=include) == once


def test_heatmap_entries_from_activities_counts_per_day_and_type() -> None:
    activities = [
        activity(date(2024, 3, 21)),
        activity(date(2024, 3, 21)),
        activity(date(2024, 3, 21), ActivityType.REVIEW),
        activity(date(2024, 4, 21)),
        activity(date(2023, 1, 1)),
    ]

    entries = heatmap_entries_from_activities(activities, WINDOW, YEAR)

    assert entries == [
        HeatmapEntry(year=YEAR, month=0, day=1, category="commit", count=2),
        HeatmapEntry(year=YEAR, month=1, day=1, category="commit", count=1),
        HeatmapEntry(year=YEAR, month=0, day=1, category="review", count=1),
    ]


def test_streak_entries_from_activities_builds_runs() -> None:
    days = [date(2024, 3, 22), date(2024, 3, 23), date(2024, 3, 24), date(2024, 3, 26)]
    activities = [activity(day) for day in days] + [activity(date(2024, 3, 23))]

    entries = streak_entries_from_activities(activities, WINDOW, YEAR)

    assert [(e.day, e.streak_count) for e in entries] == [(2, 3), (3, 2), (4, 1)]
    assert {e.category for e in entries} == {"commit"}


def test_streak_entries_cross_month_boundary() -> None:
    activities = [activity(date(2024, 4, 20)), activity(date(2024, 4, 21))]

    entries = streak_entries_from_activities(activities, WINDOW, YEAR)

    assert [(e.month, e.day, e.streak_count) for e in entries] == [(0, 31, 2), (1, 1, 1)]


def test_build_calendar_covers_twelve_months() -> None:
    calendar = build_calendar(YEAR, [], [])

    months = calendar.months
    assert len(months) == 12
    assert [m.days_in_month for m in months][-1] == 30
    assert sum(len(m.days) for m in months) == 366
    assert months[0].name == "Farvardin"
    assert calendar.year == YEAR
    assert calendar.total == 0


def test_build_calendar_applies_filter_before_aggregation() -> None:
    heatmap = [heat(1, 2, "Coding"), heat(1, 9, "Reading")]
    streaks = [streak(1, 1, "Reading")]

    calendar = build_calendar(YEAR, heatmap, streaks, include={"Coding"})

    first_day = calendar.months[0].days[0]
    assert first_day.count == 2
    assert first_day.level == 1
    assert first_day.activities == [DayActivity(category="Coding", count=2)]
    assert first_day.streak is None
    assert calendar.total == 2


def test_build_calendar_drops_excluded_categories() -> None:
    heatmap = [heat(1, 2, "Coding"), heat(1, 9, "Reading")]
    streaks = [streak(1, 1, "Coding")]

    calendar = build_calendar(YEAR, heatmap, streaks, exclude={"Coding"})

    first_day = calendar.months[0].days[0]
    assert first_day.activities == [DayActivity(category="Reading", count=9)]
    assert first_day.level == 3
    assert first_day.streak is None
    assert calendar.total == 9


def test_build_calendar_reports_streak_joins() -> None:
    calendar = build_calendar(YEAR, [], streak_run(YEAR, 3, 4, 2, "Coding"))

    days = calendar.months[3].days
    assert days[3].streak == DayStreak(
        category="Coding",
        streak_count=2,
        continues_backward=False,
        continues_forward=True,
    )
    assert days[4].streak is not None
    assert days[4].streak.continues_backward is True
    assert days[4].streak.continues_forward is False


def test_sample_data_is_reproducible_and_well_formed() -> None:
    first = generate_sample_data(YEAR, seed=42)
    second = generate_sample_data(YEAR, seed=42)

    assert first == second
    assert first["categories"] == list(SAMPLE_CATEGORIES)
    assert all(1 <= e.count <= 15 for e in first["heatmap"])
    heatmap_names = {"Learning", "Exercise", "Coding", "Writing", "Language"}
    assert {e.category for e in first["heatmap"]} <= heatmap_names
    for entry in first["streaks"]:
        assert entry.streak_count >= 1
        assert entry.category not in {"Writing", "Language"}

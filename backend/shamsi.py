from datetime import date


MONTH_NAMES = (
    "Farvardin",
    "Ordibehesht",
    "Khordad",
    "Tir",
    "Mordad",
    "Shahrivar",
    "Mehr",
    "Aban",
    "Azar",
    "Dey",
    "Bahman",
    "Esfand",
)

SEASONS: dict[str, tuple[int, ...]] = {
    "Spring": (0, 1, 2),
    "Summer": (3, 4, 5),
    "Fall": (6, 7, 8),
    "Winter": (9, 10, 11),
}

_LEAP_REMAINDERS = frozenset({1, 5, 9, 13, 17, 22, 26, 30})


def is_leap_year(year: int) -> bool:
    """Return whether a Shamsi year is a leap year.

    Uses the 33-year cycle approximation, which drifts from the astronomical
    calendar for some years.
    """

    return year % 33 in _LEAP_REMAINDERS


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a zero-based Shamsi month."""

    if month < 6:
        return 31
    if month < 11:
        return 30
    return 30 if is_leap_year(year) else 29


def first_weekday_of_month(year: int, month: int) -> int:
    """Return the grid offset of day 1 (0 = Saturday, 6 = Friday).

    Placeholder heuristic, not a Jalali to Gregorian conversion. Callers that
    need the real weekday must use a proper conversion library.
    """

    return ((year % 4) * 2 + month) % 7


def format_shamsi_date(year: int, month: int, day: int) -> str:
    return f"{year}/{month + 1}/{day}"


def season_for_month(month: int) -> str:
    for name, months in SEASONS.items():
        if month in months:
            return name
    raise ValueError(f"month out of range: {month}")


def shamsi_date_from_offset(
    day: date, window_start: date, shamsi_year: int
) -> tuple[int, int, int] | None:
    """Map a Gregorian day onto the Shamsi year that begins at `window_start`.

    `window_start` must be 1 Farvardin of `shamsi_year`. Returns
    `(year, month, day)` or None when the day falls outside that year.
    """

    offset = (day - window_start).days
    if offset < 0:
        return None

    for month in range(12):
        length = days_in_month(shamsi_year, month)
        if offset < length:
            return shamsi_year, month, offset + 1
        offset -= length

    return None

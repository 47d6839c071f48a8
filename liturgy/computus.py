# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Easter computation and the feasts that move with it
"""
from datetime import date, timedelta

# First full year of the Gregorian calendar
FIRST_GREGORIAN_YEAR = 1583

# Offsets in days from Easter Sunday
ASH_WEDNESDAY_OFFSET = -46
PALM_SUNDAY_OFFSET = -7
HOLY_THURSDAY_OFFSET = -3
GOOD_FRIDAY_OFFSET = -2
EASTER_VIGIL_OFFSET = -1
ASCENSION_OFFSET = 39
PENTECOST_OFFSET = 49
TRINITY_SUNDAY_OFFSET = 56
CORPUS_CHRISTI_OFFSET = 60


def calculate_easter(year: int) -> date:
    """
    Easter Sunday for a Gregorian year (anonymous Gregorian algorithm).

    Integer arithmetic only, e.g. 2024 -> March 31, 2025 -> April 20.

    Raises:
        ValueError: for years before the Gregorian reform or beyond date range
    """
    if not isinstance(year, int) or year < FIRST_GREGORIAN_YEAR or year > date.max.year:
        raise ValueError(f"Easter is only computed for Gregorian years {FIRST_GREGORIAN_YEAR}-{date.max.year}, got {year!r}")

    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1

    return date(year, month, day)


def relative_to_easter(year: int, offset_days: int) -> date:
    """Date a number of days before (negative) or after Easter"""
    return calculate_easter(year) + timedelta(days=offset_days)


def advent_start(year: int) -> date:
    """
    First Sunday of Advent, derived from the Sunday on or after Christmas.

    Steps back one week from that Sunday to get the 4th Sunday of Advent,
    then three more weeks.
    """
    christmas = date(year, 12, 25)
    # Sunday=0 .. Saturday=6
    day_of_week = (christmas.weekday() + 1) % 7
    days_to_sunday = 0 if day_of_week == 0 else 7 - day_of_week
    fourth_sunday = christmas + timedelta(days=days_to_sunday - 7)
    return fourth_sunday - timedelta(days=21)

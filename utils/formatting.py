# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Time-of-day arithmetic, date display helpers and fuzzy string matching
"""
import logging
import re
from datetime import date, datetime
from typing import Optional

logger = logging.getLogger(__name__)

# Mon=0 .. Sun=6, same indexing as date.weekday()
WEEKDAY_NAMES = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')
MONTH_ABBREVIATIONS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                       'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

_TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})(?::\d{2})?$')
_NON_WORD = re.compile(r'[^\w\s]')


# =============================================================================
# TIME OF DAY
# =============================================================================

def time_to_minutes(value: Optional[str]) -> Optional[int]:
    """
    Convert an 'HH:MM' (or 'HH:MM:SS') string to minutes after midnight.

    Returns None for missing or malformed values so callers can skip them.
    """
    if not value or not isinstance(value, str):
        return None
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        logger.debug(f"Unparseable time of day: {value!r}")
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        logger.debug(f"Out of range time of day: {value!r}")
        return None
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes after midnight as 'HH:MM' (wraps past midnight)"""
    minutes = minutes % (24 * 60)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(value: str, minutes: int) -> Optional[str]:
    """Shift an 'HH:MM' time by a number of minutes"""
    start = time_to_minutes(value)
    if start is None:
        return None
    return minutes_to_time(start + minutes)


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open [start, end) intersection test; touching endpoints do not overlap"""
    return start1 < end2 and start2 < end1


# =============================================================================
# CALENDAR DATES
# =============================================================================

def parse_iso_date(value) -> Optional[date]:
    """Parse 'YYYY-MM-DD' (a trailing time part is ignored); None on failure"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.debug(f"Unparseable calendar date: {value!r}")
        return None


def weekday_name(day: date) -> str:
    """English weekday name, independent of the process locale"""
    return WEEKDAY_NAMES[day.weekday()]


def format_display_date(day: date) -> str:
    """Format a date like 'Sunday, Mar 31'"""
    return f"{weekday_name(day)}, {MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'"""
    if 10 <= n % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f"{n}{suffix}"


# =============================================================================
# FUZZY MATCHING
# =============================================================================

def levenshtein_distance(str1: str, str2: str) -> int:
    """Edit distance (insertions, deletions, substitutions all cost 1)"""
    if len(str1) < len(str2):
        str1, str2 = str2, str1
    if not str2:
        return len(str1)

    previous = list(range(len(str2) + 1))
    for i, char1 in enumerate(str1, start=1):
        current = [i]
        for j, char2 in enumerate(str2, start=1):
            if char1 == char2:
                current.append(previous[j - 1])
            else:
                current.append(min(
                    previous[j - 1] + 1,  # substitution
                    current[j - 1] + 1,   # insertion
                    previous[j] + 1       # deletion
                ))
        previous = current
    return previous[-1]


def string_similarity(str1: str, str2: str) -> float:
    """
    Similarity in [0, 1] relative to the longer string.

    Two empty strings are identical (1.0).
    """
    longer, shorter = (str1, str2) if len(str1) > len(str2) else (str2, str1)
    if len(longer) == 0:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def normalize_for_match(text: Optional[str]) -> str:
    """Lowercase and strip punctuation before comparing free text"""
    if not text:
        return ""
    return _NON_WORD.sub('', text.lower())


def is_close_match(query: str, candidate: str, threshold: float = 0.8) -> bool:
    """True when a free-text query and a candidate (e.g. a geocoded address) agree closely"""
    similarity = string_similarity(normalize_for_match(query), normalize_for_match(candidate))
    return similarity > threshold

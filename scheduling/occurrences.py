# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Occurrence Expander - Turn an event's schedule into concrete dated time slots
"""
import logging
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Set

import config
from models import RepeatFrequency, WeekDay
from utils.formatting import (
    time_to_minutes, minutes_to_time, intervals_overlap, parse_iso_date, weekday_name
)
from utils.timezone import get_parish_today

logger = logging.getLogger(__name__)


class Occurrence:
    """
    One dated time slot of an event.

    The end of the slot defaults to start + DEFAULT_EVENT_DURATION_MINUTES when
    the schedule has no end time; overlap tests always use the resolved end.
    """

    def __init__(self, day: date, start_time: str, end_time: Optional[str] = None):
        self.date = day
        self.start_time = start_time
        self.end_time = end_time
        self.start_minutes = time_to_minutes(start_time)

        end_minutes = time_to_minutes(end_time) if end_time else None
        if end_minutes is None:
            end_minutes = self.start_minutes + config.DEFAULT_EVENT_DURATION_MINUTES
        self.end_minutes = end_minutes

    @property
    def resolved_end_time(self) -> str:
        return self.end_time or minutes_to_time(self.end_minutes)

    def overlaps(self, other: 'Occurrence') -> bool:
        """Same calendar date and intersecting [start, end) intervals"""
        if self.date != other.date:
            return False
        return intervals_overlap(self.start_minutes, self.end_minutes,
                                 other.start_minutes, other.end_minutes)

    def to_dict(self) -> Dict:
        return {
            'date': self.date.isoformat(),
            'startTime': self.start_time,
            'endTime': self.resolved_end_time
        }

    def __eq__(self, other):
        if not isinstance(other, Occurrence):
            return NotImplemented
        return (self.date, self.start_minutes, self.end_minutes) == \
            (other.date, other.start_minutes, other.end_minutes)

    def __hash__(self):
        return hash((self.date, self.start_minutes, self.end_minutes))

    def __repr__(self):
        return f"Occurrence({self.date.isoformat()} {self.start_time}-{self.resolved_end_time})"


def occurrences_overlap(first: Occurrence, second: Occurrence) -> bool:
    return first.overlaps(second)


def normalize_day_name(value) -> Optional[str]:
    # Accept 'Monday', 'monday' and schema.org day URLs
    if not value or not isinstance(value, str):
        return None
    try:
        return WeekDay(value.rsplit('/', 1)[-1].strip().capitalize()).value
    except ValueError:
        logger.debug(f"Ignoring unknown weekday {value!r}")
        return None


class OccurrenceExpander:
    """Expands one-off and weekly-recurring events into occurrences"""

    def __init__(self, today_provider: Optional[Callable[[], date]] = None,
                 lookahead_days: Optional[int] = None, max_days: Optional[int] = None):
        self.today_provider = today_provider or get_parish_today
        self.lookahead_days = config.DEFAULT_LOOKAHEAD_DAYS if lookahead_days is None else lookahead_days
        self.max_days = config.MAX_EXPANSION_DAYS if max_days is None else max_days

    def expand(self, event: Dict) -> List[Occurrence]:
        """
        All occurrences of an event inside its window.

        Returns an empty list (never raises) when the event has no usable start
        time, no usable date, or an empty weekday set.
        """
        schedule = event.get('schedule') or {}
        if not isinstance(schedule, dict):
            return []

        start_time = schedule.get('startTime')
        if not start_time:
            return []
        if time_to_minutes(start_time) is None:
            logger.warning(f"Skipping event '{event.get('id')}': unparseable start time {start_time!r}")
            return []

        end_time = schedule.get('endTime') or None
        if end_time and time_to_minutes(end_time) is None:
            logger.warning(f"Event '{event.get('id')}': ignoring unparseable end time {end_time!r}")
            end_time = None

        if event.get('isRecurring'):
            return self._expand_recurring(event, schedule, start_time, end_time)
        return self._expand_single(event, start_time, end_time)

    def _expand_single(self, event: Dict, start_time: str, end_time: Optional[str]) -> List[Occurrence]:
        specific_date = parse_iso_date(event.get('specificDate'))
        if specific_date is None:
            if event.get('specificDate'):
                logger.warning(f"Skipping event '{event.get('id')}': unparseable date {event.get('specificDate')!r}")
            return []
        return [Occurrence(specific_date, start_time, end_time)]

    def _expand_recurring(self, event: Dict, schedule: Dict,
                          start_time: str, end_time: Optional[str]) -> List[Occurrence]:
        days = {normalize_day_name(day) for day in schedule.get('byDay') or []}
        days.discard(None)
        if not days:
            return []

        frequency = schedule.get('repeatFrequency')
        if frequency and frequency != RepeatFrequency.WEEKLY.value:
            logger.debug(f"Event '{event.get('id')}': repeatFrequency {frequency!r} expanded as weekly")

        window_start, window_end = self._resolve_window(event, schedule)
        if window_start is None or window_end < window_start:
            return []

        excluded = self._excluded_dates(schedule)
        occurrences = []
        for offset in range((window_end - window_start).days + 1):
            current = window_start + timedelta(days=offset)
            if weekday_name(current) in days and current not in excluded:
                occurrences.append(Occurrence(current, start_time, end_time))

        return occurrences

    def _resolve_window(self, event: Dict, schedule: Dict):
        today = self.today_provider()

        start_raw = schedule.get('startDate')
        window_start = parse_iso_date(start_raw) if start_raw else today
        if window_start is None:
            logger.warning(f"Skipping event '{event.get('id')}': unparseable window start {start_raw!r}")
            return None, None

        end_raw = schedule.get('endDate')
        window_end = parse_iso_date(end_raw) if end_raw else None
        if window_end is None:
            if end_raw:
                logger.warning(f"Event '{event.get('id')}': unparseable window end {end_raw!r}, using default")
            window_end = today + timedelta(days=self.lookahead_days)

        if (window_end - window_start).days + 1 > self.max_days:
            logger.warning(
                f"Event '{event.get('id')}': window {window_start} to {window_end} "
                f"truncated to {self.max_days} days"
            )
            window_end = window_start + timedelta(days=self.max_days - 1)

        return window_start, window_end

    def _excluded_dates(self, schedule: Dict) -> Set[date]:
        excluded = set()
        for value in schedule.get('exceptDates') or []:
            parsed = parse_iso_date(value)
            if parsed is not None:
                excluded.add(parsed)
        return excluded

"""
Occurrence expansion tests

The expander is driven by a fixed "today" so recurring windows are
deterministic. 2024-03-04 is a Monday.
"""

import pytest
from datetime import date
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scheduling.occurrences import (
    Occurrence, OccurrenceExpander, occurrences_overlap, normalize_day_name
)

TODAY = date(2024, 3, 4)


@pytest.fixture
def expander():
    return OccurrenceExpander(today_provider=lambda: TODAY)


def make_event(**overrides):
    event = {
        'id': 'evt-1',
        'eventType': 'mass',
        'isRecurring': False,
        'specificDate': '2024-03-31',
        'schedule': {'startTime': '10:00', 'endTime': '11:00'}
    }
    event.update(overrides)
    return event


class TestOccurrence:

    @pytest.mark.occurrence
    def test_default_end_is_one_hour(self):
        occurrence = Occurrence(date(2024, 3, 31), '10:00')
        assert occurrence.end_minutes == 660
        assert occurrence.resolved_end_time == '11:00'
        assert occurrence.to_dict() == {'date': '2024-03-31', 'startTime': '10:00', 'endTime': '11:00'}

    @pytest.mark.occurrence
    def test_overlap_is_symmetric(self):
        first = Occurrence(date(2024, 3, 31), '10:00', '11:00')
        second = Occurrence(date(2024, 3, 31), '10:30', '11:30')
        assert occurrences_overlap(first, second)
        assert occurrences_overlap(second, first)

    @pytest.mark.occurrence
    def test_touching_slots_do_not_overlap(self):
        first = Occurrence(date(2024, 3, 31), '10:00', '11:00')
        second = Occurrence(date(2024, 3, 31), '11:00', '12:00')
        assert not first.overlaps(second)

    @pytest.mark.occurrence
    def test_different_dates_never_overlap(self):
        first = Occurrence(date(2024, 3, 31), '10:00', '11:00')
        second = Occurrence(date(2024, 4, 1), '10:00', '11:00')
        assert not first.overlaps(second)

    @pytest.mark.occurrence
    def test_default_end_used_for_overlap(self):
        open_ended = Occurrence(date(2024, 3, 31), '10:00')
        later = Occurrence(date(2024, 3, 31), '10:59', '11:30')
        assert open_ended.overlaps(later)


class TestDayNames:

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [
        ('Sunday', 'Sunday'),
        ('sunday', 'Sunday'),
        ('https://schema.org/Sunday', 'Sunday'),
        ('Funday', None),
        ('', None),
        (None, None),
    ])
    def test_normalize_day_name(self, value, expected):
        assert normalize_day_name(value) == expected


class TestSingleEvents:

    @pytest.mark.occurrence
    def test_one_off_event(self, expander):
        occurrences = expander.expand(make_event())
        assert occurrences == [Occurrence(date(2024, 3, 31), '10:00', '11:00')]

    @pytest.mark.occurrence
    def test_missing_start_time_yields_nothing(self, expander):
        assert expander.expand(make_event(schedule={})) == []
        assert expander.expand(make_event(schedule=None)) == []

    @pytest.mark.occurrence
    def test_unparseable_start_time_yields_nothing(self, expander):
        assert expander.expand(make_event(schedule={'startTime': '25:99'})) == []

    @pytest.mark.occurrence
    def test_bad_end_time_falls_back_to_default(self, expander):
        occurrences = expander.expand(make_event(schedule={'startTime': '10:00', 'endTime': 'later'}))
        assert len(occurrences) == 1
        assert occurrences[0].resolved_end_time == '11:00'

    @pytest.mark.occurrence
    def test_missing_or_bad_date_yields_nothing(self, expander):
        assert expander.expand(make_event(specificDate=None)) == []
        assert expander.expand(make_event(specificDate='someday')) == []


class TestRecurringEvents:

    @pytest.mark.occurrence
    def test_default_window_is_today_plus_thirty(self, expander):
        event = make_event(isRecurring=True, specificDate=None, schedule={
            'startTime': '09:00',
            'byDay': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
        })
        occurrences = expander.expand(event)
        assert len(occurrences) == 31
        assert occurrences[0].date == TODAY
        assert occurrences[-1].date == date(2024, 4, 3)

    @pytest.mark.occurrence
    def test_weekday_filter(self, expander):
        event = make_event(isRecurring=True, schedule={'startTime': '10:00', 'byDay': ['Sunday']})
        dates = [o.date for o in expander.expand(event)]
        assert dates == [date(2024, 3, 10), date(2024, 3, 17), date(2024, 3, 24), date(2024, 3, 31)]

    @pytest.mark.occurrence
    def test_recurring_flag_ignores_specific_date(self, expander):
        event = make_event(isRecurring=True, specificDate='2024-03-05',
                           schedule={'startTime': '10:00', 'byDay': ['Sunday']})
        assert date(2024, 3, 5) not in [o.date for o in expander.expand(event)]

    @pytest.mark.occurrence
    def test_except_dates_are_skipped(self, expander):
        event = make_event(isRecurring=True, schedule={
            'startTime': '10:00',
            'byDay': ['https://schema.org/Sunday'],
            'exceptDates': ['2024-03-17', 'not-a-date']
        })
        dates = [o.date for o in expander.expand(event)]
        assert date(2024, 3, 17) not in dates
        assert len(dates) == 3

    @pytest.mark.occurrence
    def test_explicit_window(self, expander):
        event = make_event(isRecurring=True, schedule={
            'startTime': '18:00',
            'byDay': ['Friday'],
            'startDate': '2024-02-14',
            'endDate': '2024-03-28'
        })
        dates = [o.date for o in expander.expand(event)]
        assert dates[0] == date(2024, 2, 16)
        assert dates[-1] == date(2024, 3, 22)
        assert len(dates) == 6

    @pytest.mark.occurrence
    def test_empty_weekday_set_yields_nothing(self, expander):
        event = make_event(isRecurring=True, schedule={'startTime': '10:00', 'byDay': []})
        assert expander.expand(event) == []
        event = make_event(isRecurring=True, schedule={'startTime': '10:00', 'byDay': ['', None]})
        assert expander.expand(event) == []

    @pytest.mark.occurrence
    def test_inverted_window_yields_nothing(self, expander):
        event = make_event(isRecurring=True, schedule={
            'startTime': '10:00', 'byDay': ['Sunday'],
            'startDate': '2024-06-01', 'endDate': '2024-05-01'
        })
        assert expander.expand(event) == []

    @pytest.mark.occurrence
    def test_long_window_is_truncated(self):
        expander = OccurrenceExpander(today_provider=lambda: TODAY, max_days=10)
        event = make_event(isRecurring=True, schedule={
            'startTime': '10:00',
            'byDay': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'],
            'startDate': '2024-01-01',
            'endDate': '2024-12-31'
        })
        occurrences = expander.expand(event)
        assert len(occurrences) == 10
        assert occurrences[-1].date == date(2024, 1, 10)

    @pytest.mark.occurrence
    def test_window_ending_at_last_representable_date(self, expander):
        event = make_event(isRecurring=True, schedule={
            'startTime': '10:00',
            'byDay': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'],
            'startDate': '9999-12-20',
            'endDate': '9999-12-31'
        })
        occurrences = expander.expand(event)
        assert len(occurrences) == 12
        assert occurrences[-1].date == date.max

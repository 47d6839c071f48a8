"""
Conflict detection tests

All checks run against a fixed "today" of Monday 2024-03-04, so the
priest-workload week is Sunday 2024-03-03 through Saturday 2024-03-09.
"""

import json
import pytest
from datetime import date
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import ConflictType, Severity
from scheduling import ConflictCheckOptions, ConflictDetectionService, summarize_conflicts

TODAY = date(2024, 3, 4)

PRIESTS = [
    {'id': 'p1', 'name': 'Fr. Smith'},
    {'id': 'p2', 'name': 'Fr. Jones'},
]
LOCATIONS = [
    {'id': 'loc1', 'name': 'Main Church'},
    {'id': 'loc2', 'name': 'Chapel'},
]


@pytest.fixture
def service():
    return ConflictDetectionService(today_provider=lambda: TODAY)


def one_off(event_id, day, start, end=None, **fields):
    schedule = {'startTime': start}
    if end:
        schedule['endTime'] = end
    event = {
        'id': event_id,
        'eventType': 'meeting',
        'isRecurring': False,
        'specificDate': day,
        'schedule': schedule
    }
    event.update(fields)
    return event


def of_type(conflicts, conflict_type):
    return [c for c in conflicts if c.type == conflict_type]


class TestTimeLocationConflicts:

    @pytest.mark.conflict
    def test_overlap_at_same_location(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', '11:00', eventType='mass', locationId='loc1')
        existing = [one_off('e1', '2024-03-31', '10:30', '11:30', locationId='loc1')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)

        overlaps = of_type(conflicts, ConflictType.TIME_OVERLAP)
        assert len(overlaps) == 1
        assert overlaps[0].severity == Severity.ERROR
        assert overlaps[0].message == 'Time conflict detected at Main Church on Sunday, Mar 31 at 10:00'
        assert [e['id'] for e in overlaps[0].conflicting_events] == ['e1']
        assert conflicts[0] is overlaps[0], "Errors sort first"

    @pytest.mark.conflict
    def test_unknown_location_label(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', locationId='loc9')
        existing = [one_off('e1', '2024-03-31', '10:30', locationId='loc9')]

        overlaps = of_type(service.check_event_conflicts(new_event, existing), ConflictType.TIME_OVERLAP)
        assert 'Unknown Location' in overlaps[0].message

    @pytest.mark.conflict
    def test_other_location_is_ignored(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', '11:00', locationId='loc1')
        existing = [one_off('e1', '2024-03-31', '10:30', '11:30', locationId='loc2')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)
        assert not of_type(conflicts, ConflictType.TIME_OVERLAP)

    @pytest.mark.conflict
    def test_touching_events_do_not_conflict(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', '11:00', locationId='loc1')
        existing = [one_off('e1', '2024-03-31', '11:00', '12:00', locationId='loc1')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)
        assert not of_type(conflicts, ConflictType.TIME_OVERLAP)

    @pytest.mark.conflict
    def test_location_check_can_be_disabled(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', '11:00', locationId='loc1')
        existing = [one_off('e1', '2024-03-31', '10:30', '11:30', locationId='loc1')]
        options = ConflictCheckOptions.from_dict({'checkLocations': False})

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS, options)
        assert not of_type(conflicts, ConflictType.TIME_OVERLAP)

    @pytest.mark.conflict
    def test_ignore_event_id_skips_the_event_being_edited(self, service):
        event = one_off('e1', '2024-03-31', '10:00', '11:00', locationId='loc1')
        options = ConflictCheckOptions.from_dict({'ignoreEventId': 'e1'})

        conflicts = service.check_event_conflicts(event, [dict(event)], PRIESTS, LOCATIONS, options)
        assert not of_type(conflicts, ConflictType.TIME_OVERLAP)

    @pytest.mark.conflict
    def test_recurring_candidate_reports_each_clashing_date(self, service):
        new_event = {
            'id': 'new',
            'eventType': 'meeting',
            'isRecurring': True,
            'locationId': 'loc1',
            'schedule': {
                'startTime': '10:00', 'endTime': '11:00', 'byDay': ['Sunday'],
                'startDate': '2024-03-01', 'endDate': '2024-03-31'
            }
        }
        existing = [
            one_off('e1', '2024-03-17', '10:00', '11:00', locationId='loc1'),
            one_off('e2', '2024-03-24', '10:30', locationId='loc1'),
        ]

        overlaps = of_type(service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS),
                           ConflictType.TIME_OVERLAP)
        assert [o.occurrence.date for o in overlaps] == [date(2024, 3, 17), date(2024, 3, 24)]

    @pytest.mark.conflict
    def test_two_recurring_sunday_masses(self, service):
        window = {'byDay': ['Sunday'], 'startDate': '2024-03-01', 'endDate': '2024-03-31'}
        new_event = {
            'id': 'new', 'eventType': 'mass', 'isRecurring': True, 'locationId': 'loc1',
            'schedule': dict(window, startTime='10:00', endTime='11:00')
        }
        existing = [{
            'id': 'e1', 'eventType': 'mass', 'isRecurring': True, 'locationId': 'loc1',
            'schedule': dict(window, startTime='10:30', endTime='11:30')
        }]

        overlaps = of_type(service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS),
                           ConflictType.TIME_OVERLAP)
        assert len(overlaps) == 5
        assert all([e['id'] for e in o.conflicting_events] == ['e1'] for o in overlaps)

    @pytest.mark.conflict
    def test_candidate_without_start_time(self, service):
        new_event = {'id': 'new', 'eventType': 'meeting', 'locationId': 'loc1', 'schedule': {}}
        existing = [one_off('e1', '2024-03-31', '10:00', locationId='loc1')]

        assert service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS) == []


class TestPriestConflicts:

    @pytest.mark.conflict
    def test_priest_assisting_elsewhere(self, service):
        new_event = one_off('new', '2024-03-05', '09:00', '10:00', celebrantId='p1', locationId='loc1')
        existing = [one_off('e1', '2024-03-05', '09:30', '10:30', celebrantId='p2',
                            assistantIds=['p1'], locationId='loc2')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)

        officiant = of_type(conflicts, ConflictType.OFFICIANT_CONFLICT)
        assert len(officiant) == 1
        assert officiant[0].severity == Severity.ERROR
        assert officiant[0].priest_id == 'p1'
        assert officiant[0].message.startswith('Fr. Smith is already scheduled')
        assert 'Tuesday, Mar 5 at 09:00' in officiant[0].message

    @pytest.mark.conflict
    def test_unknown_priest_label(self, service):
        new_event = one_off('new', '2024-03-05', '09:00', celebrantId='p1')
        existing = [one_off('e1', '2024-03-05', '09:30', celebrantId='p1')]

        officiant = of_type(service.check_event_conflicts(new_event, existing), ConflictType.OFFICIANT_CONFLICT)
        assert officiant[0].message.startswith('Unknown Priest')

    @pytest.mark.conflict
    def test_each_priest_checked(self, service):
        new_event = one_off('new', '2024-03-05', '09:00', celebrantId='p1', assistantIds=['p2'])
        existing = [
            one_off('e1', '2024-03-05', '09:30', celebrantId='p1'),
            one_off('e2', '2024-03-05', '09:15', celebrantId='p2'),
        ]

        officiant = of_type(service.check_event_conflicts(new_event, existing, PRIESTS),
                            ConflictType.OFFICIANT_CONFLICT)
        assert [c.priest_id for c in officiant] == ['p1', 'p2']

    @pytest.mark.conflict
    def test_priest_check_can_be_disabled(self, service):
        new_event = one_off('new', '2024-03-05', '09:00', celebrantId='p1')
        existing = [one_off('e1', '2024-03-05', '09:30', celebrantId='p1')]
        options = ConflictCheckOptions.from_dict({'checkPriests': False})

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, None, options)
        assert not [c for c in of_type(conflicts, ConflictType.OFFICIANT_CONFLICT)
                    if c.severity == Severity.ERROR]

    @pytest.mark.conflict
    def test_weekly_overload_warning(self, service):
        new_event = one_off('new', '2024-03-05', '07:00', celebrantId='p1')
        existing = [
            one_off('e1', '2024-03-06', '09:00', celebrantId='p1'),
            one_off('e2', '2024-03-07', '09:00', assistantIds=['p1']),
            one_off('e3', '2024-03-08', '09:00', celebrantId='p1'),
            one_off('e4', '2024-03-12', '09:00', celebrantId='p1'),  # next week
        ]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS)
        overload = [c for c in of_type(conflicts, ConflictType.OFFICIANT_CONFLICT)
                    if c.severity == Severity.WARNING]
        assert len(overload) == 1
        assert overload[0].message == 'Fr. Smith may be overloaded with 3 events this week'
        assert [e['id'] for e in overload[0].conflicting_events] == ['e1', 'e2', 'e3']

    @pytest.mark.conflict
    def test_no_overload_below_limit(self, service):
        new_event = one_off('new', '2024-03-05', '07:00', celebrantId='p1')
        existing = [
            one_off('e1', '2024-03-06', '09:00', celebrantId='p1'),
            one_off('e2', '2024-03-07', '09:00', celebrantId='p1'),
        ]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS)
        assert not of_type(conflicts, ConflictType.OFFICIANT_CONFLICT)


class TestLiturgicalConflicts:

    @pytest.mark.conflict
    def test_wedding_during_lent(self, service):
        new_event = one_off('new', '2024-03-09', '14:00', '15:00', eventType='wedding')

        conflicts = service.check_event_conflicts(new_event, [])

        warnings = [c for c in of_type(conflicts, ConflictType.LITURGICAL_CONFLICT)
                    if c.severity == Severity.WARNING]
        assert len(warnings) == 1
        assert warnings[0].message == 'wedding events may not be appropriate during Lent'
        assert conflicts[0] is warnings[0]

    @pytest.mark.conflict
    def test_secular_event_on_holy_day(self, service):
        new_event = one_off('new', '2024-12-25', '14:00', eventType='wedding')

        warnings = [c for c in service.check_event_conflicts(new_event, [])
                    if c.severity == Severity.WARNING]
        messages = [c.message for c in warnings]
        assert 'wedding events may not be appropriate during Advent' in messages
        assert any('is a holy day' in m for m in messages)

    @pytest.mark.conflict
    def test_seasonal_recommendations_are_info(self, service):
        new_event = one_off('new', '2024-03-01', '18:00', eventType='meeting')

        infos = [c for c in of_type(service.check_event_conflicts(new_event, []),
                                    ConflictType.LITURGICAL_CONFLICT)
                 if c.severity == Severity.INFO]
        assert len(infos) == 1
        assert infos[0].message == 'Other events recommended for Lent: Weekday Mass, Stations of the Cross'
        assert infos[0].suggestions == ['Weekday Mass', 'Stations of the Cross', 'Confession']

    @pytest.mark.conflict
    def test_liturgical_check_can_be_disabled(self, service):
        new_event = one_off('new', '2024-03-09', '14:00', eventType='wedding')
        options = ConflictCheckOptions.from_dict({'checkLiturgical': False})

        conflicts = service.check_event_conflicts(new_event, [], options=options)
        assert not of_type(conflicts, ConflictType.LITURGICAL_CONFLICT)


class TestSchedulingSuggestions:

    @pytest.mark.conflict
    def test_mass_at_recommended_time(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', eventType='mass')

        suggestions = of_type(service.check_event_conflicts(new_event, []), ConflictType.SCHEDULING_SUGGESTION)
        assert len(suggestions) == 1
        assert suggestions[0].severity == Severity.INFO
        assert suggestions[0].message == 'Mass time follows recommended parish scheduling patterns'

    @pytest.mark.conflict
    def test_mass_at_unusual_time(self, service):
        new_event = one_off('new', '2024-03-04', '07:00', eventType='mass')

        suggestions = of_type(service.check_event_conflicts(new_event, []), ConflictType.SCHEDULING_SUGGESTION)
        assert suggestions[0].message == 'Consider optimal Mass times for Monday: 09:00, 18:00'
        assert suggestions[0].suggestions == ['Schedule Mass at 09:00', 'Schedule Mass at 18:00']

    @pytest.mark.conflict
    def test_recurring_mass_uses_first_weekday(self, service):
        new_event = {
            'id': 'new', 'eventType': 'mass', 'isRecurring': True,
            'schedule': {'startTime': '19:00', 'byDay': ['Saturday'],
                         'startDate': '2024-03-09', 'endDate': '2024-03-09'}
        }

        suggestions = of_type(service.check_event_conflicts(new_event, []), ConflictType.SCHEDULING_SUGGESTION)
        assert suggestions[0].message == 'Mass time follows recommended parish scheduling patterns'

    @pytest.mark.conflict
    def test_optimal_times_table(self, service):
        assert service.get_optimal_mass_times('Sunday') == ['08:00', '10:00', '12:00', '18:00']
        assert service.get_optimal_mass_times('Saturday') == ['18:00', '19:00']
        assert service.get_optimal_mass_times('Wednesday') == ['09:00', '18:00']

    @pytest.mark.conflict
    def test_current_week_starts_sunday(self, service):
        week = service.get_current_week_dates()
        assert week[0] == date(2024, 3, 3)
        assert week[-1] == date(2024, 3, 9)


class TestMalformedCandidates:
    """Bad record data degrades to fewer findings instead of raising"""

    @pytest.mark.conflict
    def test_pre_gregorian_date_skips_liturgical_pass(self, service):
        new_event = one_off('new', '1500-06-01', '10:00', eventType='mass', locationId='loc1')
        existing = [one_off('e1', '1500-06-01', '10:30', locationId='loc1')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)

        assert of_type(conflicts, ConflictType.TIME_OVERLAP)
        assert of_type(conflicts, ConflictType.SCHEDULING_SUGGESTION)
        assert not of_type(conflicts, ConflictType.LITURGICAL_CONFLICT)

    @pytest.mark.conflict
    def test_mistyped_year(self, service):
        new_event = one_off('new', '0224-03-31', '10:00', eventType='meeting')
        assert service.check_event_conflicts(new_event, []) == []

    @pytest.mark.conflict
    @pytest.mark.parametrize("schedule", ['10:00', ['10:00'], 42])
    def test_non_dict_schedule(self, service, schedule):
        new_event = {
            'id': 'new', 'eventType': 'mass', 'locationId': 'loc1',
            'specificDate': '2024-03-31', 'schedule': schedule
        }
        existing = [one_off('e1', '2024-03-31', '10:00', locationId='loc1')]

        assert service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS) == []
        assert service.get_day_of_week({'isRecurring': True, 'schedule': schedule}) == 'Sunday'


class TestResults:

    @pytest.mark.conflict
    def test_equal_severity_keeps_pass_order(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', '11:00', eventType='mass',
                            locationId='loc1', celebrantId='p1')
        existing = [one_off('e1', '2024-03-31', '10:30', '11:30', locationId='loc1', celebrantId='p1')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)

        assert [(c.severity, c.type) for c in conflicts] == [
            (Severity.ERROR, ConflictType.TIME_OVERLAP),
            (Severity.ERROR, ConflictType.OFFICIANT_CONFLICT),
            (Severity.INFO, ConflictType.LITURGICAL_CONFLICT),
            (Severity.INFO, ConflictType.SCHEDULING_SUGGESTION),
        ]

    @pytest.mark.conflict
    def test_sorted_by_severity(self, service):
        new_event = one_off('new', '2024-03-09', '14:00', '15:00', eventType='wedding', locationId='loc1')
        existing = [one_off('e1', '2024-03-09', '14:30', locationId='loc1')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)
        weights = [c.severity.weight for c in conflicts]
        assert weights == sorted(weights, reverse=True)
        assert conflicts[0].severity == Severity.ERROR
        assert conflicts[-1].severity == Severity.INFO

    @pytest.mark.conflict
    def test_summary_and_serialization(self, service):
        new_event = one_off('new', '2024-03-31', '10:00', '11:00', eventType='mass', locationId='loc1')
        existing = [one_off('e1', '2024-03-31', '10:30', '11:30', locationId='loc1')]

        conflicts = service.check_event_conflicts(new_event, existing, PRIESTS, LOCATIONS)
        summary = summarize_conflicts(conflicts)

        assert summary['total'] == len(conflicts)
        assert summary['hasErrors'] is True
        assert summary['bySeverity']['error'] == 1
        assert summary['byType']['time_overlap'] == 1

        payload = json.dumps([c.to_dict() for c in conflicts])
        assert '"type": "time_overlap"' in payload

    @pytest.mark.conflict
    def test_empty_summary(self):
        summary = summarize_conflicts([])
        assert summary['total'] == 0
        assert summary['hasErrors'] is False
        assert summary['bySeverity'] == {'error': 0, 'warning': 0, 'info': 0}

    @pytest.mark.unit
    def test_options_default_on(self):
        options = ConflictCheckOptions.from_dict(None)
        assert options.check_priests and options.check_locations and options.check_liturgical
        assert options.ignore_event_id is None
        assert ConflictCheckOptions.from_dict({'checkPriests': None}).check_priests is True

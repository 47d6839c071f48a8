# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Conflict Detection - Check a proposed parish event against the existing schedule

Four passes run in order and their findings are merged, then stably sorted by
severity (error > warning > info):
1. Venue/time overlap at the same location
2. Priest double-booking (celebrant or assistant)
3. Liturgical appropriateness of the event for each date
4. Scheduling advisories (optimal Mass times, priest weekly workload)

Nothing here raises for incomplete records; gaps are skipped so a save is
never blocked by the checker itself.
"""
import logging
import time
from collections import Counter
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Tuple

import config
from liturgy.calendar import LiturgicalCalendarService, LiturgicalDay, LiturgicalSeason, liturgical_calendar
from models import (
    ConflictType, EventType, Severity, SECULAR_EVENT_TYPES,
    event_type_of, event_priest_ids, event_involves_priest,
    priest_display_name, location_display_name
)
from scheduling.occurrences import Occurrence, OccurrenceExpander, normalize_day_name
from utils import structured_logger
from utils.formatting import (
    format_display_date, time_to_minutes, minutes_to_time, parse_iso_date, weekday_name
)
from utils.timezone import get_parish_today

logger = logging.getLogger(__name__)

# Event types discouraged in a season
SEASON_RESTRICTIONS = {
    LiturgicalSeason.LENT: frozenset({EventType.WEDDING.value, EventType.CELEBRATION.value}),
    LiturgicalSeason.ADVENT: frozenset({EventType.WEDDING.value}),
}

OPTIMAL_MASS_TIMES = {
    'Sunday': ['08:00', '10:00', '12:00', '18:00'],
    'Saturday': ['18:00', '19:00'],  # Vigil Masses
}
OPTIMAL_WEEKDAY_MASS_TIMES = ['09:00', '18:00']


# =============================================================================
# FINDINGS
# =============================================================================

class ScheduleConflict:
    """Base finding; subclasses fix the category"""

    type: ConflictType = None

    def __init__(self, severity: Severity, message: str,
                 conflicting_events: Optional[List[Dict]] = None,
                 suggestions: Optional[List[str]] = None):
        self.severity = severity
        self.message = message
        self.conflicting_events = list(conflicting_events or [])
        self.suggestions = list(suggestions or [])

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'severity': self.severity.value,
            'message': self.message,
            'conflictingEvents': self.conflicting_events,
            'suggestions': self.suggestions
        }

    def __repr__(self):
        return f"{self.__class__.__name__}({self.severity.value}: {self.message!r})"


class TimeOverlapConflict(ScheduleConflict):
    type = ConflictType.TIME_OVERLAP

    def __init__(self, location_id: str, occurrence: Occurrence, message: str,
                 conflicting_events: List[Dict], suggestions: List[str]):
        super().__init__(Severity.ERROR, message, conflicting_events, suggestions)
        self.location_id = location_id
        self.occurrence = occurrence

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data['locationId'] = self.location_id
        data['occurrence'] = self.occurrence.to_dict()
        return data


class OfficiantConflict(ScheduleConflict):
    type = ConflictType.OFFICIANT_CONFLICT

    def __init__(self, severity: Severity, priest_id: str, message: str,
                 conflicting_events: List[Dict], suggestions: List[str],
                 occurrence: Optional[Occurrence] = None):
        super().__init__(severity, message, conflicting_events, suggestions)
        self.priest_id = priest_id
        self.occurrence = occurrence

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data['priestId'] = self.priest_id
        if self.occurrence is not None:
            data['occurrence'] = self.occurrence.to_dict()
        return data


class LiturgicalConflict(ScheduleConflict):
    type = ConflictType.LITURGICAL_CONFLICT

    def __init__(self, severity: Severity, liturgical_day: LiturgicalDay, message: str,
                 suggestions: List[str]):
        super().__init__(severity, message, [], suggestions)
        self.liturgical_day = liturgical_day

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data['date'] = self.liturgical_day.date.isoformat()
        data['season'] = self.liturgical_day.season.value
        return data


class SchedulingSuggestion(ScheduleConflict):
    type = ConflictType.SCHEDULING_SUGGESTION

    def __init__(self, message: str, suggestions: List[str]):
        super().__init__(Severity.INFO, message, [], suggestions)


class ConflictCheckOptions:
    """Toggles for a conflict check; every check is on unless switched off"""

    def __init__(self, ignore_event_id: Optional[str] = None, check_priests: bool = True,
                 check_locations: bool = True, check_liturgical: bool = True):
        self.ignore_event_id = ignore_event_id
        self.check_priests = check_priests
        self.check_locations = check_locations
        self.check_liturgical = check_liturgical

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'ConflictCheckOptions':
        data = data or {}
        # Only an explicit false disables a check
        return cls(
            ignore_event_id=data.get('ignoreEventId') or None,
            check_priests=data.get('checkPriests') is not False,
            check_locations=data.get('checkLocations') is not False,
            check_liturgical=data.get('checkLiturgical') is not False
        )


def summarize_conflicts(conflicts: List[ScheduleConflict]) -> Dict:
    """Counts by severity and by category"""
    by_severity = Counter(c.severity.value for c in conflicts)
    by_type = Counter(c.type.value for c in conflicts)
    return {
        'total': len(conflicts),
        'bySeverity': {s.value: by_severity.get(s.value, 0) for s in Severity},
        'byType': {t.value: by_type.get(t.value, 0) for t in ConflictType},
        'hasErrors': by_severity.get(Severity.ERROR.value, 0) > 0
    }


# =============================================================================
# SERVICE
# =============================================================================

ExpandedEvents = List[Tuple[Dict, List[Occurrence]]]


class ConflictDetectionService:
    """Detects scheduling conflicts for parish events; holds no per-call state"""

    def __init__(self, calendar: Optional[LiturgicalCalendarService] = None,
                 expander: Optional[OccurrenceExpander] = None,
                 today_provider: Optional[Callable[[], date]] = None):
        self.today_provider = today_provider or get_parish_today
        self.calendar = calendar or liturgical_calendar
        self.expander = expander or OccurrenceExpander(today_provider=self.today_provider)

    def check_event_conflicts(self, new_event: Dict, existing_events: List[Dict],
                              priests: Optional[List[Dict]] = None,
                              locations: Optional[List[Dict]] = None,
                              options: Optional[ConflictCheckOptions] = None) -> List[ScheduleConflict]:
        """
        Check a candidate event against the existing events of the parish.

        Args:
            new_event: Candidate event draft, possibly partial
            existing_events: Saved events of the same parish
            priests: Priest roster used to name officiants
            locations: Location roster used to name venues
            options: Check toggles and the id of the event being edited

        Returns:
            Findings sorted by descending severity; ties keep pass order
        """
        started = time.monotonic()
        options = options or ConflictCheckOptions()

        events_to_check = [
            e for e in existing_events or []
            if not options.ignore_event_id or e.get('id') != options.ignore_event_id
        ]

        logger.debug(
            f"Checking event '{new_event.get('id') or 'draft'}' against {len(events_to_check)} existing events"
        )
        candidate_occurrences = self.expander.expand(new_event)
        expanded = [(e, self.expander.expand(e)) for e in events_to_check]

        conflicts: List[ScheduleConflict] = []

        if options.check_locations:
            conflicts.extend(self._check_time_location_conflicts(
                new_event, candidate_occurrences, expanded, locations))

        if options.check_priests:
            conflicts.extend(self._check_priest_conflicts(
                new_event, candidate_occurrences, expanded, priests))

        if options.check_liturgical:
            conflicts.extend(self._check_liturgical_conflicts(new_event, candidate_occurrences))

        conflicts.extend(self._generate_scheduling_suggestions(new_event, expanded, priests))

        conflicts = sorted(conflicts, key=lambda c: -c.severity.weight)

        structured_logger.log_conflict_check(
            new_event.get('id'),
            len(candidate_occurrences),
            dict(Counter(c.severity.value for c in conflicts)),
            (time.monotonic() - started) * 1000
        )
        return conflicts

    # -------------------------------------------------------------------------
    # Pass 1: venue/time
    # -------------------------------------------------------------------------

    def _check_time_location_conflicts(self, new_event: Dict, occurrences: List[Occurrence],
                                       expanded: ExpandedEvents,
                                       locations: Optional[List[Dict]]) -> List[ScheduleConflict]:
        conflicts = []

        location_id = new_event.get('locationId')
        if not location_id or not _schedule_of(new_event).get('startTime'):
            return conflicts

        same_location = [(e, occs) for e, occs in expanded if e.get('locationId') == location_id]
        if not same_location:
            return conflicts

        location_name = location_display_name(locations, location_id)

        for occurrence in occurrences:
            conflicting_events = [
                e for e, occs in same_location
                if any(occurrence.overlaps(other) for other in occs)
            ]

            if conflicting_events:
                conflicts.append(TimeOverlapConflict(
                    location_id=location_id,
                    occurrence=occurrence,
                    message=(f"Time conflict detected at {location_name} on "
                             f"{format_display_date(occurrence.date)} at {occurrence.start_time}"),
                    conflicting_events=conflicting_events,
                    suggestions=[
                        'Choose a different time slot',
                        'Use a different location',
                        'Consider moving the conflicting event'
                    ]
                ))

        return conflicts

    # -------------------------------------------------------------------------
    # Pass 2: priest availability
    # -------------------------------------------------------------------------

    def _check_priest_conflicts(self, new_event: Dict, occurrences: List[Occurrence],
                                expanded: ExpandedEvents,
                                priests: Optional[List[Dict]]) -> List[ScheduleConflict]:
        conflicts = []

        priest_ids = event_priest_ids(new_event)
        if not priest_ids:
            return conflicts

        for occurrence in occurrences:
            for priest_id in priest_ids:
                conflicting_events = [
                    e for e, occs in expanded
                    if event_involves_priest(e, priest_id)
                    and any(occurrence.overlaps(other) for other in occs)
                ]

                if conflicting_events:
                    priest_name = priest_display_name(priests, priest_id)
                    conflicts.append(OfficiantConflict(
                        severity=Severity.ERROR,
                        priest_id=priest_id,
                        occurrence=occurrence,
                        message=(f"{priest_name} is already scheduled for another event on "
                                 f"{format_display_date(occurrence.date)} at {occurrence.start_time}"),
                        conflicting_events=conflicting_events,
                        suggestions=[
                            'Choose a different priest',
                            'Reschedule one of the conflicting events',
                            'Consider if both events really need this priest'
                        ]
                    ))

        return conflicts

    # -------------------------------------------------------------------------
    # Pass 3: liturgical appropriateness
    # -------------------------------------------------------------------------

    def _check_liturgical_conflicts(self, new_event: Dict,
                                    occurrences: List[Occurrence]) -> List[ScheduleConflict]:
        conflicts = []
        event_type = event_type_of(new_event)

        for occurrence in occurrences:
            try:
                liturgical_day = self.calendar.get_liturgical_day(occurrence.date)
            except ValueError as e:
                logger.warning(f"Skipping liturgical check for {occurrence.date.isoformat()}: {e}")
                continue
            season = liturgical_day.season.value

            if self.is_inappropriate_for_season(event_type, liturgical_day.season):
                conflicts.append(LiturgicalConflict(
                    severity=Severity.WARNING,
                    liturgical_day=liturgical_day,
                    message=f"{event_type} events may not be appropriate during {season}",
                    suggestions=[
                        f"Consider a different event type more suitable for {season}",
                        'Check with pastor for appropriateness',
                        'Review liturgical calendar guidelines'
                    ]
                ))

            if liturgical_day.is_holy_day and event_type in SECULAR_EVENT_TYPES:
                conflicts.append(LiturgicalConflict(
                    severity=Severity.WARNING,
                    liturgical_day=liturgical_day,
                    message=f"{liturgical_day.name} is a holy day - secular events should be carefully considered",
                    suggestions=[
                        'Consider rescheduling non-liturgical events',
                        'Ensure event complements the holy day',
                        'Check diocesan guidelines for holy day scheduling'
                    ]
                ))

            recommended = [s.name for s in liturgical_day.suggested_events if s.type != event_type]
            if recommended:
                shown = ', '.join(recommended[:config.LITURGICAL_SUGGESTION_MESSAGE_LIMIT])
                conflicts.append(LiturgicalConflict(
                    severity=Severity.INFO,
                    liturgical_day=liturgical_day,
                    message=f"Other events recommended for {season}: {shown}",
                    suggestions=recommended[:config.LITURGICAL_SUGGESTION_LIMIT]
                ))

        return conflicts

    @staticmethod
    def is_inappropriate_for_season(event_type: Optional[str], season: LiturgicalSeason) -> bool:
        return event_type in SEASON_RESTRICTIONS.get(season, frozenset())

    # -------------------------------------------------------------------------
    # Pass 4: scheduling advisories
    # -------------------------------------------------------------------------

    def _generate_scheduling_suggestions(self, new_event: Dict, expanded: ExpandedEvents,
                                         priests: Optional[List[Dict]]) -> List[ScheduleConflict]:
        suggestions = []
        schedule = _schedule_of(new_event)

        if event_type_of(new_event) == EventType.MASS.value and schedule.get('startTime'):
            mass_time = self._normalize_time(schedule['startTime'])
            day_of_week = self.get_day_of_week(new_event)
            optimal_times = self.get_optimal_mass_times(day_of_week)

            if mass_time in optimal_times:
                suggestions.append(SchedulingSuggestion(
                    message='Mass time follows recommended parish scheduling patterns',
                    suggestions=['Consider adding additional Mass times if needed']
                ))
            else:
                suggestions.append(SchedulingSuggestion(
                    message=f"Consider optimal Mass times for {day_of_week}: {', '.join(optimal_times)}",
                    suggestions=[f"Schedule Mass at {t}" for t in optimal_times]
                ))

        celebrant_id = new_event.get('celebrantId')
        if celebrant_id:
            week = set(self.get_current_week_dates())
            weekly_events = [
                e for e, occs in expanded
                if event_involves_priest(e, celebrant_id)
                and any(o.date in week for o in occs)
            ]

            if len(weekly_events) >= config.PRIEST_WEEKLY_EVENT_LIMIT:
                priest_name = priest_display_name(priests, celebrant_id)
                suggestions.append(OfficiantConflict(
                    severity=Severity.WARNING,
                    priest_id=celebrant_id,
                    message=f"{priest_name} may be overloaded with {len(weekly_events)} events this week",
                    conflicting_events=weekly_events,
                    suggestions=[
                        'Consider distributing events among other priests',
                        'Check if assistant priests could celebrate some events',
                        'Review priest availability and preferences'
                    ]
                ))

        return suggestions

    def get_day_of_week(self, event: Dict) -> str:
        """Weekday the event is anchored to, for Mass-time advice"""
        if event.get('specificDate') and not event.get('isRecurring'):
            specific_date = parse_iso_date(event['specificDate'])
            if specific_date is not None:
                return weekday_name(specific_date)

        by_day = _schedule_of(event).get('byDay') or []
        if by_day:
            day_name = normalize_day_name(by_day[0])
            if day_name:
                return day_name

        return 'Sunday'

    @staticmethod
    def get_optimal_mass_times(day_of_week: str) -> List[str]:
        return list(OPTIMAL_MASS_TIMES.get(day_of_week, OPTIMAL_WEEKDAY_MASS_TIMES))

    def get_current_week_dates(self) -> List[date]:
        """Sunday through Saturday of the week containing today"""
        today = self.today_provider()
        days_since_sunday = (today.weekday() + 1) % 7
        start_of_week = today - timedelta(days=days_since_sunday)
        return [start_of_week + timedelta(days=i) for i in range(7)]

    @staticmethod
    def _normalize_time(value: str) -> str:
        minutes = time_to_minutes(value)
        return minutes_to_time(minutes) if minutes is not None else value


def _schedule_of(event: Dict) -> Dict:
    schedule = event.get('schedule')
    return schedule if isinstance(schedule, dict) else {}


# Shared stateless instance
conflict_detection = ConflictDetectionService()

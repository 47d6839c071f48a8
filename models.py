# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Data models for Parish Event Scheduling

Events, priests and locations arrive as plain dicts shaped like the records in
the parish store (camelCase keys). This module holds the closed enumerations
used across the core and small helpers for reading those records.
"""
import logging
from enum import Enum
from typing import Dict, List, Optional

import config

logger = logging.getLogger(__name__)

# =============================================================================
# ENUMERATIONS
# =============================================================================

class EventType(Enum):
    """Kinds of parish events"""
    MASS = "mass"
    ADORATION = "adoration"
    CONFESSION = "confession"
    VESPERS = "vespers"
    ROSARY = "rosary"
    STATIONS = "stations"
    NOVENA = "novena"
    RETREAT = "retreat"
    CATECHESIS = "catechesis"
    YOUTH = "youth"
    MEETING = "meeting"
    CELEBRATION = "celebration"
    WEDDING = "wedding"
    FUNERAL = "funeral"
    BAPTISM = "baptism"
    CONFIRMATION = "confirmation"
    OTHER = "other"


# Event types that are not liturgical in themselves
SECULAR_EVENT_TYPES = frozenset({
    EventType.MEETING.value,
    EventType.CELEBRATION.value,
    EventType.WEDDING.value,
})


class WeekDay(Enum):
    """Days of the week as they appear in schedule.byDay"""
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class RepeatFrequency(Enum):
    """ISO 8601 durations accepted for schedule.repeatFrequency"""
    WEEKLY = "P1W"
    MONTHLY = "P1M"
    YEARLY = "P1Y"


class Severity(Enum):
    """Finding severity, ranked error > warning > info"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def weight(self) -> int:
        return SEVERITY_WEIGHTS.get(self.value, 0)


SEVERITY_WEIGHTS = {
    Severity.ERROR.value: 3,
    Severity.WARNING.value: 2,
    Severity.INFO.value: 1,
}


class ConflictType(Enum):
    """Categories of scheduling findings"""
    TIME_OVERLAP = "time_overlap"
    OFFICIANT_CONFLICT = "officiant_conflict"
    LITURGICAL_CONFLICT = "liturgical_conflict"
    SCHEDULING_SUGGESTION = "scheduling_suggestion"


# =============================================================================
# RECORD HELPERS
# =============================================================================

def event_type_of(event: Dict) -> Optional[str]:
    """Event category as a plain string (accepts EventType members too)"""
    value = event.get('eventType')
    if isinstance(value, EventType):
        return value.value
    return value


def event_priest_ids(event: Dict) -> List[str]:
    """Celebrant first, then assistants, without duplicates"""
    priest_ids = []
    celebrant_id = event.get('celebrantId')
    if celebrant_id:
        priest_ids.append(celebrant_id)
    for assistant_id in event.get('assistantIds') or []:
        if assistant_id and assistant_id not in priest_ids:
            priest_ids.append(assistant_id)
    return priest_ids


def event_involves_priest(event: Dict, priest_id: str) -> bool:
    """True when the priest celebrates or assists at the event"""
    return priest_id in event_priest_ids(event)


def find_by_id(records: Optional[List[Dict]], record_id: Optional[str]) -> Optional[Dict]:
    """Linear lookup by 'id' over a roster list"""
    if not record_id:
        return None
    for record in records or []:
        if record.get('id') == record_id:
            return record
    return None


def priest_display_name(priests: Optional[List[Dict]], priest_id: Optional[str]) -> str:
    """Resolve a priest id to its name, or the placeholder label"""
    priest = find_by_id(priests, priest_id)
    if priest and priest.get('name'):
        return priest['name']
    logger.debug(f"Priest '{priest_id}' not found in roster")
    return config.UNKNOWN_PRIEST_LABEL


def location_display_name(locations: Optional[List[Dict]], location_id: Optional[str]) -> str:
    """Resolve a location id to its name, or the placeholder label"""
    location = find_by_id(locations, location_id)
    if location and location.get('name'):
        return location['name']
    logger.debug(f"Location '{location_id}' not found in roster")
    return config.UNKNOWN_LOCATION_LABEL


# =============================================================================
# PAYLOAD VALIDATION
# =============================================================================

class PayloadValidationError(ValueError):
    """Raised when an API payload does not have the expected shape"""


def _require_list_of_dicts(payload: Dict, field: str) -> List[Dict]:
    value = payload.get(field, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise PayloadValidationError(f"'{field}' must be a list")
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise PayloadValidationError(f"'{field}[{index}]' must be an object")
    return value


def validate_conflict_payload(payload) -> Dict:
    """
    Check the shape of a conflict-check request body.

    Only structure is validated here. Missing or odd field values inside the
    records are left to the conflict engine, which degrades instead of failing.

    Returns:
        Dict with keys event, existingEvents, priests, locations, options, timezone

    Raises:
        PayloadValidationError: if the body is not usable at all
    """
    if not isinstance(payload, dict):
        raise PayloadValidationError("Request body must be a JSON object")

    event = payload.get('event')
    if not isinstance(event, dict):
        raise PayloadValidationError("'event' must be an object")

    schedule = event.get('schedule')
    if schedule is not None and not isinstance(schedule, dict):
        raise PayloadValidationError("'event.schedule' must be an object")

    existing_events = _require_list_of_dicts(payload, 'existingEvents')
    if len(existing_events) > config.MAX_CHECK_EVENTS:
        raise PayloadValidationError(
            f"Too many existing events ({len(existing_events)} > {config.MAX_CHECK_EVENTS})"
        )

    options = payload.get('options') or {}
    if not isinstance(options, dict):
        raise PayloadValidationError("'options' must be an object")

    timezone_name = payload.get('timezone')
    if timezone_name is not None and not isinstance(timezone_name, str):
        raise PayloadValidationError("'timezone' must be a string")

    return {
        'event': event,
        'existingEvents': existing_events,
        'priests': _require_list_of_dicts(payload, 'priests'),
        'locations': _require_list_of_dicts(payload, 'locations'),
        'options': options,
        'timezone': timezone_name
    }

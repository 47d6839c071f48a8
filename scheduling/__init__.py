from scheduling.occurrences import Occurrence, OccurrenceExpander, occurrences_overlap
from scheduling.conflicts import (
    ScheduleConflict, TimeOverlapConflict, OfficiantConflict, LiturgicalConflict,
    SchedulingSuggestion, ConflictCheckOptions, ConflictDetectionService,
    conflict_detection, summarize_conflicts
)

__all__ = [
    'Occurrence', 'OccurrenceExpander', 'occurrences_overlap',
    'ScheduleConflict', 'TimeOverlapConflict', 'OfficiantConflict', 'LiturgicalConflict',
    'SchedulingSuggestion', 'ConflictCheckOptions', 'ConflictDetectionService',
    'conflict_detection', 'summarize_conflicts'
]

from liturgy.computus import calculate_easter, advent_start, relative_to_easter
from liturgy.calendar import (
    LiturgicalCalendarService, LiturgicalDay, EventSuggestion, MassTiming,
    LiturgicalSeason, LiturgicalRank, LiturgicalColor, liturgical_calendar
)

__all__ = [
    'calculate_easter', 'advent_start', 'relative_to_easter',
    'LiturgicalCalendarService', 'LiturgicalDay', 'EventSuggestion', 'MassTiming',
    'LiturgicalSeason', 'LiturgicalRank', 'LiturgicalColor', 'liturgical_calendar'
]

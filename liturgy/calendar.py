# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Liturgical Calendar - Season, rank and color for any date, plus event suggestions

A deliberately simplified model of the Roman calendar:
- Seasons come from Easter and a few fixed solar dates. The Christmas window
  only covers Jan 1-6 of the date's own year, so Dec 25-31 report Advent.
- Any date in the holy-day table ranks as a Solemnity unless it is a Sunday.
- The Easter Triduum season exists in the vocabulary but is never produced.
"""
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional

from liturgy.computus import (
    calculate_easter, advent_start,
    ASH_WEDNESDAY_OFFSET, PALM_SUNDAY_OFFSET, HOLY_THURSDAY_OFFSET,
    GOOD_FRIDAY_OFFSET, EASTER_VIGIL_OFFSET, ASCENSION_OFFSET,
    PENTECOST_OFFSET, TRINITY_SUNDAY_OFFSET, CORPUS_CHRISTI_OFFSET
)
from utils.formatting import WEEKDAY_NAMES, weekday_name, ordinal


class LiturgicalSeason(Enum):
    ADVENT = "Advent"
    CHRISTMAS = "Christmas"
    ORDINARY_TIME = "Ordinary Time"
    LENT = "Lent"
    EASTER_TRIDUUM = "Easter Triduum"
    EASTER = "Easter"


class LiturgicalRank(Enum):
    SOLEMNITY = "Solemnity"
    FEAST = "Feast"
    MEMORIAL = "Memorial"
    OPTIONAL_MEMORIAL = "Optional Memorial"
    WEEKDAY = "Weekday"
    SUNDAY = "Sunday"


class LiturgicalColor(Enum):
    WHITE = "white"
    RED = "red"
    GREEN = "green"
    PURPLE = "purple"
    ROSE = "rose"
    BLACK = "black"


SEASON_COLORS = {
    LiturgicalSeason.ADVENT: LiturgicalColor.PURPLE,
    LiturgicalSeason.LENT: LiturgicalColor.PURPLE,
    LiturgicalSeason.CHRISTMAS: LiturgicalColor.WHITE,
    LiturgicalSeason.EASTER: LiturgicalColor.WHITE,
    LiturgicalSeason.ORDINARY_TIME: LiturgicalColor.GREEN,
}


# =============================================================================
# VALUE TYPES
# =============================================================================

class EventSuggestion:
    """An event the parish may want to schedule on a given day"""

    def __init__(self, type: str, name: str, description: str,
                 recommended_time: Optional[str] = None, priority: str = 'medium'):
        self.type = type
        self.name = name
        self.description = description
        self.recommended_time = recommended_time
        self.priority = priority

    def to_dict(self) -> Dict:
        data = {
            'type': self.type,
            'name': self.name,
            'description': self.description,
            'priority': self.priority
        }
        if self.recommended_time:
            data['recommendedTime'] = self.recommended_time
        return data

    def __repr__(self):
        return f"EventSuggestion({self.name!r}, priority={self.priority!r})"


class LiturgicalDay:
    """Liturgical classification of one calendar date"""

    def __init__(self, day: date, season: LiturgicalSeason, rank: LiturgicalRank,
                 name: str, color: LiturgicalColor, is_holy_day: bool = False,
                 is_sunday: bool = False, suggested_events: Optional[List[EventSuggestion]] = None):
        self.date = day
        self.season = season
        self.rank = rank
        self.name = name
        self.color = color
        self.is_holy_day = is_holy_day
        self.is_sunday = is_sunday
        self.suggested_events = suggested_events or []

    def to_dict(self) -> Dict:
        return {
            'date': self.date.isoformat(),
            'season': self.season.value,
            'rank': self.rank.value,
            'name': self.name,
            'color': self.color.value,
            'isHolyDay': self.is_holy_day,
            'isSunday': self.is_sunday,
            'suggestedEvents': [s.to_dict() for s in self.suggested_events]
        }

    def __repr__(self):
        return f"LiturgicalDay({self.date.isoformat()}, {self.season.value}, {self.rank.value})"


class MassTiming:
    """Recommended Mass times for one day of the week"""

    def __init__(self, day_of_week: str, recommended_times: List[str], description: str):
        self.day_of_week = day_of_week
        self.recommended_times = recommended_times
        self.description = description

    def to_dict(self) -> Dict:
        return {
            'dayOfWeek': self.day_of_week,
            'recommendedTimes': list(self.recommended_times),
            'description': self.description
        }


# =============================================================================
# STATIC TABLES
# =============================================================================

RECOMMENDED_MASS_TIMES = [
    ('Sunday', ['08:00', '10:00', '12:00', '18:00'], 'Primary celebration day - multiple Masses recommended'),
    ('Monday', ['09:00', '18:00'], 'Weekday Mass - morning and evening options'),
    ('Tuesday', ['09:00', '18:00'], 'Weekday Mass - morning and evening options'),
    ('Wednesday', ['09:00', '18:00'], 'Weekday Mass - morning and evening options'),
    ('Thursday', ['09:00', '18:00'], 'Weekday Mass - morning and evening options'),
    ('Friday', ['09:00', '18:00'], 'Weekday Mass - consider Stations of the Cross'),
    ('Saturday', ['09:00', '18:00'], 'Weekday Mass and vigil options'),
]

# (name, month/day or Easter offset, rank) in calendar presentation order
SPECIAL_CELEBRATIONS = [
    ('Christmas', (12, 25), LiturgicalRank.SOLEMNITY),
    ('Epiphany', (1, 6), LiturgicalRank.SOLEMNITY),
    ('Ash Wednesday', ASH_WEDNESDAY_OFFSET, LiturgicalRank.WEEKDAY),
    ('Palm Sunday', PALM_SUNDAY_OFFSET, LiturgicalRank.SUNDAY),
    ('Holy Thursday', HOLY_THURSDAY_OFFSET, LiturgicalRank.SOLEMNITY),
    ('Good Friday', GOOD_FRIDAY_OFFSET, LiturgicalRank.SOLEMNITY),
    ('Easter Vigil', EASTER_VIGIL_OFFSET, LiturgicalRank.SOLEMNITY),
    ('Easter Sunday', 0, LiturgicalRank.SOLEMNITY),
    ('Ascension', ASCENSION_OFFSET, LiturgicalRank.SOLEMNITY),
    ('Pentecost', PENTECOST_OFFSET, LiturgicalRank.SOLEMNITY),
    ('Trinity Sunday', TRINITY_SUNDAY_OFFSET, LiturgicalRank.SOLEMNITY),
    ('Corpus Christi', CORPUS_CHRISTI_OFFSET, LiturgicalRank.SOLEMNITY),
]

# type, name, description, recommended time, priority
CELEBRATION_SUGGESTIONS = {
    'Christmas': [
        ('mass', 'Christmas Vigil Mass', 'Christmas Eve celebration', '18:00', 'high'),
        ('mass', 'Midnight Mass', 'Traditional midnight celebration', '00:00', 'high'),
        ('mass', 'Christmas Day Mass', 'Christmas morning celebration', '10:00', 'high'),
    ],
    'Epiphany': [
        ('mass', 'Epiphany Mass', 'Solemnity of the Epiphany of the Lord', '10:00', 'high'),
        ('devotion', 'Blessing of Chalk', 'Traditional house blessing chalk for Epiphany', '11:00', 'low'),
    ],
    'Ash Wednesday': [
        ('mass', 'Ash Wednesday Mass', 'Distribution of ashes', '18:00', 'high'),
    ],
    'Palm Sunday': [
        ('mass', 'Palm Sunday Mass', 'Blessing of palms and passion reading', '10:00', 'high'),
    ],
    'Holy Thursday': [
        ('mass', "Mass of the Lord's Supper", 'Evening Mass with washing of feet', '19:00', 'high'),
        ('adoration', 'Adoration at the Altar of Repose', 'Watch with the Lord after the evening Mass', '21:00', 'medium'),
    ],
    'Good Friday': [
        ('devotion', "Celebration of the Lord's Passion", 'Liturgy of the Word, veneration of the Cross and Communion', '15:00', 'high'),
        ('devotion', 'Stations of the Cross', 'Traditional Good Friday devotion', '12:00', 'medium'),
        ('confession', 'Confession', 'Reconciliation before Easter', '10:00', 'medium'),
    ],
    'Easter Vigil': [
        ('mass', 'Easter Vigil Mass', 'Service of light and sacraments of initiation', '21:00', 'high'),
    ],
    'Easter Sunday': [
        ('mass', 'Easter Vigil', 'Principal celebration of Easter', '21:00', 'high'),
        ('mass', 'Easter Sunday Mass', 'Easter morning celebration', '10:00', 'high'),
    ],
    'Ascension': [
        ('mass', 'Ascension Mass', 'Solemnity of the Ascension of the Lord', '18:00', 'high'),
    ],
    'Pentecost': [
        ('mass', 'Pentecost Mass', 'Celebration of the descent of the Holy Spirit', '10:00', 'high'),
        ('devotion', 'Pentecost Vigil', 'Evening prayer vigil on the eve of Pentecost', '20:00', 'medium'),
    ],
    'Trinity Sunday': [
        ('mass', 'Trinity Sunday Mass', 'Solemnity of the Most Holy Trinity', '10:00', 'high'),
    ],
    'Corpus Christi': [
        ('mass', 'Corpus Christi Mass', 'Solemnity of the Body and Blood of Christ', '10:00', 'high'),
        ('adoration', 'Eucharistic Procession', 'Procession with the Blessed Sacrament', '11:30', 'high'),
    ],
}


# =============================================================================
# SERVICE
# =============================================================================

class LiturgicalCalendarService:
    """Computes liturgical information for dates; holds no state"""

    def get_liturgical_day(self, day: date) -> LiturgicalDay:
        """Get liturgical information for a specific date"""
        easter = calculate_easter(day.year)

        season = self.calculate_season(day, easter)
        rank = self.calculate_rank(day, easter)
        color = self.get_liturgical_color(season)
        name = self.get_liturgical_name(day, season, rank, easter)

        return LiturgicalDay(
            day=day,
            season=season,
            rank=rank,
            name=name,
            color=color,
            is_holy_day=self.is_holy_day(day, easter),
            is_sunday=_is_sunday(day),
            suggested_events=self.get_suggested_events(day, season)
        )

    def get_liturgical_range(self, start: date, end: date) -> List[LiturgicalDay]:
        """Liturgical days for every date from start through end inclusive"""
        days = []
        current = start
        while current <= end:
            days.append(self.get_liturgical_day(current))
            current += timedelta(days=1)
        return days

    def get_recommended_mass_times(self) -> Dict[str, MassTiming]:
        """Suggested Mass times keyed by weekday name, Sunday first"""
        return {
            day_name: MassTiming(day_name, list(times), description)
            for day_name, times, description in RECOMMENDED_MASS_TIMES
        }

    def get_special_celebrations(self, year: int) -> List[LiturgicalDay]:
        """The major celebrations of a year, each with its own event suggestions"""
        easter = calculate_easter(year)
        celebrations = []

        for name, when, rank in SPECIAL_CELEBRATIONS:
            if isinstance(when, tuple):
                feast_date = date(year, when[0], when[1])
            else:
                feast_date = easter + timedelta(days=when)

            season = self.calculate_season(feast_date, easter)
            celebrations.append(LiturgicalDay(
                day=feast_date,
                season=season,
                rank=rank,
                name=name,
                color=self.get_liturgical_color(season),
                is_holy_day=True,
                is_sunday=_is_sunday(feast_date),
                suggested_events=self.get_special_event_suggestions(name)
            ))

        return celebrations

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def calculate_season(self, day: date, easter: date) -> LiturgicalSeason:
        year = day.year
        christmas = date(year - 1, 12, 25)
        epiphany = date(year, 1, 6)
        ash_wednesday = easter + timedelta(days=ASH_WEDNESDAY_OFFSET)
        easter_vigil = easter + timedelta(days=EASTER_VIGIL_OFFSET)
        pentecost = easter + timedelta(days=PENTECOST_OFFSET)

        if christmas <= day <= epiphany:
            return LiturgicalSeason.CHRISTMAS
        if ash_wednesday <= day < easter_vigil:
            return LiturgicalSeason.LENT
        if easter_vigil <= day <= pentecost:
            return LiturgicalSeason.EASTER
        if day >= advent_start(year):
            return LiturgicalSeason.ADVENT

        return LiturgicalSeason.ORDINARY_TIME

    def calculate_rank(self, day: date, easter: date) -> LiturgicalRank:
        if _is_sunday(day):
            return LiturgicalRank.SUNDAY
        # Every holy day is treated as a Solemnity; the table does not carry per-feast rank
        if self.is_holy_day(day, easter):
            return LiturgicalRank.SOLEMNITY
        return LiturgicalRank.WEEKDAY

    def get_liturgical_color(self, season: LiturgicalSeason) -> LiturgicalColor:
        return SEASON_COLORS.get(season, LiturgicalColor.GREEN)

    def is_holy_day(self, day: date, easter: date) -> bool:
        return day in self.get_holy_days(day.year, easter)

    def get_holy_days(self, year: int, easter: date) -> List[date]:
        return [
            date(year, 12, 25),                           # Christmas
            date(year, 1, 6),                             # Epiphany
            easter,                                       # Easter
            easter + timedelta(days=ASCENSION_OFFSET),
            easter + timedelta(days=PENTECOST_OFFSET),
            easter + timedelta(days=CORPUS_CHRISTI_OFFSET),
        ]

    def get_liturgical_name(self, day: date, season: LiturgicalSeason,
                            rank: LiturgicalRank, easter: date) -> str:
        week = ordinal(self._week_in_season(day, season, easter))

        if rank == LiturgicalRank.SUNDAY:
            return f"{week} Sunday of {season.value}"

        day_name = weekday_name(day)
        if season == LiturgicalSeason.ORDINARY_TIME:
            return f"{day_name} of the {week} Week in Ordinary Time"

        return f"{day_name} of {season.value}"

    def _week_in_season(self, day: date, season: LiturgicalSeason, easter: date) -> int:
        """1-based week number counted from the start of the current season segment"""
        if season == LiturgicalSeason.CHRISTMAS:
            start = date(day.year - 1, 12, 25)
        elif season == LiturgicalSeason.LENT:
            start = easter + timedelta(days=ASH_WEDNESDAY_OFFSET)
        elif season == LiturgicalSeason.EASTER:
            start = easter + timedelta(days=EASTER_VIGIL_OFFSET)
        elif season == LiturgicalSeason.ADVENT:
            start = advent_start(day.year)
        elif day < easter:
            start = date(day.year, 1, 7)
        else:
            start = easter + timedelta(days=PENTECOST_OFFSET + 1)
        return (day - start).days // 7 + 1

    # -------------------------------------------------------------------------
    # Suggestions
    # -------------------------------------------------------------------------

    def get_suggested_events(self, day: date, season: LiturgicalSeason) -> List[EventSuggestion]:
        suggestions = []

        if _is_sunday(day):
            suggestions.append(EventSuggestion(
                'mass', 'Sunday Mass', 'Principal celebration of the week', '10:00', 'high'
            ))
        else:
            suggestions.append(EventSuggestion(
                'mass', 'Weekday Mass', 'Daily celebration', '09:00', 'medium'
            ))

        if season == LiturgicalSeason.ADVENT:
            suggestions.append(EventSuggestion(
                'devotion', 'Advent Wreath Blessing', 'Traditional Advent devotion', '17:00', 'medium'
            ))
        elif season == LiturgicalSeason.LENT:
            if weekday_name(day) == 'Friday':
                suggestions.append(EventSuggestion(
                    'devotion', 'Stations of the Cross', 'Traditional Friday devotion during Lent', '18:00', 'high'
                ))
            suggestions.append(EventSuggestion(
                'confession', 'Confession', 'Increased availability during Lent', '16:00', 'medium'
            ))
        elif season == LiturgicalSeason.EASTER:
            suggestions.append(EventSuggestion(
                'adoration', 'Eucharistic Adoration', 'Extended adoration during Easter season', '16:00', 'medium'
            ))

        return suggestions

    def get_special_event_suggestions(self, celebration: str) -> List[EventSuggestion]:
        return [EventSuggestion(*entry) for entry in CELEBRATION_SUGGESTIONS.get(celebration, [])]


def _is_sunday(day: date) -> bool:
    return WEEKDAY_NAMES[day.weekday()] == 'Sunday'


# Shared stateless instance
liturgical_calendar = LiturgicalCalendarService()

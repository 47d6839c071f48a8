# Expose the utilities other modules import from the utils package

from utils.timezone import (
    get_parish_time, get_parish_today, get_parish_timezone,
    is_valid_timezone, today_provider, get_timezone_offset
)
from utils.formatting import (
    time_to_minutes, minutes_to_time, add_minutes, intervals_overlap,
    parse_iso_date, weekday_name, format_display_date, ordinal,
    levenshtein_distance, string_similarity, normalize_for_match, is_close_match
)
from utils.logger import StructuredLogger, JsonFormatter, configure_logging

structured_logger = StructuredLogger('parish-scheduling')

__all__ = [
    'get_parish_time', 'get_parish_today', 'get_parish_timezone',
    'is_valid_timezone', 'today_provider', 'get_timezone_offset',
    'time_to_minutes', 'minutes_to_time', 'add_minutes', 'intervals_overlap',
    'parse_iso_date', 'weekday_name', 'format_display_date', 'ordinal',
    'levenshtein_distance', 'string_similarity', 'normalize_for_match', 'is_close_match',
    'StructuredLogger', 'JsonFormatter', 'configure_logging', 'structured_logger'
]

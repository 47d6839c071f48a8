# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Environment-based configuration for Parish Event Scheduling
"""
import os
import secrets

# Environment Detection
ENVIRONMENT = os.environ.get('ENVIRONMENT', 'production')
DEBUG = ENVIRONMENT == 'development'

# Parish Settings
# "Today" for recurrence windows and the weekly workload check is taken in this zone
PARISH_TIMEZONE = os.environ.get('PARISH_TIMEZONE', 'America/Chicago')

# Application Settings
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_hex(32))
PORT = int(os.environ.get('PORT', 5000))

# Occurrence Expansion Settings
# An event without an end time is treated as lasting this long when testing overlaps
DEFAULT_EVENT_DURATION_MINUTES = int(os.environ.get('DEFAULT_EVENT_DURATION_MINUTES', 60))
# Recurring events without a window end are expanded from today through today + N days
DEFAULT_LOOKAHEAD_DAYS = int(os.environ.get('DEFAULT_LOOKAHEAD_DAYS', 30))
# Upper bound on days iterated for a single recurrence window
MAX_EXPANSION_DAYS = int(os.environ.get('MAX_EXPANSION_DAYS', 400))

# Conflict Detection Settings
PRIEST_WEEKLY_EVENT_LIMIT = int(os.environ.get('PRIEST_WEEKLY_EVENT_LIMIT', 3))
LITURGICAL_SUGGESTION_MESSAGE_LIMIT = 2
LITURGICAL_SUGGESTION_LIMIT = 3

# Placeholders for references that do not resolve against the roster
UNKNOWN_PRIEST_LABEL = 'Unknown Priest'
UNKNOWN_LOCATION_LABEL = 'Unknown Location'

# API Limits
MAX_CHECK_EVENTS = int(os.environ.get('MAX_CHECK_EVENTS', 5000))
MAX_LITURGICAL_RANGE_DAYS = 366

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
STRUCTURED_LOGGING = os.environ.get('STRUCTURED_LOGGING', 'True').lower() == 'true'

# Development Settings
if DEBUG:
    LOG_LEVEL = 'DEBUG'

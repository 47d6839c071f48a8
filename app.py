# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

#!/usr/bin/env python3
"""
Parish Event Scheduling - JSON API over the liturgical calendar and conflict checker
"""
import logging
import time
from datetime import date
from functools import wraps

from flask import Flask, jsonify, request, make_response, g

import config
from liturgy import liturgical_calendar, calculate_easter
from liturgy.computus import FIRST_GREGORIAN_YEAR
from models import PayloadValidationError, validate_conflict_payload
from scheduling import (
    ConflictCheckOptions, ConflictDetectionService, conflict_detection, summarize_conflicts
)
from utils import (
    StructuredLogger, configure_logging, get_parish_time, get_timezone_offset, is_valid_timezone,
    parse_iso_date, today_provider
)

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)
api_logger = StructuredLogger('parish-scheduling.api')

# Initialize Flask
app = Flask(__name__)
app.secret_key = config.SECRET_KEY

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': '*',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS',
}


@app.before_request
def start_request():
    """Record start time and answer CORS preflight"""
    g.request_started = time.monotonic()
    if request.method == 'OPTIONS':
        return make_response('', 204)


@app.after_request
def add_headers(response):
    """Add CORS and security headers to all responses"""
    for header, value in CORS_HEADERS.items():
        response.headers[header] = value

    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    response.headers['Server'] = 'Parish Event Scheduling'

    started = getattr(g, 'request_started', None)
    duration_ms = round((time.monotonic() - started) * 1000, 2) if started else None
    api_logger.log_api_call(request.method, request.path, response.status_code, duration_ms)

    return response


def handle_api_errors(f):
    """Decorator to handle API errors consistently"""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except PayloadValidationError as e:
            logger.warning(f"Rejected request to {f.__name__}: {e}")
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            logger.exception(f"API error in {f.__name__}: {e}")
            return jsonify({'error': 'Internal server error'}), 500
    return decorated


def _require_date(value, field: str) -> date:
    parsed = parse_iso_date(value)
    if parsed is None:
        raise PayloadValidationError(f"'{field}' must be a date in YYYY-MM-DD format")
    return parsed


def _require_year(year: int) -> int:
    if year < FIRST_GREGORIAN_YEAR or year > date.max.year:
        raise PayloadValidationError(f"Year must be between {FIRST_GREGORIAN_YEAR} and {date.max.year}")
    return year


@app.errorhandler(404)
def not_found(error):
    return jsonify({'error': f"Route not found: {request.method} {request.path}"}), 404


@app.errorhandler(405)
def method_not_allowed(error):
    return jsonify({'error': f"Method not allowed: {request.method} {request.path}"}), 405


@app.route('/health')
def health_check():
    """Lightweight health check"""
    return jsonify({
        "status": "healthy",
        "timestamp": get_parish_time().isoformat(),
        "timezone": config.PARISH_TIMEZONE,
        "utcOffset": get_timezone_offset(),
        "service": "parish-scheduling",
        "environment": config.ENVIRONMENT
    }), 200


# =============================================================================
# LITURGICAL CALENDAR
# =============================================================================

@app.route('/api/liturgical/day/<day>')
@handle_api_errors
def liturgical_day(day):
    """Season, rank, color and suggestions for one date"""
    target = _require_date(day, 'day')
    _require_year(target.year)
    return jsonify(liturgical_calendar.get_liturgical_day(target).to_dict())


@app.route('/api/liturgical/range')
@handle_api_errors
def liturgical_range():
    """Liturgical days for an inclusive date range"""
    start = _require_date(request.args.get('start'), 'start')
    end = _require_date(request.args.get('end'), 'end')
    _require_year(start.year)
    _require_year(end.year)

    if end < start:
        raise PayloadValidationError("'end' must not be before 'start'")
    if (end - start).days + 1 > config.MAX_LITURGICAL_RANGE_DAYS:
        raise PayloadValidationError(f"Range is limited to {config.MAX_LITURGICAL_RANGE_DAYS} days")

    days = liturgical_calendar.get_liturgical_range(start, end)
    return jsonify({'start': start.isoformat(), 'end': end.isoformat(),
                    'days': [d.to_dict() for d in days]})


@app.route('/api/liturgical/celebrations/<int:year>')
@handle_api_errors
def special_celebrations(year):
    """The major celebrations of a year"""
    _require_year(year)
    celebrations = liturgical_calendar.get_special_celebrations(year)
    return jsonify({'year': year, 'celebrations': [c.to_dict() for c in celebrations]})


@app.route('/api/liturgical/easter/<int:year>')
@handle_api_errors
def easter_date(year):
    _require_year(year)
    return jsonify({'year': year, 'easter': calculate_easter(year).isoformat()})


@app.route('/api/liturgical/mass-times')
@handle_api_errors
def mass_times():
    """Recommended Mass times per weekday"""
    timings = liturgical_calendar.get_recommended_mass_times()
    return jsonify({'massTimes': [t.to_dict() for t in timings.values()]})


# =============================================================================
# CONFLICT DETECTION
# =============================================================================

@app.route('/api/conflicts/check', methods=['POST'])
@handle_api_errors
def check_conflicts():
    """Check a candidate event against the parish's existing events"""
    payload = validate_conflict_payload(request.get_json(silent=True))

    tz_name = payload['timezone']
    if tz_name:
        if not is_valid_timezone(tz_name):
            raise PayloadValidationError(f"Unknown timezone '{tz_name}'")
        service = ConflictDetectionService(today_provider=today_provider(tz_name))
    else:
        service = conflict_detection

    conflicts = service.check_event_conflicts(
        payload['event'],
        payload['existingEvents'],
        payload['priests'],
        payload['locations'],
        ConflictCheckOptions.from_dict(payload['options'])
    )

    return jsonify({
        'conflicts': [c.to_dict() for c in conflicts],
        'summary': summarize_conflicts(conflicts)
    })


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=config.PORT, debug=config.DEBUG)

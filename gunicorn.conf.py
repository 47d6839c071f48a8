# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

import os

# Requests are short and CPU bound; a couple of sync workers is plenty
workers = int(os.environ.get('WEB_CONCURRENCY', '2'))
worker_class = 'sync'
timeout = 30  # Conflict checks are bounded by MAX_CHECK_EVENTS and MAX_EXPANSION_DAYS
keepalive = 2

# Bind to the port the host provides
bind = f"0.0.0.0:{os.environ.get('PORT', '10000')}"

# Logging
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
accesslog = '-'
errorlog = '-'

# The app holds no per-process state, so it can load before forking
preload_app = True

# Process naming
proc_name = 'parish-scheduling'

max_requests = 1000
max_requests_jitter = 50

print(f"Gunicorn binding to {bind}")

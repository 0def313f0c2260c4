"""Gunicorn configuration for production deployment.

Run with: gunicorn -c gunicorn.conf.py cpa_dashboard.main:app
"""

import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Click and lead data live in process memory and the sync loop runs inside the
# worker, so more than one worker would mean diverging dashboards
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"

# Timeout configuration
timeout = 60
graceful_timeout = 30  # Lets an in-flight sync cycle finish on shutdown
keepalive = 5

# Process naming
proc_name = "cpa-dashboard-api"

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

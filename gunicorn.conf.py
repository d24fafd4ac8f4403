"""
Gunicorn configuration for the Promise Ledger API.

Env vars that override defaults:
  PORT       — TCP port to bind
  WORKERS    — number of worker processes (default: 2)
  LOG_LEVEL  — gunicorn log level (default: info)
"""
import os

wsgi_app = "promise_ledger.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Reviews are recomputed per request, so workers are CPU-bound but short-lived.
workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = 60

# stdout only; the app's own logs go through promise_ledger.core.logging.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30

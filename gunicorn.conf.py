"""
Gunicorn configuration for the Emotion Thermometer API.

Run with:  gunicorn -c gunicorn.conf.py
Env vars that override defaults:
  PORT       — TCP port to bind
  WORKERS    — number of worker processes (default: 1)
  LOG_LEVEL  — gunicorn log level (default: info)
"""
import os

wsgi_app = "emotherm.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# The default SQLite file tolerates one writer; raise this only on Postgres.
workers = int(os.environ.get("WORKERS", "1"))

worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = 60

# stdout only; the app's own loggers share the same stream.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30

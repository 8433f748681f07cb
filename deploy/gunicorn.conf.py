"""
Gunicorn configuration for the beatbox access and telemetry API.
Every setting can be overridden from the environment for container deployment.

    gunicorn -c deploy/gunicorn.conf.py beatbox.wsgi:app
"""

from __future__ import annotations

import logging
import multiprocessing
import os

# ===== Binding =====
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")

# ===== Workers =====
# Request handling is short database IO, so threads per worker go further than processes.
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() + 1)))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "5000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "500"))

# ===== Timeouts =====
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "20"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
loglevel = os.environ.get("GUNICORN_LOGLEVEL", os.environ.get("LOG_LEVEL", "info")).lower()
capture_output = True
access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '{"timestamp": "%(t)s", "remote": "%(h)s", "request": "%(r)s", '
    '"status": %(s)s, "response_time": %(D)s, "pid": %(p)s}',
)

forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "127.0.0.1")
proc_name = os.environ.get("GUNICORN_PROC_NAME", "beatbox")
preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")


def when_ready(server):
    logging.getLogger(__name__).info(
        "beatbox ready on %s (workers=%s threads=%s)", bind, workers, threads
    )


def worker_abort(worker):
    logging.getLogger(__name__).warning("worker %s timed out (>%ss), aborting", worker.pid, timeout)

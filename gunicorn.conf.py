"""
Gunicorn configuration for ListSmith production deployment.

Serves ``listsmith.main:app`` with Uvicorn workers. Requests are mostly
waiting on the OpenAI API, so a few async workers carry a lot of traffic.

    gunicorn listsmith.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

# ─── Server Socket ───────────────────────────────────────────
bind = f"0.0.0.0:{os.getenv('PORT', os.getenv('APP_PORT', '8000'))}"

# ─── Worker Processes ────────────────────────────────────────
worker_class = "uvicorn.workers.UvicornWorker"

# (2 × CPU cores) + 1, capped by WEB_CONCURRENCY
workers = min(multiprocessing.cpu_count() * 2 + 1, int(os.getenv("WEB_CONCURRENCY", "4")))

# Concurrency is via asyncio
threads = 1

# ─── Timeouts ────────────────────────────────────────────────
# Research can chain four generator calls, each retried with backoff
timeout = int(os.getenv("GUNICORN_TIMEOUT", "300"))
graceful_timeout = 30
keepalive = 5

# ─── Worker Lifecycle ────────────────────────────────────────
max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "1000"))
max_requests_jitter = 50

# Each worker owns its circuit breaker
preload_app = False

# ─── Logging ─────────────────────────────────────────────────
# LoggingMiddleware writes the structured access line
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ─── Server Mechanics ────────────────────────────────────────
forwarded_allow_ips = "*"
reuse_port = True

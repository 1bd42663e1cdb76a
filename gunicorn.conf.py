"""Gunicorn config: `gunicorn -c gunicorn.conf.py app.main:app`."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# One worker: the store is an in-process JSON snapshot.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

timeout = 60
graceful_timeout = 30

# Keep-alive — must exceed the proxy keep-alive (commonly 60s)
keepalive = 65

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("FINANCE_LOG_LEVEL", "info").lower()

# Gunicorn configuration for the queue API
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

bind = f"0.0.0.0:{os.environ.get('PORT', 8000)}"

# The memory store lives in one process; run more workers only with STORE_BACKEND=mongo
workers = int(os.environ.get("WEB_CONCURRENCY", 1))
worker_class = "uvicorn.workers.UvicornWorker"

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()

proc_name = "careplus-queue"

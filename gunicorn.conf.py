"""
Gunicorn configuration for HearHome deployment.

Usage:
    gunicorn hearhome.main:app -c gunicorn.conf.py
"""

# Bind to all interfaces on port 8000
bind = "0.0.0.0:8000"

# A single worker: the local cache is SQLite by default and jobs are I/O bound
workers = 1

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds): a pet tick walks every cached space
timeout = 120

# Keep-alive connections (seconds)
keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = "info"

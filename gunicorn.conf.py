import os

wsgi_app = "villa_admin.main:app"
bind = f"0.0.0.0:{os.getenv('PORT', 8000)}"
# One worker: the calendar scheduler starts inside each worker
workers = int(os.getenv('WEB_CONCURRENCY', 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 1000
max_requests_jitter = 100
preload_app = True
loglevel = os.getenv('LOG_LEVEL', 'info').lower()

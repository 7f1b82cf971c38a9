# Gunicorn config: gunicorn -c backend/gunicorn_config.py --chdir backend app:app
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '10000')}"
workers = int(os.environ.get("WEB_CONCURRENCY", 2))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", 120))
accesslog = "-"

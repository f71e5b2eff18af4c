"""
Development server: `python -m api`.
In production run `api:create_app()` behind a WSGI server (gunicorn/uwsgi).
"""
import logging
import os

from . import create_app

app = create_app(os.getenv("APP_ENV"))

if __name__ == "__main__":
    host = os.getenv("AUTH_API_HOST", "0.0.0.0")
    port = int(os.getenv("AUTH_API_PORT", "8000"))
    logging.getLogger(__name__).info(
        "Auth API (%s) on http://%s:%s, docs at /apidocs/", app.config["APP_ENV"], host, port
    )
    app.run(host=host, port=port, debug=app.config.get("DEBUG", False))

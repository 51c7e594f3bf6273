# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS
Pages and API are served by `runserver` from one origin, so no CORS
origins are needed by default; set CORS_ALLOWED_ORIGINS to embed the API
elsewhere.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import env

DEV_SERVER_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])

CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=DEV_SERVER_ORIGINS)

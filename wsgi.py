"""WSGI entry point for the interceptor application."""

import os

from interceptor_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))

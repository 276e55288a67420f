"""
HTML view routes of the application under test.

Renders the external items as a page so browser-level (Playwright) tests
can assert on what a user would see when the external API is mocked.
"""

import logging

from flask import Blueprint, render_template

from ..errors import ExternalApiError
from .api import fetch_external_items

logger = logging.getLogger(__name__)

views_bp = Blueprint("views", __name__)


@views_bp.route("/external-data")
def external_data() -> tuple[str, int]:
    """Render the external item list, or an error banner with 502."""
    try:
        items = fetch_external_items()
    except ExternalApiError as exc:
        logger.warning("External API failure while rendering page: %s", exc)
        return render_template("external_data.html", items=[], error="External service unavailable"), 502
    return render_template("external_data.html", items=items, error=None), 200

"""
Error types of the catalog and the application-wide error boundary.

Field validation errors are WTForms' own ``ValidationError`` and never
leave the form. ``ConstraintError`` is always handled by the resource
that raised it. ``NotFoundError`` and anything unexpected reach the
handlers registered here.
"""

import logging

from flask import render_template, request
from werkzeug.exceptions import HTTPException

from .models import db

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something broke!"


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(CatalogError):
    status_code = 404


class ConstraintError(CatalogError):
    """Uniqueness or reference violation, shown to the user as a single error."""
    status_code = 409


def render_error(message, status):
    return render_template('error.html', title=f"Error {status}", message=message, status=status), status


def register_error_handlers(app):
    @app.errorhandler(CatalogError)
    def handle_catalog_error(exc):
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc.message)
        return render_error(exc.message, exc.status_code)

    @app.errorhandler(404)
    def not_found(e):
        return render_error("Page not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return render_error("Method not allowed", 405)

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        if isinstance(exc, HTTPException):
            return exc
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return render_error(GENERIC_FAILURE, 500)

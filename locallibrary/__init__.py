"""
Local library catalog.

Flask application for browsing and managing the authors, books, book
copies and genres of a small library:

- server-rendered CRUD pages for each entity under ``/catalog``
- form validation with Flask-WTF / WTForms, CSRF protection
- SQLAlchemy models through Flask-SQLAlchemy
- security headers via Flask-Talisman

Run:
  flask --app locallibrary seed-db
  python -m locallibrary
"""

import logging

from flask import Flask, redirect, request, url_for
from flask_talisman import Talisman
from flask_wtf import CSRFProtect

from .catalog import bp as catalog_bp
from .commands import register_commands
from .config import Config
from .derived import TEMPLATE_FILTERS
from .errors import register_error_handlers
from .models import db

csrf = CSRFProtect()
logger = logging.getLogger(__name__)


def configure_logging(level):
    root = logging.getLogger("locallibrary")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        root.addHandler(handler)
    root.setLevel(level)


def create_app(test_config=None, config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    csrf.init_app(app)
    Talisman(
        app,
        force_https=app.config['FORCE_HTTPS'],
        session_cookie_secure=app.config['FORCE_HTTPS'],
        content_security_policy=app.config['CONTENT_SECURITY_POLICY'],
    )

    for name, func in TEMPLATE_FILTERS.items():
        app.add_template_filter(func, name)

    app.register_blueprint(catalog_bp)
    register_error_handlers(app)
    register_commands(app)

    @app.before_request
    def log_request():
        logger.info("Received %s request to %s", request.method, request.path)

    @app.route('/')
    def home():
        return redirect(url_for('catalog.index'))

    return app

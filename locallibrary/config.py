import os

# --- Configuration ---
BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("LOCALLIBRARY_SECRET") or "change-me-to-a-secure-random-value"
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or f"sqlite:///{os.path.join(BASE_DIR, 'locallibrary.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOCALLIBRARY_LOG_LEVEL", "INFO")

    # Talisman: keep plain HTTP usable in development
    FORCE_HTTPS = os.environ.get("LOCALLIBRARY_FORCE_HTTPS", "0") == "1"
    CONTENT_SECURITY_POLICY = {
        'default-src': ["'self'"],
        'script-src': ["'self'", "code.jquery.com", "cdn.jsdelivr.net"],
        'style-src': ["'self'", "cdn.jsdelivr.net"],
        'img-src': ["'self'", "data:"],
    }


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"

"""Configuration settings for the CSP demo server."""

import os
from dotenv import load_dotenv

from csp import PolicyConfiguration

# Load environment variables from .env file
load_dotenv()

# Allows same-origin scripts plus a few CDNs. evil.example.org is left out on
# purpose so the checkout page triggers a violation.
CSP_DIRECTIVES = (
    ("default-src", ("'self'",)),
    ("script-src", ("'self'", "https://unpkg.com", "https://cdn.jsdelivr.net", "https://ajax.googleapis.com")),
    ("img-src", ("'self'", "https://picsum.photos", "data:")),
    ("font-src", ("'self'", "https://fonts.gstatic.com")),
    ("style-src", ("'self'", "'unsafe-inline'", "https://fonts.googleapis.com")),
    ("connect-src", ("'self'",)),
    ("object-src", ("'none'",)),
    ("base-uri", ("'self'",)),
    ("frame-ancestors", ("'self'",)),
)


class Config:
    """Base configuration class."""

    DEBUG = False
    # Rate limiting
    RATELIMIT_DEFAULT = "200 per minute"
    RATELIMIT_STORAGE_URI = "memory://"

    def __init__(self, environ=None):
        environ = os.environ if environ is None else environ

        self.HOST = environ.get("HOST") or "0.0.0.0"
        self.PORT = int(environ.get("PORT") or 3000)
        self.RATELIMIT_DEFAULT = environ.get("RATELIMIT_DEFAULT") or self.RATELIMIT_DEFAULT
        # Built once here; request handling only ever sees this object
        self.CSP_POLICY = PolicyConfiguration.from_environ(environ, CSP_DIRECTIVES)


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


def get_config(environ=None):
    """Return the appropriate configuration based on environment."""
    environ = os.environ if environ is None else environ
    env = environ.get("FLASK_ENV", "development")
    if env == "production":
        return ProductionConfig(environ)
    return DevelopmentConfig(environ)

"""Application settings, read from the environment."""
from __future__ import annotations

import os

SEVEN_DAYS = 7 * 24 * 60 * 60


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "salon-secret-key-change-in-production")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///salon.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer tokens are rejected once older than this many seconds.
    TOKEN_MAX_AGE = int(os.environ.get("TOKEN_MAX_AGE", SEVEN_DAYS))

    CORS_ORIGINS = [origin.strip() for origin in os.environ.get("CORS_ORIGINS", "*").split(",")]
    CREATE_TABLES_ON_STARTUP = True
    API_PREFIX = "/api"


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"

# backend/lottodesk/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/lottodesk.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///lottodesk.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOTTODESK_LOG_LEVEL", "INFO")

    # Continuity severity bands: |diff| <= warning -> "warning",
    # <= error -> "error", anything larger -> "critical"
    CONTINUITY_WARNING_THRESHOLD = int(os.environ.get("CONTINUITY_WARNING_THRESHOLD", "5"))
    CONTINUITY_ERROR_THRESHOLD = int(os.environ.get("CONTINUITY_ERROR_THRESHOLD", "20"))

    SESSION_TTL_HOURS = int(os.environ.get("SESSION_TTL_HOURS", "24"))

    BCRYPT_ROUNDS = 12


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "DEBUG"
    # Minimum cost bcrypt accepts; keeps the suite fast
    BCRYPT_ROUNDS = 4

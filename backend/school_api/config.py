"""Application settings and validation."""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE = Path(__file__).resolve().parent.parent


class Settings:
    DATABASE_URL: str
    HOST: str
    PORT: int
    LOG_LEVEL: str
    LOG_DIR: str
    ALLOW_DEV_CORS: bool
    STATIC_DIR: str
    DB_ECHO: bool

    def __init__(self, **overrides):
        default_db = f"sqlite:///{BASE / 'school.db'}"
        self.DATABASE_URL = os.getenv("DATABASE_URL") or default_db
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = os.getenv("PORT", "5000")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_DIR = os.getenv("LOG_DIR", "")
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.STATIC_DIR = os.getenv("STATIC_DIR", str(BASE / "public"))
        self.DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"unknown setting {key!r}")
            setattr(self, key, value)
        self._validate()

    def _validate(self):
        try:
            self.PORT = int(self.PORT)
        except (TypeError, ValueError):
            raise RuntimeError(f"PORT must be an integer, got {self.PORT!r}")
        if not 0 < self.PORT < 65536:
            raise RuntimeError(f"PORT must be between 1 and 65535, got {self.PORT}")
        if not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL must not be empty")


def get_settings(**overrides) -> Settings:
    """Load `.env` (if present) and build a `Settings` instance.

    Keyword overrides win over the environment; tests use them to point
    the app at a throwaway database.
    """
    load_dotenv()
    return Settings(**overrides)

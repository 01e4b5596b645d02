"""
config.py
---------
Environment configuration for the stats API.
Values come from the process environment, optionally seeded from a .env file.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


# ── MySQL ─────────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
DB_NAME: str = os.getenv("DB_NAME", "")
DB_USER: str = os.getenv("DB_USER", "")
DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")

# Full SQLAlchemy URL; takes precedence over the DB_* parts when set
DATABASE_URL: str = os.getenv("DATABASE_URL", "")

# ── Connection pool ───────────────────────────────────────
DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
DB_POOL_TIMEOUT: Optional[float] = _optional_float("DB_POOL_TIMEOUT")  # None waits forever
DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "3600"))
DB_CONNECT_TIMEOUT: int = int(os.getenv("DB_CONNECT_TIMEOUT", "10"))
DB_QUERY_TIMEOUT: int = int(os.getenv("DB_QUERY_TIMEOUT", "30"))

# ── HTTP ──────────────────────────────────────────────────
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3000"))
STATIC_DIR: str = os.getenv("STATIC_DIR", ".")

# tests/conftest.py
"""
Global test bootstrap
- Sets a deterministic test environment BEFORE importing the application
  (settings are read at import time)
- Cheap bcrypt rounds so hashing does not dominate the run
- In-memory document store by default; SQL store tests opt in via `sql_store`
"""

from __future__ import annotations

import os

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (must run before any `videotube` import)
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret-fedcba9876543210")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
os.environ.setdefault("REFRESH_TOKEN_EXPIRE_DAYS", "10")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Pull in the rest of the fixtures (db, app, users)
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.db import *          # noqa: F401,F403,E402
from tests.fixtures.app import *         # noqa: F401,F403,E402
from tests.fixtures.users import *       # noqa: F401,F403,E402

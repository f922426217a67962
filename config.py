"""
PCMDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("PCM_DB", f"sqlite:///{BASE_DIR / 'pcmdb.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("PCM_HOST", "0.0.0.0")
PORT   = int(os.environ.get("PCM_PORT", "5000"))
DEBUG  = os.environ.get("PCM_DEBUG", "0") == "1"
SECRET = os.environ.get("PCM_SECRET", "pcmdb-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("PCM_LOG_LEVEL", "INFO").upper()

# ── Tenancy (no auth - tenant/user come from headers or these defaults) ─
DEFAULT_TENANT = os.environ.get("PCM_TENANT", "tenant-1")
DEFAULT_USER   = os.environ.get("PCM_USER", "user-1")
SEED_DEMO_DATA = os.environ.get("PCM_SEED_DEMO", "1") == "1"

# ── Import validation ──────────────────────────────────────────────────
ALLOWED_CURRENCIES = tuple(
    c.strip() for c in os.environ.get("PCM_CURRENCIES", "Rs,EUR").split(",")
    if c.strip()
)
MAX_UPLOAD_BYTES = int(os.environ.get("PCM_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# ── Pagination ─────────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = 25
PAGE_SIZE_CHOICES = (10, 25, 50, 100)
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100

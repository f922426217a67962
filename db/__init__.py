"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    Category, ProductGroup, ProductSKU, ImportBatch, OutboxEntry → ORM models
"""

from db.engine import init_db, get_session          # noqa: F401
from db.models import (                             # noqa: F401
    Base, Category, ProductGroup, ProductSKU, ImportBatch, OutboxEntry,
)

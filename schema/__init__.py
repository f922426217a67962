"""
schema - Catalog vocabulary and the bulk-import column template.

Public API:
    vocab.ENTITY_STATUSES / UOM_TYPES / YES_NO / MISSING_ACTIONS
    vocab.normalize_yes_no / normalize_uom / normalize_status
    templates.IMPORT_COLUMNS / template_csv / template_xlsx
"""

from schema.vocab import (                          # noqa: F401
    ENTITY_STATUSES,
    UOM_TYPES,
    YES_NO,
    MISSING_ACTIONS,
    normalize_yes_no,
    normalize_uom,
    normalize_status,
)
from schema.templates import (                      # noqa: F401
    IMPORT_COLUMNS,
    column_names,
    required_columns,
    optional_columns,
    template_csv,
    template_xlsx,
)

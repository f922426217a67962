"""
schema.vocab - Closed vocabularies of the catalog.

Statuses, units of measure and yes/no flags are stored as plain strings;
these tuples are the single source of allowed values for forms, the API,
inline cell edits and the import parser.
"""

from __future__ import annotations

from typing import Optional

ENTITY_STATUSES = ("active", "inactive", "paused")
UOM_TYPES       = ("Kg", "mg", "Lit", "ml", "units")
YES_NO          = ("yes", "no")

# Missing-product dispositions offered after an import
MISSING_ACTIONS = ("show", "hide", "delete", "deactivate")

_TRUTHY = frozenset({"yes", "y", "true", "1"})
_FALSY  = frozenset({"no", "n", "false", "0", ""})


def normalize_yes_no(value, default: str = "no") -> str:
    """Map 'Yes', 'TRUE', '1', … onto 'yes'/'no'.  Unknown → default."""
    v = str(value if value is not None else "").strip().lower()
    if v in _TRUTHY:
        return "yes"
    if v in _FALSY:
        return "no" if v else default
    return default


def normalize_uom(value) -> Optional[str]:
    """Case-insensitive match against UOM_TYPES.  Returns None if unknown."""
    v = str(value if value is not None else "").strip().lower()
    for uom in UOM_TYPES:
        if uom.lower() == v:
            return uom
    return None


def normalize_status(value) -> Optional[str]:
    v = str(value if value is not None else "").strip().lower()
    return v if v in ENTITY_STATUSES else None

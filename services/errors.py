"""
services.errors - Exceptions raised by the service layer.

Routes translate these into 4xx JSON responses / flash messages.
"""


class CatalogError(ValueError):
    """A catalog mutation was rejected."""
    status_code = 400


class NotFoundError(CatalogError):
    status_code = 404


class DuplicateProductError(CatalogError):
    status_code = 409


class InvalidFieldError(CatalogError):
    pass

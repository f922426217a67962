"""
services - Business-logic layer sitting between API/UI and DB.
"""

from services.errors import (                                        # noqa: F401
    CatalogError, DuplicateProductError, InvalidFieldError, NotFoundError,
)
from services.tenant_context import Actor, actor_from_headers        # noqa: F401
from services.catalog_service import CategoryService, GroupService   # noqa: F401
from services.products_service import ProductsService                # noqa: F401
from services.search_service import SearchService                    # noqa: F401
from services.export_service import export_catalog_csv              # noqa: F401

import factory
from factory.alchemy import SQLAlchemyModelFactory

import config
from db.models import Category, ProductGroup, ProductSKU


class _Base(SQLAlchemyModelFactory):
    """Session is attached per test by the ``session`` fixture."""

    class Meta:
        abstract = True
        sqlalchemy_session_persistence = "flush"


class CategoryFactory(_Base):
    """Factory for creating Category instances."""

    class Meta:
        model = Category

    tenant_id = config.DEFAULT_TENANT
    catg_name = factory.Sequence(lambda n: f"Category {n}")
    catg_status = "active"
    created_by = config.DEFAULT_USER
    modified_by = config.DEFAULT_USER


class ProductGroupFactory(_Base):
    """Factory for creating ProductGroup instances."""

    class Meta:
        model = ProductGroup

    tenant_id = factory.SelfAttribute("category.tenant_id")
    product_group_name = factory.Sequence(lambda n: f"Group {n}")
    product_group_image = ""
    category = factory.SubFactory(CategoryFactory)
    created_by = config.DEFAULT_USER
    modified_by = config.DEFAULT_USER


class ProductSKUFactory(_Base):
    """Factory for creating ProductSKU instances."""

    class Meta:
        model = ProductSKU

    tenant_id = config.DEFAULT_TENANT
    business_product_id = factory.Sequence(lambda n: f"SKU{n:04d}")
    pricelist_id = "PL1"
    product_name = factory.Sequence(lambda n: f"Product {n}")
    uom = factory.Faker("random_element", elements=["Kg", "mg", "Lit", "ml", "units"])
    uom_value = 1.0
    is_box = "no"
    is_combo = "no"
    product_mrp = factory.Faker("pyfloat", min_value=1, max_value=5000, right_digits=2)
    currency = "Rs"
    sku_status = "active"
    is_hidden = False
    product_group = None
    created_by = config.DEFAULT_USER
    modified_by = config.DEFAULT_USER


ALL_FACTORIES = (CategoryFactory, ProductGroupFactory, ProductSKUFactory)

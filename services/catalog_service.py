"""
services.catalog_service - CRUD for categories and product groups.

All session management is the caller's responsibility (open before,
close/commit after), same as the product service.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import Category, ProductGroup, ProductSKU
from schema.vocab import ENTITY_STATUSES, normalize_status
from services import outbox_service
from services.errors import CatalogError, NotFoundError, InvalidFieldError
from services.tenant_context import Actor


def _required_text(data: dict, key: str, label: str) -> str:
    val = str(data.get(key) or "").strip()
    if not val:
        raise InvalidFieldError(f"{label} is required")
    return val


def _status(value) -> str:
    status = normalize_status(value)
    if status is None:
        raise InvalidFieldError(
            f"Status must be one of: {', '.join(ENTITY_STATUSES)}")
    return status


class CategoryService:

    @staticmethod
    def list(session: Session, tenant_id: str) -> list[Category]:
        return (session.query(Category)
                .filter(Category.tenant_id == tenant_id)
                .order_by(Category.catg_name).all())

    @staticmethod
    def get(session: Session, tenant_id: str, category_id: int) -> Category | None:
        cat = session.get(Category, category_id)
        if cat is None or cat.tenant_id != tenant_id:
            return None
        return cat

    @staticmethod
    def find_by_name(session: Session, tenant_id: str, name: str) -> Category | None:
        return (session.query(Category)
                .filter(Category.tenant_id == tenant_id,
                        Category.catg_name == name)
                .one_or_none())

    @staticmethod
    def create(session: Session, data: dict, actor: Actor) -> Category:
        name = _required_text(data, "catg_name", "Category name")
        if CategoryService.find_by_name(session, actor.tenant_id, name):
            raise CatalogError(f"Category {name!r} already exists")
        cat = Category(
            tenant_id=actor.tenant_id,
            catg_name=name,
            catg_status=_status(data.get("catg_status") or "active"),
            created_by=actor.user_id,
            modified_by=actor.user_id,
        )
        session.add(cat)
        session.flush()
        outbox_service.enqueue(session, actor.tenant_id, "CREATE", "category",
                               cat.to_dict())
        return cat

    @staticmethod
    def update(session: Session, cat: Category, data: dict, actor: Actor) -> Category:
        if "catg_name" in data:
            name = _required_text(data, "catg_name", "Category name")
            other = CategoryService.find_by_name(session, cat.tenant_id, name)
            if other is not None and other.id != cat.id:
                raise CatalogError(f"Category {name!r} already exists")
            cat.catg_name = name
        if "catg_status" in data:
            cat.catg_status = _status(data["catg_status"])
        cat.modified_by = actor.user_id
        session.flush()
        outbox_service.enqueue(session, cat.tenant_id, "UPDATE", "category",
                               cat.to_dict())
        return cat

    @staticmethod
    def delete(session: Session, cat: Category, actor: Actor) -> None:
        count = (session.query(ProductGroup)
                 .filter(ProductGroup.category_id == cat.id).count())
        if count:
            raise CatalogError(
                f"Category {cat.catg_name!r} still has {count} group(s)")
        outbox_service.enqueue(session, cat.tenant_id, "DELETE", "category",
                               {"id": cat.id})
        session.delete(cat)
        session.flush()

    @staticmethod
    def get_or_create(session: Session, name: str, actor: Actor) -> Category:
        cat = CategoryService.find_by_name(session, actor.tenant_id, name)
        if cat is None:
            cat = CategoryService.create(session, {"catg_name": name}, actor)
        return cat


class GroupService:

    @staticmethod
    def list(session: Session, tenant_id: str,
             category_id: int | None = None) -> list[ProductGroup]:
        query = session.query(ProductGroup).filter(ProductGroup.tenant_id == tenant_id)
        if category_id:
            query = query.filter(ProductGroup.category_id == category_id)
        return query.order_by(ProductGroup.product_group_name).all()

    @staticmethod
    def get(session: Session, tenant_id: str, group_id: int) -> ProductGroup | None:
        group = session.get(ProductGroup, group_id)
        if group is None or group.tenant_id != tenant_id:
            return None
        return group

    @staticmethod
    def find_by_name(session: Session, tenant_id: str, category_id: int,
                     name: str) -> ProductGroup | None:
        return (session.query(ProductGroup)
                .filter(ProductGroup.tenant_id == tenant_id,
                        ProductGroup.category_id == category_id,
                        ProductGroup.product_group_name == name)
                .one_or_none())

    @staticmethod
    def _category(session: Session, tenant_id: str, value) -> Category:
        try:
            category_id = int(value)
        except (TypeError, ValueError):
            raise InvalidFieldError("Category is required")
        cat = CategoryService.get(session, tenant_id, category_id)
        if cat is None:
            raise NotFoundError(f"Category {category_id} not found")
        return cat

    @staticmethod
    def create(session: Session, data: dict, actor: Actor) -> ProductGroup:
        name = _required_text(data, "product_group_name", "Group name")
        cat = GroupService._category(session, actor.tenant_id, data.get("category_id"))
        if GroupService.find_by_name(session, actor.tenant_id, cat.id, name):
            raise CatalogError(
                f"Group {name!r} already exists in category {cat.catg_name!r}")
        group = ProductGroup(
            tenant_id=actor.tenant_id,
            product_group_name=name,
            product_group_image=str(data.get("product_group_image") or "").strip(),
            category_id=cat.id,
            created_by=actor.user_id,
            modified_by=actor.user_id,
        )
        session.add(group)
        session.flush()
        outbox_service.enqueue(session, actor.tenant_id, "CREATE", "group",
                               group.to_dict())
        return group

    @staticmethod
    def update(session: Session, group: ProductGroup, data: dict,
               actor: Actor) -> ProductGroup:
        if "category_id" in data:
            group.category_id = GroupService._category(
                session, group.tenant_id, data["category_id"]).id
        if "product_group_name" in data:
            name = _required_text(data, "product_group_name", "Group name")
            other = GroupService.find_by_name(session, group.tenant_id,
                                              group.category_id, name)
            if other is not None and other.id != group.id:
                raise CatalogError(f"Group {name!r} already exists")
            group.product_group_name = name
        if "product_group_image" in data:
            group.product_group_image = str(data["product_group_image"] or "").strip()
        group.modified_by = actor.user_id
        session.flush()
        if "category_id" in data:
            session.expire(group, ["category"])
        outbox_service.enqueue(session, group.tenant_id, "UPDATE", "group",
                               group.to_dict())
        return group

    @staticmethod
    def delete(session: Session, group: ProductGroup, actor: Actor) -> None:
        count = (session.query(ProductSKU)
                 .filter(ProductSKU.product_group_id == group.id).count())
        if count:
            raise CatalogError(
                f"Group {group.product_group_name!r} still has {count} SKU(s)")
        outbox_service.enqueue(session, group.tenant_id, "DELETE", "group",
                               {"id": group.id})
        session.delete(group)
        session.flush()

    @staticmethod
    def get_or_create(session: Session, category: Category, name: str,
                      actor: Actor) -> ProductGroup:
        group = GroupService.find_by_name(session, actor.tenant_id, category.id, name)
        if group is None:
            group = GroupService.create(
                session, {"product_group_name": name, "category_id": category.id},
                actor)
        return group

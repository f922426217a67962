"""
services.tenant_context - Who is acting, and for which tenant.

There is no authentication: the tenant and user are taken from the
X-Tenant-ID / X-User-ID request headers, falling back to the configured
defaults.
"""

from __future__ import annotations

from dataclasses import dataclass

import config

TENANT_HEADER = "X-Tenant-ID"
USER_HEADER   = "X-User-ID"


@dataclass(frozen=True)
class Actor:
    tenant_id: str
    user_id: str


def actor_from_headers(headers) -> Actor:
    tenant = (headers.get(TENANT_HEADER) or "").strip() or config.DEFAULT_TENANT
    user = (headers.get(USER_HEADER) or "").strip() or config.DEFAULT_USER
    return Actor(tenant_id=tenant, user_id=user)


def default_actor() -> Actor:
    return Actor(tenant_id=config.DEFAULT_TENANT, user_id=config.DEFAULT_USER)

"""
services.outbox_service - Append-only log of catalog mutations.

Every create/update/delete made through the services is recorded here in
the same transaction.  replay() hands pending entries, oldest first, to a
sink (the notional remote backend) and stamps them as replayed.

Idempotence: enqueue() with a replay_key already in the log returns the
existing entry, and a replayed entry is never handed out again.  If the
sink raises, the exception propagates and the caller's rollback leaves
the undelivered entries pending for the next replay.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from db.models import OutboxEntry

logger = logging.getLogger(__name__)

ACTIONS  = ("CREATE", "UPDATE", "DELETE")
ENTITIES = ("category", "group", "sku")


def enqueue(
    session: Session,
    tenant_id: str,
    action: str,
    entity: str,
    payload: dict,
    replay_key: Optional[str] = None,
) -> OutboxEntry:
    if action not in ACTIONS:
        raise ValueError(f"Unknown outbox action {action!r}")
    if entity not in ENTITIES:
        raise ValueError(f"Unknown outbox entity {entity!r}")

    key = replay_key or uuid.uuid4().hex
    existing = session.query(OutboxEntry).filter_by(replay_key=key).one_or_none()
    if existing is not None:
        return existing

    entry = OutboxEntry(
        replay_key=key,
        tenant_id=tenant_id,
        action=action,
        entity=entity,
        payload=json.dumps(payload, ensure_ascii=False, default=str),
    )
    session.add(entry)
    session.flush()
    return entry


def pending(session: Session, tenant_id: str) -> list[OutboxEntry]:
    return (
        session.query(OutboxEntry)
        .filter(OutboxEntry.tenant_id == tenant_id,
                OutboxEntry.replayed_on.is_(None))
        .order_by(OutboxEntry.seq)
        .all()
    )


def history(session: Session, tenant_id: str, limit: int = 100) -> list[OutboxEntry]:
    return (
        session.query(OutboxEntry)
        .filter(OutboxEntry.tenant_id == tenant_id)
        .order_by(OutboxEntry.seq.desc())
        .limit(limit)
        .all()
    )


def replay(
    session: Session,
    tenant_id: str,
    sink: Optional[Callable[[OutboxEntry], None]] = None,
) -> int:
    """Deliver pending entries in order.  Returns how many were delivered."""
    sink = sink or _log_sink
    delivered = 0
    for entry in pending(session, tenant_id):
        sink(entry)
        entry.replayed_on = datetime.now(timezone.utc)
        delivered += 1
    session.flush()
    if delivered:
        logger.info("Replayed %d outbox entries for %s", delivered, tenant_id)
    return delivered


def _log_sink(entry: OutboxEntry) -> None:
    logger.debug("outbox %s %s %s (%s)", entry.seq, entry.action,
                 entry.entity, entry.replay_key)

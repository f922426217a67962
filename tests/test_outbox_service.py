import pytest

from services import outbox_service
from services.catalog_service import CategoryService


def test_enqueue_is_idempotent_on_replay_key(session, actor):
    a = outbox_service.enqueue(session, actor.tenant_id, "CREATE", "sku", {"id": 1},
                               replay_key="k1")
    b = outbox_service.enqueue(session, actor.tenant_id, "CREATE", "sku", {"id": 1},
                               replay_key="k1")
    assert a is b
    assert len(outbox_service.pending(session, actor.tenant_id)) == 1


def test_enqueue_rejects_unknown_action_or_entity(session, actor):
    with pytest.raises(ValueError):
        outbox_service.enqueue(session, actor.tenant_id, "UPSERT", "sku", {})
    with pytest.raises(ValueError):
        outbox_service.enqueue(session, actor.tenant_id, "CREATE", "invoice", {})


def test_replay_delivers_in_order_once(session, actor, other_actor):
    CategoryService.create(session, {"catg_name": "One"}, actor)
    CategoryService.create(session, {"catg_name": "Two"}, actor)
    CategoryService.create(session, {"catg_name": "Theirs"}, other_actor)

    seen = []
    assert outbox_service.replay(session, actor.tenant_id, seen.append) == 2
    assert [e.to_dict()["payload"]["catg_name"] for e in seen] == ["One", "Two"]
    assert all(e.replayed_on is not None for e in seen)

    assert outbox_service.replay(session, actor.tenant_id, seen.append) == 0
    assert len(outbox_service.pending(session, other_actor.tenant_id)) == 1


def test_failing_sink_propagates(session, actor):
    outbox_service.enqueue(session, actor.tenant_id, "DELETE", "group", {"id": 3})

    def sink(_entry):
        raise ConnectionError("backend down")

    with pytest.raises(ConnectionError):
        outbox_service.replay(session, actor.tenant_id, sink)


def test_history_is_newest_first(session, actor):
    for i in range(3):
        outbox_service.enqueue(session, actor.tenant_id, "UPDATE", "sku", {"n": i})
    assert [e.to_dict()["payload"]["n"] for e in
            outbox_service.history(session, actor.tenant_id, limit=2)] == [2, 1]

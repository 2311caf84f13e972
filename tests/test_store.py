from __future__ import annotations

import pytest

from agentstore.agents.dispatch import InMemoryActionRegistry
from agentstore.agents.host import AgentHost
from agentstore.exceptions import (
    BindingStateError,
    DuplicateCapabilityError,
    OfferValidationError,
    ScopeNotInitializedError,
)
from agentstore.store import StoreFacade

from tests.helpers import BLESSING, POTION


def test_offer_lifecycle_through_facade(store: StoreFacade, registry: InMemoryActionRegistry) -> None:
    assert not store.capability_visible()

    potion = store.add_payment(**POTION)
    blessing = store.add_subscription(**BLESSING)

    assert [o.name for o in store.offers()] == ["potion", "Blessing"]
    assert store.capability_visible()
    assert "paymentRequest" in registry

    store.remove_offer(potion)
    store.remove_offer(blessing)
    store.remove_offer(blessing)

    assert store.offers() == []
    assert not store.capability_visible()


def test_update_replaces_offer_and_raises_one_epoch(store: StoreFacade, host: AgentHost) -> None:
    potion = store.add_payment(**POTION)
    identity = potion.identity

    assert store.update_offer(potion, **{**POTION, "amount": 2}) is True
    assert store.update_offer(potion, **{**POTION, "amount": 2}) is False

    snapshot = store.scope.catalog.snapshot()
    assert list(snapshot) == [identity]
    assert snapshot[identity].amount == 2
    assert host.epoch_count == 2


def test_update_of_foreign_binding_is_rejected(store: StoreFacade, host: AgentHost) -> None:
    with StoreFacade(host, InMemoryActionRegistry(), store_id="other") as other:
        foreign = other.add_payment(**POTION)

        with pytest.raises(BindingStateError):
            store.update_offer(foreign, **POTION)


def test_invalid_props_are_rejected(store: StoreFacade) -> None:
    with pytest.raises(OfferValidationError):
        store.add_payment(name="potion", amount=1, currency="zzz")

    assert store.offers() == []


def test_extra_regions_wait_for_promotion(store: StoreFacade) -> None:
    store.add_payment(**POTION)
    primary = store.active_region()
    spare = store.add_action_region()

    assert primary is not None and primary.declared
    assert not spare.declared

    store.remove_action_region(primary)

    assert store.active_region() is spare
    assert spare.declared
    assert store.capability_visible()


def test_refresh_follows_host_eligibility(store: StoreFacade, host: AgentHost) -> None:
    store.add_payment(**POTION)

    host.payment_account_id = None
    assert store.refresh() is False

    host.payment_account_id = "acct_9"
    assert store.refresh() is True


def test_close_tears_everything_down(host: AgentHost) -> None:
    registry = InMemoryActionRegistry()
    store = StoreFacade(host, registry, store_id="tavern").open()
    store.add_payment(**POTION)
    scope = store.scope

    store.close()
    store.close()

    assert not store.is_open
    assert len(registry) == 0
    assert store.bindings() == []
    with pytest.raises(ScopeNotInitializedError):
        scope.catalog.snapshot()


def test_two_trees_are_independent() -> None:
    left_host = AgentHost("agent_left", payment_account_id="acct_left")
    right_host = AgentHost("agent_right", payment_account_id="acct_right")
    left_registry = InMemoryActionRegistry()
    right_registry = InMemoryActionRegistry()

    with StoreFacade(left_host, left_registry, "left") as left, \
            StoreFacade(right_host, right_registry, "right") as right:
        left.add_payment(**POTION)

        assert left.active_region() is not None
        assert right.active_region() is not None
        assert right.offers() == []
        assert "paymentRequest" in left_registry
        assert len(right_registry) == 0
        assert right_host.epoch_count == 0


def test_rejected_declaration_does_not_leak_offer(host: AgentHost) -> None:
    shared = InMemoryActionRegistry()

    with StoreFacade(host, shared, "left") as left, StoreFacade(host, shared, "right") as right:
        left.add_payment(**POTION)

        with pytest.raises(DuplicateCapabilityError):
            right.add_payment(**POTION)

        assert right.offers() == []
        assert right.bindings() == []
        assert left.capability_visible()
        assert "paymentRequest" in shared

from __future__ import annotations

import asyncio

import pytest

from agentstore.agents.dispatch import InMemoryActionRegistry
from agentstore.agents.host import AgentHost
from agentstore.agents.offer_binding import PaymentBinding
from agentstore.agents.store_actions import (
    PAYMENT_REQUEST_EXAMPLES,
    GatedAction,
    RegionState,
    build_payment_request_declaration,
    handle_payment_request,
)
from agentstore.exceptions import AccountUnresolvedError, BindingStateError, DuplicateCapabilityError
from agentstore.models.actions import AgentRecord, PendingActionEvent
from agentstore.models.offers import PaymentOffer
from agentstore.services.scope import StoreScope

from tests.helpers import POTION


def _mount_offer(scope: StoreScope, host: AgentHost) -> PaymentBinding:
    binding = PaymentBinding(scope, host)
    binding.on_mount(PaymentOffer(**POTION))
    return binding


# ==================== Gating ====================

def test_visible_when_active_stocked_and_eligible(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()
    assert "paymentRequest" not in registry

    _mount_offer(scope, host)

    assert region.state is RegionState.REGISTERED_ACTIVE
    assert region.declared
    assert "paymentRequest" in registry


def test_empty_catalog_withdraws(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()
    binding = _mount_offer(scope, host)

    binding.on_unmount()

    assert not region.declared
    assert len(registry) == 0
    assert registry.history == ["declare:paymentRequest", "withdraw:paymentRequest"]


def test_ineligible_host_withdraws(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()
    _mount_offer(scope, host)

    host.payment_account_id = None
    assert region.refresh() is False
    assert len(registry) == 0

    host.payment_account_id = "acct_2Xyz"
    assert region.refresh() is True
    assert "paymentRequest" in registry


def test_inactive_region_never_declares(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    first = GatedAction(scope, host, registry)
    second = GatedAction(scope, host, registry)
    first.mount()
    second.mount()
    _mount_offer(scope, host)

    assert first.declared
    assert not second.declared
    assert second.state is RegionState.REGISTERED_INACTIVE
    assert len(registry) == 1


def test_promotion_hands_capability_over_without_duplicates(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    first = GatedAction(scope, host, registry)
    second = GatedAction(scope, host, registry)
    first.mount()
    second.mount()
    _mount_offer(scope, host)

    first.unmount()

    assert second.state is RegionState.REGISTERED_ACTIVE
    assert second.declared
    assert registry.history == [
        "declare:paymentRequest",
        "withdraw:paymentRequest",
        "declare:paymentRequest",
    ]


@pytest.mark.parametrize("condition", ["inactive", "empty", "ineligible"])
def test_each_condition_alone_withdraws(
    condition: str, scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()
    binding = _mount_offer(scope, host)
    assert region.declared

    if condition == "inactive":
        scope.arbiter.reset()
        scope.arbiter.register()
        region.refresh()
    elif condition == "empty":
        binding.on_unmount()
    else:
        host.payment_account_id = ""
        region.refresh()

    assert not region.declared
    assert len(registry) == 0


def test_registry_rejects_duplicate_declarations(registry: InMemoryActionRegistry) -> None:
    declaration = build_payment_request_declaration()
    registry.declare(declaration)

    with pytest.raises(DuplicateCapabilityError):
        registry.declare(declaration)


def test_double_mount_is_rejected(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()

    with pytest.raises(BindingStateError):
        region.mount()


def test_unmount_is_idempotent(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()

    region.unmount()
    region.unmount()

    assert region.state is RegionState.UNMOUNTED
    assert scope.arbiter.participants() == ()


# ==================== Declaration ====================

def test_declaration_shape() -> None:
    declaration = build_payment_request_declaration()

    assert declaration.type == "paymentRequest"
    assert declaration.description.startswith("Request payment or a subscription")
    assert [e["type"] for e in declaration.examples] == ["payment", "subscription"]
    assert "$defs" in declaration.schema
    assert "handler" not in declaration.describe()


def test_examples_use_first_currency_and_interval() -> None:
    payment, subscription = PAYMENT_REQUEST_EXAMPLES

    assert payment["props"]["currency"] == "usd"
    assert subscription["props"]["interval"] == "day"


# ==================== Handler ====================

def _event(account_id: str | None, committed: list[dict]) -> PendingActionEvent:
    args: dict = {"type": "payment", "props": dict(POTION)}

    async def commit() -> None:
        committed.append(dict(args))

    return PendingActionEvent(
        agent=AgentRecord(agent_id="agent_innkeeper", payment_account_id=account_id),
        args=args,
        commit=commit,
        action_type="paymentRequest",
    )


def test_handler_attaches_account_before_commit() -> None:
    committed: list[dict] = []

    asyncio.run(handle_payment_request(_event("acct_1Abc", committed)))

    assert committed == [{"type": "payment", "props": POTION, "payment_account_id": "acct_1Abc"}]


@pytest.mark.parametrize("account_id", [None, "", "   "])
def test_handler_aborts_without_account(account_id: str | None) -> None:
    committed: list[dict] = []
    event = _event(account_id, committed)

    with pytest.raises(AccountUnresolvedError):
        asyncio.run(handle_payment_request(event))

    assert committed == []
    assert "payment_account_id" not in event.args


def test_dispatch_runs_declared_handler(registry: InMemoryActionRegistry) -> None:
    registry.declare(build_payment_request_declaration(account_arg_name="stripe_connect_account_id"))
    committed: list[dict] = []

    asyncio.run(registry.dispatch(_event("acct_1Abc", committed)))

    assert committed[0]["stripe_connect_account_id"] == "acct_1Abc"


def test_account_changes_regate_without_refresh(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()
    _mount_offer(scope, host)

    host.payment_account_id = None
    assert "paymentRequest" not in registry

    host.payment_account_id = "acct_2Xyz"
    assert "paymentRequest" in registry


def test_unmounted_region_ignores_account_changes(
    scope: StoreScope, host: AgentHost, registry: InMemoryActionRegistry
) -> None:
    region = GatedAction(scope, host, registry)
    region.mount()
    _mount_offer(scope, host)
    region.unmount()

    host.payment_account_id = None
    host.payment_account_id = "acct_3"

    assert registry.history == ["declare:paymentRequest", "withdraw:paymentRequest"]

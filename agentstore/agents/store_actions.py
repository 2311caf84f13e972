"""
Store Actions - Gated paymentRequest Capability

A GatedAction is one action region of a store tree. Any number of regions may
be mounted, but the capability is declared to the action-dispatch framework
only while ALL of the following hold:

1. This region's identity is the arbiter's active identity
2. The catalog holds at least one offer
3. The host agent is eligible (has a payment-receiving account)

When any condition fails the capability is withdrawn entirely; the framework
never sees a declaration that would reject every call.

Region states:
    UNMOUNTED -> REGISTERED_INACTIVE <-> REGISTERED_ACTIVE -> UNMOUNTED
Inactive/active transitions come only from arbiter promotion/demotion.
"""
from enum import Enum
from functools import partial
from textwrap import dedent
from typing import Callable, List, Optional
import logging

from ..config import settings
from ..constants import CURRENCIES, INTERVALS
from ..exceptions import AccountUnresolvedError, BindingStateError
from ..models.actions import CapabilityDeclaration, PendingActionEvent
from ..models.offers import store_item_schema, validate_store_item
from ..services.identity import Identity
from ..services.scope import StoreScope
from .dispatch import ActionDispatcher
from .host import HostAgent

logger = logging.getLogger(__name__)


PAYMENT_REQUEST_DESCRIPTION = dedent("""\
    Request payment or a subscription for an item available in the store.
""")

PAYMENT_REQUEST_EXAMPLES = [
    {
        "type": "payment",
        "props": {
            "name": "potion",
            "description": "Heals 50 HP",
            "amount": 1,
            "currency": CURRENCIES[0],
        },
    },
    {
        "type": "subscription",
        "props": {
            "name": "Blessing",
            "description": "Get daily blessings delivered in your DMs",
            "amount": 1,
            "currency": CURRENCIES[0],
            "interval": INTERVALS[0],
            "intervalCount": 1,
        },
    },
]


# ============================================================================
# Capability Handler
# ============================================================================

async def handle_payment_request(
    event: PendingActionEvent,
    account_arg_name: Optional[str] = None
) -> None:
    """
    Attach the requesting agent's payment account to the event, then commit.

    Args:
        event: Pending paymentRequest from the action framework
        account_arg_name: Argument key for the account id
            (defaults to settings.account_arg_name)

    Raises:
        AccountUnresolvedError: agent has no payment account; commit is skipped
    """
    arg_name = account_arg_name or settings.account_arg_name
    account_id = event.agent.payment_account_id

    if not account_id or not str(account_id).strip():
        logger.warning(f"paymentRequest from agent {event.agent.agent_id} has no payment account")
        raise AccountUnresolvedError(
            f"Agent {event.agent.agent_id} has no payment account configured",
            {"agent_id": event.agent.agent_id}
        )

    event.args[arg_name] = account_id
    await event.commit()
    logger.info(f"Committed paymentRequest for agent {event.agent.agent_id}")


def build_payment_request_declaration(
    action_type: Optional[str] = None,
    account_arg_name: Optional[str] = None
) -> CapabilityDeclaration:
    """Declaration of the paymentRequest capability with schema and examples."""
    for example in PAYMENT_REQUEST_EXAMPLES:
        validate_store_item(example)

    return CapabilityDeclaration(
        type=action_type or settings.action_type,
        description=PAYMENT_REQUEST_DESCRIPTION,
        schema=store_item_schema(),
        examples=PAYMENT_REQUEST_EXAMPLES,
        handler=partial(handle_payment_request, account_arg_name=account_arg_name),
    )


# ============================================================================
# Gated Region
# ============================================================================

class RegionState(str, Enum):
    UNMOUNTED = "unmounted"
    REGISTERED_INACTIVE = "registered_inactive"
    REGISTERED_ACTIVE = "registered_active"


class GatedAction:
    """
    One action region competing for the store's single paymentRequest slot.

    Usage:
        region = GatedAction(scope, host, dispatcher)
        region.mount()
        ...
        region.unmount()
    """

    def __init__(
        self,
        scope: StoreScope,
        host: HostAgent,
        dispatcher: ActionDispatcher,
        declaration: Optional[CapabilityDeclaration] = None
    ):
        self._scope = scope
        self._host = host
        self._dispatcher = dispatcher
        self.declaration = declaration or build_payment_request_declaration()
        self.identity: Optional[Identity] = None
        self.state = RegionState.UNMOUNTED
        self.declared = False
        self._unsubscribers: List[Callable[[], None]] = []

    @property
    def mounted(self) -> bool:
        return self.state is not RegionState.UNMOUNTED

    @property
    def active(self) -> bool:
        return self.state is RegionState.REGISTERED_ACTIVE

    def mount(self) -> Identity:
        """
        Join the arbiter and start tracking gating conditions.

        Raises:
            BindingStateError: already mounted
            ScopeNotInitializedError: scope not open
        """
        if self.mounted:
            raise BindingStateError(
                f"Action region {self.identity!r} is already mounted",
                {"identity": repr(self.identity)}
            )
        arbiter = self._scope.arbiter
        catalog = self._scope.catalog

        self.identity = arbiter.register()
        self.state = RegionState.REGISTERED_INACTIVE
        self._unsubscribers = [
            arbiter.subscribe(self._on_active_changed),
            catalog.subscribe(self._on_catalog_changed),
        ]
        subscribe_host = getattr(self._host, "subscribe", None)
        if callable(subscribe_host):
            self._unsubscribers.append(subscribe_host(self._on_host_changed))
        self.evaluate()
        return self.identity

    def unmount(self) -> None:
        """Withdraw (if declared), stop listening, leave the arbiter. Idempotent."""
        if not self.mounted:
            return
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._set_declared(False)

        identity = self.identity
        self.identity = None
        self.state = RegionState.UNMOUNTED
        self._scope.arbiter.unregister(identity)

    def refresh(self) -> bool:
        """Re-evaluate after an external eligibility change."""
        return self.evaluate()

    def evaluate(self) -> bool:
        """
        Recompute the gating conjunction and declare/withdraw to match.

        Returns:
            True if the capability is visible after evaluation
        """
        if not self.mounted:
            return False

        is_active = self._scope.arbiter.current_active() == self.identity
        self.state = RegionState.REGISTERED_ACTIVE if is_active else RegionState.REGISTERED_INACTIVE

        visible = is_active and len(self._scope.catalog) > 0 and bool(self._host.eligible)
        self._set_declared(visible)
        return visible

    # ==================== Internals ====================

    def _on_active_changed(self, previous: Optional[Identity], current: Optional[Identity]) -> None:
        if self.identity in (previous, current):
            self.evaluate()

    def _on_catalog_changed(self, catalog) -> None:
        self.evaluate()

    def _on_host_changed(self, host) -> None:
        self.evaluate()

    def _set_declared(self, visible: bool) -> None:
        if visible and not self.declared:
            self._dispatcher.declare(self.declaration)
            self.declared = True
            logger.info(f"Region {self.identity!r} declared {self.declaration.type}")
        elif not visible and self.declared:
            self._dispatcher.withdraw(self.declaration.type)
            self.declared = False
            logger.info(f"Region {self.identity!r} withdrew {self.declaration.type}")

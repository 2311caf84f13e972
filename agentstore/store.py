"""
Store Facade

Composition root for one store tree: one StoreScope, any number of offer
bindings, and one or more gated action regions competing for the single
paymentRequest declaration.

Usage:
    with StoreFacade(host, dispatcher, store_id="tavern") as store:
        potion = store.add_payment(name="potion", amount=1, currency="usd")
        store.update_offer(potion, name="potion", amount=2, currency="usd")
        store.remove_offer(potion)
"""
from typing import List, Optional
import logging

from .agents.dispatch import ActionDispatcher
from .agents.host import HostAgent
from .agents.offer_binding import OfferBinding, PaymentBinding, SubscriptionBinding
from .agents.store_actions import GatedAction
from .exceptions import BindingStateError
from .models.actions import CapabilityDeclaration
from .models.offers import OfferDescriptor, build_offer
from .services.identity import Identity
from .services.scope import StoreScope

logger = logging.getLogger(__name__)


class StoreFacade:
    """One mounted store tree."""

    def __init__(
        self,
        host: HostAgent,
        dispatcher: ActionDispatcher,
        store_id: str = "store",
        declaration: Optional[CapabilityDeclaration] = None
    ):
        self.store_id = store_id
        self.host = host
        self.dispatcher = dispatcher
        self.scope = StoreScope(name=store_id)
        self._declaration = declaration
        self._bindings: List[OfferBinding] = []
        self._regions: List[GatedAction] = []

    # ==================== Lifecycle ====================

    def open(self) -> "StoreFacade":
        """Open the scope and mount the primary action region."""
        if self.scope.is_open:
            return self
        self.scope.open()
        self.add_action_region()
        logger.info(f"Store {self.store_id} opened for agent {self.host.agent_id}")
        return self

    def close(self) -> None:
        """Unmount every offer and region, then tear the scope down."""
        if not self.scope.is_open:
            return
        for binding in list(self._bindings):
            binding.on_unmount()
        for region in list(self._regions):
            region.unmount()
        self._bindings.clear()
        self._regions.clear()
        self.scope.close()
        logger.info(f"Store {self.store_id} closed")

    def __enter__(self) -> "StoreFacade":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self.scope.is_open

    # ==================== Offers ====================

    def add_payment(self, **fields) -> PaymentBinding:
        """Mount a one-off payment offer."""
        binding = PaymentBinding(self.scope, self.host)
        return self._mount(binding, build_offer("payment", **fields))

    def add_subscription(self, **fields) -> SubscriptionBinding:
        """Mount a subscription offer."""
        binding = SubscriptionBinding(self.scope, self.host)
        return self._mount(binding, build_offer("subscription", **fields))

    def update_offer(self, binding: OfferBinding, **fields) -> bool:
        """
        Replace an offer's props.

        Returns:
            True if the dependency tuple changed and the offer was re-registered
        """
        self._require_owned(binding)
        descriptor = build_offer(binding.kind, **fields)
        return binding.on_update(descriptor)

    def remove_offer(self, binding: OfferBinding) -> None:
        """Unmount an offer. Removing an already removed offer is a no-op."""
        if binding in self._bindings:
            self._bindings.remove(binding)
        binding.on_unmount()

    def offers(self) -> List[OfferDescriptor]:
        return self.scope.catalog.offers()

    def bindings(self) -> List[OfferBinding]:
        return list(self._bindings)

    def _mount(self, binding: OfferBinding, descriptor: OfferDescriptor) -> OfferBinding:
        binding.on_mount(descriptor)
        self._bindings.append(binding)
        return binding

    def _require_owned(self, binding: OfferBinding) -> None:
        if binding not in self._bindings:
            raise BindingStateError(
                f"Offer binding is not mounted in store {self.store_id}",
                {"store_id": self.store_id}
            )

    # ==================== Action Regions ====================

    def add_action_region(self) -> GatedAction:
        """Mount another region under this store's arbiter."""
        region = GatedAction(self.scope, self.host, self.dispatcher, declaration=self._declaration)
        region.mount()
        self._regions.append(region)
        return region

    def remove_action_region(self, region: GatedAction) -> None:
        if region in self._regions:
            self._regions.remove(region)
        region.unmount()

    def regions(self) -> List[GatedAction]:
        return list(self._regions)

    def active_region(self) -> Optional[GatedAction]:
        """Region currently holding the arbiter's active slot."""
        active: Optional[Identity] = self.scope.arbiter.current_active()
        for region in self._regions:
            if region.identity == active:
                return region
        return None

    def capability_visible(self) -> bool:
        return any(region.declared for region in self._regions)

    def refresh(self) -> bool:
        """
        Re-evaluate gating after the host's eligibility changed.

        Returns:
            True if the capability is declared afterwards
        """
        for region in list(self._regions):
            region.refresh()
        return self.capability_visible()

"""
Offer Bindings

Per-offer lifecycle unit. A binding is driven by three discrete events:

    on_mount(descriptor)   UNMOUNTED -> MOUNTED     register + epoch
    on_update(descriptor)  MOUNTED   -> MOUNTED     re-register + epoch, only if
                                                    the dependency tuple changed
    on_unmount()           MOUNTED   -> UNMOUNTED   unregister exactly once

The identity is allocated on mount and kept across updates, so a change
replaces the catalog entry instead of adding a second one.
"""
from enum import Enum
from typing import Any, Optional, Tuple, Type
import logging

from ..exceptions import BindingStateError, OfferValidationError
from ..models.offers import OfferDescriptor, PaymentOffer, SubscriptionOffer
from ..services.identity import Identity
from ..services.scope import StoreScope
from .host import HostAgent

logger = logging.getLogger(__name__)


class BindingState(str, Enum):
    UNMOUNTED = "unmounted"
    MOUNTED = "mounted"


class OfferBinding:
    """
    Base binding. Subclasses pick the descriptor variant and the catalog
    register/unregister pair.
    """

    kind: str
    descriptor_type: Type[OfferDescriptor]

    def __init__(self, scope: StoreScope, host: HostAgent):
        self._scope = scope
        self._host = host
        self.state = BindingState.UNMOUNTED
        self.identity: Optional[Identity] = None
        self.descriptor: Optional[OfferDescriptor] = None
        self._deps: Optional[Tuple[Any, ...]] = None

    @property
    def mounted(self) -> bool:
        return self.state is BindingState.MOUNTED

    # ==================== Lifecycle Events ====================

    def on_mount(self, descriptor: OfferDescriptor) -> Identity:
        """
        Mount the offer: allocate identity, register, raise first epoch.

        Raises:
            BindingStateError: already mounted
            OfferValidationError: wrong descriptor variant
        """
        if self.mounted:
            raise BindingStateError(
                f"{type(self).__name__} is already mounted as {self.identity!r}",
                {"identity": repr(self.identity)}
            )
        self._check_variant(descriptor)

        self.identity = self._scope.allocate()
        self.state = BindingState.MOUNTED
        try:
            self._register(descriptor)
        except Exception:
            logger.warning(f"Mount of {self.identity!r} failed, rolling back")
            self.on_unmount()
            raise
        return self.identity

    def on_update(self, descriptor: OfferDescriptor) -> bool:
        """
        Apply new props. Re-registers only when the dependency tuple differs.

        Returns:
            True if the offer was re-registered

        Raises:
            BindingStateError: not mounted
        """
        if not self.mounted:
            raise BindingStateError(
                f"{type(self).__name__} cannot update while unmounted",
                {"name": getattr(descriptor, "name", None)}
            )
        self._check_variant(descriptor)

        if descriptor.dependency_tuple() == self._deps:
            return False

        logger.debug(f"Offer {self.identity!r} changed: {self._deps!r} -> {descriptor.dependency_tuple()!r}")
        self._register(descriptor)
        return True

    def on_unmount(self) -> None:
        """Unregister and release the identity. No-op when already unmounted."""
        if not self.mounted:
            return
        identity = self.identity
        self.state = BindingState.UNMOUNTED
        self.identity = None
        self.descriptor = None
        self._deps = None
        self._unregister(identity)

    # ==================== Internals ====================

    def _register(self, descriptor: OfferDescriptor) -> None:
        try:
            self._catalog_register(self.identity, descriptor)
        except Exception:
            # listeners run after the write, so the catalog may hold either version
            self.descriptor = self._scope.catalog.get(self.identity)
            self._deps = self.descriptor.dependency_tuple() if self.descriptor else None
            raise
        self.descriptor = descriptor
        self._deps = descriptor.dependency_tuple()
        self._host.use_epoch(self._deps)

    def _check_variant(self, descriptor: OfferDescriptor) -> None:
        if not isinstance(descriptor, self.descriptor_type):
            raise OfferValidationError(
                f"{type(self).__name__} requires {self.descriptor_type.__name__}",
                {"received": type(descriptor).__name__}
            )

    def _catalog_register(self, identity: Identity, descriptor: OfferDescriptor) -> None:
        raise NotImplementedError

    def _unregister(self, identity: Identity) -> None:
        raise NotImplementedError


class PaymentBinding(OfferBinding):
    """One-off payment offer."""

    kind = "payment"
    descriptor_type = PaymentOffer

    def _catalog_register(self, identity: Identity, descriptor: OfferDescriptor) -> None:
        self._scope.catalog.register_payment(identity, descriptor)

    def _unregister(self, identity: Identity) -> None:
        self._scope.catalog.unregister_payment(identity)


class SubscriptionBinding(OfferBinding):
    """Recurring subscription offer."""

    kind = "subscription"
    descriptor_type = SubscriptionOffer

    def _catalog_register(self, identity: Identity, descriptor: OfferDescriptor) -> None:
        self._scope.catalog.register_subscription(identity, descriptor)

    def _unregister(self, identity: Identity) -> None:
        self._scope.catalog.unregister_subscription(identity)

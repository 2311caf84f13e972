"""
Catalog Registry

Tracks the offers currently mounted in one store tree, keyed by the identity
of the binding that mounted them.

Storage is type-agnostic (payment and subscription descriptors live in one
mapping) so gating only needs cardinality, while callers can still filter by
variant when building examples or listings.
"""
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional
import logging
import threading

from ..exceptions import OfferValidationError, ScopeNotInitializedError
from ..models.offers import OfferDescriptor, PaymentOffer, SubscriptionOffer
from .identity import Identity

logger = logging.getLogger(__name__)


CatalogListener = Callable[["CatalogRegistry"], None]


class CatalogRegistry:
    """
    Live offer catalog for a single store scope.

    Each mutation builds a new mapping and swaps it in one assignment, so a
    reader never sees both the stale and the fresh entry for one identity.
    """

    def __init__(self, name: str = "catalog"):
        self._name = name
        self._entries: Mapping[Identity, OfferDescriptor] = MappingProxyType({})
        self._listeners: List[CatalogListener] = []
        self._lock = threading.RLock()
        self._closed = False

    # ==================== Registration ====================

    def register_payment(self, identity: Identity, descriptor: PaymentOffer) -> None:
        """Upsert a payment offer under identity."""
        if not isinstance(descriptor, PaymentOffer):
            raise OfferValidationError(
                "register_payment() requires a PaymentOffer",
                {"received": type(descriptor).__name__}
            )
        self._upsert(identity, descriptor)

    def register_subscription(self, identity: Identity, descriptor: SubscriptionOffer) -> None:
        """Upsert a subscription offer under identity."""
        if not isinstance(descriptor, SubscriptionOffer):
            raise OfferValidationError(
                "register_subscription() requires a SubscriptionOffer",
                {"received": type(descriptor).__name__}
            )
        self._upsert(identity, descriptor)

    def unregister_payment(self, identity: Identity) -> None:
        """Remove the payment offer for identity if present."""
        self._remove(identity, "payment")

    def unregister_subscription(self, identity: Identity) -> None:
        """Remove the subscription offer for identity if present."""
        self._remove(identity, "subscription")

    def _upsert(self, identity: Identity, descriptor: OfferDescriptor) -> None:
        with self._lock:
            self._require_open("register")
            entries = dict(self._entries)
            replaced = identity in entries
            entries[identity] = descriptor
            self._entries = MappingProxyType(entries)

        logger.info(
            f"{self._name}: {'re-registered' if replaced else 'registered'} "
            f"{descriptor.kind} '{descriptor.name}' under {identity!r} "
            f"({descriptor.amount} {descriptor.currency})"
        )
        self._notify()

    def _remove(self, identity: Identity, kind: str) -> None:
        with self._lock:
            self._require_open("unregister")
            current = self._entries.get(identity)
            if current is None or current.kind != kind:
                logger.debug(f"{self._name}: no {kind} offer under {identity!r}, nothing to remove")
                return
            entries = dict(self._entries)
            del entries[identity]
            self._entries = MappingProxyType(entries)

        logger.info(f"{self._name}: unregistered {kind} '{current.name}' under {identity!r}")
        self._notify()

    # ==================== Reads ====================

    def snapshot(self) -> Dict[Identity, OfferDescriptor]:
        """Copy of the current identity -> descriptor mapping."""
        with self._lock:
            self._require_open("snapshot")
            return dict(self._entries)

    def get(self, identity: Identity) -> Optional[OfferDescriptor]:
        with self._lock:
            self._require_open("get")
            return self._entries.get(identity)

    def offers(self) -> List[OfferDescriptor]:
        """Descriptors in registration order."""
        return list(self.snapshot().values())

    def payments(self) -> List[PaymentOffer]:
        return [o for o in self.offers() if isinstance(o, PaymentOffer)]

    def subscriptions(self) -> List[SubscriptionOffer]:
        return [o for o in self.offers() if isinstance(o, SubscriptionOffer)]

    def __len__(self) -> int:
        with self._lock:
            self._require_open("len")
            return len(self._entries)

    # ==================== Lifecycle ====================

    def subscribe(self, listener: CatalogListener) -> Callable[[], None]:
        """Call listener(registry) after every effective change."""
        with self._lock:
            self._require_open("subscribe")
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def reset(self) -> None:
        """Drop every entry. The registry stays usable."""
        with self._lock:
            self._require_open("reset")
            had_entries = bool(self._entries)
            self._entries = MappingProxyType({})

        if had_entries:
            self._notify()

    def close(self) -> None:
        """Empty the catalog and refuse further use."""
        with self._lock:
            if self._closed:
                return
            self._entries = MappingProxyType({})
            self._listeners.clear()
            self._closed = True
        logger.info(f"{self._name}: closed")

    def _notify(self) -> None:
        """Run every listener; the first failure is re-raised after all have run."""
        first_error: Optional[Exception] = None
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"{self._name}: listener {listener!r} failed: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def _require_open(self, operation: str) -> None:
        if self._closed:
            raise ScopeNotInitializedError(
                f"{operation}() called on closed {self._name}",
                {"operation": operation, "catalog": self._name}
            )

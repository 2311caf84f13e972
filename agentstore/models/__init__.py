"""
Offer and action models.

Exports offer descriptors, the store item schema and capability types.
"""
from .offers import (
    OfferDescriptor,
    PaymentOffer,
    PaymentProps,
    SubscriptionOffer,
    SubscriptionProps,
    StoreItem,
    build_offer,
    store_item_schema,
    validate_store_item,
)
from .actions import AgentRecord, CapabilityDeclaration, PendingActionEvent

__all__ = [
    "OfferDescriptor",
    "PaymentOffer",
    "PaymentProps",
    "SubscriptionOffer",
    "SubscriptionProps",
    "StoreItem",
    "build_offer",
    "store_item_schema",
    "validate_store_item",
    "AgentRecord",
    "CapabilityDeclaration",
    "PendingActionEvent",
]

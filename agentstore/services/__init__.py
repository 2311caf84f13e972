"""
Store services.

Identity allocation, active-holder arbitration, offer catalog and the scope
object tying them to one store tree.
"""
from .identity import Identity, IdentityAllocator
from .arbiter import ActiveArbiter, ParticipantSet
from .catalog import CatalogRegistry
from .scope import StoreScope

__all__ = [
    "Identity",
    "IdentityAllocator",
    "ActiveArbiter",
    "ParticipantSet",
    "CatalogRegistry",
    "StoreScope",
]

"""
Store Scope

Explicit per-tree state handle. One StoreScope owns the identity allocator,
the active arbiter and the catalog registry of one mounted store tree, and is
passed to every binding and action region instead of being looked up from
ambient context. Independent scopes share nothing.
"""
from typing import Optional
import logging

from ..exceptions import ScopeNotInitializedError
from .arbiter import ActiveArbiter
from .catalog import CatalogRegistry
from .identity import Identity, IdentityAllocator

logger = logging.getLogger(__name__)


class StoreScope:
    """
    Owner of one store tree's arbiter and catalog.

    Usage:
        with StoreScope("shop") as scope:
            identity = scope.arbiter.register()
    """

    def __init__(self, name: str = "store"):
        self.name = name
        self._allocator: Optional[IdentityAllocator] = None
        self._arbiter: Optional[ActiveArbiter] = None
        self._catalog: Optional[CatalogRegistry] = None

    def open(self) -> "StoreScope":
        """Create fresh, empty arbiter and catalog. Reopening a closed scope starts over."""
        if self.is_open:
            return self
        self._allocator = IdentityAllocator()
        self._arbiter = ActiveArbiter(self._allocator, name=f"{self.name}.arbiter")
        self._catalog = CatalogRegistry(name=f"{self.name}.catalog")
        logger.info(f"Opened store scope: {self.name}")
        return self

    def close(self) -> None:
        """Tear down: arbiter and catalog are emptied and reject further calls."""
        if self._arbiter is not None:
            self._arbiter.close()
        if self._catalog is not None:
            self._catalog.close()
        if self.is_open:
            logger.info(f"Closed store scope: {self.name}")
        self._allocator = None

    @property
    def is_open(self) -> bool:
        return self._allocator is not None

    @property
    def arbiter(self) -> ActiveArbiter:
        if self._arbiter is None:
            raise ScopeNotInitializedError(
                f"Store scope '{self.name}' was never opened",
                {"scope": self.name, "component": "arbiter"}
            )
        return self._arbiter

    @property
    def catalog(self) -> CatalogRegistry:
        if self._catalog is None:
            raise ScopeNotInitializedError(
                f"Store scope '{self.name}' was never opened",
                {"scope": self.name, "component": "catalog"}
            )
        return self._catalog

    def allocate(self) -> Identity:
        """Fresh identity from this scope's allocator."""
        if self._allocator is None:
            raise ScopeNotInitializedError(
                f"Store scope '{self.name}' is not open",
                {"scope": self.name, "component": "allocator"}
            )
        return self._allocator.allocate()

    def __enter__(self) -> "StoreScope":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

"""
Store Directory

Holds the independently mounted store trees of one process, keyed by store id.
Every store gets its own scope and, unless one is supplied, its own action
registry, so trees never see each other's offers or declarations.
"""
from typing import Dict, List, Optional
import logging

from ..agents.dispatch import ActionDispatcher, InMemoryActionRegistry
from ..agents.host import HostAgent
from ..exceptions import StoreNotFoundError
from ..store import StoreFacade

logger = logging.getLogger(__name__)


class StoreDirectory:
    """Open store trees by id."""

    def __init__(self):
        self._stores: Dict[str, StoreFacade] = {}

    def open_store(
        self,
        store_id: str,
        host: HostAgent,
        dispatcher: Optional[ActionDispatcher] = None
    ) -> StoreFacade:
        """
        Open a new store tree, or return the already open one with this id.

        Args:
            store_id: Unique store identifier
            host: Agent the store offers items for
            dispatcher: Action registry (a fresh InMemoryActionRegistry by default)
        """
        existing = self._stores.get(store_id)
        if existing is not None:
            return existing

        store = StoreFacade(host, dispatcher or InMemoryActionRegistry(), store_id=store_id)
        store.open()
        self._stores[store_id] = store
        logger.info(f"Store directory: opened {store_id} ({len(self._stores)} open)")
        return store

    def get(self, store_id: str) -> StoreFacade:
        """
        Raises:
            StoreNotFoundError: no open store with this id
        """
        store = self._stores.get(store_id)
        if store is None:
            raise StoreNotFoundError(
                f"No open store with ID: {store_id}",
                {"store_id": store_id}
            )
        return store

    def close_store(self, store_id: str) -> None:
        store = self._stores.pop(store_id, None)
        if store is not None:
            store.close()

    def close_all(self) -> None:
        for store_id in list(self._stores):
            self.close_store(store_id)

    def store_ids(self) -> List[str]:
        return list(self._stores)

    def __len__(self) -> int:
        return len(self._stores)

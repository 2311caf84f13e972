"""
Stores API Endpoints

Read-only view of the open store trees: their live offer catalogs and the
capability each one currently declares to its agent.
"""
from fastapi import APIRouter, Request
from typing import Any, Dict
import logging

from ..agents.dispatch import InMemoryActionRegistry
from ..services.store_directory import StoreDirectory
from ..store import StoreFacade

logger = logging.getLogger(__name__)

router = APIRouter()


def _directory(request: Request) -> StoreDirectory:
    return request.app.state.directory


def _summary(store: StoreFacade) -> Dict[str, Any]:
    active = store.active_region()
    return {
        "store_id": store.store_id,
        "agent_id": store.host.agent_id,
        "offer_count": len(store.offers()),
        "region_count": len(store.regions()),
        "active_region": active.identity.value if active else None,
        "capability_declared": store.capability_visible(),
    }


@router.get("")
async def list_stores(request: Request) -> Dict[str, Any]:
    """
    List open stores.

    Returns:
        {
            "count": int,
            "stores": List[StoreSummary]
        }
    """
    directory = _directory(request)
    stores = [_summary(directory.get(store_id)) for store_id in directory.store_ids()]
    return {
        "count": len(stores),
        "stores": stores
    }


@router.get("/{store_id}/offers")
async def list_offers(store_id: str, request: Request) -> Dict[str, Any]:
    """
    Get the live catalog of a store.

    Path Parameters:
        store_id: Store identifier

    Returns:
        {
            "store_id": str,
            "count": int,
            "offers": List[{"identity": int, ...offer fields}]
        }

    Example:
        GET /api/stores/tavern/offers
    """
    store = _directory(request).get(store_id)
    logger.debug(f"List offers: {store_id}")

    snapshot = store.scope.catalog.snapshot()
    offers = [
        {"identity": identity.value, **descriptor.model_dump(by_alias=True)}
        for identity, descriptor in snapshot.items()
    ]
    return {
        "store_id": store_id,
        "count": len(offers),
        "offers": offers
    }


@router.get("/{store_id}/capabilities")
async def list_capabilities(store_id: str, request: Request) -> Dict[str, Any]:
    """
    Get the capabilities a store currently declares to its agent.

    Returns an empty list while the capability is withdrawn (no offers, no
    payment account, or no mounted region).
    """
    store = _directory(request).get(store_id)

    declarations = []
    if isinstance(store.dispatcher, InMemoryActionRegistry):
        declarations = [d.describe() for d in store.dispatcher.declarations()]
    elif store.capability_visible():
        declarations = [region.declaration.describe() for region in store.regions() if region.declared]

    return {
        "store_id": store_id,
        "capabilities": declarations
    }

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from agentstore.agents.dispatch import InMemoryActionRegistry
from agentstore.agents.host import AgentHost
from agentstore.services.scope import StoreScope
from agentstore.store import StoreFacade

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def host() -> AgentHost:
    return AgentHost("agent_innkeeper", name="Innkeeper", payment_account_id="acct_1Abc")


@pytest.fixture
def registry() -> InMemoryActionRegistry:
    return InMemoryActionRegistry()


@pytest.fixture
def scope() -> Iterator[StoreScope]:
    with StoreScope("test") as opened:
        yield opened


@pytest.fixture
def store(host: AgentHost, registry: InMemoryActionRegistry) -> Iterator[StoreFacade]:
    with StoreFacade(host, registry, store_id="tavern") as opened:
        yield opened

"""
Host Agent Interface

The agent runtime embedding a store. The store only needs three things from
it: a sink for change epochs, the agent's payment account, and whether the
agent may receive payments at all.
"""
from typing import Any, Callable, List, Optional, Protocol, Tuple, runtime_checkable
import logging

from ..models.actions import AgentRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class HostAgent(Protocol):
    """
    Upstream agent runtime consumed by offer bindings and the gated action.

    Hosts that can push eligibility changes also expose
    subscribe(listener) -> unsubscribe; others rely on GatedAction.refresh().
    """

    agent_id: str

    def use_epoch(self, deps: Tuple[Any, ...]) -> None:
        """Receive a change epoch for an offer's dependency tuple."""
        ...

    @property
    def payment_account_id(self) -> Optional[str]:
        ...

    @property
    def eligible(self) -> bool:
        """True when the agent has a configured payment-receiving account."""
        ...

    def record(self) -> AgentRecord:
        """Agent snapshot attached to pending action events."""
        ...


class AgentHost:
    """
    In-process host agent.

    Records every epoch it receives so the runtime (or a test) can coalesce
    them on its own schedule. Eligibility follows the payment account, and
    subscribers are told whenever the account changes.
    """

    def __init__(
        self,
        agent_id: str,
        name: str = "",
        payment_account_id: Optional[str] = None
    ):
        self.agent_id = agent_id
        self.name = name or agent_id
        self._payment_account_id = payment_account_id
        self.epochs: List[Tuple[Any, ...]] = []
        self._listeners: List[Callable[["AgentHost"], None]] = []

    def use_epoch(self, deps: Tuple[Any, ...]) -> None:
        self.epochs.append(tuple(deps))
        logger.debug(f"Agent {self.agent_id}: epoch #{len(self.epochs)} {deps!r}")

    @property
    def payment_account_id(self) -> Optional[str]:
        return self._payment_account_id

    @payment_account_id.setter
    def payment_account_id(self, value: Optional[str]) -> None:
        self._payment_account_id = value
        logger.info(f"Agent {self.agent_id}: payment account {'set' if value else 'cleared'}")
        for listener in list(self._listeners):
            listener(self)

    def subscribe(self, listener: Callable[["AgentHost"], None]) -> Callable[[], None]:
        """Call listener(host) after every payment account change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def eligible(self) -> bool:
        return bool(self._payment_account_id)

    @property
    def epoch_count(self) -> int:
        return len(self.epochs)

    def record(self) -> AgentRecord:
        """Snapshot of this agent as carried on pending action events."""
        return AgentRecord(
            agent_id=self.agent_id,
            name=self.name,
            payment_account_id=self._payment_account_id,
        )

"""
Action-dispatch data structures.

These mirror what the agent's action framework hands to a capability:
a declaration describing the action, and a pending event carrying the
requesting agent and the outgoing arguments.
"""
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional


@dataclass(frozen=True)
class AgentRecord:
    """Agent on whose behalf an action is requested."""
    agent_id: str
    name: str = ""
    payment_account_id: Optional[str] = None


@dataclass
class PendingActionEvent:
    """
    Action requested by an agent, not yet committed.

    The handler may mutate args before calling commit(); once committed the
    framework delivers args downstream.
    """
    agent: AgentRecord
    args: Dict[str, Any]
    commit: Callable[[], Awaitable[None]]
    action_type: str = ""


ActionHandler = Callable[[PendingActionEvent], Awaitable[None]]


@dataclass(frozen=True)
class CapabilityDeclaration:
    """Invocable action as declared to the action-dispatch framework."""
    type: str
    description: str
    schema: Dict[str, Any]
    examples: List[Dict[str, Any]] = field(default_factory=list)
    handler: Optional[ActionHandler] = None

    def describe(self) -> Dict[str, Any]:
        """Serializable view without the handler."""
        return {
            "type": self.type,
            "description": self.description,
            "schema": self.schema,
            "examples": self.examples,
        }

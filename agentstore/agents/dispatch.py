"""
Action Dispatch Registry

Downstream collaborator receiving capability declarations. The protocol is
what the store calls into; InMemoryActionRegistry is the default
implementation used by the HTTP surface and the Strands tool export.

The registry refuses duplicate declarations of the same action type, which is
why a store lets only its active region declare.
"""
from typing import Dict, List, Optional, Protocol
import logging

from ..exceptions import CapabilityNotDeclaredError, DuplicateCapabilityError
from ..models.actions import CapabilityDeclaration, PendingActionEvent

logger = logging.getLogger(__name__)


class ActionDispatcher(Protocol):
    def declare(self, declaration: CapabilityDeclaration) -> None:
        ...

    def withdraw(self, action_type: str) -> None:
        ...


class InMemoryActionRegistry:
    """Capability declarations keyed by action type."""

    def __init__(self):
        self._declarations: Dict[str, CapabilityDeclaration] = {}
        self.history: List[str] = []

    def declare(self, declaration: CapabilityDeclaration) -> None:
        """
        Register a capability.

        Raises:
            DuplicateCapabilityError: action type already declared
        """
        if declaration.type in self._declarations:
            raise DuplicateCapabilityError(
                f"Capability '{declaration.type}' is already declared",
                {"type": declaration.type}
            )
        self._declarations[declaration.type] = declaration
        self.history.append(f"declare:{declaration.type}")
        logger.info(f"Declared capability: {declaration.type}")

    def withdraw(self, action_type: str) -> None:
        """Remove a capability. Withdrawing an undeclared type is a no-op."""
        if self._declarations.pop(action_type, None) is None:
            return
        self.history.append(f"withdraw:{action_type}")
        logger.info(f"Withdrew capability: {action_type}")

    def get(self, action_type: str) -> Optional[CapabilityDeclaration]:
        return self._declarations.get(action_type)

    def declarations(self) -> List[CapabilityDeclaration]:
        return list(self._declarations.values())

    def __contains__(self, action_type: str) -> bool:
        return action_type in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    async def dispatch(self, event: PendingActionEvent) -> None:
        """
        Run the declared handler for event.action_type.

        Raises:
            CapabilityNotDeclaredError: no such capability is declared right now
        """
        declaration = self._declarations.get(event.action_type)
        if declaration is None or declaration.handler is None:
            raise CapabilityNotDeclaredError(
                f"Capability '{event.action_type}' is not declared",
                {"type": event.action_type}
            )
        logger.info(f"Dispatching {event.action_type} for agent {event.agent.agent_id}")
        await declaration.handler(event)

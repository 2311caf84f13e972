"""
Strands Tool Export

Exposes the capabilities currently declared in an InMemoryActionRegistry as
Strands @tool functions, so a Strands Agent can call paymentRequest directly.

Each tool call builds a PendingActionEvent for the host agent and runs the
declared handler, which attaches the payment account and commits. Tools are
built from the registry at call time: rebuild them after the store declares
or withdraws a capability.

Usage:
    tools = build_strands_tools(registry, host, commit_fn=deliver_request)
    agent = Agent(model=model, tools=tools, system_prompt=...)
"""
from typing import Any, Awaitable, Callable, Dict, List
import json
import logging

from pydantic import ValidationError
from strands import tool

from ..exceptions import StoreError
from ..models.actions import CapabilityDeclaration, PendingActionEvent
from ..models.offers import validate_store_item
from .dispatch import InMemoryActionRegistry
from .host import HostAgent

logger = logging.getLogger(__name__)


CommitFn = Callable[[str, Dict[str, Any]], Awaitable[None]]


def build_strands_tools(
    registry: InMemoryActionRegistry,
    host: HostAgent,
    commit_fn: CommitFn
) -> List[Any]:
    """
    Wrap every declared capability as a Strands tool.

    Args:
        registry: Registry the store declares into
        host: Agent whose payment account is attached to requests
        commit_fn: Coroutine(action_type, args) delivering committed requests

    Returns:
        List of Strands tools (empty when nothing is declared)
    """
    tools = [
        _capability_tool(declaration, registry, host, commit_fn)
        for declaration in registry.declarations()
    ]
    logger.debug(f"Built {len(tools)} Strands tool(s) for agent {host.agent_id}")
    return tools


def _capability_tool(
    declaration: CapabilityDeclaration,
    registry: InMemoryActionRegistry,
    host: HostAgent,
    commit_fn: CommitFn
):
    action_type = declaration.type

    @tool(name=action_type, description=declaration.description.strip())
    async def capability(item_type: str, props: Dict[str, Any]) -> str:
        """
        Request payment or a subscription for a store item.

        Args:
            item_type: "payment" or "subscription"
            props: Item fields (name, description, amount, currency, and for
                subscriptions interval and intervalCount)

        Returns:
            JSON string: {"success": bool, "args": {...}} or an error object
        """
        args: Dict[str, Any] = {"type": item_type, "props": props}
        try:
            validate_store_item(args)
        except ValidationError as e:
            return json.dumps({
                "success": False,
                "error_code": "store:offer:invalid",
                "message": f"Invalid store item: {e.error_count()} validation error(s)",
            })

        async def commit() -> None:
            await commit_fn(action_type, args)

        event = PendingActionEvent(
            agent=host.record(),
            args=args,
            commit=commit,
            action_type=action_type,
        )

        try:
            await registry.dispatch(event)
        except StoreError as e:
            logger.warning(f"{action_type} failed for agent {host.agent_id}: {e.error_code}")
            return json.dumps({"success": False, **e.to_dict()})

        return json.dumps({"success": True, "args": args})

    return capability

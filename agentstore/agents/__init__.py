"""
Store agents - lifecycle units that talk to the host agent runtime.

Files in this package:
- host.py: HostAgent protocol and the in-process AgentHost
- dispatch.py: ActionDispatcher protocol and InMemoryActionRegistry
- offer_binding.py: PaymentBinding / SubscriptionBinding lifecycle state machines
- store_actions.py: GatedAction region and the paymentRequest capability
- strands_tools.py: Strands @tool export of declared capabilities
"""

__all__ = ["host", "dispatch", "offer_binding", "store_actions", "strands_tools"]

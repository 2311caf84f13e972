"""
agentstore - purchasable offers for autonomous agents

Lets a host application declare payment and subscription offers for an agent
and guarantees that exactly one action region per store tree surfaces the
paymentRequest capability to the agent's action framework.

Modules:
- models: offer descriptors, store item schema, capability types
- services: identity allocation, active arbiter, catalog registry, store scope
- agents: host agent interface, offer bindings, gated paymentRequest action
- store: StoreFacade composition root
- main: read-only FastAPI surface
"""

__version__ = "0.1.0"
__all__ = ["models", "services", "agents", "store", "config", "exceptions"]

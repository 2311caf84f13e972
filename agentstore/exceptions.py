"""
Store Exception Hierarchy

Standard error codes for the offer catalog, the active-holder arbiter and the
payment request capability. All errors use the store: prefix.
"""
from typing import Optional, Dict, Any


class StoreError(Exception):
    """
    Base exception for all store errors.

    Every error carries a stable error code so hosts can branch on it
    without parsing messages.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ScopeNotInitializedError(StoreError):
    """
    Arbiter or catalog used outside an open store scope.

    This is a wiring bug in the host and is never retried.

    Examples:
    - current_active() called after the scope was closed
    - Binding created against a scope that was never opened
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:scope:not_initialized", message, details)


class BindingStateError(StoreError):
    """
    Lifecycle event not valid in the binding's current state.

    Examples:
    - on_update() before on_mount()
    - on_mount() on an already mounted binding
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:binding:invalid_state", message, details)


class OfferValidationError(StoreError):
    """
    Offer descriptor rejected.

    Examples:
    - Unknown currency or interval
    - Non-positive amount
    - Subscription registered through the payment path
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:offer:invalid", message, details)


class AccountUnresolvedError(StoreError):
    """
    Requesting agent has no payment account identifier.

    The pending action is not committed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:account:unresolved", message, details)


class DuplicateCapabilityError(StoreError):
    """Capability type declared twice to the same action registry."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:capability:duplicate", message, details)


class CapabilityNotDeclaredError(StoreError):
    """Dispatch attempted for a capability that is not currently declared."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:capability:not_declared", message, details)


class StoreNotFoundError(StoreError):
    """No open store tree with the requested id."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("store:not_found", message, details)

"""
Active Arbiter

Keeps the ordered set of registered participants for one store tree and
designates exactly one of them as active.

Rules:
- The first participant registered into an empty set becomes active
- Removing the active participant promotes the earliest remaining one
- Removing a non-active participant leaves the active one unchanged
- Removing an unknown participant is a no-op (teardown may run after reset)

State is an immutable (participants, active) pair swapped under a lock, so each
mutation is a pure function of the previous state. Listeners are notified
after the swap, outside the lock, and only when the active identity changes.
"""
from typing import Callable, List, NamedTuple, Optional, Tuple
import logging
import threading

from ..exceptions import ScopeNotInitializedError
from .identity import Identity, IdentityAllocator

logger = logging.getLogger(__name__)


ActiveListener = Callable[[Optional[Identity], Optional[Identity]], None]


class ParticipantSet(NamedTuple):
    """Ordered live participants plus the active one (None iff empty)."""
    participants: Tuple[Identity, ...] = ()
    active: Optional[Identity] = None


def _with_registered(state: ParticipantSet, identity: Identity) -> ParticipantSet:
    participants = state.participants + (identity,)
    active = state.active if state.active is not None else identity
    return ParticipantSet(participants, active)


def _with_unregistered(state: ParticipantSet, identity: Identity) -> ParticipantSet:
    if identity not in state.participants:
        return state
    participants = tuple(p for p in state.participants if p != identity)
    active = state.active
    if active == identity:
        active = participants[0] if participants else None
    return ParticipantSet(participants, active)


class ActiveArbiter:
    """
    Exactly-one-active election among registered participants.

    One arbiter exists per store scope. Use register()/unregister() from the
    participant lifecycle and current_active() to decide whether to act.
    """

    def __init__(self, allocator: Optional[IdentityAllocator] = None, name: str = "arbiter"):
        self._allocator = allocator or IdentityAllocator()
        self._name = name
        self._state = ParticipantSet()
        self._listeners: List[ActiveListener] = []
        self._lock = threading.RLock()
        self._closed = False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def register(self) -> Identity:
        """
        Allocate a fresh identity and append it to the participant set.

        Returns:
            The new participant's identity (active if it is the only one)
        """
        with self._lock:
            self._require_open("register")
            identity = self._allocator.allocate()
            previous = self._state.active
            self._state = _with_registered(self._state, identity)
            current = self._state.active

        logger.debug(f"{self._name}: registered {identity!r} (active={current!r})")
        self._notify(previous, current)
        return identity

    def unregister(self, identity: Identity) -> None:
        """
        Remove a participant, promoting the earliest survivor if it was active.

        Unknown identities are ignored.
        """
        with self._lock:
            self._require_open("unregister")
            previous = self._state.active
            new_state = _with_unregistered(self._state, identity)
            if new_state is self._state:
                logger.debug(f"{self._name}: unregister of absent {identity!r} ignored")
                return
            self._state = new_state
            current = new_state.active

        logger.debug(f"{self._name}: unregistered {identity!r} (active={current!r})")
        self._notify(previous, current)

    def reset(self) -> None:
        """Drop every participant. The arbiter stays usable."""
        with self._lock:
            self._require_open("reset")
            previous = self._state.active
            self._state = ParticipantSet()

        self._notify(previous, None)

    def close(self) -> None:
        """Reset and refuse further use. Listeners are dropped, not notified."""
        with self._lock:
            if self._closed:
                return
            self._state = ParticipantSet()
            self._listeners.clear()
            self._closed = True

        logger.info(f"{self._name}: closed")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def current_active(self) -> Optional[Identity]:
        with self._lock:
            self._require_open("current_active")
            return self._state.active

    def participants(self) -> Tuple[Identity, ...]:
        with self._lock:
            self._require_open("participants")
            return self._state.participants

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: ActiveListener) -> Callable[[], None]:
        """
        Call listener(previous, current) whenever the active identity changes.

        Returns:
            Callable that removes the listener (safe to call twice)
        """
        with self._lock:
            self._require_open("subscribe")
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, previous: Optional[Identity], current: Optional[Identity]) -> None:
        if previous == current:
            return
        logger.info(f"{self._name}: active {previous!r} -> {current!r}")
        for listener in list(self._listeners):
            listener(previous, current)

    def _require_open(self, operation: str) -> None:
        if self._closed:
            raise ScopeNotInitializedError(
                f"{operation}() called on closed {self._name}",
                {"operation": operation, "arbiter": self._name}
            )

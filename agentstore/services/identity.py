"""
Identity Allocation

Issues opaque, ordered identities for arbiter participants and offer bindings.
Allocation is monotonic per allocator, so an identity is never reused while
its allocator lives.
"""
from dataclasses import dataclass
import itertools
import threading


@dataclass(frozen=True, order=True)
class Identity:
    """Opaque registration token. Comparable by allocation order."""
    value: int

    def __repr__(self) -> str:
        return f"Identity({self.value})"


class IdentityAllocator:
    """Process-local monotonically increasing identity source."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def allocate(self) -> Identity:
        with self._lock:
            return Identity(next(self._counter))

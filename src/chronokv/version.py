"""
Version Module

Purpose:
    Immutable record of a single write to one (key, field) pair.

Key Features:
    - VALUE versions carry a string payload
    - TOMBSTONE versions mark deletion and carry no payload
    - Optional absolute expiry (expires_at)

Ordering:
    Versions are ordered by (effective_timestamp, sequence). The sequence
    number only breaks ties between writes attributed to the same timestamp;
    the higher sequence wins.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class VersionKind(Enum):
    """Kind of write recorded by a version"""

    VALUE = "value"
    TOMBSTONE = "tombstone"


@dataclass(frozen=True)
class Version:
    """One write to one (key, field) pair"""

    effective_timestamp: int
    sequence: int
    kind: VersionKind
    value: Optional[str] = None
    expires_at: Optional[int] = None

    def __post_init__(self):
        if self.kind is VersionKind.TOMBSTONE and self.value is not None:
            raise ValueError("Tombstone versions cannot carry a value")
        if self.kind is VersionKind.VALUE and self.value is None:
            raise ValueError("Value versions must carry a value")

    @property
    def order_key(self) -> Tuple[int, int]:
        return (self.effective_timestamp, self.sequence)

    @property
    def is_tombstone(self) -> bool:
        return self.kind is VersionKind.TOMBSTONE

    def is_expired(self, at: int) -> bool:
        """True if a query at timestamp `at` falls at or after expiry"""
        return self.expires_at is not None and at >= self.expires_at

    def __repr__(self):
        payload = "<tombstone>" if self.is_tombstone else repr(self.value)
        expiry = "" if self.expires_at is None else f", expires_at={self.expires_at}"
        return (f"Version(ts={self.effective_timestamp}, seq={self.sequence}, "
                f"{payload}{expiry})")

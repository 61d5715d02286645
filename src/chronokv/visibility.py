"""
Visibility Module

Decides whether the version found by a floor lookup is observable at a
query timestamp. Expiry is computed lazily from the stored expires_at, so a
historical query sees the TTL state that held at that time.

An expired version does not fall back to an older one: once a TTL'd write
lapses the field stays empty until something writes to it again.
"""

from enum import Enum
from typing import Optional

from .version import Version


class Visibility(Enum):
    """Outcome of a visibility check"""

    MISSING = "missing"    # no version at or before the query timestamp
    DELETED = "deleted"    # floor version is a tombstone
    EXPIRED = "expired"    # floor version's TTL has lapsed
    VISIBLE = "visible"


def classify(version: Optional[Version], query_timestamp: int) -> Visibility:
    if version is None:
        return Visibility.MISSING
    if version.is_tombstone:
        return Visibility.DELETED
    if version.is_expired(query_timestamp):
        return Visibility.EXPIRED
    return Visibility.VISIBLE


def visible(version: Optional[Version], query_timestamp: int) -> Optional[str]:
    """
    Payload of `version` as observed at `query_timestamp`

    Returns:
        The value, or None if missing, deleted or expired
    """
    if classify(version, query_timestamp) is Visibility.VISIBLE:
        return version.value
    return None

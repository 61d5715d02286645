"""
Version Log Module

Purpose:
    Ordered history of every write to a single (key, field) pair.
    Supports insertion at arbitrary timestamps (retroactive writes) and
    floor lookups for "value as of time T" queries.

Key Features:
    - Versions kept sorted by (effective_timestamp, sequence) in a SortedDict
    - O(log n) insert and floor lookup
    - Tombstones are ordinary versions, history is never dropped
    - One lock per log so writers on different fields never contend

Design:
    Using sortedcontainers.SortedDict, the same structure the memtable of an
    LSM-tree uses, keyed by the version order key instead of the user key.
"""

import itertools
import math
import threading
from contextlib import nullcontext
from typing import Iterator, Optional

from sortedcontainers import SortedDict

from .version import Version, VersionKind


class VersionLog:
    """
    Multi-version history for one field of one record

    Created on the first write to the field and kept for the lifetime of
    the store. Deleting a field appends a TOMBSTONE version.
    """

    def __init__(self, thread_safe: bool = True):
        """
        Args:
            thread_safe: If False, `lock` is a no-op context manager
        """
        self._versions = SortedDict()  # (effective_timestamp, sequence) -> Version
        self._sequence = itertools.count(1)
        self.lock = threading.RLock() if thread_safe else nullcontext()

    def insert(self, effective_timestamp: int, value: Optional[str],
               expires_at: Optional[int] = None) -> Version:
        """
        Record a write at `effective_timestamp`

        Args:
            effective_timestamp: Logical time the write is attributed to
            value: The payload, or None for a tombstone
            expires_at: Absolute expiry timestamp, or None for no expiry

        Returns:
            The newly created version
        """
        kind = VersionKind.TOMBSTONE if value is None else VersionKind.VALUE
        with self.lock:
            version = Version(
                effective_timestamp=effective_timestamp,
                sequence=next(self._sequence),
                kind=kind,
                value=value,
                expires_at=expires_at,
            )
            self._versions[version.order_key] = version
        return version

    def floor(self, timestamp: int) -> Optional[Version]:
        """
        Latest version with effective_timestamp <= timestamp

        Among versions sharing the same effective timestamp the most
        recently inserted one wins.

        Returns:
            The version, or None if the query predates all history
        """
        with self.lock:
            # (timestamp, inf) sorts after every (timestamp, seq) key
            index = self._versions.bisect_right((timestamp, math.inf))
            if index == 0:
                return None
            return self._versions.peekitem(index - 1)[1]

    def latest(self) -> Optional[Version]:
        """Version with the greatest order key, or None if empty"""
        with self.lock:
            if not self._versions:
                return None
            return self._versions.peekitem(-1)[1]

    def iter_versions(self) -> Iterator[Version]:
        """
        Iterate over a snapshot of all versions in order

        Yields:
            Versions sorted by (effective_timestamp, sequence)
        """
        with self.lock:
            snapshot = list(self._versions.values())
        yield from snapshot

    def is_empty(self) -> bool:
        return len(self._versions) == 0

    def __len__(self):
        return len(self._versions)

    def __repr__(self):
        latest = self.latest()
        return f"VersionLog(versions={len(self._versions)}, latest={latest!r})"


class VersionLogIterator:
    """
    Cursor over the history of a version log

    Walks a snapshot of the log taken at construction time, so writes made
    while iterating are not observed.
    """

    def __init__(self, log: VersionLog):
        """
        Args:
            log: The version log to walk
        """
        self._iter = log.iter_versions()
        self._current = None
        self._advance()

    def _advance(self):
        """Move to next version"""
        self._current = next(self._iter, None)

    def peek(self) -> Optional[Version]:
        """Current version without advancing, or None if exhausted"""
        return self._current

    def next(self) -> Optional[Version]:
        """Current version, then advance; None if exhausted"""
        current = self._current
        if current is not None:
            self._advance()
        return current

    def has_next(self) -> bool:
        return self._current is not None

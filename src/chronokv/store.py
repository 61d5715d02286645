"""
Temporal Store Module

Purpose:
    In-memory key -> field -> value store that answers both "what is the
    value now" and "what was the value at time T".

Key Features:
    - Every write is a new version, history is never discarded
    - Per-field TTL anchored to the write's timestamp, evaluated at read time
    - Compare-and-set / compare-and-delete, atomic per (key, field)
    - Sorted scans and literal prefix scans over visible fields
    - Retroactive writes (set_at) and historical reads (get_at)

Every operation is a floor lookup on one field's VersionLog followed by a
visibility check at the call's timestamp. There is no background expiry.
"""

import logging
from typing import List, Optional

from .directory import FieldDirectory
from .version import Version
from .version_log import VersionLogIterator
from .visibility import Visibility, classify, visible

logger = logging.getLogger(__name__)


def _check_str(name: str, value) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, got {type(value).__name__}")


def _check_optional_str(name: str, value) -> None:
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{name} must be str or None, got {type(value).__name__}")


def _check_int(name: str, value) -> None:
    # bool is an int subclass but never a meaningful timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")


def _check_ttl(ttl) -> None:
    _check_int("ttl", ttl)
    if ttl < 0:
        raise ValueError(f"ttl must be >= 0, got {ttl}")


class TemporalStore:
    """
    Multi-version record store with TTL and time-travel reads

    Absent values are returned as None. The empty string is a valid value.

    Usage:
        store = TemporalStore()
        store.set(100, "user", "name", "Alice")
        store.set(200, "user", "name", "Bob")
        store.get_at(300, "user", "name", 150)   # "Alice"
    """

    SCAN_ENTRY_FORMAT = "{field}({value})"

    def __init__(self, thread_safe: bool = True):
        """
        Args:
            thread_safe: Lock each field log and the directory. Disable only
                when the store is confined to one thread.
        """
        self._directory = FieldDirectory(thread_safe=thread_safe)

    # ========== Basic operations ==========

    def set(self, timestamp: int, key: str, field: str, value: str) -> None:
        """Write `value` at `timestamp` with no expiry"""
        _check_int("timestamp", timestamp)
        self._write(timestamp, key, field, value, None)

    def get(self, timestamp: int, key: str, field: str) -> Optional[str]:
        """Value visible at `timestamp`, or None"""
        _check_int("timestamp", timestamp)
        return self._read(timestamp, key, field)

    def compare_and_set(self, timestamp: int, key: str, field: str,
                        expected: Optional[str], new_value: str) -> bool:
        """
        Write `new_value` if the currently visible value equals `expected`

        `expected=None` matches a field that is missing, deleted or expired.

        Returns:
            True if the write was applied
        """
        _check_int("timestamp", timestamp)
        _check_str("new_value", new_value)
        return self._compare_and_write(timestamp, key, field, expected, new_value, None)

    def compare_and_delete(self, timestamp: int, key: str, field: str,
                           expected: Optional[str]) -> bool:
        """
        Tombstone the field if the currently visible value equals `expected`

        Returns:
            True if the tombstone was written
        """
        _check_int("timestamp", timestamp)
        return self._compare_and_write(timestamp, key, field, expected, None, None)

    # ========== Scans ==========

    def scan(self, timestamp: int, key: str) -> List[str]:
        """
        All fields of `key` visible at `timestamp`

        Returns:
            "field(value)" entries sorted by field name
        """
        return self.scan_by_prefix(timestamp, key, "")

    def scan_by_prefix(self, timestamp: int, key: str, prefix: str) -> List[str]:
        """Like scan, restricted to fields starting with the literal `prefix`"""
        _check_int("timestamp", timestamp)
        _check_str("key", key)
        _check_str("prefix", prefix)

        entries = []
        for field in self._directory.fields(key, prefix):
            value = self._read(timestamp, key, field)
            if value is not None:
                entries.append(self.SCAN_ENTRY_FORMAT.format(field=field, value=value))
        return entries

    # ========== TTL ==========

    def set_with_ttl(self, timestamp: int, key: str, field: str,
                     value: str, ttl: int) -> None:
        """
        Write `value` visible during [timestamp, timestamp + ttl)

        A ttl of 0 writes a value that is never visible.

        Raises:
            ValueError: If ttl is negative
        """
        _check_int("timestamp", timestamp)
        _check_ttl(ttl)
        self._write(timestamp, key, field, value, timestamp + ttl)

    def compare_and_set_with_ttl(self, timestamp: int, key: str, field: str,
                                 expected: Optional[str], new_value: str,
                                 ttl: int) -> bool:
        """compare_and_set whose write expires at timestamp + ttl"""
        _check_int("timestamp", timestamp)
        _check_str("new_value", new_value)
        _check_ttl(ttl)
        return self._compare_and_write(timestamp, key, field, expected,
                                       new_value, timestamp + ttl)

    # ========== Time travel ==========

    def set_at(self, now: int, key: str, field: str, value: str,
               set_timestamp: int) -> None:
        """
        Write `value` as if it happened at `set_timestamp`

        `now` is validated but not stored; a later call at the same
        `set_timestamp` still wins over an earlier one.
        """
        _check_int("now", now)
        _check_int("set_timestamp", set_timestamp)
        self._write(set_timestamp, key, field, value, None)

    def get_at(self, now: int, key: str, field: str,
               query_timestamp: int) -> Optional[str]:
        """Value that was visible at `query_timestamp`, or None"""
        _check_int("now", now)
        _check_int("query_timestamp", query_timestamp)
        return self._read(query_timestamp, key, field)

    # ========== Introspection ==========

    def status(self, timestamp: int, key: str, field: str) -> Visibility:
        """Why a field is (or is not) visible at `timestamp`"""
        _check_int("timestamp", timestamp)
        _check_str("key", key)
        _check_str("field", field)
        log = self._directory.get(key, field)
        if log is None:
            return Visibility.MISSING
        return classify(log.floor(timestamp), timestamp)

    def history(self, key: str, field: str) -> List[Version]:
        """Every version of a field in (effective_timestamp, sequence) order"""
        _check_str("key", key)
        _check_str("field", field)
        log = self._directory.get(key, field)
        if log is None or log.is_empty():
            return []

        versions = []
        cursor = VersionLogIterator(log)
        while cursor.has_next():
            versions.append(cursor.next())
        return versions

    def keys(self) -> List[str]:
        """Every key written at least once, sorted"""
        return self._directory.keys()

    def __contains__(self, key):
        return key in self._directory

    def __repr__(self):
        return f"TemporalStore(keys={len(self._directory)})"

    # ========== Internals ==========

    def _read(self, timestamp: int, key: str, field: str) -> Optional[str]:
        _check_str("key", key)
        _check_str("field", field)
        log = self._directory.get(key, field)
        if log is None:
            return None
        return visible(log.floor(timestamp), timestamp)

    def _write(self, timestamp: int, key: str, field: str, value: str,
               expires_at: Optional[int]) -> Version:
        _check_str("key", key)
        _check_str("field", field)
        _check_str("value", value)
        log = self._directory.get_or_create(key, field)
        version = log.insert(timestamp, value, expires_at)
        logger.debug("Wrote %s/%s: %r", key, field, version)
        return version

    def _compare_and_write(self, timestamp: int, key: str, field: str,
                           expected: Optional[str], value: Optional[str],
                           expires_at: Optional[int]) -> bool:
        """
        Atomically compare the visible value with `expected` and write

        Args:
            value: New payload, or None to write a tombstone

        Returns:
            True if the version was inserted
        """
        _check_str("key", key)
        _check_str("field", field)
        _check_optional_str("expected", expected)

        if expected is None:
            # A never-written field is absent, so this CAS cannot miss on it
            log = self._directory.get_or_create(key, field)
        else:
            log = self._directory.get(key, field)
            if log is None:
                logger.debug("CAS miss on %s/%s at %d: field never written",
                             key, field, timestamp)
                return False

        with log.lock:
            current = visible(log.floor(timestamp), timestamp)
            if current != expected:
                logger.debug("CAS miss on %s/%s at %d: expected %r, found %r",
                             key, field, timestamp, expected, current)
                return False
            version = log.insert(timestamp, value, expires_at)

        logger.debug("CAS applied on %s/%s: %r", key, field, version)
        return True

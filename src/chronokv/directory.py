"""
Field Directory Module

Two-level map from record key to field name to VersionLog. Field names are
kept in a SortedDict per key so scans come out in ascending order and prefix
scans can start at the prefix instead of walking every field.

A key stays in the directory once written, even if all of its fields are
deleted or expired.
"""

import threading
from contextlib import nullcontext
from typing import Dict, List, Optional

from sortedcontainers import SortedDict

from .version_log import VersionLog


class FieldDirectory:
    """Owns every VersionLog of a store"""

    def __init__(self, thread_safe: bool = True):
        self._records: Dict[str, SortedDict] = {}
        self._thread_safe = thread_safe
        # Guards creation of records/logs and field enumeration only
        self._lock = threading.Lock() if thread_safe else nullcontext()

    def get(self, key: str, field: str) -> Optional[VersionLog]:
        """Log for (key, field), or None if the field was never written"""
        with self._lock:
            fields = self._records.get(key)
            if fields is None:
                return None
            return fields.get(field)

    def get_or_create(self, key: str, field: str) -> VersionLog:
        with self._lock:
            fields = self._records.get(key)
            if fields is None:
                fields = self._records[key] = SortedDict()
            log = fields.get(field)
            if log is None:
                log = fields[field] = VersionLog(thread_safe=self._thread_safe)
            return log

    def fields(self, key: str, prefix: str = "") -> List[str]:
        """
        Field names registered for `key`, sorted ascending

        Args:
            key: The record key
            prefix: Literal prefix filter; empty matches all fields

        Returns:
            Snapshot list of field names (empty if key is unknown)
        """
        with self._lock:
            fields = self._records.get(key)
            if fields is None:
                return []
            if not prefix:
                return list(fields.keys())
            matched = []
            for name in fields.irange(minimum=prefix):
                if not name.startswith(prefix):
                    break
                matched.append(name)
            return matched

    def keys(self) -> List[str]:
        """Every record key ever written, sorted"""
        with self._lock:
            return sorted(self._records)

    def __contains__(self, key):
        with self._lock:
            return key in self._records

    def __len__(self):
        return len(self._records)

    def __repr__(self):
        return f"FieldDirectory(keys={len(self._records)})"

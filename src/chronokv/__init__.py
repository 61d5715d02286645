"""
chronokv

An in-memory, multi-version key/field store with time-travel reads.

Main components:
    - Version: Immutable record of one write (value or tombstone)
    - VersionLog: Sorted per-field history with floor lookup
    - Visibility: TTL and tombstone rules applied at read time
    - FieldDirectory: key -> field -> VersionLog map for scans
    - TemporalStore: Public operations (set, get, CAS, scans, TTL, time travel)
"""

from .version import Version, VersionKind
from .version_log import VersionLog, VersionLogIterator
from .visibility import Visibility, classify, visible
from .directory import FieldDirectory
from .store import TemporalStore

__version__ = "0.1.0"
__all__ = [
    'Version',
    'VersionKind',
    'VersionLog',
    'VersionLogIterator',
    'Visibility',
    'classify',
    'visible',
    'FieldDirectory',
    'TemporalStore',
]

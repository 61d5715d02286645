"""
Demo: Time-travel reads and TTL

Walks through a small history for one record and prints what the store
returns at different points in time.
"""

import logging
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from chronokv import TemporalStore


def show(label: str, value):
    shown = "<absent>" if value is None else repr(value)
    print(f"   {label:<40} -> {shown}")


def demo_history():
    """Demo 1: Values over time"""

    print("\n" + " DEMO 1: HISTORY ".center(70, "="))

    store = TemporalStore()
    store.set(100, "user", "name", "Alice")
    store.set(200, "user", "name", "Alice Smith")
    store.set_at(250, "user", "name", "Alicia", 150)  # retroactive

    for ts in (50, 100, 150, 199, 200):
        show(f"get_at(300, 'user', 'name', {ts})", store.get_at(300, "user", "name", ts))

    print("\n   Full history:")
    for version in store.history("user", "name"):
        print(f"     {version!r}")


def demo_ttl():
    """Demo 2: TTL expiry and CAS"""

    print("\n" + " DEMO 2: TTL & CAS ".center(70, "="))

    store = TemporalStore()
    store.set_with_ttl(100, "session", "token", "abc123", 50)
    store.set(100, "session", "user", "alice")

    show("scan(120, 'session')", store.scan(120, "session"))
    show("scan(150, 'session')", store.scan(150, "session"))
    show("status(150, 'session', 'token')", store.status(150, "session", "token").value)

    ok = store.compare_and_set_with_ttl(160, "session", "token", None, "def456", 100)
    show("compare_and_set_with_ttl(160, ..., None)", ok)
    show("get(200, 'session', 'token')", store.get(200, "session", "token"))
    show("get_at(300, 'session', 'token', 120)", store.get_at(300, "session", "token", 120))
    show("get_at(300, 'session', 'token', 155)", store.get_at(300, "session", "token", 155))


if __name__ == '__main__':
    if '-v' in sys.argv:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    demo_history()
    demo_ttl()

"""
Concurrency tests for TemporalStore

Tests:
    - Concurrent CAS on one field: exactly one winner per pre-state
    - Concurrent CAS chains apply every increment exactly once
    - Writers on different fields do not interfere
"""

import threading
import unittest
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from chronokv import TemporalStore


class TestConcurrentCAS(unittest.TestCase):
    """Test linearizable compare-and-set per field"""

    NUM_THREADS = 16

    def setUp(self):
        self.store = TemporalStore()

    def test_single_winner_from_absent(self):
        """Only one of many racing creators succeeds"""
        barrier = threading.Barrier(self.NUM_THREADS)

        def attempt(i):
            barrier.wait()
            return self.store.compare_and_set(100, "lock", "owner", None, f"worker-{i}")

        with ThreadPoolExecutor(max_workers=self.NUM_THREADS) as pool:
            results = list(pool.map(attempt, range(self.NUM_THREADS)))

        self.assertEqual(results.count(True), 1)
        winner = results.index(True)
        self.assertEqual(self.store.get(100, "lock", "owner"), f"worker-{winner}")
        self.assertEqual(len(self.store.history("lock", "owner")), 1)

    def test_single_winner_delete(self):
        self.store.set(100, "lock", "owner", "me")
        barrier = threading.Barrier(self.NUM_THREADS)

        def attempt(_):
            barrier.wait()
            return self.store.compare_and_delete(200, "lock", "owner", "me")

        with ThreadPoolExecutor(max_workers=self.NUM_THREADS) as pool:
            results = list(pool.map(attempt, range(self.NUM_THREADS)))

        self.assertEqual(results.count(True), 1)
        self.assertIsNone(self.store.get(200, "lock", "owner"))

    def test_counter_increments(self):
        """Retrying CAS loops lose no increments"""
        self.store.set(0, "stats", "count", "0")
        per_thread = 50

        def increment(_):
            for _ in range(per_thread):
                while True:
                    current = self.store.get(1, "stats", "count")
                    if self.store.compare_and_set(1, "stats", "count",
                                                  current, str(int(current) + 1)):
                        break

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(increment, range(8)))

        self.assertEqual(self.store.get(1, "stats", "count"), str(8 * per_thread))

    def test_independent_fields(self):
        def writer(i):
            for ts in range(100):
                self.store.set(ts, "record", f"field{i:02d}", str(ts))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(writer, range(8)))

        scan = self.store.scan(1000, "record")
        self.assertEqual(scan, [f"field{i:02d}(99)" for i in range(8)])
        for i in range(8):
            self.assertEqual(len(self.store.history("record", f"field{i:02d}")), 100)


def run_tests():
    """Run all concurrency tests"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestConcurrentCAS))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)

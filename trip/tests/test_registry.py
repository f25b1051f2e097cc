import tempfile
import threading
import unittest
from pathlib import Path

from trip.api.registry import TripRegistry
from trip.infra.Hybrid_Repository import HybridRepository
from trip.infra.Local_Store import LocalStore, LocalTransport
from trip.utilities.scheduler import ManualScheduler


class BlockingTransport(LocalTransport):
    """Local transport whose loads for one trip wait until released."""

    def __init__(self, store, slow_trip):
        super().__init__(store)
        self.slow_trip = slow_trip
        self.entered = threading.Event()
        self.release = threading.Event()

    def load(self, entity, trip_id):
        if trip_id == self.slow_trip:
            self.entered.set()
            self.release.wait(5)
        return super().load(entity, trip_id)


class TestTripRegistry(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.local = BlockingTransport(LocalStore(Path(self._tmp.name) / 'store.json'), 'slow')
        self.registry = TripRegistry(HybridRepository(self.local), scheduler=ManualScheduler())

    def tearDown(self):
        self.local.release.set()
        self._tmp.cleanup()

    def test_same_instance_per_trip(self):
        self.assertIs(self.registry.get('t1'), self.registry.get('t1'))
        self.assertIsNot(self.registry.get('t1'), self.registry.get('t2'))

    def test_slow_trip_does_not_block_others(self):
        loaded = []
        worker = threading.Thread(target=lambda: loaded.append(self.registry.get('slow')))
        worker.start()
        self.assertTrue(self.local.entered.wait(2))

        self.assertEqual(self.registry.get('fast').trip_id, 'fast')
        self.assertEqual(loaded, [])

        self.local.release.set()
        worker.join(2)
        self.assertEqual(loaded[0].trip_id, 'slow')
        self.assertIs(self.registry.get('slow'), loaded[0])

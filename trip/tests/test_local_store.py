import tempfile
import unittest
from unittest import mock
from pathlib import Path
from trip.infra.Local_Store import LocalStore, LocalTransport, collection_key


class TestLocalStore(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / 'store.json'
        self.store = LocalStore(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_values_survive_a_new_instance(self):
        self.store.save('packing_items:t1', [{'id': 'p1'}])
        reopened = LocalStore(self.path)
        self.assertEqual(reopened.load('packing_items:t1'), [{'id': 'p1'}])
        self.assertEqual(reopened.load('missing', 'fallback'), 'fallback')

    def test_load_returns_a_copy(self):
        self.store.save('k', {'items': [1]})
        value = self.store.load('k')
        value['items'].append(2)
        self.assertEqual(self.store.load('k'), {'items': [1]})

    def test_delete_and_keys(self):
        self.store.save('a', 1)
        self.store.save('b', 2)
        self.store.save('c', 3)
        self.assertTrue(self.store.delete('a'))
        self.assertFalse(self.store.delete('a'))
        self.assertEqual(self.store.delete_many(['b', 'zzz']), 1)
        self.assertEqual(self.store.keys(), ['c'])

    def test_unreadable_file_starts_empty(self):
        self.path.write_text('{not json', encoding='utf-8')
        self.assertEqual(LocalStore(self.path).keys(), [])

    def test_no_temp_files_left_behind(self):
        self.store.save('a', 1)
        self.assertEqual([p.name for p in Path(self._tmp.name).iterdir()], ['store.json'])


class TestLocalTransport(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = LocalStore(Path(self._tmp.name) / 'store.json')
        self.transport = LocalTransport(self.store)

    def tearDown(self):
        self._tmp.cleanup()

    def test_collections_are_scoped_by_trip(self):
        self.transport.save('meals', 't1', [{'id': 'm1'}])
        self.assertEqual(self.transport.load('meals', 't1'), [{'id': 'm1'}])
        self.assertEqual(self.transport.load('meals', 't2'), [])
        self.assertIn(collection_key('meals', 't1'), self.store.keys())

    def test_non_list_value_reads_as_empty(self):
        self.store.save(collection_key('meals', 't1'), {'broken': True})
        self.assertEqual(self.transport.load('meals', 't1'), [])


class TestLocalStoreWriteFailure(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / 'store.json'
        self.store = LocalStore(self.path)
        self.store.save('a', [1])

    def tearDown(self):
        self._tmp.cleanup()

    def test_failed_write_leaves_cache_unchanged(self):
        with mock.patch.object(self.store, '_atomic_write', side_effect=OSError('disk full')):
            with self.assertRaises(OSError):
                self.store.save('a', [2])
            with self.assertRaises(OSError):
                self.store.delete('a')
        self.assertEqual(self.store.load('a'), [1])
        self.store.save('b', [3])
        self.assertEqual(LocalStore(self.path).load('a'), [1])

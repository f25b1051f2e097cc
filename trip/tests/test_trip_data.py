import tempfile
import unittest
from pathlib import Path

from trip.domain.Meal import Meal
from trip.domain.PackingItem import PackingItem
from trip.domain.TodoItem import TodoItem
from trip.domain.errors import BackendUnavailable, NotFound
from trip.events.Event_Bus import GLOBAL_EVENT_BUS, SYNC_ROLLED_BACK
from trip.infra.Hybrid_Repository import HybridRepository
from trip.infra.Local_Store import LocalStore
from trip.infra.session import SessionState
from trip.logic.sync.trip_data import TripData
from trip.utilities.constants import PACKING_ITEMS, MEALS, SHOPPING_ITEMS
from trip.utilities.scheduler import ManualScheduler
from trip.tests.fakes import CountingTransport, FakeRemote


class TestTripData(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.local = CountingTransport(LocalStore(Path(self._tmp.name) / 'store.json'))
        self.remote = FakeRemote()
        self.session = SessionState()
        self.repo = HybridRepository(self.local, self.remote, self.session)
        self.sched = ManualScheduler()
        self.data = TripData('t1', self.repo, scheduler=self.sched).load()
        self.tent = PackingItem(id='p1', name='Tent', category='Shelter', needs_to_buy=True)

    def tearDown(self):
        self._tmp.cleanup()

    def test_packing_change_updates_shopping_list(self):
        self.data.set_packing_items([self.tent])
        self.assertEqual([i.source_item_id for i in self.data.shopping_items], ['p1'])
        self.assertEqual(self.local.saves, [])
        self.sched.advance(0.2)
        self.assertEqual(len(self.local.load(PACKING_ITEMS, 't1')), 1)
        self.assertEqual(len(self.local.load(SHOPPING_ITEMS, 't1')), 1)

    def test_burst_of_edits_is_saved_once(self):
        for qty in (1, 2, 3):
            self.data.set_packing_items([self.tent.copy(quantity=qty)])
        self.sched.advance(0.2)
        self.assertEqual(self.local.saves.count(PACKING_ITEMS), 1)
        self.assertEqual(self.local.load(PACKING_ITEMS, 't1')[0]['quantity'], 3)

    def test_toggle_is_saved_immediately(self):
        self.data.set_packing_items([self.tent])
        self.sched.advance(0.2)
        item = self.data.toggle_packing_status('p1', 'owned')
        self.assertTrue(item.is_owned)
        self.assertFalse(item.needs_to_buy)
        self.assertTrue(self.local.load(PACKING_ITEMS, 't1')[0]['isOwned'])
        self.assertEqual(self.data.shopping_items, [])

    def test_failed_toggle_rolls_back(self):
        self.data.set_packing_items([self.tent])
        self.sched.advance(0.2)
        events = []
        listener = lambda name, payload: events.append(payload)
        GLOBAL_EVENT_BUS.subscribe(SYNC_ROLLED_BACK, listener)
        try:
            self.session.sign_in('u1', 'tok')
            self.remote.fail_save = True
            with self.assertRaises(BackendUnavailable):
                self.data.toggle_packing_status('p1', 'packed')
        finally:
            GLOBAL_EVENT_BUS.unsubscribe(SYNC_ROLLED_BACK, listener)
        self.assertFalse(self.data.packing_items[0].is_packed)
        self.assertEqual(events[0]['trip_id'], 't1')

        # The reverted state is written back so the local copy converges
        self.sched.advance(0.2)
        self.assertFalse(self.local.load(PACKING_ITEMS, 't1')[0]['isPacked'])

    def test_toggle_errors(self):
        with self.assertRaises(NotFound):
            self.data.toggle_packing_status('missing', 'owned')
        self.data.set_packing_items([self.tent])
        with self.assertRaises(ValueError):
            self.data.toggle_packing_status('p1', 'borrowed')

    def test_removed_ingredient_is_not_derived_again(self):
        self.data.set_meals([Meal(id='m1', name='Chili', ingredients=['Beans'])])
        beans = self.data.shopping_items[0]
        self.data.remove_shopping_item(beans.id)
        self.assertEqual(self.data.deleted_ingredients.state, ['beans'])
        self.data.set_meals([Meal(id='m1', name='Chili', ingredients=['Beans']),
                             Meal(id='m2', name='Burrito', ingredients=['beans', 'Tortillas'])])
        self.assertEqual([i.name for i in self.data.shopping_items], ['Tortillas'])

    def test_overlong_ingredient_does_not_block_shopping_saves(self):
        self.data.set_meals([Meal(id='m1', name='Chili', ingredients=['x' * 101, 'rice'])])
        self.sched.advance(1)
        self.assertEqual([r['name'] for r in self.local.load(SHOPPING_ITEMS, 't1')], ['rice'])
        self.assertEqual(self.data.shopping.errors, [])
        self.assertEqual(len(self.data.meals.errors), 1)

    def test_manual_item_and_clear_meals(self):
        lantern = self.data.add_shopping_item('Lantern')
        self.data.set_meals([Meal(id='m1', name='Chili', ingredients=['Beans'])])
        self.data.clear_meals()
        self.assertEqual(self.data.meal_list, [])
        self.assertEqual(self.data.shopping_items, [lantern])

    def test_todos_are_renumbered(self):
        self.data.set_todo_items([TodoItem(id='b', text='Buy gas', display_order=7),
                                  TodoItem(id='a', text='Book site', display_order=3)])
        self.assertEqual([(t.id, t.display_order) for t in self.data.todo_items], [('b', 0), ('a', 1)])

    def test_close_flushes_pending_writes(self):
        self.data.set_meals([Meal(id='m1', name='Chili')])
        self.data.close()
        self.assertEqual(self.local.load(MEALS, 't1')[0]['name'], 'Chili')
        self.assertEqual(self.sched.pending, 0)

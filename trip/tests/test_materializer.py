import itertools
import unittest
from trip.domain.Meal import Meal
from trip.domain.PackingItem import PackingItem
from trip.domain.ShoppingItem import ShoppingItem
from trip.logic.packing.status import set_owned, set_needs_to_buy
from trip.logic.shopping.materializer import materialize, shopping_list_changed, ingredient_totals


class TestMaterializer(unittest.TestCase):

    def setUp(self):
        counter = itertools.count(1)
        self.ids = lambda: f"s{next(counter)}"

    def test_removed_ingredient_disappears(self):
        meal = Meal(id='m1', name='Stir fry', ingredients=['Kelp noodles', 'Rice'])
        first = materialize([], [meal], [], [], id_factory=self.ids)
        self.assertEqual([i.name for i in first], ['Kelp noodles', 'Rice'])
        rice_id = first[1].id

        second = materialize([], [meal.copy(ingredients=['Rice'])], [], first, id_factory=self.ids)
        self.assertEqual([i.name for i in second], ['Rice'])
        self.assertEqual(second[0].id, rice_id)

    def test_shared_ingredient_across_groups_is_unassigned(self):
        meals = [Meal(id='m1', ingredients=['rice'], assigned_group_id='G1'),
                 Meal(id='m2', ingredients=['Rice'], assigned_group_id='G2')]
        result = materialize([], meals, [], [], id_factory=self.ids)
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].quantity, 2)
        self.assertIsNone(result[0].assigned_group_id)

        same = [m.copy(assigned_group_id='G1') for m in meals]
        result = materialize([], same, [], result, id_factory=self.ids)
        self.assertEqual(result[0].assigned_group_id, 'G1')

    def test_tent_follows_packing_status(self):
        tent = set_needs_to_buy(PackingItem(id='p1', name='Tent', category='Shelter'))
        listed = materialize([tent], [], [], [], id_factory=self.ids)
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0].category, 'camping')
        self.assertEqual(listed[0].source_item_id, 'p1')

        owned = materialize([set_owned(tent)], [], [], listed, id_factory=self.ids)
        self.assertEqual(owned, [])

        back = materialize([set_needs_to_buy(set_owned(tent))], [], [], owned, id_factory=self.ids)
        self.assertEqual(len(back), 1)
        self.assertEqual(back[0].source_item_id, 'p1')

    def test_manual_camping_items_survive(self):
        lantern = ShoppingItem(id='x1', name='Lantern', category='camping')
        result = materialize([], [], [], [lantern], id_factory=self.ids)
        self.assertEqual(result, [lantern])

    def test_blacklisted_ingredient_is_skipped(self):
        meal = Meal(id='m1', ingredients=[' Rice ', 'Beans'])
        result = materialize([], [meal], ['rice'], [], id_factory=self.ids)
        self.assertEqual([i.name for i in result], ['Beans'])

    def test_checked_state_survives_quantity_change(self):
        meal = Meal(id='m1', ingredients=['Eggs'])
        first = materialize([], [meal], [], [], id_factory=self.ids)
        checked = [first[0].copy(is_checked=True)]
        result = materialize([], [meal, Meal(id='m2', ingredients=['eggs'])], [], checked, id_factory=self.ids)
        self.assertEqual(result[0].quantity, 2)
        self.assertTrue(result[0].is_checked)
        self.assertEqual(result[0].id, first[0].id)

    def test_idempotent(self):
        packing = [PackingItem(id='p1', name='Tent', category='Shelter', needs_to_buy=True, assigned_group_id='g1'),
                   PackingItem(id='p2', name='Stove', category='Kitchen', is_owned=True)]
        meals = [Meal(id='m1', ingredients=['Rice', 'Beans'], assigned_group_id='g1'),
                 Meal(id='m2', ingredients=['rice'])]
        manual = ShoppingItem(id='x1', name='Lantern', category='camping')
        once = materialize(packing, meals, [], [manual], id_factory=self.ids)
        twice = materialize(packing, meals, [], once, id_factory=self.ids)
        self.assertEqual(once, twice)
        self.assertFalse(shopping_list_changed(once, twice))

    def test_derived_items_are_not_duplicated(self):
        tent = PackingItem(id='p1', name='Tent', category='Shelter', needs_to_buy=True)
        dup = [ShoppingItem(id='a', name='Tent', category='camping', source_item_id='p1'),
               ShoppingItem(id='b', name='Tent', category='camping', source_item_id='p1')]
        result = materialize([tent], [], [], dup, id_factory=self.ids)
        self.assertEqual([i.id for i in result], ['a'])

    def test_ingredient_totals(self):
        totals = ingredient_totals([Meal(id='m1', ingredients=['Rice', 'rice ']), Meal(id='m2', ingredients=[''])])
        self.assertEqual(list(totals), ['rice'])
        self.assertEqual(totals['rice']['quantity'], 2)

    def test_overlong_ingredient_is_skipped(self):
        totals = ingredient_totals([Meal(id='m1', ingredients=['x' * 101, 'Rice'])])
        self.assertEqual(list(totals), ['rice'])

    def test_shopping_list_changed(self):
        a = ShoppingItem(id='a', name='Rice')
        self.assertFalse(shopping_list_changed([a], [a.copy(is_checked=True)]))
        self.assertTrue(shopping_list_changed([a], [a.copy(quantity=3)]))
        self.assertTrue(shopping_list_changed([a], []))

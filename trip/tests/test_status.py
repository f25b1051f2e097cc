import unittest
from trip.domain.PackingItem import PackingItem
from trip.domain.errors import NotFound
from trip.logic.packing.status import (
    set_owned, set_needs_to_buy, toggle_owned, toggle_packed, apply_status_to, reset_statuses, TRANSITIONS,
)


class TestPackingStatus(unittest.TestCase):

    def setUp(self):
        self.item = PackingItem(id='p1', name='Tent', category='Shelter')

    def test_owned_and_needs_to_buy_exclude_each_other(self):
        buy = set_needs_to_buy(self.item)
        self.assertTrue(buy.needs_to_buy)
        owned = set_owned(buy)
        self.assertTrue(owned.is_owned)
        self.assertFalse(owned.needs_to_buy)
        again = set_needs_to_buy(owned)
        self.assertFalse(again.is_owned)
        self.assertTrue(again.needs_to_buy)

    def test_transitions_do_not_mutate_input(self):
        toggle_owned(self.item)
        self.assertFalse(self.item.is_owned)

    def test_packed_is_independent_of_ownership(self):
        packed = toggle_packed(self.item)
        self.assertTrue(packed.is_packed)
        self.assertFalse(packed.is_owned)
        self.assertTrue(toggle_owned(packed).is_packed)

    def test_double_toggle_restores_item(self):
        self.assertEqual(toggle_owned(toggle_owned(self.item)), self.item)

    def test_apply_status_to(self):
        other = PackingItem(id='p2', name='Stove', category='Kitchen')
        updated = apply_status_to([self.item, other], 'p2', TRANSITIONS['needs-to-buy'])
        self.assertFalse(updated[0].needs_to_buy)
        self.assertTrue(updated[1].needs_to_buy)
        with self.assertRaises(NotFound):
            apply_status_to([self.item], 'missing', TRANSITIONS['packed'])

    def test_reset_statuses(self):
        busy = self.item.copy(is_owned=True, is_packed=True, assigned_group_id='g1')
        reset = reset_statuses([busy])[0]
        self.assertFalse(reset.is_owned or reset.is_packed or reset.needs_to_buy)
        self.assertIsNone(reset.assigned_group_id)
        self.assertEqual(reset.name, 'Tent')

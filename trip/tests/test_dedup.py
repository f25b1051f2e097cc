import unittest
from trip.domain.PackingItem import PackingItem
from trip.logic.packing.dedup import dedup_packing_items, retention_score, count_duplicates


def _item(id, name='Tent', category='Shelter', **kw):
    return PackingItem(id=id, name=name, category=category, **kw)


class TestDedupPackingItems(unittest.TestCase):

    def test_one_item_per_identity_key(self):
        items = [_item('a'), _item('b', name=' tent '), _item('c', name='Stove', category='Kitchen')]
        result = dedup_packing_items(items)
        self.assertEqual(len(result), 2)
        self.assertEqual(result[1].id, 'c')

    def test_group_assignment_outweighs_flags(self):
        flagged = _item('a', is_owned=True, is_packed=True)
        grouped = _item('b', assigned_group_id='g1')
        self.assertEqual(retention_score(flagged), 2)
        self.assertEqual(retention_score(grouped), 3)
        self.assertEqual(dedup_packing_items([flagged, grouped])[0].id, 'b')
        self.assertEqual(dedup_packing_items([grouped, flagged])[0].id, 'b')

    def test_equal_score_prefers_grouped_copy(self):
        flagged = _item('a', is_owned=True, is_packed=True, notes='blue one')
        grouped = _item('b', assigned_group_id='g1')
        self.assertEqual(retention_score(flagged), retention_score(grouped))
        self.assertEqual(dedup_packing_items([flagged, grouped])[0].id, 'b')

    def test_personal_and_shared_copies_are_distinct(self):
        items = [_item('a'), _item('b', is_personal=True)]
        self.assertEqual(len(dedup_packing_items(items)), 2)

    def test_idempotent(self):
        items = [_item('a'), _item('b', is_owned=True), _item('c', name='Stove', category='Kitchen'),
                 _item('d', name='stove', category='kitchen', needs_to_buy=True)]
        once = dedup_packing_items(items)
        self.assertEqual(dedup_packing_items(once), once)

    def test_winner_does_not_depend_on_input_order(self):
        items = [_item('a', is_owned=True), _item('b', is_packed=True), _item('c', name='Stove', category='Kitchen')]
        forward = {i.id for i in dedup_packing_items(items)}
        backward = {i.id for i in dedup_packing_items(list(reversed(items)))}
        self.assertEqual(forward, backward)

    def test_count_duplicates(self):
        self.assertEqual(count_duplicates([_item('a'), _item('b'), _item('c')]), 2)
        self.assertEqual(count_duplicates([]), 0)

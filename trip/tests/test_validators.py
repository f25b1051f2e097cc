import unittest
from trip.domain.errors import ValidationRejected
from trip.utilities.validators import (
    PackingItemInput, MealInput, ShoppingItemInput, TodoItemInput, validate_records,
)


class TestValidators(unittest.TestCase):

    def test_valid_records_pass(self):
        validate_records(PackingItemInput, [{'id': 'p1', 'name': 'Tent', 'category': 'Shelter', 'quantity': 2}],
                         'packing_items')
        validate_records(ShoppingItemInput, [{'id': 's1', 'name': 'Rice', 'quantity': 1, 'category': 'food'}],
                         'shopping_items')
        validate_records(TodoItemInput, [{'id': 't1', 'text': 'Pack'}], 'todo_items')

    def test_rejections_list_every_bad_record(self):
        records = [
            {'id': 'p1', 'name': 'Tent', 'category': 'Shelter', 'quantity': 1},
            {'id': 'p2', 'name': '   ', 'category': 'Shelter', 'quantity': 1},
            {'id': 'p3', 'name': 'Stove', 'category': 'Kitchen', 'quantity': 0},
        ]
        with self.assertRaises(ValidationRejected) as ctx:
            validate_records(PackingItemInput, records, 'packing_items')
        self.assertEqual([d['index'] for d in ctx.exception.details], [1, 2])
        self.assertIn('2 invalid', str(ctx.exception))

    def test_owned_item_cannot_need_buying(self):
        record = {'id': 'p1', 'name': 'Tent', 'category': 'Shelter', 'quantity': 1,
                  'isOwned': True, 'needsToBuy': True}
        with self.assertRaises(ValidationRejected):
            validate_records(PackingItemInput, [record], 'packing_items')

    def test_meal_type_and_shopping_category(self):
        with self.assertRaises(ValidationRejected):
            validate_records(MealInput, [{'id': 'm1', 'name': 'Chili', 'day': 1, 'type': 'brunch'}], 'meals')
        with self.assertRaises(ValidationRejected):
            validate_records(ShoppingItemInput, [{'id': 's1', 'name': 'Rice', 'quantity': 1, 'category': 'x'}],
                             'shopping_items')

    def test_meal_ingredients_share_the_name_limit(self):
        meal = {'id': 'm1', 'name': 'Chili', 'day': 1, 'type': 'dinner', 'ingredients': ['x' * 101, 'rice']}
        with self.assertRaises(ValidationRejected):
            validate_records(MealInput, [meal], 'meals')
        meal['ingredients'] = ['x' * 100, 'rice']
        validate_records(MealInput, [meal], 'meals')

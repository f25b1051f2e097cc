from typing import List

from fastapi import APIRouter, Body, Request

from trip.domain.Meal import Meal
from trip.utilities.constants import MEALS
from trip.utilities.validators import MealInput, validate_records

router = APIRouter(prefix='/api/trips/{trip_id}/meals', tags=['meals'])


@router.get('')
def list_meals(trip_id: str, request: Request):
    data = request.app.state.trips.get(trip_id)
    meals = [m.to_dict() for m in data.meal_list]
    return {'trip_id': trip_id, 'meals': meals, 'count': len(meals)}


@router.put('')
def replace_meals(trip_id: str, request: Request, meals: List[dict] = Body(...)):
    validate_records(MealInput, meals, MEALS)
    data = request.app.state.trips.get(trip_id)
    data.set_meals([Meal.from_dict(m) for m in meals])
    return {'trip_id': trip_id, 'meals': [m.to_dict() for m in data.meal_list], 'pending': data.meals.pending}


@router.delete('')
def clear_meals(trip_id: str, request: Request):
    """Remove every meal and forget deleted ingredients."""
    data = request.app.state.trips.get(trip_id)
    data.clear_meals()
    return {'trip_id': trip_id, 'meals': [], 'count': 0}

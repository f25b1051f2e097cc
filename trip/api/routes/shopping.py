from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from trip.utilities.constants import MAX_NAME_LENGTH, SHOPPING_CATEGORIES

router = APIRouter(prefix='/api/trips/{trip_id}/shopping-list', tags=['shopping'])


class ManualItem(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    quantity: int = Field(1, ge=1)
    category: str = Field('camping', pattern=rf'^({"|".join(SHOPPING_CATEGORIES)})$')


def _payload(trip_id, items):
    return {'trip_id': trip_id, 'items': [i.to_dict() for i in items], 'count': len(items)}


@router.get('')
def get_shopping_list(trip_id: str, request: Request):
    data = request.app.state.trips.get(trip_id)
    return _payload(trip_id, data.shopping_items)


@router.post('/refresh')
def refresh_shopping_list(trip_id: str, request: Request):
    data = request.app.state.trips.get(trip_id)
    return _payload(trip_id, data.refresh_shopping_list())


@router.post('/items')
def add_item(trip_id: str, body: ManualItem, request: Request):
    data = request.app.state.trips.get(trip_id)
    item = data.add_shopping_item(body.name, quantity=body.quantity, category=body.category)
    return {'trip_id': trip_id, 'item': item.to_dict()}


@router.delete('/{item_id}')
def remove_item(trip_id: str, item_id: str, request: Request):
    """Remove one item. Meal ingredients are remembered so they are not derived again."""
    data = request.app.state.trips.get(trip_id)
    return _payload(trip_id, data.remove_shopping_item(item_id))

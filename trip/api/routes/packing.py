from typing import List

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import JSONResponse

from trip.domain.PackingItem import PackingItem
from trip.domain.errors import BackendUnavailable
from trip.logic.packing.status import TRANSITIONS
from trip.utilities.constants import PACKING_ITEMS
from trip.utilities.validators import PackingItemInput, validate_records

router = APIRouter(prefix='/api/trips/{trip_id}/packing-items', tags=['packing'])


@router.get('')
def list_packing_items(trip_id: str, request: Request):
    data = request.app.state.trips.get(trip_id)
    items = [i.to_dict() for i in data.packing_items]
    return {'trip_id': trip_id, 'items': items, 'count': len(items)}


@router.put('')
def replace_packing_items(trip_id: str, request: Request, items: List[dict] = Body(...)):
    validate_records(PackingItemInput, items, PACKING_ITEMS)
    data = request.app.state.trips.get(trip_id)
    data.set_packing_items([PackingItem.from_dict(i) for i in items])
    return {'trip_id': trip_id, 'items': [i.to_dict() for i in data.packing_items], 'pending': data.packing.pending}


@router.post('/{item_id}/{status}')
def toggle_status(trip_id: str, item_id: str, status: str, request: Request):
    """Toggle owned / needs-to-buy / packed. Saved immediately; reverted if the save fails."""
    if status not in TRANSITIONS:
        raise HTTPException(status_code=400, detail=f"Unknown status '{status}'")
    data = request.app.state.trips.get(trip_id)
    try:
        item = data.toggle_packing_status(item_id, status)
    except BackendUnavailable as e:
        reverted = next(i for i in data.packing_items if i.id == item_id)
        return JSONResponse(status_code=202, content={
            'item': reverted.to_dict(),
            'rolled_back': True,
            'warning': str(e),
        })
    return {'item': item.to_dict(), 'rolled_back': False}


@router.post('/reset')
def reset_statuses(trip_id: str, request: Request):
    """Clear owned / needs-to-buy / packed flags and group assignments for every item."""
    data = request.app.state.trips.get(trip_id)
    data.reset_packing_statuses()
    return {'trip_id': trip_id, 'items': [i.to_dict() for i in data.packing_items], 'pending': data.packing.pending}

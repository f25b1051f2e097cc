from typing import List

from fastapi import APIRouter, Body, Request

from trip.domain.TodoItem import TodoItem
from trip.utilities.constants import TODO_ITEMS
from trip.utilities.validators import TodoItemInput, validate_records

router = APIRouter(prefix='/api/trips/{trip_id}/todos', tags=['todos'])


@router.get('')
def list_todos(trip_id: str, request: Request):
    data = request.app.state.trips.get(trip_id)
    return {'trip_id': trip_id, 'items': [t.to_dict() for t in data.todo_items]}


@router.put('')
def replace_todos(trip_id: str, request: Request, items: List[dict] = Body(...)):
    validate_records(TodoItemInput, items, TODO_ITEMS)
    data = request.app.state.trips.get(trip_id)
    data.set_todo_items([TodoItem.from_dict(t) for t in items])
    return {'trip_id': trip_id, 'items': [t.to_dict() for t in data.todo_items]}

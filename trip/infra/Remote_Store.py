"""Remote store client for the hosted (Supabase / PostgREST) backend.

Every table is scoped by ``trip_id`` and ``user_id``. A save is an upsert on
``id`` followed by deleting the trip's rows that are no longer in the
collection; saving an empty collection deletes all of them. Any transport or
HTTP status failure surfaces as ``BackendUnavailable``.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from trip.domain.errors import BackendUnavailable
from trip.infra.session import SessionState
from trip.utilities.constants import (
    PACKING_ITEMS, MEALS, SHOPPING_ITEMS, TODO_ITEMS, DELETED_INGREDIENTS,
)

logger = logging.getLogger(__name__)

# camelCase record key -> table column
COLUMNS: Dict[str, Dict[str, str]] = {
    PACKING_ITEMS: {
        "id": "id", "name": "name", "category": "category", "quantity": "quantity",
        "isOwned": "is_owned", "needsToBuy": "needs_to_buy", "isPacked": "is_packed",
        "weight": "weight", "assignedGroupId": "assigned_group_id", "isPersonal": "is_personal",
        "notes": "notes", "sourceActivityIds": "source_activity_ids", "required": "required",
    },
    MEALS: {
        "id": "id", "name": "name", "day": "day", "type": "type", "ingredients": "ingredients",
        "assignedGroupId": "assigned_group_id", "servings": "servings", "isCustom": "is_custom",
    },
    SHOPPING_ITEMS: {
        "id": "id", "name": "name", "quantity": "quantity", "category": "category",
        "isChecked": "is_checked", "needsToBuy": "needs_to_buy", "isOwned": "is_owned",
        "sourceItemId": "source_item_id", "assignedGroupId": "assigned_group_id",
    },
    TODO_ITEMS: {
        "id": "id", "text": "text", "isCompleted": "is_completed", "order": "display_order",
    },
}
ORDERING = {TODO_ITEMS: "display_order.asc"}


def to_row(entity: str, record: Dict[str, Any], trip_id: str, user_id: str) -> Dict[str, Any]:
    row = {column: record.get(key) for key, column in COLUMNS[entity].items()}
    row["trip_id"] = trip_id
    row["user_id"] = user_id
    if entity in (PACKING_ITEMS, MEALS):
        row["last_modified_by"] = user_id
        row["last_modified_at"] = datetime.now(timezone.utc).isoformat()
    return row


def from_row(entity: str, row: Dict[str, Any]) -> Dict[str, Any]:
    return {key: row.get(column) for key, column in COLUMNS[entity].items()}


def quote_value(value: Any) -> str:
    """Double-quote a value for a PostgREST ``in.(...)`` list so ``,`` and ``)`` stay literal."""
    escaped = str(value).replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


class RemoteStore:
    name = 'remote'

    def __init__(self, base_url: str, api_key: str, session: SessionState,
                 timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.session = session
        self._client = client or httpx.Client(timeout=timeout)

    def close(self):
        self._client.close()

    # --- request helpers ----------------------------------------------------
    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.session.access_token}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _user_id(self, entity: str) -> str:
        if not self.session.is_active():
            raise BackendUnavailable("Not signed in", entity=entity)
        return self.session.user_id

    def _request(self, entity: str, method: str, table: str, params: Dict[str, str],
                 json: Any = None, prefer: Optional[str] = None) -> httpx.Response:
        url = f"{self.base_url}/rest/v1/{table}"
        try:
            resp = self._client.request(method, url, params=params, json=json, headers=self._headers(prefer))
            resp.raise_for_status()
            return resp
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {table} failed with status {e.response.status_code}: {e.response.text[:200]}")
            raise BackendUnavailable(f"{table}: HTTP {e.response.status_code}", entity=entity) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {table} transport error: {e}")
            raise BackendUnavailable(f"{table}: {e}", entity=entity) from e

    @staticmethod
    def _scope(trip_id: str, user_id: str) -> Dict[str, str]:
        return {"trip_id": f"eq.{trip_id}", "user_id": f"eq.{user_id}"}

    # --- collection API -----------------------------------------------------
    def load(self, entity: str, trip_id: str) -> List[Any]:
        user_id = self._user_id(entity)
        params = {"select": "*", **self._scope(trip_id, user_id)}
        if entity == DELETED_INGREDIENTS:
            params["select"] = "ingredient_name"
        elif entity in ORDERING:
            params["order"] = ORDERING[entity]
        resp = self._request(entity, "GET", entity, params)
        try:
            rows = resp.json() or []
            if not isinstance(rows, list):
                raise TypeError(f"expected a list of rows, got {type(rows).__name__}")
            if entity == DELETED_INGREDIENTS:
                return [row["ingredient_name"] for row in rows]
            return [from_row(entity, row) for row in rows]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"GET {entity} returned a malformed body: {e}")
            raise BackendUnavailable(f"{entity}: malformed response", entity=entity) from e

    def save(self, entity: str, trip_id: str, records: List[Any]) -> None:
        user_id = self._user_id(entity)
        scope = self._scope(trip_id, user_id)
        if entity == DELETED_INGREDIENTS:
            self._request(entity, "DELETE", entity, scope)
            if records:
                rows = [{"trip_id": trip_id, "user_id": user_id, "ingredient_name": name} for name in records]
                self._request(entity, "POST", entity, {}, json=rows, prefer="return=minimal")
            return
        if not records:
            self._request(entity, "DELETE", entity, scope)
            logger.info(f"Cleared remote {entity} for trip {trip_id}")
            return
        rows = [to_row(entity, record, trip_id, user_id) for record in records]
        self._request(entity, "POST", entity, {"on_conflict": "id"}, json=rows,
                      prefer="resolution=merge-duplicates,return=minimal")
        keep = ",".join(quote_value(r["id"]) for r in rows)
        self._request(entity, "DELETE", entity, {**scope, "id": f"not.in.({keep})"})
        logger.info(f"Saved {len(rows)} {entity} remotely for trip {trip_id}")


__all__ = ['RemoteStore', 'COLUMNS', 'to_row', 'from_row', 'quote_value']

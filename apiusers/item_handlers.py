"""HTTP handlers for an in-memory catalogue of items."""

from __future__ import annotations

import threading

from werkzeug.wrappers import Request, Response

from apiusers.handlers import _error_response, _json_response, _read_json
from apiusers.items import Item, item_from_dict

_DECODE_ERROR = "Erro ao decodificar o JSON: "
_ID_REQUIRED = "ID é obrigatório"
_NOT_FOUND = "Item não encontrado"


class ItemHandler:
    """Serves create, read, update, delete and list endpoints for items."""

    def __init__(self) -> None:
        self._items: dict[str, Item] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _decode(request: Request) -> Item:
        return item_from_dict(_read_json(request))

    def create_item(self, request: Request) -> Response:
        """Store the item in the body under its own identifier."""
        try:
            item = self._decode(request)
        except (TypeError, ValueError) as exc:
            return _error_response(_DECODE_ERROR + str(exc), 400)

        with self._lock:
            self._items[item.id] = item
        return _json_response(item.to_dict())

    def get_item(self, request: Request, item_id: str) -> Response:
        """Return the item stored under ``item_id``."""
        if not item_id:
            return _error_response(_ID_REQUIRED, 400)
        with self._lock:
            item = self._items.get(item_id)
        if item is None:
            return _error_response(_NOT_FOUND, 404)
        return _json_response(item.to_dict())

    def update_item(self, request: Request, item_id: str) -> Response:
        """Replace the item stored under ``item_id`` with the one in the body."""
        if not item_id:
            return _error_response(_ID_REQUIRED, 400)
        try:
            item = self._decode(request)
        except (TypeError, ValueError) as exc:
            return _error_response(_DECODE_ERROR + str(exc), 400)

        with self._lock:
            if item_id not in self._items:
                return _error_response(_NOT_FOUND, 404)
            self._items[item_id] = item
        return _json_response(item.to_dict())

    def delete_item(self, request: Request, item_id: str) -> Response:
        """Remove the item stored under ``item_id``."""
        if not item_id:
            return _error_response(_ID_REQUIRED, 400)
        with self._lock:
            if self._items.pop(item_id, None) is None:
                return _error_response(_NOT_FOUND, 404)
        return Response(status=204)

    def list_items(self, request: Request) -> Response:
        """Return every stored item."""
        with self._lock:
            items = list(self._items.values())
        return _json_response([item.to_dict() for item in items])
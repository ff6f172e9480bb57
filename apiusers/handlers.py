"""HTTP handlers for the bank client API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from werkzeug.wrappers import Request, Response

from apiusers.clients import (
    ClientError,
    InsufficientFundsError,
    InvalidAmountError,
    WithdrawLimitError,
    new_corporate_client,
    new_personal_client,
)
from apiusers.sql_store import StoreError
from apiusers.store import ClientNotFoundError, ClientStore

_JSON_CONTENT_TYPE = "application/json"
_TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
_INVALID_BODY = "Invalid request body"

_HTML_ESCAPES = (
    ("&", "\\u0026"),
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)

_LOOKUP_ERRORS = (LookupError, StoreError)
_REQUEST_ERRORS = (LookupError, StoreError, ClientError)
_CLIENT_MISTAKES = (InvalidAmountError, InsufficientFundsError, WithdrawLimitError)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character {name[0]!r} looking for beginning of value")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def _read_json(request: Request) -> Any:
    """Decode the first JSON value of the request body."""
    text = request.get_data().decode("utf-8", errors="replace")
    stripped = text.lstrip(" \t\r\n")
    if not stripped:
        raise ValueError("EOF")
    value, _ = _DECODER.raw_decode(stripped)
    return value


def _prepare(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    if isinstance(value, Mapping):
        return {key: _prepare(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_prepare(item) for item in value]
    return value


def _encode(payload: Any) -> str:
    text = json.dumps(
        _prepare(payload), ensure_ascii=False, separators=(",", ":"), allow_nan=False
    )
    for char, escape in _HTML_ESCAPES:
        text = text.replace(char, escape)
    return text + "\n"


def _json_response(payload: Any, status: int = 200) -> Response:
    try:
        body = _encode(payload)
    except ValueError:
        body = ""
    return Response(body, status=status, content_type=_JSON_CONTENT_TYPE)


def _error_response(message: str, status: int) -> Response:
    response = Response(message + "\n", status=status, content_type=_TEXT_CONTENT_TYPE)
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _object_payload(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError("request body must be a JSON object")
    return value


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"field {key!r} must be a number")
    try:
        return float(value)
    except OverflowError as exc:
        raise ValueError(f"field {key!r} is out of range") from exc


@dataclass
class CreatePersonalClientRequest:
    """Body of a request that opens a personal account."""

    name: str = ""
    cpf: str = ""
    initial_balance: float = 0.0

    @classmethod
    def _from_request(cls, request: Request) -> CreatePersonalClientRequest:
        data = _object_payload(_read_json(request))
        return cls(
            name=_text(data, "name"),
            cpf=_text(data, "cpf"),
            initial_balance=_number(data, "initial_balance"),
        )


@dataclass
class CreateCorporateClientRequest:
    """Body of a request that opens a corporate account."""

    name: str = ""
    cnpj: str = ""
    initial_balance: float = 0.0

    @classmethod
    def _from_request(cls, request: Request) -> CreateCorporateClientRequest:
        data = _object_payload(_read_json(request))
        return cls(
            name=_text(data, "name"),
            cnpj=_text(data, "cnpj"),
            initial_balance=_number(data, "initial_balance"),
        )


@dataclass
class WithdrawRequest:
    """Body of a cash withdrawal request."""

    amount: float = 0.0

    @classmethod
    def _from_request(cls, request: Request) -> WithdrawRequest:
        data = _object_payload(_read_json(request))
        return cls(amount=_number(data, "amount"))


class ClientHandler:
    """Serves the client endpoints on top of a client store."""

    def __init__(self, store: ClientStore) -> None:
        self._store = store

    def create_personal_client(self, request: Request) -> Response:
        """Open a personal account from the request body."""
        try:
            body = CreatePersonalClientRequest._from_request(request)
        except (TypeError, ValueError):
            return _error_response(_INVALID_BODY, 400)

        client = new_personal_client(body.name, body.cpf, body.initial_balance)
        try:
            self._store.create_personal_client(client)
        except _REQUEST_ERRORS as exc:
            return _error_response(str(exc), 500)
        return _json_response(client.to_dict(), 201)

    def create_corporate_client(self, request: Request) -> Response:
        """Open a corporate account from the request body."""
        try:
            body = CreateCorporateClientRequest._from_request(request)
        except (TypeError, ValueError):
            return _error_response(_INVALID_BODY, 400)

        client = new_corporate_client(body.name, body.cnpj, body.initial_balance)
        try:
            self._store.create_corporate_client(client)
        except _REQUEST_ERRORS as exc:
            return _error_response(str(exc), 500)
        return _json_response(client.to_dict(), 201)

    def get_client(self, request: Request, client_id: str) -> Response:
        """Return one client."""
        try:
            client = self._store.get_client(client_id)
        except _LOOKUP_ERRORS as exc:
            return _error_response(str(exc), 404)
        return _json_response(None if client is None else client.to_dict())

    def list_clients(self, request: Request) -> Response:
        """Return every client."""
        try:
            clients = self._store.list_clients()
        except _REQUEST_ERRORS as exc:
            return _error_response(str(exc), 500)
        payload = None if clients is None else [client.to_dict() for client in clients]
        return _json_response(payload)

    def withdraw(self, request: Request, client_id: str) -> Response:
        """Take cash from a client's account and save the result."""
        try:
            body = WithdrawRequest._from_request(request)
        except (TypeError, ValueError):
            return _error_response(_INVALID_BODY, 400)

        try:
            client = self._store.get_client(client_id)
        except _LOOKUP_ERRORS as exc:
            return _error_response(str(exc), 404)
        if client is None:
            return _error_response(str(ClientNotFoundError()), 404)

        try:
            client.withdraw(body.amount)
        except _CLIENT_MISTAKES as exc:
            return _error_response(str(exc), 400)
        except ClientError as exc:
            return _error_response(str(exc), 500)

        try:
            self._store.update_client(client)
        except _REQUEST_ERRORS as exc:
            return _error_response(str(exc), 500)
        return _json_response(client.to_dict())

    def get_statement(self, request: Request, client_id: str) -> Response:
        """Return the transactions of one client."""
        try:
            client = self._store.get_client(client_id)
        except _LOOKUP_ERRORS as exc:
            return _error_response(str(exc), 404)
        if client is None:
            return _error_response(str(ClientNotFoundError()), 404)
        return _json_response([transaction.to_dict() for transaction in client.statement()])
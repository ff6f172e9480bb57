"""Client store backed by a DB-API database connection."""

from __future__ import annotations

import json
from typing import Any, Callable, Sequence

from apiusers.clients import (
    Client,
    CorporateClient,
    PersonalClient,
    transaction_from_dict,
)
from apiusers.store import ClientNotFoundError, ClientStore

_PLACEHOLDERS: dict[str, Callable[[int], str]] = {
    "qmark": lambda position: "?",
    "format": lambda position: "%s",
    "numeric": lambda position: f":{position}",
}

_CREATE_CLIENTS = """
CREATE TABLE IF NOT EXISTS clients (
    id VARCHAR(36) PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    balance DECIMAL(15,2) NOT NULL,
    client_type VARCHAR(10) NOT NULL,
    cpf VARCHAR(14),
    cnpj VARCHAR(18),
    transactions TEXT
)"""

_SELECT_CLIENTS = "SELECT id, name, balance, client_type, cpf, cnpj, transactions FROM clients"


class StoreError(Exception):
    """The database rejected an operation or returned data that cannot be read."""


class SqlClientStore(ClientStore):
    """Stores clients in a ``clients`` table reached through a DB-API connection."""

    def __init__(self, connection: Any, paramstyle: str = "qmark") -> None:
        try:
            self._mark = _PLACEHOLDERS[paramstyle]
        except KeyError:
            raise ValueError(f"unsupported paramstyle: {paramstyle!r}") from None
        self._connection = connection
        self._db_error: type[BaseException] = getattr(connection, "Error", Exception)

    def _marks(self, count: int) -> list[str]:
        return [self._mark(position) for position in range(1, count + 1)]

    def _execute(self, message: str, query: str, params: Sequence[Any] = ()) -> Any:
        try:
            cursor = self._connection.cursor()
            cursor.execute(query, tuple(params))
        except self._db_error as exc:
            raise StoreError(f"{message}: {exc}") from exc
        return cursor

    def _commit(self, message: str) -> None:
        try:
            self._connection.commit()
        except self._db_error as exc:
            raise StoreError(f"{message}: {exc}") from exc

    def init_tables(self) -> None:
        self._execute("error creating tables", _CREATE_CLIENTS)
        self._commit("error creating tables")

    def _insert(self, client: Client, document_column: str, document: str) -> None:
        message = f"error creating {client.client_type} client"
        marks = self._marks(6)
        query = (
            f"INSERT INTO clients (id, name, balance, client_type, {document_column}, transactions) "
            f"VALUES ({', '.join(marks)})"
        )
        self._execute(
            message,
            query,
            (
                client.id,
                client.name,
                client.balance,
                client.client_type,
                document,
                _dump_transactions(client),
            ),
        )
        self._commit(message)

    def create_personal_client(self, client: PersonalClient) -> None:
        self._insert(client, "cpf", client.cpf)

    def create_corporate_client(self, client: CorporateClient) -> None:
        self._insert(client, "cnpj", client.cnpj)

    def get_client(self, client_id: str) -> Client:
        marks = self._marks(1)
        cursor = self._execute(
            "error getting client", f"{_SELECT_CLIENTS} WHERE id = {marks[0]}", (client_id,)
        )
        try:
            row = cursor.fetchone()
        except self._db_error as exc:
            raise StoreError(f"error getting client: {exc}") from exc
        if row is None:
            raise ClientNotFoundError()
        client = _client_from_row(row)
        if client is None:
            raise StoreError(f"unknown client type: {row[3]}")
        return client

    def update_client(self, client: Client) -> None:
        if not isinstance(client, (PersonalClient, CorporateClient)):
            raise StoreError("invalid client type")
        message = f"error updating {client.client_type} client"
        marks = self._marks(3)
        query = (
            f"UPDATE clients SET balance = {marks[0]}, transactions = {marks[1]} "
            f"WHERE id = {marks[2]} AND client_type = '{client.client_type}'"
        )
        cursor = self._execute(
            message, query, (client.balance, _dump_transactions(client), client.id)
        )
        if cursor.rowcount < 0:
            raise StoreError("error getting rows affected: count unavailable")
        if cursor.rowcount == 0:
            raise ClientNotFoundError()
        self._commit(message)

    def list_clients(self) -> list[Client]:
        cursor = self._execute("error listing clients", _SELECT_CLIENTS)
        try:
            rows = cursor.fetchall()
        except self._db_error as exc:
            raise StoreError(f"error iterating clients: {exc}") from exc
        return [client for client in map(_client_from_row, rows) if client is not None]

    def close(self) -> None:
        try:
            self._connection.close()
        except self._db_error as exc:
            raise StoreError(f"error closing database: {exc}") from exc


def _dump_transactions(client: Client) -> str:
    try:
        return json.dumps([t.to_dict() for t in client.transactions])
    except (TypeError, ValueError) as exc:
        raise StoreError(f"error marshaling transactions: {exc}") from exc


def _load_transactions(raw: Any) -> list:
    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        if isinstance(raw, str):
            raw = json.loads(raw)
        elif raw is None:
            raise ValueError("unexpected end of JSON input")
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise TypeError("transactions must be a JSON array")
        return [transaction_from_dict(entry) for entry in raw]
    except (TypeError, ValueError) as exc:
        raise StoreError(f"error unmarshaling transactions: {exc}") from exc


def _client_from_row(row: Sequence[Any]) -> Client | None:
    client_id, name, balance, client_type, cpf, cnpj, raw_transactions = row
    if client_type not in ("personal", "corporate"):
        return None
    transactions = _load_transactions(raw_transactions)
    if client_type == "personal":
        return PersonalClient(
            id=client_id,
            name=name,
            balance=float(balance),
            transactions=transactions,
            cpf=cpf or "",
        )
    return CorporateClient(
        id=client_id,
        name=name,
        balance=float(balance),
        transactions=transactions,
        cnpj=cnpj or "",
    )
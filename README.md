# apiusers

A small library for building a JSON API around three kinds of record:

- **bank clients** – personal clients (identified by a CPF) and corporate
  clients (identified by a CNPJ), each with a balance and a statement of
  withdrawals;
- **users** – people with a first name, last name and biography, validated on
  creation;
- **items** – products with an id, a name and a price.

Request handlers take a Werkzeug `Request` and return a Werkzeug `Response`.

Install with the test extra to run the test suite:

```
pip install -e ".[test]"
pytest
```

## Clients (`apiusers.clients`)

```python
from apiusers.clients import (
    new_personal_client,
    WithdrawLimitError,
)

client = new_personal_client("John Doe", "123.456.789-00", 2000.0)
client.withdraw(500.0)

print(client.to_dict()["balance"])   # 1500.0
print(len(client.statement()))       # 1

try:
    client.withdraw(1500.0)
except WithdrawLimitError:
    ...  # personal clients may withdraw at most 1000.0 at a time
```

`new_personal_client(name, cpf, initial_balance)` and
`new_corporate_client(name, cnpj, initial_balance)` give the client a fresh
UUID and an empty statement. `PersonalClient` and `CorporateClient` both
derive from `Client`.

Withdrawal rules, checked in this order:

| Condition                               | Exception                |
|-----------------------------------------|--------------------------|
| amount is zero or negative              | `InvalidAmountError`     |
| amount above the per-withdrawal limit   | `WithdrawLimitError`     |
| amount above the current balance        | `InsufficientFundsError` |

The limit is 1000.0 for personal clients and 5000.0 for corporate clients.
All three exceptions derive from `ClientError`. A successful `withdraw`
lowers the balance, appends a `Transaction` of type `"withdrawal"` to the
statement and returns it. `statement()` returns a copy of the transaction
list.

`Client.to_dict()` and `Transaction.to_dict()` give JSON-ready dictionaries
(timestamps as ISO 8601 text); `transaction_from_dict(data)` reads a
transaction back, raising `TypeError` on a field of the wrong type and
`ValueError` on a bad timestamp.

## Users (`apiusers.users`)

```python
from apiusers.users import new_user, ValidationError

user = new_user("  Ada ", "Lovelace", "Wrote the first published algorithm.")
print(user.to_dict())

try:
    new_user("A", "Lovelace", "Too short")
except ValidationError as exc:
    print(exc)   # first_name deve ter entre 2 e 20 caracteres
```

`new_user` strips surrounding whitespace and calls `User.validate()`. First
and last names must be 2–20 bytes long in UTF-8 and the biography 20–450.
`ValidationError` is a `ValueError`.

## Items (`apiusers.items`)

`Item` has `id`, `name` and `price`; `item_from_dict(data)` builds one from
decoded JSON, giving missing fields their empty value and raising `TypeError`
on a field of the wrong type.

## Stores

`apiusers.store` provides:

- `UserStore` – a thread-safe in-memory store of users. `insert` assigns a
  new UUID; `find_by_id`, `update` and `delete` raise `UserNotFoundError` for
  an unknown id; `find_all` returns every user.
- `ClientStore` – the abstract interface of a client store
  (`create_personal_client`, `create_corporate_client`, `get_client`,
  `update_client`, `list_clients`, `close`, `init_tables`). It is a context
  manager that calls `close()` on exit.
- `MockClientStore` – a client store whose methods call the `on_...`
  callbacks given to it; unset callbacks do nothing, `get_client` then
  returns `None` and `list_clients` an empty list.
- `ClientNotFoundError` – raised when a client does not exist.

`apiusers.sql_store.SqlClientStore(connection, paramstyle="qmark")` keeps
clients in a `clients` table through any DB-API connection; `paramstyle` may
be `"qmark"`, `"format"` or `"numeric"`. Transactions are stored as JSON
text. For example, with the standard library's SQLite:

```python
import sqlite3
from apiusers.clients import new_corporate_client
from apiusers.sql_store import SqlClientStore

with SqlClientStore(sqlite3.connect(":memory:")) as store:
    store.init_tables()
    client = new_corporate_client("ACME Corp", "12.345.678/0001-00", 10000.0)
    store.create_corporate_client(client)
    client.withdraw(3000.0)
    store.update_client(client)
    print(store.get_client(client.id).balance)   # 7000.0
```

Database failures and unreadable rows raise `StoreError`; a missing client
raises `ClientNotFoundError`.

## Handlers

`apiusers.handlers.ClientHandler(store)` serves the client API on top of a
`ClientStore`. Request bodies are described by
`CreatePersonalClientRequest`, `CreateCorporateClientRequest` and
`WithdrawRequest`.

| Method                                    | Success status |
|-------------------------------------------|----------------|
| `create_personal_client(request)`         | 201            |
| `create_corporate_client(request)`        | 201            |
| `get_client(request, client_id)`          | 200            |
| `list_clients(request)`                   | 200            |
| `withdraw(request, client_id)`            | 200            |
| `get_statement(request, client_id)`       | 200            |

A malformed body gives 400 (`Invalid request body`), a client the store
cannot find 404, a rejected withdrawal 400 and a store failure 500. Errors
are plain-text responses; successes are JSON. `get_client` answers `null`
with status 200 when the store returns no client, while `withdraw` and
`get_statement` answer 404.

`apiusers.item_handlers.ItemHandler()` is a CRUD handler for items kept in
memory: `create_item(request)` stores the item under its own id,
`get_item`, `update_item` and `delete_item` take `(request, item_id)`, and
`list_items(request)` returns all items. An empty id gives 400, an unknown
id 404, an undecodable body 400, and a successful delete 204 with no body.

## What the package does not do

There is no command, no server and no URL routing: the handlers are plain
methods that you call with a request and, where needed, the id taken from
the path. Wiring them into a WSGI application and running it is left to the
caller. `UserStore` has no HTTP handlers, and the only persistent storage is
`SqlClientStore`; users and items live in memory only.
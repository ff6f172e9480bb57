import sqlite3

import pytest

from apiusers.clients import (
    CorporateClient,
    PersonalClient,
    new_corporate_client,
    new_personal_client,
)
from apiusers.sql_store import SqlClientStore, StoreError
from apiusers.store import ClientNotFoundError


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    yield conn
    try:
        conn.close()
    except sqlite3.Error:
        pass


@pytest.fixture
def store(connection):
    s = SqlClientStore(connection)
    s.init_tables()
    return s


def test_init_tables_is_idempotent(store):
    store.init_tables()
    assert store.list_clients() == []


def test_personal_client_round_trip(store):
    client = new_personal_client("John Doe", "123.456.789-00", 2000.0)
    store.create_personal_client(client)
    loaded = store.get_client(client.id)
    assert isinstance(loaded, PersonalClient)
    assert loaded == client
    assert loaded.cpf == "123.456.789-00"


def test_corporate_client_round_trip(store):
    client = new_corporate_client("ACME Corp", "12.345.678/0001-00", 10000.0)
    store.create_corporate_client(client)
    loaded = store.get_client(client.id)
    assert isinstance(loaded, CorporateClient)
    assert loaded == client
    assert loaded.balance == 10000.0


def test_get_missing_client_raises(store):
    with pytest.raises(ClientNotFoundError):
        store.get_client("missing")


def test_duplicate_id_is_rejected(store):
    client = new_personal_client("John Doe", "123.456.789-00", 2000.0)
    store.create_personal_client(client)
    with pytest.raises(StoreError, match="error creating personal client"):
        store.create_personal_client(client)


def test_list_clients_returns_all(store):
    personal = new_personal_client("John Doe", "123.456.789-00", 2000.0)
    corporate = new_corporate_client("ACME Corp", "12.345.678/0001-00", 10000.0)
    store.create_personal_client(personal)
    store.create_corporate_client(corporate)
    clients = {c.id: c for c in store.list_clients()}
    assert clients == {personal.id: personal, corporate.id: corporate}


def test_update_persists_withdrawal(store):
    client = new_personal_client("John Doe", "123.456.789-00", 2000.0)
    store.create_personal_client(client)
    transaction = client.withdraw(500.0)
    store.update_client(client)
    loaded = store.get_client(client.id)
    assert loaded.balance == 1500.0
    assert loaded.transactions == [transaction]
    assert loaded.statement()[0].to_dict() == transaction.to_dict()


def test_update_missing_client_raises(store):
    client = new_corporate_client("ACME Corp", "12.345.678/0001-00", 10000.0)
    with pytest.raises(ClientNotFoundError):
        store.update_client(client)


def test_update_checks_client_type(store):
    personal = new_personal_client("John Doe", "123.456.789-00", 2000.0)
    store.create_personal_client(personal)
    impostor = CorporateClient(id=personal.id, name="x", balance=1.0, cnpj="")
    with pytest.raises(ClientNotFoundError):
        store.update_client(impostor)
    assert store.get_client(personal.id).balance == 2000.0


def test_update_invalid_client_type(store):
    with pytest.raises(StoreError, match="invalid client type"):
        store.update_client(object())


def test_unknown_client_type(store, connection):
    connection.execute(
        "INSERT INTO clients (id, name, balance, client_type, transactions) VALUES (?, ?, ?, ?, ?)",
        ("odd", "Odd", 1.0, "other", "[]"),
    )
    with pytest.raises(StoreError, match="unknown client type: other"):
        store.get_client("odd")
    assert store.list_clients() == []


def test_null_transactions_cannot_be_read(store, connection):
    connection.execute(
        "INSERT INTO clients (id, name, balance, client_type, cpf) VALUES (?, ?, ?, ?, ?)",
        ("p1", "Someone", 5.0, "personal", "000"),
    )
    with pytest.raises(StoreError, match="error unmarshaling transactions"):
        store.get_client("p1")


def test_json_null_transactions_give_empty_list(store, connection):
    connection.execute(
        "INSERT INTO clients (id, name, balance, client_type, cnpj, transactions) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        ("c1", "Company", 7.5, "corporate", None, "null"),
    )
    loaded = store.get_client("c1")
    assert loaded.transactions == []
    assert loaded.cnpj == ""


def test_numeric_paramstyle(connection):
    s = SqlClientStore(connection, paramstyle="numeric")
    s.init_tables()
    client = new_personal_client("John Doe", "123.456.789-00", 2000.0)
    s.create_personal_client(client)
    client.withdraw(100.0)
    s.update_client(client)
    assert s.get_client(client.id) == client


def test_unsupported_paramstyle():
    with pytest.raises(ValueError):
        SqlClientStore(sqlite3.connect(":memory:"), paramstyle="named")


def test_operations_after_close_fail(store):
    store.close()
    with pytest.raises(StoreError):
        store.list_clients()


def test_missing_table_reports_error(connection):
    s = SqlClientStore(connection)
    with pytest.raises(StoreError, match="error listing clients"):
        s.list_clients()
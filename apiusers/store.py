"""Storage for users and clients: an in-memory user store and a configurable client store."""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from apiusers.clients import Client, CorporateClient, PersonalClient
from apiusers.users import User


class UserNotFoundError(LookupError):
    """No user is stored under the requested identifier."""

    def __init__(self, message: str = "usuário não encontrado") -> None:
        super().__init__(message)


class ClientNotFoundError(LookupError):
    """No client is stored under the requested identifier."""

    def __init__(self, message: str = "client not found") -> None:
        super().__init__(message)


class ClientStore(ABC):
    """Operations every client store provides."""

    @abstractmethod
    def create_personal_client(self, client: PersonalClient) -> None:
        """Store a new personal client."""

    @abstractmethod
    def create_corporate_client(self, client: CorporateClient) -> None:
        """Store a new corporate client."""

    @abstractmethod
    def get_client(self, client_id: str) -> Client | None:
        """Return the client stored under ``client_id``."""

    @abstractmethod
    def update_client(self, client: Client) -> None:
        """Save the balance and transactions of an existing client."""

    @abstractmethod
    def list_clients(self) -> list[Client]:
        """Return every stored client."""

    @abstractmethod
    def close(self) -> None:
        """Release the resources held by the store."""

    @abstractmethod
    def init_tables(self) -> None:
        """Prepare the storage for use."""

    def __enter__(self) -> ClientStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class UserStore:
    """Thread-safe in-memory store of users keyed by identifier."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def find_all(self) -> list[User]:
        """Return every stored user."""
        with self._lock:
            return list(self._users.values())

    def find_by_id(self, user_id: str) -> User:
        """Return the user stored under ``user_id``."""
        with self._lock:
            try:
                return self._users[user_id]
            except KeyError:
                raise UserNotFoundError() from None

    def insert(self, user: User) -> User:
        """Store ``user`` under a freshly generated identifier and return it."""
        with self._lock:
            user.id = str(uuid.uuid4())
            self._users[user.id] = user
            return user

    def update(self, user_id: str, user: User) -> User:
        """Replace the user stored under ``user_id`` with ``user``."""
        with self._lock:
            if user_id not in self._users:
                raise UserNotFoundError()
            user.id = user_id
            self._users[user_id] = user
            return user

    def delete(self, user_id: str) -> User:
        """Remove and return the user stored under ``user_id``."""
        with self._lock:
            try:
                return self._users.pop(user_id)
            except KeyError:
                raise UserNotFoundError() from None


@dataclass
class MockClientStore(ClientStore):
    """Client store whose behaviour is supplied by callbacks; unset ones do nothing."""

    on_create_personal_client: Callable[[PersonalClient], None] | None = None
    on_create_corporate_client: Callable[[CorporateClient], None] | None = None
    on_get_client: Callable[[str], Client | None] | None = None
    on_update_client: Callable[[Client], None] | None = None
    on_list_clients: Callable[[], list[Client]] | None = None

    def create_personal_client(self, client: PersonalClient) -> None:
        if self.on_create_personal_client is not None:
            self.on_create_personal_client(client)

    def create_corporate_client(self, client: CorporateClient) -> None:
        if self.on_create_corporate_client is not None:
            self.on_create_corporate_client(client)

    def get_client(self, client_id: str) -> Client | None:
        if self.on_get_client is not None:
            return self.on_get_client(client_id)
        return None

    def update_client(self, client: Client) -> None:
        if self.on_update_client is not None:
            self.on_update_client(client)

    def list_clients(self) -> list[Client]:
        if self.on_list_clients is not None:
            return self.on_list_clients()
        return []

    def close(self) -> None:
        """Nothing to release."""

    def init_tables(self) -> None:
        """Nothing to prepare."""
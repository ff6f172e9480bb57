"""Bank clients: personal and corporate accounts with cash withdrawals."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Mapping

PERSONAL_CLIENT_WITHDRAW_LIMIT = 1000.0
CORPORATE_CLIENT_WITHDRAW_LIMIT = 5000.0

WITHDRAWAL = "withdrawal"
DEPOSIT = "deposit"

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_FRACTION = re.compile(r"\.(\d+)")


class ClientError(Exception):
    """Base class for errors raised by client operations."""


class InsufficientFundsError(ClientError):
    """The balance does not cover the requested amount."""

    def __init__(self, message: str = "saldo insuficiente") -> None:
        super().__init__(message)


class InvalidAmountError(ClientError):
    """The requested amount is not a positive value."""

    def __init__(self, message: str = "valor inválido") -> None:
        super().__init__(message)


class WithdrawLimitError(ClientError):
    """The requested amount exceeds the client's withdrawal limit."""

    def __init__(self, message: str = "limite de saque excedido") -> None:
        super().__init__(message)


def _format_timestamp(moment: datetime) -> str:
    text = moment.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _parse_timestamp(text: str) -> datetime:
    normalized = text.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION.sub(
        lambda m: "." + m.group(1)[:6].ljust(6, "0"), normalized, count=1
    )
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"invalid timestamp: {text!r}") from exc


def _expect(data: Mapping[str, Any], key: str, kind: type | tuple[type, ...], default: Any) -> Any:
    value = data.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, kind):
        raise TypeError(f"field {key!r} has the wrong type: {type(value).__name__}")
    return value


@dataclass
class Transaction:
    """A single movement on a client's account."""

    id: str
    amount: float
    type: str
    description: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of the transaction."""
        return {
            "id": self.id,
            "amount": self.amount,
            "type": self.type,
            "description": self.description,
            "created_at": _format_timestamp(self.created_at),
        }


def transaction_from_dict(data: Mapping[str, Any]) -> Transaction:
    """Build a transaction from its JSON representation."""
    if not isinstance(data, Mapping):
        raise TypeError("transaction must be a JSON object")
    created = _expect(data, "created_at", str, None)
    return Transaction(
        id=_expect(data, "id", str, ""),
        amount=float(_expect(data, "amount", (int, float), 0.0)),
        type=_expect(data, "type", str, ""),
        description=_expect(data, "description", str, ""),
        created_at=_ZERO_TIME if created is None else _parse_timestamp(created),
    )


@dataclass
class Client:
    """Fields and behaviour shared by every kind of client."""

    client_type: ClassVar[str]
    withdraw_limit: ClassVar[float]

    id: str
    name: str
    balance: float
    transactions: list[Transaction] = field(default_factory=list)

    def withdraw(self, amount: float) -> Transaction:
        """Take cash from the account and record the withdrawal."""
        if amount <= 0:
            raise InvalidAmountError()
        if amount > self.withdraw_limit:
            raise WithdrawLimitError()
        if amount > self.balance:
            raise InsufficientFundsError()

        self.balance -= amount
        transaction = Transaction(
            id=str(uuid.uuid4()),
            amount=amount,
            type=WITHDRAWAL,
            description="Saque em dinheiro",
            created_at=datetime.now().astimezone(),
        )
        self.transactions.append(transaction)
        return transaction

    def statement(self) -> list[Transaction]:
        """Return the client's transactions in the order they happened."""
        return list(self.transactions)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of the client."""
        return {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
            "transactions": [t.to_dict() for t in self.transactions],
        }


@dataclass
class PersonalClient(Client):
    """An individual, identified by CPF."""

    client_type: ClassVar[str] = "personal"
    withdraw_limit: ClassVar[float] = PERSONAL_CLIENT_WITHDRAW_LIMIT

    cpf: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "cpf": self.cpf}


@dataclass
class CorporateClient(Client):
    """A company, identified by CNPJ."""

    client_type: ClassVar[str] = "corporate"
    withdraw_limit: ClassVar[float] = CORPORATE_CLIENT_WITHDRAW_LIMIT

    cnpj: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "cnpj": self.cnpj}


def new_personal_client(name: str, cpf: str, initial_balance: float) -> PersonalClient:
    """Create a personal client with a fresh identifier and no transactions."""
    return PersonalClient(
        id=str(uuid.uuid4()),
        name=name,
        balance=float(initial_balance),
        transactions=[],
        cpf=cpf,
    )


def new_corporate_client(name: str, cnpj: str, initial_balance: float) -> CorporateClient:
    """Create a corporate client with a fresh identifier and no transactions."""
    return CorporateClient(
        id=str(uuid.uuid4()),
        name=name,
        balance=float(initial_balance),
        transactions=[],
        cnpj=cnpj,
    )
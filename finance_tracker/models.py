"""Record types for categories, transactions, budgets and the local user.

Records are plain dataclasses.  They serialize with the camelCase field
names used by the persisted collections and by backup files, so stored data
and exports stay interchangeable with earlier versions of the application.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from . import config
from .errors import ValidationError


class TransactionType(str, Enum):
    GAIN = "GAIN"
    DEPENSE = "DEPENSE"
    EPARGNE = "EPARGNE"

    @classmethod
    def parse(cls, value: Any) -> "TransactionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown transaction type: {value!r}") from exc


class PaymentMode(str, Enum):
    ESPECES = "Espèces"
    CARTE = "Carte"
    MOBILE_MONEY = "Mobile Money"
    VIREMENT = "Virement"


def parse_date(value: Any) -> date:
    """Coerce a stored date (``YYYY-MM-DD`` or an ISO timestamp) to a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"Invalid transaction date: {value!r}")


def _parse_amount(value: Any, label: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {label}: {value!r}") from exc
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative: {amount}")
    return amount


@dataclass
class Category:
    id: str
    name: str
    user_id: str
    type: TransactionType

    @property
    def is_system(self) -> bool:
        return self.user_id == config.SYSTEM_USER_ID

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            user_id=str(data.get("userId", "")),
            type=TransactionType.parse(data.get("type", TransactionType.DEPENSE)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "userId": self.user_id,
            "type": self.type.value,
        }


@dataclass
class Transaction:
    id: str
    user_id: str
    date: date
    description: str
    category: str
    type: TransactionType
    amount: float
    payment_mode: str = PaymentMode.ESPECES.value
    linked_category: Optional[str] = None

    def __post_init__(self) -> None:
        self.date = parse_date(self.date)
        self.type = TransactionType.parse(self.type)
        self.amount = _parse_amount(self.amount, "amount")
        if isinstance(self.payment_mode, PaymentMode):
            self.payment_mode = self.payment_mode.value

    @property
    def is_withdrawal(self) -> bool:
        return self.category == config.WITHDRAWAL_CATEGORY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            date=data.get("date"),
            description=str(data.get("description", "")),
            category=str(data.get("category", "")),
            type=data.get("type", TransactionType.DEPENSE),
            amount=data.get("amount", 0),
            payment_mode=str(data.get("paymentMode", PaymentMode.ESPECES.value)),
            linked_category=data.get("linkedCategory"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "id": self.id,
            "userId": self.user_id,
            "date": self.date.isoformat(),
            "description": self.description,
            "category": self.category,
            "type": self.type.value,
            "amount": self.amount,
            "paymentMode": self.payment_mode,
        }
        if self.linked_category is not None:
            payload["linkedCategory"] = self.linked_category
        return payload


@dataclass
class Budget:
    id: str
    user_id: str
    category: str
    month: int
    year: int
    planned_amount: float

    def __post_init__(self) -> None:
        self.month = int(self.month)
        self.year = int(self.year)
        if not 0 <= self.month <= 11:
            raise ValidationError(f"Budget month must be within 0-11, got {self.month}")
        self.planned_amount = _parse_amount(self.planned_amount, "planned amount")

    @property
    def natural_key(self) -> tuple:
        return (self.user_id, self.category, self.month, self.year)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Budget":
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            category=str(data.get("category", "")),
            month=data.get("month", 0),
            year=data.get("year", 0),
            planned_amount=data.get("plannedAmount", 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "category": self.category,
            "month": self.month,
            "year": self.year,
            "plannedAmount": self.planned_amount,
        }


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(id=str(data["id"]), email=str(data.get("email", "")), name=str(data.get("name", "")))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass(frozen=True)
class Session:
    """The authenticated principal, passed explicitly into every service call."""

    user: User

    @property
    def user_id(self) -> str:
        return self.user.id


__all__ = [
    "TransactionType",
    "PaymentMode",
    "Category",
    "Transaction",
    "Budget",
    "User",
    "Session",
    "parse_date",
]

"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Immutable data structures returned by kernel services and selectors.
    Services and selectors never hand ORM instances to callers; rows are
    converted into these frozen dataclasses so nothing outside a
    transaction can mutate ledger state.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  from_model() class methods are
    boundary converters invoked only from services and selectors.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from marketplace_kernel.models.contract import Contract as ContractModel
    from marketplace_kernel.models.job import Job as JobModel
    from marketplace_kernel.models.profile import Profile as ProfileModel


class ProfileType(str, Enum):
    """Role a profile plays in contracts."""

    CLIENT = "client"
    CONTRACTOR = "contractor"


class ContractStatus(str, Enum):
    """Contract lifecycle status.  Transitions happen outside the kernel."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class ProfileInfo:
    id: UUID
    first_name: str
    last_name: str
    profession: str
    balance: Decimal
    profile_type: ProfileType

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_client(self) -> bool:
        return self.profile_type == ProfileType.CLIENT

    @classmethod
    def from_model(cls, model: ProfileModel) -> ProfileInfo:
        return cls(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            profession=model.profession,
            balance=model.balance,
            profile_type=ProfileType(model.profile_type),
        )


@dataclass(frozen=True)
class ContractInfo:
    id: UUID
    terms: str
    status: ContractStatus
    client_id: UUID
    contractor_id: UUID

    @classmethod
    def from_model(cls, model: ContractModel) -> ContractInfo:
        return cls(
            id=model.id,
            terms=model.terms,
            status=ContractStatus(model.status),
            client_id=model.client_id,
            contractor_id=model.contractor_id,
        )


@dataclass(frozen=True)
class JobInfo:
    id: UUID
    description: str
    price: Decimal
    contract_id: UUID
    paid: bool
    payment_date: datetime | None

    @classmethod
    def from_model(cls, model: JobModel) -> JobInfo:
        return cls(
            id=model.id,
            description=model.description,
            price=model.price,
            contract_id=model.contract_id,
            paid=model.paid,
            payment_date=model.payment_date,
        )


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a job payment, valid once the transaction commits."""

    job_id: UUID
    price: Decimal
    client_new_balance: Decimal
    contractor_new_balance: Decimal
    payment_date: datetime


@dataclass(frozen=True)
class DepositResult:
    """Outcome of an accepted deposit."""

    profile_id: UUID
    amount: Decimal
    max_deposit: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class ProfessionEarnings:
    """Total paid to contractors of one profession inside a report window."""

    profession: str
    earned: Decimal


@dataclass(frozen=True)
class ClientPayments:
    """Total paid by one client inside a report window."""

    id: UUID
    full_name: str
    paid: Decimal

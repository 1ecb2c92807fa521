"""
marketplace_services.outcomes -- status/payload pairs handed to the transport.

Responsibility:
    Converts kernel results and kernel exceptions into an
    ``OperationOutcome(status, payload)`` the outer HTTP layer can send
    verbatim.  Status codes follow HTTP semantics; payload keys follow the
    public API (``fullName``, ``message``, ``error``).

Invariants enforced:
    - Every typed kernel error maps to exactly one status.  Errors not in
      the table are treated as 500.
    - 5xx payloads carry only a generic message and code, never the text
      of the underlying exception.
    - Money (``paid``, ``price``) is a plain decimal string such as
      ``"800"`` or ``"10.5"``, not a JSON number.  Consumers that need
      arithmetic parse it as a decimal; no float rounding happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from marketplace_kernel.domain.dtos import (
    ClientPayments,
    ContractInfo,
    JobInfo,
    ProfessionEarnings,
)
from marketplace_kernel.exceptions import (
    ContractNotFoundError,
    DepositCapExceededError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidDateRangeError,
    JobNotFoundError,
    MarketplaceKernelError,
    ProfileNotFoundError,
    UnauthenticatedError,
    UnexpectedError,
)

_STATUS_BY_ERROR: dict[type[MarketplaceKernelError], int] = {
    UnauthenticatedError: 401,
    JobNotFoundError: 404,
    ContractNotFoundError: 404,
    ProfileNotFoundError: 404,
    InsufficientFundsError: 400,
    InvalidAmountError: 400,
    DepositCapExceededError: 400,
    InvalidDateRangeError: 400,
}


@dataclass(frozen=True)
class OperationOutcome:
    """Transport-neutral response: an HTTP-style status and a JSON-able payload."""

    status: int
    payload: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def success(payload: Any) -> OperationOutcome:
    return OperationOutcome(status=200, payload=payload)


def status_for(error: MarketplaceKernelError) -> int:
    """HTTP-style status for a kernel error; 500 for anything unmapped."""
    for error_type in type(error).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return 500


def failure(error: MarketplaceKernelError) -> OperationOutcome:
    status = status_for(error)
    if status >= 500 and not isinstance(error, UnexpectedError):
        error = UnexpectedError(operation="unknown")
    return OperationOutcome(
        status=status,
        payload={"error": str(error), "code": error.code},
    )


# ---------------------------------------------------------------------------
# Payload shapes
# ---------------------------------------------------------------------------


def _money(value: Decimal) -> str:
    return format(value.normalize(), "f")


def profession_payload(earnings: ProfessionEarnings | None) -> dict[str, Any]:
    return {"profession": earnings.profession if earnings else None}


def clients_payload(clients: list[ClientPayments]) -> list[dict[str, Any]]:
    return [
        {"id": str(c.id), "fullName": c.full_name, "paid": _money(c.paid)}
        for c in clients
    ]


def contract_payload(contract: ContractInfo) -> dict[str, Any]:
    return {
        "id": str(contract.id),
        "terms": contract.terms,
        "status": contract.status.value,
        "clientId": str(contract.client_id),
        "contractorId": str(contract.contractor_id),
    }


def job_payload(job: JobInfo) -> dict[str, Any]:
    return {
        "id": str(job.id),
        "description": job.description,
        "price": _money(job.price),
        "contractId": str(job.contract_id),
        "paid": job.paid,
        "paymentDate": job.payment_date.isoformat() if job.payment_date else None,
    }

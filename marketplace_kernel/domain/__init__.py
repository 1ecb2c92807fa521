"""Pure domain layer: clock, DTOs, and report window validation."""

from marketplace_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from marketplace_kernel.domain.dtos import (
    ClientPayments,
    ContractInfo,
    ContractStatus,
    DepositResult,
    JobInfo,
    PaymentResult,
    ProfessionEarnings,
    ProfileInfo,
    ProfileType,
)
from marketplace_kernel.domain.reporting_window import (
    DEFAULT_BEST_CLIENTS_LIMIT,
    MAX_BEST_CLIENTS_LIMIT,
    DateWindow,
    parse_date_window,
    resolve_limit,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "ClientPayments",
    "ContractInfo",
    "ContractStatus",
    "DepositResult",
    "JobInfo",
    "PaymentResult",
    "ProfessionEarnings",
    "ProfileInfo",
    "ProfileType",
    "DEFAULT_BEST_CLIENTS_LIMIT",
    "MAX_BEST_CLIENTS_LIMIT",
    "DateWindow",
    "parse_date_window",
    "resolve_limit",
]

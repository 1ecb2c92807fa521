"""Kernel services: flush-only writers that run inside the caller's transaction."""

from marketplace_kernel.services.access_service import AccessService
from marketplace_kernel.services.base import BaseService, coerce_uuid
from marketplace_kernel.services.deposit_service import (
    DEFAULT_DEPOSIT_CAP_RATIO,
    DepositService,
    validate_deposit_amount,
)
from marketplace_kernel.services.ledger_store import LedgerStore
from marketplace_kernel.services.payment_service import PaymentService

__all__ = [
    "AccessService",
    "BaseService",
    "coerce_uuid",
    "DEFAULT_DEPOSIT_CAP_RATIO",
    "DepositService",
    "validate_deposit_amount",
    "LedgerStore",
    "PaymentService",
]

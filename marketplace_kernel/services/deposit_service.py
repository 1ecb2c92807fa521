"""
DepositService -- credits a client's balance within a cap tied to debt.

Responsibility:
    Accepts an external deposit into a profile's balance only when the
    amount is at most a fixed share (25% by default) of what that profile
    still owes on unpaid jobs of in-progress contracts.

Architecture position:
    Kernel > Services -- imperative shell.  Reads obligations and locks the
    target row through LedgerStore.

Invariants enforced:
    - Amount validation happens before the store is touched.
    - ``max_deposit = total_unpaid * cap_ratio``; ``amount > max_deposit``
      is rejected.  A client with no unpaid obligations has a zero cap, so
      every deposit is rejected.
    - The balance increment is applied to the locked row's current value,
      so concurrent deposits to one target serialize.

Failure modes:
    - InvalidAmountError: amount missing, non-numeric, zero, or negative.
    - DepositCapExceededError: amount above the cap.
    - ProfileNotFoundError: target row missing when the credit is applied.
"""

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace_kernel.db.types import ZERO, money_from_value
from marketplace_kernel.domain.dtos import DepositResult
from marketplace_kernel.exceptions import (
    DepositCapExceededError,
    InvalidAmountError,
    ProfileNotFoundError,
)
from marketplace_kernel.logging_config import LogContext, get_logger
from marketplace_kernel.services.base import BaseService
from marketplace_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.deposit")

DEFAULT_DEPOSIT_CAP_RATIO = Decimal("0.25")


def validate_deposit_amount(amount: Any) -> Decimal:
    """
    Parse a deposit amount and require it to be positive.

    Raises:
        InvalidAmountError: If amount is not a finite number > 0.
    """
    try:
        value = money_from_value(amount)
    except ValueError as exc:
        raise InvalidAmountError(amount) from exc
    if value <= ZERO:
        raise InvalidAmountError(amount)
    return value


class DepositService(BaseService):
    """
    Applies capped deposits to profile balances.

    Non-goals:
        - Does NOT commit; the caller's transaction scope does.
        - Does NOT special-case a zero cap (see module docstring).
    """

    def __init__(
        self,
        session: Session,
        cap_ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
    ):
        super().__init__(session)
        if not (ZERO <= cap_ratio <= Decimal("1")):
            raise ValueError(f"cap_ratio must be within [0, 1], got {cap_ratio}")
        self._cap_ratio = cap_ratio
        self._store = LedgerStore(session)

    @property
    def cap_ratio(self) -> Decimal:
        return self._cap_ratio

    def max_deposit_for(self, profile_id: UUID) -> Decimal:
        """Current deposit ceiling for a profile."""
        return self._store.sum_unpaid_obligations(profile_id) * self._cap_ratio

    def deposit(self, target_profile_id: UUID, amount: Any) -> DepositResult:
        """
        Credit ``amount`` to the target profile's balance.

        Postconditions (on success, once committed):
            - target balance increased by exactly ``amount``.

        Raises:
            InvalidAmountError: Amount is not a positive number.
            DepositCapExceededError: Amount is above the cap.
            ProfileNotFoundError: Target profile does not exist.
        """
        value = validate_deposit_amount(amount)

        with LogContext.bind(profile_id=target_profile_id):
            max_deposit = self.max_deposit_for(target_profile_id)
            if value > max_deposit:
                logger.info(
                    "deposit_rejected",
                    extra={
                        "reason": DepositCapExceededError.code,
                        "amount": value,
                        "max_deposit": max_deposit,
                    },
                )
                raise DepositCapExceededError(
                    str(target_profile_id), value, max_deposit, self._cap_ratio
                )

            profile = self._store.lock_profile_for_update(target_profile_id)
            if profile is None:
                raise ProfileNotFoundError(str(target_profile_id))

            new_balance = self._store.credit_balance(profile, value)
            logger.info(
                "deposit_applied",
                extra={
                    "amount": value,
                    "max_deposit": max_deposit,
                    "new_balance": new_balance,
                },
            )

            return DepositResult(
                profile_id=profile.id,
                amount=value,
                max_deposit=max_deposit,
                new_balance=new_balance,
            )

"""
LedgerStore -- repository methods with explicit filter and lock semantics.

Responsibility:
    Holds every query the Payment and Deposit engines run against the store,
    so the engines read as a short narrative of business steps and the
    locking rules live in one place.

Architecture position:
    Kernel > Services.  Used by PaymentService and DepositService within
    the caller's transaction.

Invariants enforced:
    - Row locks: every row whose balance or paid flag is about to be decided
      on is read with ``SELECT ... FOR UPDATE`` and held until the caller
      commits or rolls back.
    - Fresh reads: locked reads use ``populate_existing`` so a balance is
      never taken from a stale identity-map copy.
    - Flush only: mutations flush; the caller owns commit.

Failure modes:
    - OperationalError on lock timeout / deadlock (propagates to the caller's
      transaction scope, which rolls back).
    - IntegrityError from the balance CHECK constraint if a debit would
      overdraw (PaymentService checks first, so this indicates a bug).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from marketplace_kernel.db.types import ZERO
from marketplace_kernel.domain.dtos import ContractStatus
from marketplace_kernel.logging_config import get_logger
from marketplace_kernel.models.contract import Contract
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.services.base import BaseService

logger = get_logger("services.ledger_store")


class LedgerStore(BaseService):
    """
    Repository over Profile, Contract and Job rows.

    Contract:
        All methods run inside the caller's session/transaction.  Methods
        named ``lock_*`` / ``find_*_for_update`` take row locks.
    """

    def find_unpaid_job_for_client(self, job_id: UUID, client_id: UUID) -> Job | None:
        """
        Load and lock an unpaid job the given client is allowed to pay.

        Filter: ``job.id = job_id AND job.paid = false AND
        contract.client_id = client_id``.
        Lock: the job row only (``FOR UPDATE OF jobs``).  A concurrent payer
        blocked on the same row re-evaluates ``paid = false`` after the
        winner commits and gets no row back.

        Returns:
            The locked Job with its contract loaded, or None.
        """
        stmt = (
            select(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .where(
                Job.id == job_id,
                Job.paid.is_(False),
                Contract.client_id == client_id,
            )
            .with_for_update(of=Job)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def lock_profile_for_update(self, profile_id: UUID) -> Profile | None:
        """
        Load and lock a profile row, re-reading its balance from the store.

        Returns:
            The locked Profile, or None if it does not exist.
        """
        stmt = (
            select(Profile)
            .where(Profile.id == profile_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def sum_unpaid_obligations(self, client_id: UUID) -> Decimal:
        """
        Total price of unpaid jobs on the client's in-progress contracts.

        Filter: ``job.paid = false AND contract.client_id = client_id AND
        contract.status = 'in_progress'``.  No lock; the figure only caps a
        deposit and does not move money.

        Returns:
            The sum, or Decimal("0") when there are no such jobs.
        """
        stmt = (
            select(func.coalesce(func.sum(Job.price), ZERO))
            .join(Contract, Job.contract_id == Contract.id)
            .where(
                Job.paid.is_(False),
                Contract.client_id == client_id,
                Contract.status == ContractStatus.IN_PROGRESS.value,
            )
        )
        total = self.session.execute(stmt).scalar_one()
        return Decimal(total) if total is not None else ZERO

    def debit_balance(self, profile: Profile, amount: Decimal) -> Decimal:
        """Subtract ``amount`` from a locked profile.  Returns the new balance."""
        profile.balance = profile.balance - amount
        self.session.flush()
        logger.debug(
            "balance_debited",
            extra={"profile_id": str(profile.id), "amount": amount},
        )
        return profile.balance

    def credit_balance(self, profile: Profile, amount: Decimal) -> Decimal:
        """Add ``amount`` to a locked profile.  Returns the new balance."""
        profile.balance = profile.balance + amount
        self.session.flush()
        logger.debug(
            "balance_credited",
            extra={"profile_id": str(profile.id), "amount": amount},
        )
        return profile.balance

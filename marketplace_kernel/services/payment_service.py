"""
PaymentService -- settles a job as one zero-sum balance transfer.

Responsibility:
    Moves a job's price from the paying client's balance to the
    contractor's balance and marks the job paid, as a single atomic unit
    inside the caller's transaction.

Architecture position:
    Kernel > Services -- imperative shell.  Uses LedgerStore for every
    locked read and write; the clock supplies the payment timestamp.

Invariants enforced:
    - Only the contract's client may pay; contractors and unrelated
      profiles get JobNotFoundError, the same as a missing or paid job.
    - Zero-sum: client -price, contractor +price, nothing else changes.
    - No overdraft: the client's balance is re-read from its locked row and
      must be >= price.
    - Single payment: the job row is locked with ``paid = false`` in the
      filter, so two concurrent payments serialize and the loser sees
      JobNotFoundError.
    - Lock order is job, then paying client, then contractor.

Failure modes:
    - JobNotFoundError: no unpaid job with this id on the caller's contracts.
    - InsufficientFundsError: client balance < price.  Nothing is mutated.
    - ProfileNotFoundError: the contractor row is missing (referential
      damage; the FK normally prevents it).
    - Any store exception propagates; the caller's scope rolls back.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from marketplace_kernel.domain.clock import Clock, SystemClock
from marketplace_kernel.domain.dtos import PaymentResult
from marketplace_kernel.exceptions import (
    InsufficientFundsError,
    JobNotFoundError,
    ProfileNotFoundError,
)
from marketplace_kernel.logging_config import LogContext, get_logger
from marketplace_kernel.services.base import BaseService
from marketplace_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.payment")


class PaymentService(BaseService):
    """
    Pays jobs on behalf of their client.

    Non-goals:
        - Does NOT commit; the caller's transaction scope does.
        - Does NOT resolve caller identity; callers pass a resolved profile id.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._store = LedgerStore(session)

    def pay_job(self, job_id: UUID, caller_profile_id: UUID) -> PaymentResult:
        """
        Pay an unpaid job from the caller's balance.

        Preconditions:
            - Called inside an open transaction that the caller will commit.

        Postconditions (on success, once committed):
            - client balance decreased by job.price
            - contractor balance increased by job.price
            - job.paid is True and job.payment_date is the clock's UTC now

        Raises:
            JobNotFoundError: Missing, already paid, or caller is not the client.
            InsufficientFundsError: Caller balance is below the job price.
        """
        with LogContext.bind(job_id=job_id, actor_id=caller_profile_id):
            job = self._store.find_unpaid_job_for_client(job_id, caller_profile_id)
            if job is None:
                logger.info("payment_rejected", extra={"reason": JobNotFoundError.code})
                raise JobNotFoundError(str(job_id))

            client = self._store.lock_profile_for_update(caller_profile_id)
            if client is None:
                raise ProfileNotFoundError(str(caller_profile_id))

            if client.balance < job.price:
                logger.info(
                    "payment_rejected",
                    extra={
                        "reason": InsufficientFundsError.code,
                        "balance": client.balance,
                        "price": job.price,
                    },
                )
                raise InsufficientFundsError(str(job_id), client.balance, job.price)

            contractor_id = job.contract.contractor_id
            contractor = self._store.lock_profile_for_update(contractor_id)
            if contractor is None:
                raise ProfileNotFoundError(str(contractor_id))

            price = job.price
            client_balance = self._store.debit_balance(client, price)
            contractor_balance = self._store.credit_balance(contractor, price)

            paid_at = self._clock.now_utc()
            job.paid = True
            job.payment_date = paid_at
            self.session.flush()

            logger.info(
                "job_paid",
                extra={
                    "price": price,
                    "contractor_id": str(contractor_id),
                    "client_balance": client_balance,
                    "contractor_balance": contractor_balance,
                },
            )

            return PaymentResult(
                job_id=job.id,
                price=price,
                client_new_balance=client_balance,
                contractor_new_balance=contractor_balance,
                payment_date=paid_at,
            )

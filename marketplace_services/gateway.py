"""
marketplace_services.gateway -- the operations the outer HTTP layer calls.

Responsibility:
    Runs each ledger operation in its own transaction (one session from the
    injected factory per call), wires the kernel services and selectors for
    that session, and converts the result or failure into an
    ``OperationOutcome``.

Architecture position:
    Services -- the only place where kernel services are constructed and
    composed, and the only place where transactions begin and end.  Kernel
    code below it only flushes.

Invariants enforced:
    - One operation, one transaction: a business failure or a store error
      rolls the whole operation back before an outcome is returned.
    - Input validation (job id shape, deposit amount, report window) runs
      before the first query.
    - Unexpected errors are logged with traceback and reported as a
      generic 500; their text never reaches the payload.

Usage:
    gateway = MarketplaceGateway(session_factory, clock=SystemClock())
    caller = gateway.authenticate(request.headers["profile_id"])
    outcome = gateway.pay_job(caller, job_id)
    respond(outcome.status, outcome.payload)
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session, sessionmaker

from marketplace_kernel.db.engine import session_scope
from marketplace_kernel.domain.clock import Clock, SystemClock
from marketplace_kernel.domain.dtos import ProfileInfo
from marketplace_kernel.domain.reporting_window import (
    DEFAULT_BEST_CLIENTS_LIMIT,
    parse_date_window,
    resolve_limit,
)
from marketplace_kernel.exceptions import (
    ContractNotFoundError,
    JobNotFoundError,
    MarketplaceKernelError,
    ProfileNotFoundError,
    UnexpectedError,
)
from marketplace_kernel.logging_config import LogContext, get_logger
from marketplace_kernel.selectors.contract_selector import ContractSelector
from marketplace_kernel.selectors.reporting_selector import ReportingSelector
from marketplace_kernel.services.access_service import AccessService
from marketplace_kernel.services.base import coerce_uuid
from marketplace_kernel.services.deposit_service import (
    DEFAULT_DEPOSIT_CAP_RATIO,
    DepositService,
    validate_deposit_amount,
)
from marketplace_kernel.services.payment_service import PaymentService
from marketplace_services.outcomes import (
    OperationOutcome,
    clients_payload,
    contract_payload,
    failure,
    job_payload,
    profession_payload,
    status_for,
    success,
)

logger = get_logger("services.gateway")

Caller = ProfileInfo | UUID


def _caller_id(caller: Caller) -> UUID:
    return caller.id if isinstance(caller, ProfileInfo) else caller


class MarketplaceGateway:
    """Entry points for payments, deposits, reports and contract lookups.

    Contract:
        Receives a session factory and optional Clock.  Every public method
        except ``authenticate`` returns an ``OperationOutcome`` and never
        raises for business or store failures.

    Non-goals:
        - Does NOT parse HTTP requests or own a web framework.
        - Does NOT retry failed transactions.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clock: Clock | None = None,
        deposit_cap_ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
        best_clients_default_limit: int = DEFAULT_BEST_CLIENTS_LIMIT,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._deposit_cap_ratio = deposit_cap_ratio
        self._default_limit = best_clients_default_limit

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def authenticate(self, identifier: object) -> ProfileInfo:
        """
        Resolve the opaque caller identifier sent with a request.

        Raises:
            UnauthenticatedError: Missing, malformed or unknown identifier.
        """
        with session_scope(self._session_factory) as session:
            return AccessService(session).resolve_caller(identifier)

    # ------------------------------------------------------------------
    # Ledger mutations
    # ------------------------------------------------------------------

    def pay_job(self, caller: Caller, job_id: object) -> OperationOutcome:
        caller_id = _caller_id(caller)

        def work(session: Session) -> dict[str, Any]:
            parsed = coerce_uuid(job_id)
            if parsed is None:
                raise JobNotFoundError(str(job_id))
            PaymentService(session, self._clock).pay_job(parsed, caller_id)
            return {"message": "Payment successful"}

        return self._run(
            "pay_job",
            work,
            failure_message="Payment failed",
            actor_id=caller_id,
            job_id=job_id,
        )

    def deposit(self, target_profile_id: object, amount: Any) -> OperationOutcome:
        def work(session: Session) -> dict[str, Any]:
            value = validate_deposit_amount(amount)
            target = coerce_uuid(target_profile_id)
            if target is None:
                raise ProfileNotFoundError(str(target_profile_id))
            DepositService(session, self._deposit_cap_ratio).deposit(target, value)
            return {"message": "Deposit successful"}

        return self._run(
            "deposit",
            work,
            failure_message="Deposit failed",
            profile_id=target_profile_id,
        )

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def best_profession(self, start: Any, end: Any) -> OperationOutcome:
        def work(session: Session) -> dict[str, Any]:
            window = parse_date_window(start, end)
            return profession_payload(ReportingSelector(session).best_profession(window))

        return self._run("best_profession", work)

    def best_clients(self, start: Any, end: Any, limit: Any = None) -> OperationOutcome:
        def work(session: Session) -> list[dict[str, Any]]:
            window = parse_date_window(start, end)
            rows = ReportingSelector(session).best_clients(
                window, resolve_limit(limit, self._default_limit)
            )
            return clients_payload(rows)

        return self._run("best_clients", work)

    # ------------------------------------------------------------------
    # Contract visibility
    # ------------------------------------------------------------------

    def get_contract(self, caller: Caller, contract_id: object) -> OperationOutcome:
        caller_id = _caller_id(caller)

        def work(session: Session) -> dict[str, Any]:
            parsed = coerce_uuid(contract_id)
            if parsed is None:
                raise ContractNotFoundError(str(contract_id))
            contract = ContractSelector(session).get_visible_contract(caller_id, parsed)
            return contract_payload(contract)

        return self._run("get_contract", work, actor_id=caller_id)

    def list_contracts(self, caller: Caller) -> OperationOutcome:
        caller_id = _caller_id(caller)

        def work(session: Session) -> list[dict[str, Any]]:
            contracts = ContractSelector(session).list_active_contracts(caller_id)
            return [contract_payload(c) for c in contracts]

        return self._run("list_contracts", work, actor_id=caller_id)

    def list_unpaid_jobs(self, caller: Caller) -> OperationOutcome:
        caller_id = _caller_id(caller)

        def work(session: Session) -> list[dict[str, Any]]:
            jobs = ContractSelector(session).list_unpaid_jobs(caller_id)
            return [job_payload(j) for j in jobs]

        return self._run("list_unpaid_jobs", work, actor_id=caller_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(
        self,
        operation: str,
        work: Callable[[Session], Any],
        *,
        failure_message: str = "Operation failed",
        **context: Any,
    ) -> OperationOutcome:
        with LogContext.bind(
            operation=operation, correlation_id=uuid4().hex, **context
        ):
            try:
                with session_scope(self._session_factory) as session:
                    payload = work(session)
            except MarketplaceKernelError as exc:
                if status_for(exc) >= 500:
                    logger.exception("operation_error", extra={"code": exc.code})
                    return failure(UnexpectedError(operation, failure_message))
                logger.info("operation_rejected", extra={"code": exc.code})
                return failure(exc)
            except Exception:
                logger.exception("operation_error", extra={"code": UnexpectedError.code})
                return failure(UnexpectedError(operation, failure_message))

            logger.info("operation_completed")
            return success(payload)

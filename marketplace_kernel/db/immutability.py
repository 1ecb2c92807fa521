"""
ORM-Level Immutability Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

A paid job is a settled money movement.  If any code path could flip it back
to unpaid, rewrite its payment date, or change its price, the ledger could
pay the same job twice or make balances disagree with job history.  Likewise
a contract's client and contractor decide who may pay; rewriting them after
the fact would redirect money.

SQLAlchemy fires events before UPDATE/DELETE operations reach the database.
We register listeners that intercept these events and check the rules:

    session.flush()
         |
         v
    [before_update event] --> _check_*_immutability() --> ImmutabilityViolationError
         |
         v
    [before_delete event] --> _check_job_delete() ------> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity    | When Immutable          | Fields
----------|-------------------------|-------------------------------------------
Job       | Once paid was true      | paid, payment_date, price, contract_id
Job       | Once paid was true      | DELETE blocked
Contract  | Always                  | client_id, contractor_id

The unpaid -> paid transition itself (PaymentService) is allowed.
"""

from sqlalchemy import event
from sqlalchemy.orm.attributes import get_history

from marketplace_kernel.exceptions import ImmutabilityViolationError
from marketplace_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

_FROZEN_JOB_FIELDS = ("paid", "payment_date", "price", "contract_id")
_FROZEN_CONTRACT_FIELDS = ("client_id", "contractor_id")


def _was_paid_before(target) -> bool:
    """True if the job was already paid when this unit of work began."""
    paid_history = get_history(target, "paid")
    if paid_history.deleted:
        return bool(paid_history.deleted[0])
    if not paid_history.added:
        return bool(target.paid)
    return False


def _blocked(entity_type: str, entity_id, operation: str, field: str, reason: str):
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "operation": operation,
            "field": field,
        },
    )
    return ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(entity_id),
        reason=reason,
    )


def _check_job_immutability(mapper, connection, target):
    """
    Prevent updates to settlement fields of paid jobs.

    Logic:
        1. paid changing FROM true: block (un-paying a settled job)
        2. paid unchanged and true: block changes to frozen fields
        3. paid changing TO true: allow (this IS the payment)
    """
    if not _was_paid_before(target):
        return

    for field in _FROZEN_JOB_FIELDS:
        if get_history(target, field).has_changes():
            raise _blocked(
                "Job",
                target.id,
                "UPDATE",
                field,
                f"Cannot modify field '{field}' on a paid job",
            )


def _check_job_delete(mapper, connection, target):
    """Prevent deletion of paid jobs."""
    if _was_paid_before(target):
        raise _blocked(
            "Job", target.id, "DELETE", "paid", "Paid jobs cannot be deleted"
        )


def _check_contract_immutability(mapper, connection, target):
    """Prevent rewriting the parties of a contract."""
    for field in _FROZEN_CONTRACT_FIELDS:
        if get_history(target, field).deleted:
            raise _blocked(
                "Contract",
                target.id,
                "UPDATE",
                field,
                f"Cannot modify field '{field}' on a contract",
            )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Call this once during application initialization, after the models are
    importable and before any ledger operation runs.  Safe to call twice.
    """
    from marketplace_kernel.models.contract import Contract
    from marketplace_kernel.models.job import Job

    for target, event_name, listener_fn in (
        (Job, "before_update", _check_job_immutability),
        (Job, "before_delete", _check_job_delete),
        (Contract, "before_update", _check_contract_immutability),
    ):
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests.
    """
    from marketplace_kernel.models.contract import Contract
    from marketplace_kernel.models.job import Job

    _safe_remove_listener(Job, "before_update", _check_job_immutability)
    _safe_remove_listener(Job, "before_delete", _check_job_delete)
    _safe_remove_listener(Contract, "before_update", _check_contract_immutability)

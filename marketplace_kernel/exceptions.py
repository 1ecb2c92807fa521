"""
Typed Exception Hierarchy for the Marketplace Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger must tell apart "the caller can fix this" from "the
store broke".  Parsing message strings for that is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        payment_service.pay_job(job_id, caller_id)
    except InsufficientFundsError as e:
        log.warning("short by %s", e.price - e.balance)
        api_response(code=e.code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    MarketplaceKernelError (base)
    |
    +-- AccessError
    |   +-- UnauthenticatedError
    |   +-- ContractNotFoundError
    |
    +-- ProfileError
    |   +-- ProfileNotFoundError
    |
    +-- PaymentError
    |   +-- JobNotFoundError
    |   +-- InsufficientFundsError
    |
    +-- DepositError
    |   +-- InvalidAmountError
    |   +-- DepositCapExceededError
    |
    +-- ReportingError
    |   +-- InvalidDateRangeError
    |
    +-- ImmutabilityError
    |   +-- ImmutabilityViolationError
    |
    +-- UnexpectedError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                    | When Raised
-----------|-------------------------|-----------------------------------------
Access     | UNAUTHENTICATED         | Caller identifier missing or unknown
           | CONTRACT_NOT_FOUND      | Contract missing or caller not a party
-----------|-------------------------|-----------------------------------------
Profile    | PROFILE_NOT_FOUND       | Deposit target row vanished
-----------|-------------------------|-----------------------------------------
Payment    | JOB_NOT_FOUND           | Missing, already paid, or not the payer
           | INSUFFICIENT_FUNDS      | Client balance below job price
-----------|-------------------------|-----------------------------------------
Deposit    | INVALID_AMOUNT          | Amount non-numeric, zero or negative
           | DEPOSIT_CAP_EXCEEDED    | Amount above 25% of unpaid obligations
-----------|-------------------------|-----------------------------------------
Reporting  | INVALID_DATE_RANGE      | Bound missing, unparsable, or reversed
-----------|-------------------------|-----------------------------------------
Integrity  | IMMUTABILITY_VIOLATION  | Un-paying a job, rewriting a contract
-----------|-------------------------|-----------------------------------------
Store      | UNEXPECTED              | Store/transaction failure (5xx only)

JOB_NOT_FOUND deliberately conflates "no such job", "already paid" and
"not your contract" so that contract visibility never leaks to the payer.
"""

from decimal import Decimal


class MarketplaceKernelError(Exception):
    """
    Base exception for all marketplace kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "MARKETPLACE_KERNEL_ERROR"


# Access-related exceptions


class AccessError(MarketplaceKernelError):
    """Base exception for caller identity and visibility errors."""

    code: str = "ACCESS_ERROR"


class UnauthenticatedError(AccessError):
    """Caller identifier is missing or does not resolve to a profile."""

    code: str = "UNAUTHENTICATED"

    def __init__(self, identifier: object = None):
        self.identifier = None if identifier is None else str(identifier)
        super().__init__("Caller could not be identified")


class ContractNotFoundError(AccessError):
    """Contract does not exist or the caller is not a party to it."""

    code: str = "CONTRACT_NOT_FOUND"

    def __init__(self, contract_id: str):
        self.contract_id = contract_id
        super().__init__(f"Contract not found: {contract_id}")


# Profile-related exceptions


class ProfileError(MarketplaceKernelError):
    """Base exception for profile errors."""

    code: str = "PROFILE_ERROR"


class ProfileNotFoundError(ProfileError):
    """Profile with given ID was not found."""

    code: str = "PROFILE_NOT_FOUND"

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile not found: {profile_id}")


# Payment-related exceptions


class PaymentError(MarketplaceKernelError):
    """Base exception for job payment errors."""

    code: str = "PAYMENT_ERROR"


class JobNotFoundError(PaymentError):
    """
    No unpaid job with this ID exists on a contract the caller pays for.

    Covers not-found, already-paid and unauthorized-payer on purpose.
    """

    code: str = "JOB_NOT_FOUND"

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__("Job not found or already paid")


class InsufficientFundsError(PaymentError):
    """Client balance is lower than the job price."""

    code: str = "INSUFFICIENT_FUNDS"

    def __init__(self, job_id: str, balance: Decimal, price: Decimal):
        self.job_id = job_id
        self.balance = balance
        self.price = price
        super().__init__("Insufficient funds")


# Deposit-related exceptions


class DepositError(MarketplaceKernelError):
    """Base exception for deposit errors."""

    code: str = "DEPOSIT_ERROR"


class InvalidAmountError(DepositError):
    """Deposit amount is not a positive number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount: object):
        self.amount = str(amount)
        super().__init__("Deposit amount must be a positive number")


class DepositCapExceededError(DepositError):
    """
    Deposit amount exceeds the cap derived from unpaid obligations.

    The message always names the policy percentage (e.g. "25%").
    """

    code: str = "DEPOSIT_CAP_EXCEEDED"

    def __init__(
        self,
        profile_id: str,
        amount: Decimal,
        max_deposit: Decimal,
        cap_ratio: Decimal,
    ):
        self.profile_id = profile_id
        self.amount = amount
        self.max_deposit = max_deposit
        self.cap_ratio = cap_ratio
        percent = (cap_ratio * 100).normalize()
        super().__init__(
            f"Deposit amount exceeds {percent:f}% of total jobs to pay"
        )


# Reporting-related exceptions


class ReportingError(MarketplaceKernelError):
    """Base exception for reporting errors."""

    code: str = "REPORTING_ERROR"


class InvalidDateRangeError(ReportingError):
    """Report window bounds are missing, unparsable, or reversed."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, reason: str, start: object = None, end: object = None):
        self.reason = reason
        self.start = None if start is None else str(start)
        self.end = None if end is None else str(end)
        super().__init__(reason)


# Immutability-related exceptions


class ImmutabilityError(MarketplaceKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete a record past its mutable lifetime."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )


# Store failures


class UnexpectedError(MarketplaceKernelError):
    """
    Store or transaction failure.

    The only kind that maps to a 5xx outcome.  The message is generic; the
    original exception is kept as __cause__ for logging only.
    """

    code: str = "UNEXPECTED"

    def __init__(self, operation: str, message: str = "Operation failed"):
        self.operation = operation
        super().__init__(message)

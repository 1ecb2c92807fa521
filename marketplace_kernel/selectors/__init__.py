"""Read-only selectors (query side)."""

from marketplace_kernel.selectors.base import BaseSelector
from marketplace_kernel.selectors.contract_selector import ContractSelector
from marketplace_kernel.selectors.reporting_selector import ReportingSelector

__all__ = [
    "BaseSelector",
    "ContractSelector",
    "ReportingSelector",
]

"""Domain models for the marketplace kernel."""

from marketplace_kernel.domain.dtos import ContractStatus, ProfileType
from marketplace_kernel.models.contract import Contract
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile

__all__ = [
    "Contract",
    "ContractStatus",
    "Job",
    "Profile",
    "ProfileType",
]

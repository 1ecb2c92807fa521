"""
marketplace_services -- transaction-owning layer above the kernel.

Constructs kernel services per operation and turns their results into
transport-neutral outcomes.
"""

from marketplace_services.bootstrap import MarketplaceRuntime, build_runtime
from marketplace_services.gateway import MarketplaceGateway
from marketplace_services.outcomes import OperationOutcome

__all__ = [
    "MarketplaceGateway",
    "MarketplaceRuntime",
    "OperationOutcome",
    "build_runtime",
]

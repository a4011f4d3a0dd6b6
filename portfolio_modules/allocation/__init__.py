"""
Resource Allocation Module (``portfolio_modules.allocation``).

Responsibility
--------------
A person's percentage commitment to a project over a period, and the
pairwise over-commitment check across that person's concurrent
allocations.

Architecture position
---------------------
**Modules layer** -- the ``ResourceAllocation`` aggregate, its change
records and activation workflow, and ``AllocationConflictService`` which
consumes an ``AllocationLookup`` supplied by the host.

Failure modes
-------------
* ``InvalidAllocationError`` -- malformed percentage, period, role or date.
* ``AllocationStateError`` -- operation on an inactive or elapsed
  allocation.
"""

from portfolio_modules.allocation.events import (
    AllocationCreated,
    AllocationDeactivated,
    AllocationExtended,
    AllocationReactivated,
    AllocationReduced,
    AllocationRoleUpdated,
    AllocationUpdated,
    OverallocationDetected,
)
from portfolio_modules.allocation.models import AllocationStatus, ResourceAllocation
from portfolio_modules.allocation.service import (
    AllocationConflict,
    AllocationConflictService,
    AllocationLookup,
)
from portfolio_modules.allocation.workflows import ALLOCATION_WORKFLOW

__all__ = [
    "ALLOCATION_WORKFLOW",
    "AllocationConflict",
    "AllocationConflictService",
    "AllocationCreated",
    "AllocationDeactivated",
    "AllocationExtended",
    "AllocationLookup",
    "AllocationReactivated",
    "AllocationReduced",
    "AllocationRoleUpdated",
    "AllocationStatus",
    "AllocationUpdated",
    "OverallocationDetected",
    "ResourceAllocation",
]

"""Allocation Workflows.

State machine for the resource allocation active flag.
"""

from portfolio_kernel.domain.workflow import Guard, Transition, Workflow
from portfolio_kernel.logging_config import get_logger

logger = get_logger("modules.allocation.workflows")


PERIOD_NOT_ELAPSED = Guard(
    "period_not_elapsed", "Allocation period has not fully elapsed (end >= today)"
)

ALLOCATION_WORKFLOW = Workflow(
    name="resource_allocation",
    description="Resource allocation activation lifecycle",
    initial_state="active",
    states=("active", "inactive"),
    transitions=(
        Transition("active", "inactive", action="deactivate"),
        Transition("inactive", "active", action="reactivate", guard=PERIOD_NOT_ELAPSED),
    ),
)

logger.info("allocation_workflow_registered", extra={
    "workflow_name": ALLOCATION_WORKFLOW.name,
    "state_count": len(ALLOCATION_WORKFLOW.states),
})

"""Budget Workflows.

State machine for the project budget lifecycle. ``closed`` is terminal.
"""

from portfolio_kernel.domain.workflow import Transition, Workflow
from portfolio_kernel.logging_config import get_logger

logger = get_logger("modules.budget.workflows")


BUDGET_WORKFLOW = Workflow(
    name="project_budget",
    description="Project budget spending lifecycle",
    initial_state="active",
    states=("active", "frozen", "closed"),
    transitions=(
        Transition("active", "frozen", action="freeze"),
        Transition("frozen", "active", action="unfreeze"),
        Transition("active", "closed", action="close"),
        Transition("frozen", "closed", action="close"),
    ),
    terminal_states=("closed",),
)

logger.info("budget_workflow_registered", extra={
    "workflow_name": BUDGET_WORKFLOW.name,
    "state_count": len(BUDGET_WORKFLOW.states),
    "transition_count": len(BUDGET_WORKFLOW.transitions),
})

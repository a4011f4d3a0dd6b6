"""
Pure domain layer.

This module contains immutable value objects and aggregate building
blocks with NO dependencies on:
- Persistence
- Configuration files
- Ambient wall-clock time
- I/O

Time enters only through an injected Clock.
"""

from portfolio_kernel.domain.aggregate import AggregateMetadata
from portfolio_kernel.domain.changes import ChangeKind, ChangeQueue, ChangeRecord
from portfolio_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from portfolio_kernel.domain.date_range import DateRange
from portfolio_kernel.domain.values import Money
from portfolio_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    # Value Objects
    "Money",
    "DateRange",
    # Aggregate building blocks
    "AggregateMetadata",
    "ChangeKind",
    "ChangeQueue",
    "ChangeRecord",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
    # Workflow
    "Guard",
    "Transition",
    "Workflow",
]

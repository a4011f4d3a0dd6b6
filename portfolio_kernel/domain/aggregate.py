"""
Aggregate metadata -- identity and audit fields composed into aggregates.

Each aggregate holds one ``AggregateMetadata`` instead of inheriting from
a base entity class. Identity is assigned by the caller (or generated
here when omitted); timestamps come from the aggregate's clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class AggregateMetadata:
    """Identity plus creation/modification audit stamps."""

    created_at: datetime
    created_by: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    updated_at: datetime | None = None
    updated_by: UUID | None = None

    def touch(self, at: datetime, actor: UUID | None = None) -> None:
        """Record a modification. ``updated_by`` is kept when no actor is given."""
        self.updated_at = at
        if actor is not None:
            self.updated_by = actor

    @property
    def last_modified_at(self) -> datetime:
        return self.updated_at or self.created_at

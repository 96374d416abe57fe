"""
Execution loop value objects.

Dependencies: None
System role: Shared state and results of one job run
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from i18n_backend.boundary.db.models import JobStatus
from i18n_backend.boundary.llm.provider import COST_QUANTUM


@dataclass(frozen=True)
class JobContext:
    """Immutable job attributes every item needs."""

    job_id: UUID
    project_id: UUID
    source_locale: str
    target_locale: str


@dataclass(frozen=True)
class PendingItem:
    item_id: UUID
    key_id: UUID


@dataclass
class RunState:
    """
    Mutable state shared by the workers of one run.

    stop is set when cancellation is observed or a worker hits a fatal
    error; workers check it before taking the next item.
    """

    stop: asyncio.Event = field(default_factory=asyncio.Event)
    cancelled: bool = False
    processed: int = 0
    costs: list[Decimal] = field(default_factory=list)

    def add_cost(self, cost: Decimal | None) -> None:
        if cost is not None:
            self.costs.append(cost)

    @property
    def actual_cost_usd(self) -> Decimal | None:
        """Summed provider cost; None when no call reported a cost."""
        if not self.costs:
            return None
        return sum(self.costs, Decimal(0)).quantize(COST_QUANTUM)


@dataclass(frozen=True)
class JobRunSummary:
    """What one executor run did."""

    job_id: UUID
    status: JobStatus | None
    processed: int = 0
    actual_cost_usd: Decimal | None = None

from __future__ import annotations

from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AssignmentCategory(str, Enum):
    SERVICE = "service"
    STANDBY = "standby"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"


class ConflictSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"


class ResultModel(BaseModel):
    """Base for engine output: immutable, serialised with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ScheduleEntry(ResultModel):
    trainset_id: str
    assignment: AssignmentCategory
    reasoning: Tuple[str, ...] = Field(default_factory=tuple, description="Rule trail in evaluation order")
    confidence: float = Field(ge=0.0, le=1.0)
    service_readiness: float = Field(ge=0.0, le=100.0)
    overall_score: float = Field(ge=0.0, le=100.0)


class Conflict(ResultModel):
    trainset_id: str
    issue: str
    severity: ConflictSeverity = ConflictSeverity.CRITICAL
    resolution: str


class FleetMetrics(ResultModel):
    """Fleet-wide percentages in [0, 100]"""
    service_readiness: float = Field(default=0.0, ge=0.0, le=100.0)
    maintenance_compliance: float = Field(default=0.0, ge=0.0, le=100.0)
    branding_compliance: float = Field(default=0.0, ge=0.0, le=100.0)
    mileage_balance: float = Field(default=0.0, ge=0.0, le=100.0)
    overall_score: float = Field(default=0.0, ge=0.0, le=100.0)


class OptimizationResult(ResultModel):
    timestamp: datetime
    schedule: Tuple[ScheduleEntry, ...] = Field(default_factory=tuple)
    metrics: FleetMetrics = Field(default_factory=FleetMetrics)
    conflicts: Tuple[Conflict, ...] = Field(default_factory=tuple)

    def status_counts(self) -> Dict[str, int]:
        """Number of trainsets per assignment category (every category present)."""
        counts = Counter(entry.assignment.value for entry in self.schedule)
        return {category.value: counts.get(category.value, 0) for category in AssignmentCategory}

    def critical_issue_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity == ConflictSeverity.CRITICAL)

    def entry_for(self, trainset_id: str) -> ScheduleEntry:
        for entry in self.schedule:
            if entry.trainset_id == trainset_id:
                return entry
        raise KeyError(trainset_id)

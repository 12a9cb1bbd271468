# fleet_induction/services/fleet_metrics.py
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.core.scoring_config import FLEET_SCORE_WEIGHTS
from fleet_induction.models.optimization import AssignmentCategory, FleetMetrics, ScheduleEntry


def _pct(part: float, total: int) -> float:
    return min(100.0, max(0.0, part / total * 100.0))


def aggregate_fleet_metrics(schedule: Iterable[ScheduleEntry], policy: Optional[PolicyConfig] = None) -> FleetMetrics:
    """Roll per-trainset assignments into fleet-wide percentages.

    Branding compliance and mileage balance are policy inputs rather than
    computed values for now. An empty schedule yields all-zero metrics.
    """
    policy = policy or get_policy()
    entries = list(schedule)
    total = len(entries)
    if total == 0:
        return FleetMetrics()

    counts = Counter(entry.assignment for entry in entries)
    weighted = sum(FLEET_SCORE_WEIGHTS[category.value] * counts[category] for category in AssignmentCategory)

    return FleetMetrics(
        service_readiness=_pct(counts[AssignmentCategory.SERVICE], total),
        maintenance_compliance=_pct(counts[AssignmentCategory.MAINTENANCE], total),
        branding_compliance=policy.branding_compliance_pct,
        mileage_balance=policy.mileage_balance_pct,
        overall_score=_pct(weighted, total),
    )

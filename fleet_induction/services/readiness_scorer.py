# fleet_induction/services/readiness_scorer.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.core.scoring_config import (
    CLEANING_READINESS,
    OVERALL_PENALTIES,
    READINESS_BASE,
    SCORE_MAX,
    SCORE_MIN,
    SERVICE_READINESS,
)
from fleet_induction.models.optimization import AssignmentCategory
from fleet_induction.models.trainset import Trainset
from fleet_induction.services.certificate_aggregator import (
    REQUIRED_DEPARTMENTS,
    CertificateSummary,
    summarize_certificates,
)

Adjustment = Tuple[str, float]


def clamp_score(value: float) -> float:
    return min(max(value, SCORE_MIN), SCORE_MAX)


@dataclass(frozen=True)
class ReadinessBreakdown:
    service_readiness: float
    overall_score: float
    readiness_adjustments: Tuple[Adjustment, ...] = field(default_factory=tuple)
    overall_adjustments: Tuple[Adjustment, ...] = field(default_factory=tuple)


class ReadinessScorer:
    """Bounded [0, 100] quality scores for a trainset under a given assignment.

    The scores depend only on the assignment and the trainset state, never on
    which classifier rule produced the assignment, so they can be recomputed for
    a hypothetical assignment (e.g. "what if this rake ran in service?").
    """

    def __init__(self, policy: Optional[PolicyConfig] = None):
        self.policy = policy or get_policy()

    def score(self, trainset: Trainset, assignment: AssignmentCategory, now: datetime,
              summary: Optional[CertificateSummary] = None) -> ReadinessBreakdown:
        summary = summary or summarize_certificates(trainset.fitness_certificates)
        readiness, readiness_adjustments = self._service_readiness(trainset, assignment, summary)
        overall, overall_adjustments = self._overall(trainset, readiness, summary, now)
        return ReadinessBreakdown(
            service_readiness=readiness,
            overall_score=overall,
            readiness_adjustments=tuple(readiness_adjustments),
            overall_adjustments=tuple(overall_adjustments),
        )

    def _service_readiness(self, trainset: Trainset, assignment: AssignmentCategory,
                           summary: CertificateSummary) -> Tuple[float, List[Adjustment]]:
        base = READINESS_BASE[assignment.value]
        adjustments: List[Adjustment] = [(f"Base for {assignment.value}", base)]
        score = base

        if assignment == AssignmentCategory.SERVICE:
            if summary.disqualifying_count > 0:
                forced = SERVICE_READINESS["DISQUALIFIED_SCORE"]
                adjustments.append(("Expired or suspended certificate", forced - score))
                return clamp_score(forced), adjustments
            if summary.expiring_soon > 0:
                forced = SERVICE_READINESS["EXPIRING_SOON_SCORE"]
                adjustments.append(("Certificate expiring soon", forced - score))
                return clamp_score(forced), adjustments

            bonus = SERVICE_READINESS["VALID_CERTIFICATE_BONUS"].get(summary.valid_departments, 0.0)
            if bonus:
                adjustments.append((f"{summary.valid_departments}/3 certificates valid", bonus))
                score += bonus

            if trainset.mileage < self.policy.readiness_low_mileage_km:
                adjustments.append(("Low mileage", SERVICE_READINESS["LOW_MILEAGE_BONUS"]))
                score += SERVICE_READINESS["LOW_MILEAGE_BONUS"]
            elif trainset.mileage < self.policy.readiness_mid_mileage_km:
                adjustments.append(("Moderate mileage", SERVICE_READINESS["MID_MILEAGE_BONUS"]))
                score += SERVICE_READINESS["MID_MILEAGE_BONUS"]

            reliability = max(
                0.0,
                SERVICE_READINESS["CRITICAL_ISSUE_ALLOWANCE"]
                - SERVICE_READINESS["CRITICAL_ISSUE_PENALTY"] * trainset.critical_issue_count,
            )
            if reliability:
                adjustments.append(("Critical issue allowance", reliability))
                score += reliability

            if trainset.under_branding_contract:
                adjustments.append(("Branding contract active", SERVICE_READINESS["BRANDING_BONUS"]))
                score += SERVICE_READINESS["BRANDING_BONUS"]

        elif assignment == AssignmentCategory.CLEANING:
            bonus = CLEANING_READINESS["VALID_CERTIFICATE_BONUS"].get(summary.valid_departments, 0.0)
            if bonus:
                adjustments.append((f"{summary.valid_departments}/3 certificates valid", bonus))
                score += bonus

            allowance = max(
                0.0,
                CLEANING_READINESS["ISSUE_ALLOWANCE"]
                - CLEANING_READINESS["ISSUE_PENALTY"] * len(trainset.current_issues),
            )
            if allowance:
                adjustments.append(("Open issue allowance", allowance))
                score += allowance

        return clamp_score(score), adjustments

    def _overall(self, trainset: Trainset, readiness: float, summary: CertificateSummary,
                 now: datetime) -> Tuple[float, List[Adjustment]]:
        adjustments: List[Adjustment] = []
        score = readiness

        days_to_maintenance = (trainset.next_maintenance - now.date()).days
        if days_to_maintenance <= self.policy.maintenance_urgent_days:
            adjustments.append((f"Maintenance due in {days_to_maintenance} day(s)", -OVERALL_PENALTIES["MAINTENANCE_URGENT"]))
        elif days_to_maintenance <= self.policy.maintenance_due_days:
            adjustments.append((f"Maintenance due in {days_to_maintenance} day(s)", -OVERALL_PENALTIES["MAINTENANCE_DUE"]))

        if summary.disqualifying_count > 0:
            adjustments.append(("Expired or suspended certificate", -OVERALL_PENALTIES["CERTIFICATE_DISQUALIFIED"]))
        elif summary.expiring_soon > 0:
            adjustments.append(("Certificate expiring soon", -OVERALL_PENALTIES["CERTIFICATE_EXPIRING_SOON"]))
        elif summary.valid_departments < len(REQUIRED_DEPARTMENTS):
            adjustments.append(("Incomplete certificate set", -OVERALL_PENALTIES["CERTIFICATE_INCOMPLETE"]))

        if trainset.current_issues:
            issue_penalty = OVERALL_PENALTIES["PER_OPEN_ISSUE"] * len(trainset.current_issues)
            adjustments.append((f"{len(trainset.current_issues)} open issue(s)", -issue_penalty))

        score += sum(delta for _, delta in adjustments)
        return clamp_score(score), adjustments


def score_trainset(trainset: Trainset, assignment: AssignmentCategory, now: datetime,
                   policy: Optional[PolicyConfig] = None) -> ReadinessBreakdown:
    return ReadinessScorer(policy).score(trainset, assignment, now)

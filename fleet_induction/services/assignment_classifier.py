# fleet_induction/services/assignment_classifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.models.optimization import AssignmentCategory
from fleet_induction.models.trainset import Trainset
from fleet_induction.services.certificate_aggregator import CertificateSummary, summarize_certificates
from fleet_induction.services.condition_scorer import ConditionScorer, SuitabilityBreakdown
from fleet_induction.utils.randomness import RandomSource, draw_jitter

logger = logging.getLogger(__name__)

HEADLINES = {
    AssignmentCategory.SERVICE: "Optimal for peak hour service",
    AssignmentCategory.CLEANING: "Scheduled for interior cleaning before next service",
    AssignmentCategory.STANDBY: "Available for backup service",
    AssignmentCategory.MAINTENANCE: "Low suitability score, scheduled for preventive maintenance",
}


@dataclass(frozen=True)
class Classification:
    assignment: AssignmentCategory
    reasoning: Tuple[str, ...]
    confidence: float
    jitter: float
    certificates: CertificateSummary
    # Only present when the trainset passed the disqualification rules
    suitability: Optional[SuitabilityBreakdown] = None

    @property
    def disqualified(self) -> bool:
        return self.suitability is None


class AssignmentClassifier:
    """Disqualification hierarchy followed by suitability thresholds.

    Rules run in a fixed order and the first match wins:
    1. expired or suspended certificates
    2. certificates expiring soon
    3. critical open issues
    4. suitability score thresholds (service > cleaning > standby > maintenance)

    Exactly one jitter value is drawn per trainset before any rule runs. It feeds
    both the suitability score and the reported confidence, so the random stream
    advances identically whichever path a trainset takes.
    """

    def __init__(self, policy: Optional[PolicyConfig] = None):
        self.policy = policy or get_policy()
        self.condition_scorer = ConditionScorer(self.policy)

    def confidence_for(self, jitter: float) -> float:
        span = self.policy.confidence_max - self.policy.confidence_min
        return self.policy.confidence_min + jitter * span

    def classify(self, trainset: Trainset, random_source: RandomSource) -> Classification:
        jitter = draw_jitter(random_source)
        confidence = self.confidence_for(jitter)
        summary = summarize_certificates(trainset.fitness_certificates)

        disqualification = self._disqualify(trainset, summary)
        if disqualification is not None:
            logger.debug(f"{trainset.id}: disqualified -> maintenance ({disqualification[0]})")
            return Classification(
                assignment=AssignmentCategory.MAINTENANCE,
                reasoning=tuple(disqualification),
                confidence=confidence,
                jitter=jitter,
                certificates=summary,
            )

        suitability = self.condition_scorer.score(trainset, jitter, summary)
        assignment = self._threshold(suitability.total)
        reasoning = [HEADLINES[assignment], *suitability.fired]

        logger.debug(f"{trainset.id}: suitability {suitability.total:.3f} -> {assignment.value}")
        return Classification(
            assignment=assignment,
            reasoning=tuple(reasoning),
            confidence=confidence,
            jitter=jitter,
            certificates=summary,
            suitability=suitability,
        )

    def _disqualify(self, trainset: Trainset, summary: CertificateSummary) -> Optional[List[str]]:
        """Return the reasoning trail if a safety rule forces maintenance."""
        if summary.disqualifying_count > 0:
            reasons = []
            if summary.expired:
                reasons.append(f"{summary.expired} fitness certificate(s) expired")
            if summary.suspended:
                reasons.append(f"{summary.suspended} fitness certificate(s) suspended")
            reasons.append("Service blocked until certificates are renewed")
            return reasons

        if summary.expiring_soon > 0:
            return [
                f"{summary.expiring_soon} fitness certificate(s) expiring soon",
                "Scheduled for certificate renewal inspection",
            ]

        if trainset.critical_issue_count > 0:
            return [
                "Critical issue requires immediate attention",
                f"{trainset.critical_issue_count} critical issue(s) open",
            ]

        return None

    def _threshold(self, score: float) -> AssignmentCategory:
        if score > self.policy.service_threshold:
            return AssignmentCategory.SERVICE
        if score > self.policy.cleaning_threshold:
            return AssignmentCategory.CLEANING
        if score > self.policy.standby_threshold:
            return AssignmentCategory.STANDBY
        return AssignmentCategory.MAINTENANCE

# fleet_induction/services/condition_scorer.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.core.scoring_config import SUITABILITY_TERMS
from fleet_induction.models.trainset import Trainset
from fleet_induction.services.certificate_aggregator import CertificateSummary, summarize_certificates


@dataclass(frozen=True)
class SuitabilityBreakdown:
    jitter: float
    mileage_term: float
    issue_term: float
    branding_term: float
    certificate_term: float
    # Human-readable labels of the favourable terms that fired, in evaluation order
    fired: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def deterministic_total(self) -> float:
        return self.mileage_term + self.issue_term + self.branding_term + self.certificate_term

    @property
    def total(self) -> float:
        return self.jitter + self.deterministic_total


class ConditionScorer:
    """Continuous service-suitability score for trainsets that passed the safety rules."""

    def __init__(self, policy: Optional[PolicyConfig] = None):
        self.policy = policy or get_policy()

    def score(self, trainset: Trainset, jitter: float,
              summary: Optional[CertificateSummary] = None) -> SuitabilityBreakdown:
        summary = summary or summarize_certificates(trainset.fitness_certificates)
        fired: List[str] = []

        if trainset.mileage < self.policy.high_mileage_km:
            mileage_term = SUITABILITY_TERMS["LOW_MILEAGE"]
            fired.append("Low mileage")
        else:
            mileage_term = SUITABILITY_TERMS["HIGH_MILEAGE"]

        if not trainset.current_issues:
            issue_term = SUITABILITY_TERMS["NO_ISSUES"]
            fired.append("No current issues")
        else:
            issue_term = SUITABILITY_TERMS["HAS_ISSUES"]

        if trainset.under_branding_contract:
            branding_term = SUITABILITY_TERMS["BRANDING_OBLIGATION"]
            fired.append("Branding contract requirements")
        else:
            branding_term = 0.0

        if summary.all_departments_valid:
            certificate_term = SUITABILITY_TERMS["ALL_CERTIFICATES_VALID"]
            fired.append("All fitness certificates valid")
        else:
            certificate_term = SUITABILITY_TERMS["CERTIFICATES_NOT_ALL_VALID"]

        return SuitabilityBreakdown(
            jitter=jitter,
            mileage_term=mileage_term,
            issue_term=issue_term,
            branding_term=branding_term,
            certificate_term=certificate_term,
            fired=tuple(fired),
        )

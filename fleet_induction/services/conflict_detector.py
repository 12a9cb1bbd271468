# fleet_induction/services/conflict_detector.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
import logging

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.models.optimization import AssignmentCategory, Conflict, ConflictSeverity
from fleet_induction.models.trainset import Trainset
from fleet_induction.services.certificate_aggregator import hours_until_expiry

logger = logging.getLogger(__name__)

CRITICAL_ISSUE_TEXT = "Critical maintenance issues detected"
CRITICAL_ISSUE_RESOLUTION = "Schedule for immediate maintenance"
EXPIRY_TEXT = "Fitness certificate expires soon"
EXPIRY_RESOLUTION = "Withdraw from service and renew fitness certificate"


class ConflictDetector:
    """Flags trainsets whose assignment disagrees with their safety state."""

    def __init__(self, policy: Optional[PolicyConfig] = None):
        self.policy = policy or get_policy()

    def detect(self, trainset: Trainset, assignment: AssignmentCategory, now: datetime) -> Optional[Conflict]:
        if trainset.critical_issue_count > 0:
            return Conflict(
                trainset_id=trainset.id,
                issue=CRITICAL_ISSUE_TEXT,
                severity=ConflictSeverity.CRITICAL,
                resolution=CRITICAL_ISSUE_RESOLUTION,
            )

        if assignment == AssignmentCategory.SERVICE and self._expires_within_threshold(trainset, now):
            return Conflict(
                trainset_id=trainset.id,
                issue=EXPIRY_TEXT,
                severity=ConflictSeverity.CRITICAL,
                resolution=EXPIRY_RESOLUTION,
            )

        return None

    def _expires_within_threshold(self, trainset: Trainset, now: datetime) -> bool:
        hours = hours_until_expiry(trainset.fitness_certificates, now)
        if hours is None:
            # No certificates on record: nothing proves the rake is fit
            return True
        return hours < self.policy.conflict_expiry_hours

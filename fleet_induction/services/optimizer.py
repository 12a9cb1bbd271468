# fleet_induction/services/optimizer.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple
import logging

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.models.optimization import Conflict, OptimizationResult, ScheduleEntry
from fleet_induction.models.trainset import Trainset
from fleet_induction.services.assignment_classifier import AssignmentClassifier, Classification
from fleet_induction.services.conflict_detector import ConflictDetector
from fleet_induction.services.fleet_metrics import aggregate_fleet_metrics
from fleet_induction.services.readiness_scorer import ReadinessBreakdown, ReadinessScorer
from fleet_induction.utils.normalization import TrainsetLike, parse_fleet
from fleet_induction.utils.randomness import RandomSource, SeededRandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainsetEvaluation:
    """Everything the engine derived for one trainset; feeds explanations."""
    trainset: Trainset
    classification: Classification
    readiness: ReadinessBreakdown
    conflict: Optional[Conflict]

    def to_entry(self) -> ScheduleEntry:
        return ScheduleEntry(
            trainset_id=self.trainset.id,
            assignment=self.classification.assignment,
            reasoning=self.classification.reasoning,
            confidence=self.classification.confidence,
            service_readiness=self.readiness.service_readiness,
            overall_score=self.readiness.overall_score,
        )


class InductionOptimizer:
    """Runs the induction pipeline over a fleet snapshot.

    Per trainset: classify -> score readiness -> detect conflicts. The per-trainset
    stage has no cross-trainset dependencies; fleet metrics are computed only
    once the full schedule exists. The optimizer holds no run state, so one
    instance can serve concurrent runs as long as each run gets its own random
    source (the default).
    """

    def __init__(self, policy: Optional[PolicyConfig] = None):
        self.policy = policy or get_policy()
        self.classifier = AssignmentClassifier(self.policy)
        self.readiness_scorer = ReadinessScorer(self.policy)
        self.conflict_detector = ConflictDetector(self.policy)

    def new_random_source(self, seed: Optional[int] = None) -> RandomSource:
        return SeededRandomSource(seed if seed is not None else self.policy.random_seed)

    def evaluate(self, trainset: Trainset, random_source: RandomSource, now: datetime) -> TrainsetEvaluation:
        classification = self.classifier.classify(trainset, random_source)
        readiness = self.readiness_scorer.score(
            trainset, classification.assignment, now, classification.certificates
        )
        conflict = self.conflict_detector.detect(trainset, classification.assignment, now)
        return TrainsetEvaluation(trainset, classification, readiness, conflict)

    def evaluate_fleet(self, trainsets: Iterable[TrainsetLike], *, random_source: Optional[RandomSource] = None,
                       now: Optional[datetime] = None) -> Tuple[datetime, List[TrainsetEvaluation]]:
        fleet = parse_fleet(trainsets)
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        random_source = random_source or self.new_random_source()
        return now, [self.evaluate(trainset, random_source, now) for trainset in fleet]

    def optimize(self, trainsets: Iterable[TrainsetLike], *, random_source: Optional[RandomSource] = None,
                 now: Optional[datetime] = None) -> OptimizationResult:
        now, evaluations = self.evaluate_fleet(trainsets, random_source=random_source, now=now)
        logger.info(f"Optimizing induction plan for {len(evaluations)} trainsets")

        schedule = tuple(evaluation.to_entry() for evaluation in evaluations)
        conflicts = tuple(e.conflict for e in evaluations if e.conflict is not None)
        metrics = aggregate_fleet_metrics(schedule, self.policy)

        result = OptimizationResult(timestamp=now, schedule=schedule, metrics=metrics, conflicts=conflicts)

        for conflict in conflicts:
            logger.warning(f"Conflict on {conflict.trainset_id}: {conflict.issue}")
        logger.info(
            "Optimization complete: %s, %d conflict(s), overall %.1f%%",
            result.status_counts(),
            len(conflicts),
            metrics.overall_score,
        )
        return result

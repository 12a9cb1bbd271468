"""Tests for the end-to-end induction optimization run"""
from datetime import timedelta

import pytest
from pydantic import ValidationError

from fleet_induction.config import PolicyConfig
from fleet_induction.models.errors import InvalidTrainsetError
from fleet_induction.models.optimization import AssignmentCategory
from fleet_induction.services.mock_data_generator import KMRLMockDataGenerator
from fleet_induction.services.optimizer import InductionOptimizer
from fleet_induction.utils.randomness import FixedRandomSource, SeededRandomSource

from conftest import ACTIVE_BRANDING, NOW, certificate_data, issue_data, trainset_data


@pytest.fixture
def optimizer(policy):
    return InductionOptimizer(policy)


def _clean_fleet(count=25):
    return [trainset_data(f"train-{i}", mileage=20_000 + i * 9_000) for i in range(1, count + 1)]


def test_schedule_preserves_input_order(optimizer):
    fleet = [trainset_data(f"train-{i}") for i in (3, 1, 2)]

    result = optimizer.optimize(fleet, random_source=SeededRandomSource(1), now=NOW)

    assert [e.trainset_id for e in result.schedule] == ["train-3", "train-1", "train-2"]
    assert result.timestamp == NOW


def test_clean_fleet_has_no_conflicts(optimizer):
    result = optimizer.optimize(_clean_fleet(), random_source=SeededRandomSource(7), now=NOW)

    assert len(result.schedule) == 25
    assert result.conflicts == ()
    assert result.metrics.service_readiness + result.metrics.maintenance_compliance <= 100.0
    assert all(e.assignment == AssignmentCategory.SERVICE for e in result.schedule)


def test_empty_fleet(optimizer):
    result = optimizer.optimize([], now=NOW)

    assert result.schedule == ()
    assert result.conflicts == ()
    assert result.metrics.overall_score == 0.0
    assert result.metrics.branding_compliance == 0.0
    assert result.status_counts() == {"service": 0, "standby": 0, "maintenance": 0, "cleaning": 0}


def test_expired_certificate_example(optimizer):
    fleet = [trainset_data(certificates=[
        certificate_data("rolling_stock", "expired"),
        certificate_data("signalling"),
        certificate_data("telecom"),
    ])]

    entry = optimizer.optimize(fleet, random_source=FixedRandomSource([0.6]), now=NOW).schedule[0]

    assert entry.assignment == AssignmentCategory.MAINTENANCE
    assert "1 fitness certificate(s) expired" in entry.reasoning
    assert entry.service_readiness == 20.0
    assert entry.overall_score == 0.0
    assert entry.confidence == pytest.approx(0.87)


def test_conflicts_follow_input_order(optimizer):
    fleet = [
        trainset_data("train-1"),
        trainset_data("train-2", issues=[issue_data("critical")]),
        trainset_data("train-3"),
        trainset_data("train-4", issues=[issue_data("critical")]),
    ]

    result = optimizer.optimize(fleet, random_source=SeededRandomSource(3), now=NOW)

    assert [c.trainset_id for c in result.conflicts] == ["train-2", "train-4"]
    assert result.critical_issue_count() == 2


def test_service_rake_with_certificate_expiring_tonight_is_flagged(optimizer):
    fleet = [trainset_data(
        mileage=10_000,
        branding=ACTIVE_BRANDING,
        certificates=[
            certificate_data("rolling_stock", expires_in=timedelta(hours=8)),
            certificate_data("signalling"),
            certificate_data("telecom"),
        ],
    )]

    result = optimizer.optimize(fleet, random_source=FixedRandomSource([0.0]), now=NOW)

    assert result.schedule[0].assignment == AssignmentCategory.SERVICE
    assert result.conflicts[0].issue == "Fitness certificate expires soon"


def test_fixed_seed_gives_identical_results(optimizer):
    fleet = KMRLMockDataGenerator(seed=11, now=NOW).generate_trainsets(25)

    first = optimizer.optimize(fleet, random_source=SeededRandomSource(99), now=NOW)
    second = optimizer.optimize(fleet, random_source=SeededRandomSource(99), now=NOW)

    assert first == second


def test_disqualifications_do_not_depend_on_jitter(optimizer):
    fleet = KMRLMockDataGenerator(seed=5, now=NOW).generate_trainsets(25)

    _, first = optimizer.evaluate_fleet(fleet, random_source=SeededRandomSource(1), now=NOW)
    _, second = optimizer.evaluate_fleet(fleet, random_source=SeededRandomSource(2), now=NOW)

    assert [e.classification.disqualified for e in first] == [e.classification.disqualified for e in second]
    for a, b in zip(first, second):
        if a.classification.disqualified:
            assert a.classification.reasoning == b.classification.reasoning


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_bounds_hold_across_random_fleets(optimizer, seed):
    fleet = KMRLMockDataGenerator(seed=seed, now=NOW).generate_trainsets(25)

    _, evaluations = optimizer.evaluate_fleet(fleet, random_source=SeededRandomSource(seed), now=NOW)

    for evaluation in evaluations:
        entry = evaluation.to_entry()
        assert 0.75 <= entry.confidence <= 0.95
        assert 0.0 <= entry.service_readiness <= 100.0
        assert 0.0 <= entry.overall_score <= 100.0
        if evaluation.classification.certificates.disqualifying_count > 0:
            assert entry.assignment == AssignmentCategory.MAINTENANCE
            assert entry.overall_score <= 50.0


def test_status_counts_cover_whole_fleet(optimizer):
    fleet = KMRLMockDataGenerator(seed=21, now=NOW).generate_trainsets(25)

    result = optimizer.optimize(fleet, random_source=SeededRandomSource(21), now=NOW)

    assert sum(result.status_counts().values()) == 25


def test_malformed_trainset_aborts_run(optimizer):
    fleet = [trainset_data("train-1"), trainset_data("train-2", mileage=-5)]

    with pytest.raises(InvalidTrainsetError) as exc_info:
        optimizer.optimize(fleet, now=NOW)

    assert exc_info.value.index == 1
    assert exc_info.value.trainset_id == "train-2"


def test_unknown_issue_severity_aborts_run(optimizer):
    fleet = [trainset_data(issues=[issue_data("catastrophic")])]

    with pytest.raises(InvalidTrainsetError):
        optimizer.optimize(fleet, now=NOW)


def test_result_is_immutable(optimizer):
    result = optimizer.optimize([trainset_data()], random_source=SeededRandomSource(0), now=NOW)

    with pytest.raises(ValidationError):
        result.timestamp = NOW + timedelta(days=1)
    with pytest.raises(ValidationError):
        result.schedule[0].assignment = AssignmentCategory.STANDBY


def test_result_serialises_with_camel_case(optimizer):
    result = optimizer.optimize([trainset_data()], random_source=SeededRandomSource(0), now=NOW)

    payload = result.model_dump(mode="json", by_alias=True)

    assert set(payload) == {"timestamp", "schedule", "metrics", "conflicts"}
    assert set(payload["schedule"][0]) == {
        "trainsetId", "assignment", "reasoning", "confidence", "serviceReadiness", "overallScore",
    }
    assert "maintenanceCompliance" in payload["metrics"]


def test_entry_lookup_by_trainset_id(optimizer):
    fleet = [trainset_data("train-1"), trainset_data("train-2", issues=[issue_data("critical")])]

    result = optimizer.optimize(fleet, random_source=SeededRandomSource(4), now=NOW)

    assert result.entry_for("train-2").assignment == AssignmentCategory.MAINTENANCE
    with pytest.raises(KeyError):
        result.entry_for("train-9")


def test_default_random_source_follows_policy_seed():
    fleet = KMRLMockDataGenerator(seed=2, now=NOW).generate_trainsets(10)
    optimizer = InductionOptimizer(PolicyConfig(random_seed=17))

    assert optimizer.optimize(fleet, now=NOW) == optimizer.optimize(fleet, now=NOW)
    assert optimizer.optimize(fleet, now=NOW) == InductionOptimizer().optimize(
        fleet, random_source=SeededRandomSource(17), now=NOW
    )

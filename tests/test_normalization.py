"""Tests for input validation at the engine boundary"""
from datetime import timezone

import pytest

from fleet_induction.models.errors import InvalidTrainsetError
from fleet_induction.models.trainset import CertificateStatus, IssueType, Trainset
from fleet_induction.utils.normalization import parse_fleet, parse_trainset

from conftest import ACTIVE_BRANDING, certificate_data, issue_data, trainset_data


def test_camel_case_record():
    trainset = parse_trainset(trainset_data(issues=[issue_data("high", "electrical")], branding=ACTIVE_BRANDING))

    assert trainset.id == "train-1"
    assert trainset.fitness_certificates[0].status == CertificateStatus.VALID
    assert trainset.current_issues[0].issue_type == IssueType.ELECTRICAL
    assert trainset.branding.contract_hours == 400
    assert trainset.under_branding_contract is True


def test_snake_case_record():
    record = {
        "id": "train-9",
        "number": "009",
        "status": "service",
        "location": "Aluva",
        "mileage": 1200,
        "last_maintenance": "2025-02-01",
        "next_maintenance": "2025-03-20",
        "fitness_certificates": [],
        "current_issues": [],
    }

    trainset = parse_trainset(record)

    assert trainset.next_maintenance.isoformat() == "2025-03-20"
    assert trainset.branding is None


def test_unknown_front_end_fields_are_ignored():
    record = trainset_data()
    record["metroLine"] = {"lineName": "Blue Line"}
    record["fitnessExpiry"] = "2025-03-10"

    trainset = parse_trainset(record)

    assert trainset.fitness_expiry.isoformat() == "2025-03-10"


def test_naive_timestamps_are_utc():
    cert = certificate_data()
    cert["expiryDate"] = "2025-05-01T00:00:00"

    trainset = parse_trainset(trainset_data(certificates=[cert]))

    assert trainset.fitness_certificates[0].expiry_date.tzinfo == timezone.utc


@pytest.mark.parametrize("mutate", [
    lambda r: r.pop("id"),
    lambda r: r.pop("nextMaintenance"),
    lambda r: r.update(mileage=-1),
    lambda r: r.update(status="flying"),
    lambda r: r["fitnessCertificates"][0].update(status="pending"),
    lambda r: r["fitnessCertificates"][0].update(department="catering"),
])
def test_malformed_records_are_rejected(mutate):
    record = trainset_data()
    mutate(record)

    with pytest.raises(InvalidTrainsetError) as exc_info:
        parse_trainset(record, index=4)

    assert exc_info.value.index == 4
    assert exc_info.value.errors()


def test_non_mapping_record_is_rejected():
    with pytest.raises(InvalidTrainsetError):
        parse_trainset(["not", "a", "trainset"])


def test_models_pass_through():
    trainset = Trainset.model_validate(trainset_data())

    assert parse_trainset(trainset) is trainset


def test_duplicate_ids_are_rejected():
    with pytest.raises(InvalidTrainsetError) as exc_info:
        parse_fleet([trainset_data("train-1"), trainset_data("train-2"), trainset_data("train-1")])

    assert exc_info.value.index == 2


def test_branding_under_contract_flag():
    fulfilled = parse_trainset(trainset_data(branding={"advertiser": "BSNL", "contractHours": 100, "completedHours": 100}))

    assert fulfilled.under_branding_contract is False

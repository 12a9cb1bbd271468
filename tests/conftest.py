"""Shared fixtures: a fixed clock and builders for trainset snapshots"""
from datetime import datetime, timedelta, timezone

import pytest

from fleet_induction.config import PolicyConfig
from fleet_induction.models.trainset import Trainset

NOW = datetime(2025, 3, 1, 6, 0, tzinfo=timezone.utc)
DEPARTMENTS = ("rolling_stock", "signalling", "telecom")


def certificate_data(department="rolling_stock", status="valid", expires_in=timedelta(days=60)):
    expiry = NOW + expires_in
    return {
        "department": department,
        "issuedDate": (expiry - timedelta(days=365)).isoformat(),
        "expiryDate": expiry.isoformat(),
        "status": status,
        "priority": "low",
    }


def issue_data(severity="low", issue_type="mechanical"):
    return {
        "type": issue_type,
        "severity": severity,
        "reportedAt": (NOW - timedelta(hours=3)).isoformat(),
        "estimatedResolution": (NOW + timedelta(hours=5)).isoformat(),
    }


def trainset_data(trainset_id="train-1", *, mileage=40_000, certificates=None, issues=(),
                  branding=None, maintenance_in_days=30, status="standby"):
    if certificates is None:
        certificates = [certificate_data(d) for d in DEPARTMENTS]
    return {
        "id": trainset_id,
        "number": trainset_id.split("-")[-1].zfill(3),
        "status": status,
        "location": "Muttom",
        "mileage": mileage,
        "lastMaintenance": (NOW - timedelta(days=20)).date().isoformat(),
        "nextMaintenance": (NOW + timedelta(days=maintenance_in_days)).date().isoformat(),
        "fitnessCertificates": list(certificates),
        "currentIssues": list(issues),
        "branding": branding,
    }


def make_trainset(trainset_id="train-1", **kwargs) -> Trainset:
    return Trainset.model_validate(trainset_data(trainset_id, **kwargs))


ACTIVE_BRANDING = {"advertiser": "Kerala Tourism", "contractHours": 400, "completedHours": 120}
FULFILLED_BRANDING = {"advertiser": "BSNL", "contractHours": 200, "completedHours": 200}


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy():
    return PolicyConfig()


@pytest.fixture
def ideal_trainset():
    """Low mileage, no issues, all certificates valid, branding hours still owed"""
    return make_trainset("train-1", mileage=30_000, branding=ACTIVE_BRANDING)

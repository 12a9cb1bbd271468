# fleet_induction/services/certificate_aggregator.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional
import logging

from fleet_induction.models.trainset import (
    CertificateStatus,
    Department,
    FitnessCertificate,
    Priority,
    Trainset,
    as_utc,
)

logger = logging.getLogger(__name__)

REQUIRED_DEPARTMENTS = tuple(Department)


@dataclass(frozen=True)
class CertificateSummary:
    expired: int = 0
    suspended: int = 0
    expiring_soon: int = 0
    valid: int = 0
    valid_departments: int = 0

    @property
    def disqualifying_count(self) -> int:
        return self.expired + self.suspended

    @property
    def all_departments_valid(self) -> bool:
        return self.valid_departments == len(REQUIRED_DEPARTMENTS)


def _status_of(cert: FitnessCertificate) -> CertificateStatus:
    """Resolve the status, treating anything unrecognised as suspended."""
    try:
        return CertificateStatus(cert.status)
    except ValueError:
        logger.warning(f"Unrecognised certificate status {cert.status!r}; counting as suspended")
        return CertificateStatus.SUSPENDED


def summarize_certificates(certificates: Iterable[FitnessCertificate]) -> CertificateSummary:
    """Count certificates per status.

    A department counts as valid only when it carries at least one certificate
    and every certificate it carries is valid, so duplicates never inflate the
    department total.
    """
    counts: Counter = Counter()
    department_ok: Dict[Department, bool] = {}

    for cert in certificates:
        status = _status_of(cert)
        counts[status] += 1
        is_valid = status == CertificateStatus.VALID
        department_ok[cert.department] = department_ok.get(cert.department, True) and is_valid

    return CertificateSummary(
        expired=counts[CertificateStatus.EXPIRED],
        suspended=counts[CertificateStatus.SUSPENDED],
        expiring_soon=counts[CertificateStatus.EXPIRING_SOON],
        valid=counts[CertificateStatus.VALID],
        valid_departments=sum(1 for d in REQUIRED_DEPARTMENTS if department_ok.get(d, False)),
    )


def resolve_certificate_status(expiry: datetime, now: datetime, *, expiring_soon_days: int = 7,
                               suspended: bool = False) -> CertificateStatus:
    if suspended:
        return CertificateStatus.SUSPENDED
    expiry, now = as_utc(expiry), as_utc(now)
    if expiry <= now:
        return CertificateStatus.EXPIRED
    if expiry - now <= timedelta(days=expiring_soon_days):
        return CertificateStatus.EXPIRING_SOON
    return CertificateStatus.VALID


def certificate_priority(expiry: datetime, now: datetime) -> Priority:
    """Renewal priority from time-to-expiry."""
    remaining = as_utc(expiry) - as_utc(now)
    if remaining <= timedelta(hours=24):
        return Priority.CRITICAL
    if remaining <= timedelta(days=7):
        return Priority.HIGH
    if remaining <= timedelta(days=30):
        return Priority.MEDIUM
    return Priority.LOW


def hours_until_expiry(certificates: Iterable[FitnessCertificate], now: datetime) -> Optional[float]:
    """Hours until the earliest certificate expiry, negative if already past; None without certificates."""
    expiries = [cert.expiry_date for cert in certificates]
    if not expiries:
        return None
    return (min(expiries) - as_utc(now)).total_seconds() / 3600.0


def fleet_certificate_counts(trainsets: List[Trainset]) -> Dict[str, int]:
    counts = {status.value: 0 for status in CertificateStatus}
    for trainset in trainsets:
        for cert in trainset.fitness_certificates:
            counts[_status_of(cert).value] += 1
    return counts

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TrainsetStatus(str, Enum):
    SERVICE = "service"
    STANDBY = "standby"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    INSPECTION = "inspection"


class Department(str, Enum):
    ROLLING_STOCK = "rolling_stock"
    SIGNALLING = "signalling"
    TELECOM = "telecom"


class CertificateStatus(str, Enum):
    VALID = "valid"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    SUSPENDED = "suspended"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueType(str, Enum):
    ROLLING_STOCK = "rolling_stock"
    SIGNALING = "signaling"
    TELECOM = "telecom"
    MECHANICAL = "mechanical"
    ELECTRICAL = "electrical"


# Issue severity shares the priority scale
Severity = Priority


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SnapshotModel(BaseModel):
    """Base for externally supplied records: read-only, camelCase or snake_case keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class FitnessCertificate(SnapshotModel):
    department: Department
    issued_date: datetime
    expiry_date: datetime
    status: CertificateStatus
    priority: Priority = Priority.LOW
    id: Optional[str] = None
    certificate_number: Optional[str] = None
    issued_by: Optional[str] = None
    validity_days: Optional[int] = Field(default=None, ge=0)
    conditions: List[str] = Field(default_factory=list)

    @field_validator("issued_date", "expiry_date")
    @classmethod
    def _naive_is_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class Issue(SnapshotModel):
    issue_type: IssueType = Field(alias="type")
    severity: Severity
    reported_at: datetime
    estimated_resolution: datetime
    assigned_technician: Optional[str] = None
    id: Optional[str] = None
    description: Optional[str] = None

    @field_validator("reported_at", "estimated_resolution")
    @classmethod
    def _naive_is_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class BrandingContract(SnapshotModel):
    advertiser: str
    contract_hours: float = Field(ge=0)
    completed_hours: float = Field(ge=0)

    @property
    def under_contract(self) -> bool:
        """True while the advertiser is still owed exposure hours."""
        return self.completed_hours < self.contract_hours


class Trainset(SnapshotModel):
    id: str = Field(min_length=1)
    number: str = Field(min_length=1)
    status: TrainsetStatus
    location: str
    mileage: int = Field(ge=0, description="Odometer reading in km")
    last_maintenance: date
    next_maintenance: date
    fitness_certificates: List[FitnessCertificate] = Field(default_factory=list)
    current_issues: List[Issue] = Field(default_factory=list)
    branding: Optional[BrandingContract] = None
    next_location: Optional[str] = None
    estimated_arrival: Optional[str] = None
    # Legacy single-expiry field; decisions use the per-department certificates
    fitness_expiry: Optional[date] = None

    @property
    def under_branding_contract(self) -> bool:
        return self.branding is not None and self.branding.under_contract

    @property
    def critical_issue_count(self) -> int:
        return sum(1 for issue in self.current_issues if issue.severity == Severity.CRITICAL)

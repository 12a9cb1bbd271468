import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import uuid

from fleet_induction.config import PolicyConfig, get_policy
from fleet_induction.models.trainset import Department, IssueType, Priority, TrainsetStatus
from fleet_induction.services.certificate_aggregator import certificate_priority, resolve_certificate_status

STATIONS = [
    "Aluva", "Pulinchodu", "Companypady", "Ambattukavu", "Muttom", "Kalamassery",
    "Cusat", "Pathadipalam", "Edapally", "Changampuzha Park", "Palarivattom",
    "JLN Stadium", "Kaloor", "Town Hall", "MG Road", "Maharajas", "Ernakulam South",
    "Kadavanthra", "Elamkulam", "Vyttila", "Thaikoodam", "Petta",
]

ADVERTISERS = ["Coca-Cola", "Samsung", "Reliance", "BSNL", "Kerala Tourism"]
TECHNICIANS = ["Rajesh Kumar", "Priya Sharma", "Amit Patel", "Sneha Nair", "Vikram Singh"]

ISSUE_DESCRIPTIONS = {
    IssueType.ROLLING_STOCK: ["Brake system malfunction detected", "Door mechanism requires calibration"],
    IssueType.SIGNALING: ["CBTC onboard unit intermittent", "ATP balise read errors"],
    IssueType.TELECOM: ["PA system audio dropout", "CCTV recorder offline"],
    IssueType.MECHANICAL: ["Bogie suspension noise reported", "Coupler wear above limit"],
    IssueType.ELECTRICAL: ["Pantograph contact strip worn", "Auxiliary converter fault"],
}


class KMRLMockDataGenerator:
    """Generate a realistic Kochi Metro fleet snapshot (camelCase records, as the UI sends them)."""

    def __init__(self, seed: Optional[int] = None, now: Optional[datetime] = None,
                 policy: Optional[PolicyConfig] = None):
        self.policy = policy or get_policy()
        self.rng = random.Random(seed if seed is not None else self.policy.random_seed)
        self.now = now or datetime.now(timezone.utc)

    def generate_trainsets(self, count: int = 25) -> List[Dict[str, Any]]:
        return [self.generate_trainset(i) for i in range(1, count + 1)]

    def generate_trainset(self, index: int) -> Dict[str, Any]:
        rng = self.rng
        number = str(index).zfill(3)
        trainset_id = f"train-{index}"
        status = rng.choice(list(TrainsetStatus))

        branding = None
        if rng.random() > 0.6:
            branding = {
                "advertiser": rng.choice(ADVERTISERS),
                "contractHours": rng.randint(100, 600),
                "completedHours": rng.randint(0, 600),
            }

        return {
            "id": trainset_id,
            "number": number,
            "status": status.value,
            "location": rng.choice(STATIONS),
            "mileage": rng.randint(50_000, 250_000),
            "lastMaintenance": (self.now - timedelta(days=rng.randint(1, 30))).date().isoformat(),
            "nextMaintenance": (self.now + timedelta(days=rng.randint(1, 30))).date().isoformat(),
            "fitnessCertificates": [self._certificate(trainset_id, d) for d in Department],
            "currentIssues": self._issues(index) if rng.random() > 0.6 else [],
            "branding": branding,
        }

    def _certificate(self, trainset_id: str, department: Department) -> Dict[str, Any]:
        rng = self.rng
        validity_days = rng.choice([90, 180, 365])
        # Mostly healthy, with a tail of expiring and lapsed certificates
        expiry = self.now + timedelta(hours=rng.uniform(-72, 24 * 60))
        issued = expiry - timedelta(days=validity_days)
        status = resolve_certificate_status(
            expiry, self.now,
            expiring_soon_days=self.policy.certificate_expiring_soon_days,
            suspended=rng.random() < 0.03,
        )
        return {
            "id": str(uuid.UUID(int=rng.getrandbits(128))),
            "department": department.value,
            "certificateNumber": f"{department.value[:2].upper()}-{trainset_id}-{rng.randint(1000, 9999)}",
            "issuedBy": "KMRL Safety Directorate",
            "issuedDate": issued.isoformat(),
            "expiryDate": expiry.isoformat(),
            "validityDays": validity_days,
            "status": status.value,
            "priority": certificate_priority(expiry, self.now).value,
        }

    def _issues(self, index: int) -> List[Dict[str, Any]]:
        rng = self.rng
        issue_type = rng.choice(list(IssueType))
        return [{
            "id": f"issue-{index}",
            "type": issue_type.value,
            "severity": rng.choice(list(Priority)).value,
            "description": rng.choice(ISSUE_DESCRIPTIONS[issue_type]),
            "reportedAt": (self.now - timedelta(hours=rng.uniform(0, 24))).isoformat(),
            "estimatedResolution": (self.now + timedelta(hours=rng.uniform(0, 24))).isoformat(),
            "assignedTechnician": rng.choice(TECHNICIANS) if rng.random() > 0.3 else None,
        }]

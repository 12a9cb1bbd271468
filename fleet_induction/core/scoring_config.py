# fleet_induction/core/scoring_config.py

# Centralized scoring points for trainset induction planning.
# Used by the classifier, the readiness scorer and explainability so every
# surface reports the same numbers.

SUITABILITY_TERMS = {
    # Mileage: fresher rakes are preferred for revenue service
    "LOW_MILEAGE": 0.3,
    "HIGH_MILEAGE": 0.1,
    # Open issue load
    "NO_ISSUES": 0.4,
    "HAS_ISSUES": 0.1,
    # Active advertiser wrap still owed exposure hours
    "BRANDING_OBLIGATION": 0.3,
    # Certificate health across departments
    "ALL_CERTIFICATES_VALID": 0.3,
    "CERTIFICATES_NOT_ALL_VALID": 0.1,
}

READINESS_BASE = {
    "service": 60.0,
    "cleaning": 50.0,
    "standby": 40.0,
    "maintenance": 20.0,
}

SERVICE_READINESS = {
    "DISQUALIFIED_SCORE": 0.0,       # expired/suspended certificate under service
    "EXPIRING_SOON_SCORE": 20.0,
    "VALID_CERTIFICATE_BONUS": {3: 25.0, 2: 15.0, 1: 5.0},
    "LOW_MILEAGE_BONUS": 15.0,
    "MID_MILEAGE_BONUS": 10.0,
    "CRITICAL_ISSUE_ALLOWANCE": 15.0,
    "CRITICAL_ISSUE_PENALTY": 5.0,   # per critical issue, taken from the allowance
    "BRANDING_BONUS": 5.0,
}

CLEANING_READINESS = {
    "VALID_CERTIFICATE_BONUS": {3: 20.0, 2: 10.0},
    "ISSUE_ALLOWANCE": 10.0,
    "ISSUE_PENALTY": 2.0,            # per open issue, taken from the allowance
}

OVERALL_PENALTIES = {
    "MAINTENANCE_URGENT": 20.0,
    "MAINTENANCE_DUE": 10.0,
    "CERTIFICATE_DISQUALIFIED": 50.0,
    "CERTIFICATE_EXPIRING_SOON": 30.0,
    "CERTIFICATE_INCOMPLETE": 15.0,
    "PER_OPEN_ISSUE": 2.0,
}

# Weight of each assignment category in the fleet overall score
FLEET_SCORE_WEIGHTS = {
    "service": 0.4,
    "cleaning": 0.3,
    "standby": 0.2,
    "maintenance": 0.1,
}

SCORE_MIN = 0.0
SCORE_MAX = 100.0

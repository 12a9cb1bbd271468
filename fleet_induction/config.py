# fleet_induction/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, ConfigDict, Field, model_validator
from dotenv import load_dotenv
from typing import Any, Dict, Optional
import logging
import os
import yaml
from pathlib import Path

logger = logging.getLogger(__name__)


def _check_policy_order(policy) -> None:
    """Reject bands that are internally inconsistent."""
    if not policy.service_threshold > policy.cleaning_threshold > policy.standby_threshold:
        raise ValueError("thresholds must satisfy service > cleaning > standby")
    if policy.confidence_min > policy.confidence_max:
        raise ValueError("confidence_min must not exceed confidence_max")
    if policy.maintenance_urgent_days > policy.maintenance_due_days:
        raise ValueError("maintenance_urgent_days must not exceed maintenance_due_days")
    if policy.readiness_low_mileage_km > policy.readiness_mid_mileage_km:
        raise ValueError("readiness_low_mileage_km must not exceed readiness_mid_mileage_km")


class Settings(BaseSettings):
    """Application settings loaded from environment variables (FLEET_* prefix)"""

    # API Configuration
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)
    environment: Optional[str] = Field(default=None)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Suitability thresholds (strictly greater than)
    service_threshold: float = Field(default=0.7, ge=0.0)
    cleaning_threshold: float = Field(default=0.5, ge=0.0)
    standby_threshold: float = Field(default=0.3, ge=0.0)

    # Confidence band reported with every decision
    confidence_min: float = Field(default=0.75, ge=0.0, le=1.0)
    confidence_max: float = Field(default=0.95, ge=0.0, le=1.0)

    # Conflicts and maintenance urgency
    conflict_expiry_hours: float = Field(default=12.0, ge=0.0)
    maintenance_urgent_days: int = Field(default=7, ge=0)
    maintenance_due_days: int = Field(default=14, ge=0)
    certificate_expiring_soon_days: int = Field(default=7, ge=0)

    # Mileage bands (km)
    high_mileage_km: int = Field(default=150_000, ge=0)
    readiness_low_mileage_km: int = Field(default=50_000, ge=0)
    readiness_mid_mileage_km: int = Field(default=100_000, ge=0)

    # Fleet metric placeholders until real computations land
    branding_compliance_pct: float = Field(default=92.4, ge=0.0, le=100.0)
    mileage_balance_pct: float = Field(default=89.6, ge=0.0, le=100.0)

    # Optional fixed seed for reproducible runs; None means fresh entropy per run
    random_seed: Optional[int] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FLEET_",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _bands_in_order(self):
        _check_policy_order(self)
        return self


def load_settings(defaults: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build settings, filling from YAML defaults any field not set in the environment.
    Values from either source go through the same field validation.
    """
    overrides = {}
    for key, value in (defaults or {}).items():
        field = str(key).lower()
        if field not in Settings.model_fields:
            logger.warning(f"Ignoring unknown key in defaults.yaml: {key}")
            continue
        if os.getenv(f"FLEET_{field.upper()}") is None:
            overrides[field] = value
    return Settings(**overrides)


# Eagerly load .env so overrides are picked up reliably
load_dotenv(".env")

# Load defaults from YAML if available
_defaults_path = Path(__file__).parent / "defaults.yaml"
_defaults = {}
if _defaults_path.exists():
    try:
        with open(_defaults_path, "r") as f:
            _defaults = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load defaults.yaml: {e}")

# Create settings instance
settings = load_settings(_defaults)


class PolicyConfig(BaseModel):
    """Immutable snapshot of the scoring policy used for one optimization run."""
    model_config = ConfigDict(frozen=True)

    service_threshold: float = Field(default=0.7, ge=0.0)
    cleaning_threshold: float = Field(default=0.5, ge=0.0)
    standby_threshold: float = Field(default=0.3, ge=0.0)
    confidence_min: float = Field(default=0.75, ge=0.0, le=1.0)
    confidence_max: float = Field(default=0.95, ge=0.0, le=1.0)
    conflict_expiry_hours: float = Field(default=12.0, ge=0.0)
    maintenance_urgent_days: int = Field(default=7, ge=0)
    maintenance_due_days: int = Field(default=14, ge=0)
    certificate_expiring_soon_days: int = Field(default=7, ge=0)
    high_mileage_km: int = Field(default=150_000, ge=0)
    readiness_low_mileage_km: int = Field(default=50_000, ge=0)
    readiness_mid_mileage_km: int = Field(default=100_000, ge=0)
    branding_compliance_pct: float = Field(default=92.4, ge=0.0, le=100.0)
    mileage_balance_pct: float = Field(default=89.6, ge=0.0, le=100.0)
    random_seed: Optional[int] = None

    @model_validator(mode="after")
    def _bands_in_order(self):
        _check_policy_order(self)
        return self


def get_policy() -> PolicyConfig:
    """
    Build the policy snapshot from the current settings.
    """
    values = {name: getattr(settings, name) for name in PolicyConfig.model_fields}
    return PolicyConfig(**values)

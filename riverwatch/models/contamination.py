"""Bacterial indicator (E. coli) reading models."""

from dataclasses import dataclass
from enum import StrEnum


class RiskLevel(StrEnum):
    HIGH = "High Risk"
    LOW = "Low Risk"


@dataclass(frozen=True)
class ContaminationReading:
    site_code: str
    value: float
    date_time: str
    site_name: str
    risk_level: RiskLevel


def classify_risk(value: float, threshold: float) -> RiskLevel:
    """Strictly above the threshold is high risk."""
    return RiskLevel.HIGH if value > threshold else RiskLevel.LOW

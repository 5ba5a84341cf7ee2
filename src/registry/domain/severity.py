from enum import Enum
from typing import Mapping


class Severity(str, Enum):
    """Triage label derived from the functional assessment"""
    HIGH = "High"
    MODERATE = "Moderate"


# "Muita dificuldade" or worse in a single domain
HIGH_SEVERITY_THRESHOLD = 3


def classify_severity(scores: Mapping[str, int]) -> Severity:
    """
    Worst domain dominates: one domain at or above the threshold makes the
    whole case High, regardless of the other domains.
    """
    if any(level >= HIGH_SEVERITY_THRESHOLD for level in scores.values()):
        return Severity.HIGH
    return Severity.MODERATE

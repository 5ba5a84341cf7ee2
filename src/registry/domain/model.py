"""
Case record domain model for the children-with-disability registry.

A CaseDraft is the raw operator input; validate() is the only way to turn it
into a CaseRecord. Records are immutable once created.
"""
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple
from uuid import uuid4

from geolocation.domain.model import GeolocationCapture
from registry.domain import reference_data
from registry.domain.severity import classify_severity


@dataclass(frozen=True)
class CaseDraft:
    """Operator input for one case, before validation"""
    child_name: str = ""
    id_type: str = ""
    id_number: str = ""
    caregiver_name: str = ""
    caregiver_relation: str = ""
    caregiver_phone: str = ""
    gender: str = ""
    dob: str = ""                     # 'YYYY-MM-DD'
    district: str = ""
    diagnosis_choice: str = ""
    custom_diagnosis: str = ""        # only read when diagnosis_choice is "Outros"
    is_clinically_confirmed: bool = False
    scores: Mapping[str, int] = field(default_factory=dict)
    lat: Optional[float] = None
    lng: Optional[float] = None

    def with_location(self, capture: GeolocationCapture) -> "CaseDraft":
        coordinate = capture.current_coordinate()
        if coordinate is None:
            return replace(self, lat=None, lng=None)
        return replace(self, lat=coordinate.lat, lng=coordinate.lng)


@dataclass(frozen=True)
class CaseRecord:
    id: str
    child_name: str
    id_type: str
    id_number: str
    caregiver_name: str
    caregiver_relation: str
    caregiver_phone: str
    gender: str
    dob: str
    scores: Dict[str, int]
    barriers: Tuple[str, ...]
    district: str
    lat: float
    lng: float
    timestamp: str                    # ISO-8601, UTC
    diagnosis: str
    is_clinically_confirmed: bool
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        """Persisted shape, field names as used by the stored collection."""
        return {
            persisted: _to_json_value(getattr(self, attribute))
            for attribute, persisted in _PERSISTED_FIELDS.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CaseRecord":
        values = {
            attribute: data.get(persisted)
            for attribute, persisted in _PERSISTED_FIELDS.items()
        }
        values["scores"] = {key: int(level) for key, level in (values["scores"] or {}).items()}
        values["barriers"] = tuple(values["barriers"] or ())
        values["diagnosis"] = values["diagnosis"] or ""
        values["severity"] = values["severity"] or classify_severity(values["scores"]).value
        values["is_clinically_confirmed"] = bool(values["is_clinically_confirmed"])
        values["lat"] = float(values["lat"])
        values["lng"] = float(values["lng"])
        return cls(**values)


_PERSISTED_FIELDS = {
    "id": "id",
    "child_name": "childName",
    "id_type": "idType",
    "id_number": "idNumber",
    "caregiver_name": "caregiverName",
    "caregiver_relation": "caregiverRelation",
    "caregiver_phone": "caregiverPhone",
    "gender": "gender",
    "dob": "dob",
    "scores": "scores",
    "barriers": "barriers",
    "district": "district",
    "lat": "lat",
    "lng": "lng",
    "timestamp": "timestamp",
    "severity": "severity",
    "diagnosis": "diagnosis",
    "is_clinically_confirmed": "isClinicallyConfirmed",
}


def _to_json_value(value):
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


def validate(draft: CaseDraft, now: Optional[datetime] = None) -> CaseRecord:
    """
    Check a draft and build the immutable record.

    Checks run in a fixed order and the first failure wins:
    geolocation, identity/caregiver fields, diagnosis, assessment scores.

    Raises:
        MissingGeolocation, MissingRequiredField, InvalidFieldValue,
        InvalidDiagnosis, InvalidScoreRange
    """
    lat, lng = _check_geolocation(draft.lat, draft.lng)
    identity = _check_identity(draft)
    diagnosis = _check_diagnosis(draft.diagnosis_choice, draft.custom_diagnosis)
    scores = _check_scores(draft.scores)

    now = now or datetime.now(timezone.utc)

    return CaseRecord(
        id=str(uuid4()),
        scores=scores,
        barriers=(),
        lat=lat,
        lng=lng,
        timestamp=now.isoformat(),
        diagnosis=diagnosis,
        is_clinically_confirmed=bool(draft.is_clinically_confirmed),
        severity=classify_severity(scores).value,
        **identity,
    )


def _usable_number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _check_geolocation(lat, lng) -> Tuple[float, float]:
    lat = _usable_number(lat)
    lng = _usable_number(lng)
    if lat is None or lng is None:
        raise MissingGeolocation("Latitude and longitude are required")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
        raise MissingGeolocation(f"Coordinates out of range: ({lat}, {lng})")
    return lat, lng


_REQUIRED_FIELDS = (
    "child_name",
    "id_type",
    "caregiver_name",
    "caregiver_relation",
    "caregiver_phone",
    "gender",
    "dob",
    "district",
)

_ENUMERATED_FIELDS = (
    ("id_type", reference_data.ID_TYPES),
    ("caregiver_relation", reference_data.RELATIONS),
    ("gender", reference_data.GENDERS),
    ("district", reference_data.DISTRICTS),
)


def _check_identity(draft: CaseDraft) -> Dict[str, str]:
    # presence of every required field first, then allowed values
    identity = {}
    for attribute in _REQUIRED_FIELDS:
        value = (getattr(draft, attribute) or "").strip()
        if not value:
            raise MissingRequiredField(f"{attribute} is required", field=attribute)
        identity[attribute] = value
    identity["id_number"] = (draft.id_number or "").strip()

    for attribute, allowed in _ENUMERATED_FIELDS:
        if identity[attribute] not in allowed:
            raise InvalidFieldValue(
                f"{attribute} {identity[attribute]!r} is not a known value", field=attribute
            )

    try:
        date.fromisoformat(identity["dob"])
    except ValueError:
        raise InvalidFieldValue(f"dob {identity['dob']!r} is not a YYYY-MM-DD date", field="dob")
    return identity


def _check_diagnosis(choice: str, custom: str) -> str:
    choice = (choice or "").strip()
    if not choice:
        raise InvalidDiagnosis("A diagnosis must be selected", field="diagnosis")
    if choice not in reference_data.COMMON_DIAGNOSES:
        raise InvalidDiagnosis(f"Unknown diagnosis {choice!r}", field="diagnosis")
    if choice == reference_data.OTHER_DIAGNOSIS:
        custom = (custom or "").strip()
        if not custom:
            raise InvalidDiagnosis("The condition must be specified", field="custom_diagnosis")
        return custom
    return choice


def _check_scores(scores: Optional[Mapping[str, int]]) -> Dict[str, int]:
    scores = dict(scores or {})

    missing = [domain for domain in reference_data.DOMAIN_IDS if domain not in scores]
    unknown = sorted(set(scores) - set(reference_data.DOMAIN_IDS))
    if missing or unknown:
        raise InvalidScoreRange(
            f"Scores must cover exactly the assessment domains "
            f"(missing: {missing}, unknown: {unknown})",
            field="scores",
        )

    checked = {}
    for domain in reference_data.DOMAIN_IDS:
        level = scores[domain]
        if isinstance(level, bool) or not isinstance(level, int):
            raise InvalidScoreRange(f"Score for {domain} must be an integer", field=domain)
        if not reference_data.MIN_SCORE <= level <= reference_data.MAX_SCORE:
            raise InvalidScoreRange(f"Score for {domain} out of range: {level}", field=domain)
        checked[domain] = level
    return checked


class CaseValidationError(ValueError):
    """Base class for drafts that cannot become a record."""
    kind = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingGeolocation(CaseValidationError):
    kind = "MissingGeolocation"


class MissingRequiredField(CaseValidationError):
    kind = "MissingRequiredField"


class InvalidFieldValue(CaseValidationError):
    kind = "InvalidFieldValue"


class InvalidDiagnosis(CaseValidationError):
    kind = "InvalidDiagnosis"


class InvalidScoreRange(CaseValidationError):
    kind = "InvalidScoreRange"

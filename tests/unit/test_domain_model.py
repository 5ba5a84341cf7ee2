"""Unit tests for case draft validation and the record shape"""
import json
from datetime import datetime, timezone

import pytest

from geolocation.domain.model import GeolocationCapture, LocationMethod
from registry.domain.model import (
    CaseRecord,
    InvalidDiagnosis,
    InvalidFieldValue,
    InvalidScoreRange,
    MissingGeolocation,
    MissingRequiredField,
    validate,
)
from registry.domain.reference_data import DOMAIN_IDS, OTHER_DIAGNOSIS, reference_catalogue


def test_valid_draft_becomes_record(make_draft):
    now = datetime(2025, 3, 4, 9, 30, tzinfo=timezone.utc)
    record = validate(make_draft(), now=now)

    assert record.id
    assert record.child_name == "Ana Macuácua"
    assert record.diagnosis == "Paralisia Cerebral"
    assert record.timestamp == now.isoformat()
    assert record.severity == "Moderate"
    assert record.barriers == ()
    assert record.is_clinically_confirmed is False
    assert (record.lat, record.lng) == (-25.9301, 32.6045)


def test_each_record_gets_its_own_id(make_draft):
    draft = make_draft()
    assert validate(draft).id != validate(draft).id


def test_severity_is_derived_from_scores(make_draft):
    scores = {domain: 1 for domain in DOMAIN_IDS}
    scores["mobility"] = 3
    record = validate(make_draft(scores=scores))
    assert record.severity == "High"


@pytest.mark.parametrize("lat,lng", [
    (None, 32.6),
    (-25.9, None),
    (None, None),
    (float("nan"), 32.6),
    (-25.9, float("inf")),
])
def test_missing_coordinates_are_rejected(make_draft, lat, lng):
    with pytest.raises(MissingGeolocation):
        validate(make_draft(lat=lat, lng=lng))


def test_missing_geolocation_wins_over_other_errors(make_draft):
    draft = make_draft(lat=None, child_name="", diagnosis_choice="", scores={})
    with pytest.raises(MissingGeolocation):
        validate(draft)


def test_out_of_range_coordinates_are_rejected(make_draft):
    with pytest.raises(MissingGeolocation):
        validate(make_draft(lat=125.0))


@pytest.mark.parametrize("field", ["child_name", "caregiver_name", "caregiver_phone", "dob"])
def test_required_text_fields(make_draft, field):
    with pytest.raises(MissingRequiredField) as exc_info:
        validate(make_draft(**{field: "   "}))
    assert exc_info.value.field == field
    assert exc_info.value.kind == "MissingRequiredField"


def test_id_number_is_optional(make_draft):
    record = validate(make_draft(id_type="Não Possui / Em Processo", id_number=""))
    assert record.id_number == ""


@pytest.mark.parametrize("field,value", [
    ("id_type", "Passaporte"),
    ("caregiver_relation", "Vizinho"),
    ("gender", "X"),
    ("district", "Matola"),
    ("dob", "14/05/2018"),
])
def test_values_outside_reference_data_are_rejected(make_draft, field, value):
    with pytest.raises(InvalidFieldValue) as exc_info:
        validate(make_draft(**{field: value}))
    assert exc_info.value.field == field


def test_missing_field_reported_before_unknown_value(make_draft):
    with pytest.raises(MissingRequiredField) as exc_info:
        validate(make_draft(id_type="Passaporte", caregiver_name=""))
    assert exc_info.value.field == "caregiver_name"


def test_future_dob_is_accepted(make_draft):
    record = validate(make_draft(dob="2999-01-01"))
    assert record.dob == "2999-01-01"


def test_text_fields_are_stored_stripped(make_draft):
    record = validate(make_draft(child_name="  Ana  ", caregiver_phone=" +258 84 "))
    assert record.child_name == "Ana"
    assert record.caregiver_phone == "+258 84"


def test_diagnosis_must_be_selected(make_draft):
    with pytest.raises(InvalidDiagnosis):
        validate(make_draft(diagnosis_choice=""))


def test_unknown_diagnosis_is_rejected(make_draft):
    with pytest.raises(InvalidDiagnosis):
        validate(make_draft(diagnosis_choice="Gripe"))


def test_other_diagnosis_stores_custom_text(make_draft):
    record = validate(make_draft(diagnosis_choice=OTHER_DIAGNOSIS, custom_diagnosis=" Albinismo "))
    assert record.diagnosis == "Albinismo"
    assert record.diagnosis != OTHER_DIAGNOSIS


def test_other_diagnosis_requires_custom_text(make_draft):
    with pytest.raises(InvalidDiagnosis) as exc_info:
        validate(make_draft(diagnosis_choice=OTHER_DIAGNOSIS, custom_diagnosis=""))
    assert exc_info.value.field == "custom_diagnosis"


def test_custom_text_ignored_for_listed_diagnosis(make_draft):
    record = validate(make_draft(diagnosis_choice="Epilepsia", custom_diagnosis="Albinismo"))
    assert record.diagnosis == "Epilepsia"


def test_incomplete_scores_are_rejected(make_draft):
    scores = {domain: 1 for domain in DOMAIN_IDS if domain != "selfcare"}
    with pytest.raises(InvalidScoreRange):
        validate(make_draft(scores=scores))


def test_unknown_score_domain_is_rejected(make_draft):
    scores = {domain: 1 for domain in DOMAIN_IDS}
    scores["memory"] = 2
    with pytest.raises(InvalidScoreRange):
        validate(make_draft(scores=scores))


@pytest.mark.parametrize("level", [0, 5, -1, True, 2.0, "3"])
def test_out_of_range_or_non_integer_scores(make_draft, level):
    scores = {domain: 1 for domain in DOMAIN_IDS}
    scores["learning"] = level
    with pytest.raises(InvalidScoreRange) as exc_info:
        validate(make_draft(scores=scores))
    assert exc_info.value.field == "learning"


def test_draft_takes_coordinate_from_capture(make_draft):
    capture = GeolocationCapture().switch_method(LocationMethod.MAP).with_map_pick(-25.1234567, 32.7654321)
    draft = make_draft(lat=None, lng=None).with_location(capture)
    assert (draft.lat, draft.lng) == (-25.123457, 32.765432)


def test_draft_without_capture_coordinate_has_no_location(make_draft):
    draft = make_draft().with_location(GeolocationCapture())
    assert draft.lat is None and draft.lng is None


def test_record_serializes_with_persisted_field_names(make_draft):
    record = validate(make_draft(is_clinically_confirmed=True))
    data = record.to_dict()

    assert set(data) == {
        "id", "childName", "idType", "idNumber", "caregiverName", "caregiverRelation",
        "caregiverPhone", "gender", "dob", "scores", "barriers", "district", "lat", "lng",
        "timestamp", "severity", "diagnosis", "isClinicallyConfirmed",
    }
    assert data["isClinicallyConfirmed"] is True
    assert data["barriers"] == []


def test_record_survives_json_round_trip(make_draft):
    record = validate(make_draft())
    restored = CaseRecord.from_dict(json.loads(json.dumps(record.to_dict())))
    assert restored == record


def test_reference_catalogue_lists_domains_and_levels():
    catalogue = reference_catalogue()
    assert [d["id"] for d in catalogue["assessment_domains"]] == list(DOMAIN_IDS)
    assert [lvl["level"] for lvl in catalogue["severity_levels"]] == [1, 2, 3, 4]
    assert catalogue["other_diagnosis"] in catalogue["diagnoses"]
    assert len(catalogue["districts"]) == 7

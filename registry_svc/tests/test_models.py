"""
Tests for record serialization, projection and form parsing.
"""
from models.records import (
    BloodPressureRecord,
    PatientRecord,
    classify_document,
    document_kind,
)
from models.results import InsertResult, SubmissionOutcome
from core.exceptions import InsertError
from schemas import BloodPressureForm, PatientForm


# =============================================================================
# PATIENT RECORDS
# =============================================================================

def test_patient_record_to_document():
    record = PatientRecord(full_name="Ana Silva", email="ana@example.com", cpf="12345678900")
    assert record.to_document() == {
        "full_name": "Ana Silva",
        "email": "ana@example.com",
        "cpf": "12345678900",
    }


def test_patient_record_from_document_fills_missing_fields():
    record = PatientRecord.from_document({"full_name": "Ana Silva", "cpf": None})
    assert record == PatientRecord(full_name="Ana Silva", email="", cpf="")


# =============================================================================
# BLOOD PRESSURE RECORDS
# =============================================================================

def test_blood_pressure_record_without_date_omits_it():
    document = BloodPressureRecord(systolic_pressure="120", diastolic_pressure="80").to_document()
    assert document == {"systolic_pressure": "120", "diastolic_pressure": "80"}


def test_blood_pressure_record_with_date_keeps_it():
    record = BloodPressureRecord(systolic_pressure="120", diastolic_pressure="80", date="2024-03-01")
    assert record.to_document()["date"] == "2024-03-01"


def test_blood_pressure_projection_of_patient_document():
    row = BloodPressureRecord.from_document(
        {"full_name": "Ana Silva", "email": "ana@example.com", "cpf": "1"}
    ).as_row()
    assert row == {"date": "", "systolic_pressure": "", "diastolic_pressure": ""}


def test_blood_pressure_projection_renders_numbers_as_text():
    row = BloodPressureRecord.from_document({"systolic_pressure": 120, "diastolic_pressure": 80}).as_row()
    assert row == {"date": "", "systolic_pressure": "120", "diastolic_pressure": "80"}


# =============================================================================
# CLASSIFICATION
# =============================================================================

def test_classify_document():
    assert isinstance(classify_document({"full_name": "Ana"}), PatientRecord)
    assert isinstance(classify_document({"systolic_pressure": "120"}), BloodPressureRecord)
    assert classify_document({"_id": "abc"}) is None


def test_document_kind_labels():
    assert document_kind({"cpf": "1"}) == "patient"
    assert document_kind({"date": "2024-03-01"}) == "blood_pressure"
    assert document_kind({}) == "unknown"


# =============================================================================
# FORMS
# =============================================================================

def test_patient_form_reports_missing_fields():
    form = PatientForm.from_form(full_name="Ana Silva", email=None, cpf="")
    assert form.full_name == "Ana Silva"
    assert form.email == ""
    assert form.cpf == ""
    assert form.missing_fields == ("email", "cpf")


def test_blood_pressure_form_uses_wire_names_for_missing_fields():
    form = BloodPressureForm.from_form(systolic_pressure="120")
    assert form.missing_fields == ("diastolicPressure",)
    assert form.to_record() == BloodPressureRecord(systolic_pressure="120", diastolic_pressure="")


def test_blood_pressure_form_accepts_aliases():
    form = BloodPressureForm.model_validate({"systolicPressure": "120", "diastolicPressure": "80"})
    assert form.systolic_pressure == "120"
    assert form.diastolic_pressure == "80"


# =============================================================================
# OUTCOMES
# =============================================================================

def test_submission_outcome_status():
    record = PatientRecord()
    assert SubmissionOutcome(record=record, insert=InsertResult(inserted_id="1")).status == "stored"
    assert SubmissionOutcome(
        record=record, missing_fields=("cpf",), insert=InsertResult(inserted_id="1")
    ).status == "incomplete"
    failed = SubmissionOutcome(record=record, missing_fields=("cpf",), insert=InsertResult(error=InsertError()))
    assert failed.status == "not-stored"
    assert not failed.stored

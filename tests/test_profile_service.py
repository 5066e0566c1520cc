# tests/test_profile_service.py
import pytest
from pydantic import ValidationError

from carebridge import crud, models, schemas
from carebridge.services import profile_service


def test_get_profile_checks_role(db, doctor, patient):
    assert profile_service.get_profile(db, doctor.id, models.UserRole.doctor).id == doctor.id

    with pytest.raises(crud.NotFoundError, match="Doctor not found"):
        profile_service.get_profile(db, patient.id, models.UserRole.doctor)
    with pytest.raises(crud.NotFoundError, match="Patient not found"):
        profile_service.get_profile(db, 999, models.UserRole.patient)


def test_patient_update_drops_doctor_only_fields(db, patient):
    updated = profile_service.update_profile(db, patient.id, models.UserRole.patient, {
        "name": "Rahul S.",
        "bloodGroup": "B+",
        "height": 178,
        "specialization": "Cardiology",
        "role": "doctor",
    })

    assert updated.name == "Rahul S."
    assert updated.role == models.UserRole.patient
    assert updated.patient_profile.blood_group == "B+"
    assert updated.patient_profile.height == "178"
    assert updated.doctor_profile is None


def test_doctor_update_splits_user_and_profile_fields(db, doctor):
    payload = schemas.DoctorProfileUpdate(phone="+91 90000 11111", hospital="City Care", languages=["Hindi", "English"])

    updated = profile_service.update_profile(db, doctor.id, models.UserRole.doctor, payload)

    assert updated.phone == "+91 90000 11111"
    assert updated.doctor_profile.hospital == "City Care"
    assert updated.doctor_profile.languages == ["Hindi", "English"]
    # untouched fields survive a partial update
    assert updated.doctor_profile.specialization == "General Medicine"
    assert updated.email == "amit@example.com"


def test_doctor_payload_on_patient_keeps_shared_fields_only(db, patient):
    payload = schemas.DoctorProfileUpdate(bio="Runner", hospital="Somewhere")

    updated = profile_service.update_profile(db, patient.id, models.UserRole.patient, payload)

    assert updated.bio == "Runner"
    assert updated.doctor_profile is None


def test_update_unknown_user(db):
    with pytest.raises(crud.NotFoundError, match="Patient not found"):
        profile_service.update_profile(db, 123, models.UserRole.patient, {"name": "Ghost"})


def test_update_rejects_bad_email(db, patient):
    with pytest.raises(ValidationError):
        profile_service.update_profile(db, patient.id, models.UserRole.patient, {"email": "not-an-email"})


def test_duplicate_email_surfaces_store_message(db, patient):
    with pytest.raises(crud.CRUDError, match="Database error: .*UNIQUE"):
        crud.create_user(db, models.UserRole.patient, {"name": "Copy", "email": "rahul@example.com"})
    # the session is usable after the rollback
    assert crud.get_user(db, patient.id).email == "rahul@example.com"

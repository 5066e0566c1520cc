# tests/test_records_service.py
from datetime import date, datetime

import pytest

from carebridge import crud, models, schemas
from carebridge.config import get_settings
from carebridge.services import records_service


def test_add_vital_fills_status_and_trend(db, patient):
    vital = records_service.add_vital(db, patient.id, schemas.VitalCreate(label="Pulse", value=72, unit="bpm"))

    assert vital.value == "72"
    assert vital.status == "normal"
    assert vital.trend == "stable"
    assert vital.history == []


def test_add_vital_keeps_only_recent_history(db, patient):
    limit = get_settings().vital_history_limit
    readings = [str(100 + i) for i in range(limit + 5)]

    vital = records_service.add_vital(db, patient.id, schemas.VitalCreate(
        label="Sugar", value="110", unit="mg/dL", history=readings
    ))

    assert len(vital.history) == limit
    assert vital.history[-1] == readings[-1]


def test_add_vital_for_unknown_patient(db, doctor):
    with pytest.raises(crud.NotFoundError, match="Patient not found"):
        records_service.add_vital(db, doctor.id, schemas.VitalCreate(label="Pulse", value="72", unit="bpm"))
    assert db.query(models.Vital).count() == 0


def test_upload_document_defaults(db, patient):
    document = records_service.upload_document(db, patient.id, schemas.DocumentCreate(name="Scan", type="Lab Report"))

    assert document.size == "1.2 MB"
    assert document.extension == "PDF"
    assert document.file_url == records_service.DOCUMENT_DEFAULTS["file_url"]
    assert document.issued_on == date.today()
    assert document.doctor_id is None


def test_upload_document_checks_issuing_doctor(db, patient, other_patient):
    with pytest.raises(crud.NotFoundError, match="Doctor not found"):
        records_service.upload_document(db, patient.id, schemas.DocumentCreate(
            name="Scan", type="Lab Report", doctor_id=other_patient.id
        ))


def test_create_prescription_is_active_and_dated_today(db, patient, doctor):
    prescription = records_service.create_prescription(db, schemas.PrescriptionCreate(
        patient_id=patient.id,
        doctor_id=doctor.id,
        diagnosis="Viral Fever",
        medicines=[{"name": "Paracetamol 500mg", "dosage": "1-0-1"}],
    ))

    assert prescription.status == models.PrescriptionStatus.active
    assert prescription.prescribed_on == date.today()
    assert prescription.medicines[0]["name"] == "Paracetamol 500mg"
    assert [p.id for p in records_service.list_prescriptions(db, patient.id)] == [prescription.id]


def test_create_prescription_unknown_patient(db, doctor):
    with pytest.raises(crud.NotFoundError, match="Patient not found"):
        records_service.create_prescription(db, schemas.PrescriptionCreate(patient_id=777, doctor_id=doctor.id))


def test_payments_split_by_direction(db, patient, other_patient, doctor):
    paid_at = datetime(2026, 2, 2, 10, 30)
    mine = crud.create_payment(db, schemas.PaymentCreate(payer_id=patient.id, payee_id=doctor.id, amount=800, paid_at=paid_at))
    theirs = crud.create_payment(db, schemas.PaymentCreate(payer_id=other_patient.id, payee_id=doctor.id, amount=600, paid_at=paid_at))

    assert [p.id for p in records_service.payments_made(db, patient.id)] == [mine.id]
    assert [p.id for p in records_service.payments_received(db, doctor.id)] == [theirs.id, mine.id]
    assert records_service.payments_made(db, doctor.id) == []


def test_payment_requires_patient_payer(db, doctor):
    with pytest.raises(crud.NotFoundError, match="Patient not found"):
        crud.create_payment(db, schemas.PaymentCreate(
            payer_id=doctor.id, payee_id=doctor.id, amount=100, paid_at=datetime(2026, 1, 1)
        ))


def test_list_patients_includes_everyone_with_last_visit(db, patient, other_patient, doctor):
    for day in (1, 9):
        crud.create_appointment(
            db, patient_id=patient.id, doctor_id=doctor.id,
            scheduled_at=datetime(2026, 1, day, 9, 0), visit_type="Checkup",
        )

    patients, last_visits = records_service.list_patients(db)

    assert [p.id for p in patients] == [patient.id, other_patient.id]
    assert last_visits[patient.id] == datetime(2026, 1, 9, 9, 0)
    assert other_patient.id not in last_visits


def test_patient_history_collects_visits_only(db, patient, doctor):
    statuses = [models.AppointmentStatus.completed, models.AppointmentStatus.upcoming, models.AppointmentStatus.today]
    for status in statuses:
        crud.create_appointment(
            db, patient_id=patient.id, doctor_id=doctor.id,
            scheduled_at=datetime(2026, 1, 5, 9, 0), visit_type=status.value, status=status,
        )

    vitals, visits, documents = records_service.patient_history(db, patient.id)

    assert vitals == [] and documents == []
    assert sorted(v.visit_type for v in visits) == ["completed", "today"]


def test_patient_history_unknown_patient(db):
    with pytest.raises(crud.NotFoundError, match="Patient not found"):
        records_service.patient_history(db, 55)

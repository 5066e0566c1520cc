# carebridge/routers/doctor.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import formatters, models, schemas
from ..database import get_db
from ..services import appointment_service, profile_service, records_service

router = APIRouter(
    prefix="/doctor",
    tags=["Doctor"],
    responses={404: {"description": "Not found"}},
)


@router.get("/dashboard/{doctor_id}", response_model=schemas.DoctorDashboard)
def read_doctor_dashboard(doctor_id: int, db: Session = Depends(get_db)):
    doctor = profile_service.get_profile(db, doctor_id, models.UserRole.doctor)
    today = appointment_service.todays_for_doctor(db, doctor_id)
    upcoming = appointment_service.next_for_doctor(db, doctor_id)
    return formatters.doctor_dashboard(doctor, today, upcoming)


@router.get("/appointments/{doctor_id}", response_model=List[schemas.DoctorAppointmentRow])
def read_doctor_appointments(
    doctor_id: int,
    filter_type: Optional[str] = Query(None, alias="type", description="today | upcoming | online | past"),
    db: Session = Depends(get_db)
):
    appointments = appointment_service.list_for_doctor(db, doctor_id, filter_type)
    return [formatters.doctor_appointment_row(a) for a in appointments]


@router.post("/appointments", response_model=schemas.AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(appointment: schemas.AppointmentCreate, db: Session = Depends(get_db)):
    """Doctor-side scheduling; no notification is sent."""
    db_appointment = appointment_service.create_by_doctor(db, appointment)
    return formatters.appointment_response(db_appointment)


@router.get("/patients/{doctor_id}", response_model=List[schemas.PatientListRow])
def read_doctor_patients(doctor_id: int, db: Session = Depends(get_db)):
    # Not scoped to doctor_id: every registered patient is listed
    patients, last_visits = records_service.list_patients(db)
    return formatters.patient_list(patients, last_visits)


@router.get("/payments/{doctor_id}", response_model=List[schemas.DoctorPaymentRow])
def read_doctor_payments(doctor_id: int, db: Session = Depends(get_db)):
    return [formatters.doctor_payment_row(p) for p in records_service.payments_received(db, doctor_id)]


@router.get("/profile/{doctor_id}", response_model=schemas.UserResponse)
def read_doctor_profile(doctor_id: int, db: Session = Depends(get_db)):
    return profile_service.get_profile(db, doctor_id, models.UserRole.doctor)


@router.put("/profile/{doctor_id}", response_model=schemas.UserResponse)
def update_doctor_profile(
    doctor_id: int,
    payload: schemas.DoctorProfileUpdate,
    db: Session = Depends(get_db)
):
    return profile_service.update_profile(db, doctor_id, models.UserRole.doctor, payload)


@router.get("/patient/{patient_id}/history", response_model=schemas.PatientHistory)
def read_patient_history(patient_id: int, db: Session = Depends(get_db)):
    """Vitals, past and same-day visits, and documents for one patient."""
    vitals, visits, documents = records_service.patient_history(db, patient_id)
    return formatters.patient_history(vitals, visits, documents)


@router.post("/prescription", response_model=schemas.PrescriptionResponse, status_code=status.HTTP_201_CREATED)
def create_prescription(prescription: schemas.PrescriptionCreate, db: Session = Depends(get_db)):
    db_prescription = records_service.create_prescription(db, prescription)
    return formatters.prescription_response(db_prescription)

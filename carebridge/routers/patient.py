# carebridge/routers/patient.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import formatters, models, schemas
from ..database import get_db
from ..services import appointment_service, profile_service, records_service

router = APIRouter(
    prefix="/patient",
    tags=["Patient"],
    responses={404: {"description": "Not found"}},
)


@router.get("/dashboard/{patient_id}", response_model=schemas.PatientDashboard)
def read_patient_dashboard(patient_id: int, db: Session = Depends(get_db)):
    """Greeting card data plus the earliest upcoming or same-day appointment."""
    patient = profile_service.get_profile(db, patient_id, models.UserRole.patient)
    upcoming = appointment_service.next_for_patient(db, patient_id)
    return formatters.patient_dashboard(patient, upcoming)


@router.get("/appointments/{patient_id}", response_model=List[schemas.PatientAppointmentRow])
def read_patient_appointments(patient_id: int, db: Session = Depends(get_db)):
    appointments = appointment_service.list_for_patient(db, patient_id)
    return [formatters.patient_appointment_row(a) for a in appointments]


@router.post("/book", response_model=schemas.AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(appointment: schemas.AppointmentCreate, db: Session = Depends(get_db)):
    """Book an appointment and notify the doctor."""
    db_appointment = appointment_service.book(db, appointment)
    return formatters.appointment_response(db_appointment)


@router.put("/reschedule/{appointment_id}", response_model=schemas.AppointmentResponse)
def reschedule_appointment(
    appointment_id: int,
    schedule: schemas.AppointmentReschedule,
    db: Session = Depends(get_db)
):
    db_appointment = appointment_service.reschedule(db, appointment_id, schedule)
    return formatters.appointment_response(db_appointment)


@router.get("/payments/{patient_id}", response_model=List[schemas.PatientPaymentRow])
def read_patient_payments(patient_id: int, db: Session = Depends(get_db)):
    return [formatters.patient_payment_row(p) for p in records_service.payments_made(db, patient_id)]


@router.get("/profile/{patient_id}", response_model=schemas.UserResponse)
def read_patient_profile(patient_id: int, db: Session = Depends(get_db)):
    return profile_service.get_profile(db, patient_id, models.UserRole.patient)


@router.put("/profile/{patient_id}", response_model=schemas.UserResponse)
def update_patient_profile(
    patient_id: int,
    payload: schemas.PatientProfileUpdate,
    db: Session = Depends(get_db)
):
    return profile_service.update_profile(db, patient_id, models.UserRole.patient, payload)


@router.get("/vitals/{patient_id}", response_model=List[schemas.VitalResponse])
def read_patient_vitals(patient_id: int, db: Session = Depends(get_db)):
    return records_service.list_vitals(db, patient_id)


@router.post("/vitals/{patient_id}", response_model=schemas.VitalResponse, status_code=status.HTTP_201_CREATED)
def add_patient_vital(patient_id: int, vital: schemas.VitalCreate, db: Session = Depends(get_db)):
    return records_service.add_vital(db, patient_id, vital)


@router.get("/prescriptions/{patient_id}", response_model=List[schemas.PrescriptionRow])
def read_patient_prescriptions(patient_id: int, db: Session = Depends(get_db)):
    return [formatters.prescription_row(p) for p in records_service.list_prescriptions(db, patient_id)]


@router.get("/documents/{patient_id}", response_model=List[schemas.DocumentRow])
def read_patient_documents(patient_id: int, db: Session = Depends(get_db)):
    return [formatters.document_row(d) for d in records_service.list_documents(db, patient_id)]


@router.post("/documents/{patient_id}", response_model=schemas.DocumentRow, status_code=status.HTTP_201_CREATED)
def upload_patient_document(patient_id: int, document: schemas.DocumentCreate, db: Session = Depends(get_db)):
    db_document = records_service.upload_document(db, patient_id, document)
    return formatters.document_row(db_document, uploaded=True)


@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def register_patient(registration: schemas.PatientRegister, db: Session = Depends(get_db)):
    """
    Register a walk-in patient. Supplying both `condition` and `mode` also
    checks them in for a same-day appointment.
    """
    return appointment_service.register_patient(db, registration)

# carebridge/services/appointment_service.py
"""
Appointment lifecycle.

Exposed transitions are booking (patient or doctor side), rescheduling and
the same-day visit created at walk-in registration. Completion and
cancellation are not exposed. Bookings are not checked for clashes: two
bookings for the same doctor and slot both succeed.
"""
from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..config import get_settings
from . import notification_service

logger = structlog.get_logger(__name__)

DEFAULT_DURATION = "30 min"

BOOKING_NOTIFICATION = {
    "type": models.NotificationType.appointment,
    "title": "New Booking",
    "message": "You have a new appointment request.",
}

FEMALE_AVATAR_URL = "https://i.pinimg.com/736x/c4/ee/1e/c4ee1e8a63ad02db5faf5827d4fcc083.jpg"
MALE_AVATAR_URL = "https://i.pinimg.com/1200x/fb/a6/4b/fba64b5c2a843b3f68d5cf04e4e9913b.jpg"

# ?type= values understood by the doctor's appointment list
APPOINTMENT_FILTERS = {
    "today": {"statuses": [models.AppointmentStatus.today]},
    "upcoming": {"statuses": [models.AppointmentStatus.upcoming]},
    "online": {"mode": models.AppointmentMode.online},
    "past": {"statuses": [models.AppointmentStatus.completed]},
}

PATIENT_NEXT_STATUSES = [models.AppointmentStatus.upcoming, models.AppointmentStatus.today]
VISIT_STATUSES = [models.AppointmentStatus.completed, models.AppointmentStatus.today]


def _create(db: Session, appointment: schemas.AppointmentCreate, duration: Optional[str]) -> models.Appointment:
    crud.resolve_user(db, appointment.patient_id, models.UserRole.patient)
    crud.resolve_user(db, appointment.doctor_id, models.UserRole.doctor)
    return crud.create_appointment(
        db,
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
        scheduled_at=appointment.scheduled_at,
        visit_type=appointment.type,
        mode=appointment.mode,
        status=models.AppointmentStatus.upcoming,
        duration=duration,
        notes=appointment.notes,
    )


def book(db: Session, appointment: schemas.AppointmentCreate) -> models.Appointment:
    """Patient-side booking. The doctor is notified after the appointment is stored."""
    db_appointment = _create(db, appointment, duration=appointment.duration)
    notification_service.notify(db, user_id=appointment.doctor_id, **BOOKING_NOTIFICATION)
    logger.info(
        "appointment.booked",
        appointment_id=db_appointment.id,
        patient_id=db_appointment.patient_id,
        doctor_id=db_appointment.doctor_id,
    )
    return db_appointment


def create_by_doctor(db: Session, appointment: schemas.AppointmentCreate) -> models.Appointment:
    db_appointment = _create(db, appointment, duration=appointment.duration or DEFAULT_DURATION)
    logger.info(
        "appointment.created_by_doctor",
        appointment_id=db_appointment.id,
        doctor_id=db_appointment.doctor_id,
    )
    return db_appointment


def reschedule(db: Session, appointment_id: int, schedule: schemas.AppointmentReschedule) -> models.Appointment:
    """Move an appointment. Status always becomes upcoming, even from completed or cancelled."""
    db_appointment = crud.get_appointment(db, appointment_id)
    if db_appointment is None:
        raise crud.NotFoundError("Appointment not found")
    previous_status = db_appointment.status
    updated = crud.update_appointment(
        db, db_appointment,
        scheduled_at=schedule.scheduled_at,
        status=models.AppointmentStatus.upcoming,
    )
    logger.info(
        "appointment.rescheduled",
        appointment_id=appointment_id,
        previous_status=previous_status.value,
        scheduled_at=updated.scheduled_at.isoformat(),
        reason=schedule.reason,
    )
    return updated


def list_for_doctor(db: Session, doctor_id: int, filter_kind: Optional[str] = None) -> List[models.Appointment]:
    """Newest-created first. Unknown filter kinds fall back to every appointment."""
    filters = APPOINTMENT_FILTERS.get(filter_kind or "", {})
    return crud.get_appointments(db, doctor_id=doctor_id, **filters)


def list_for_patient(db: Session, patient_id: int) -> List[models.Appointment]:
    return crud.get_appointments(db, patient_id=patient_id)


def todays_for_doctor(db: Session, doctor_id: int) -> List[models.Appointment]:
    return crud.get_appointments(db, doctor_id=doctor_id, statuses=[models.AppointmentStatus.today])


def next_for_doctor(db: Session, doctor_id: int) -> Optional[models.Appointment]:
    return crud.get_next_appointment(db, doctor_id=doctor_id, statuses=[models.AppointmentStatus.upcoming])


def next_for_patient(db: Session, patient_id: int) -> Optional[models.Appointment]:
    return crud.get_next_appointment(db, patient_id=patient_id, statuses=PATIENT_NEXT_STATUSES)


def visits_for_patient(db: Session, patient_id: int) -> List[models.Appointment]:
    return crud.get_appointments(db, patient_id=patient_id, statuses=VISIT_STATUSES)


def default_avatar(gender: Optional[str]) -> str:
    return FEMALE_AVATAR_URL if gender == "Female" else MALE_AVATAR_URL


def _registration_doctor(db: Session, doctor_id: Optional[int]) -> models.User:
    doctor_id = doctor_id if doctor_id is not None else get_settings().default_doctor_id
    if doctor_id is not None:
        return crud.resolve_user(db, doctor_id, models.UserRole.doctor)
    doctor = crud.get_first_doctor(db)
    if doctor is None:
        raise crud.NotFoundError("Doctor not found")
    return doctor


def register_patient(db: Session, registration: schemas.PatientRegister) -> models.User:
    """
    Create a patient account. When both a condition and a visit mode are given
    the patient is also checked in for a same-day appointment.
    """
    walk_in = bool(registration.condition and registration.mode)
    # Resolve the doctor before writing anything so a bad id leaves no orphan patient
    doctor = _registration_doctor(db, registration.doctor_id) if walk_in else None

    patient = crud.create_user(
        db,
        role=models.UserRole.patient,
        user_data={
            "name": registration.name,
            "email": registration.email,
            "age": registration.age,
            "gender": registration.gender,
            "phone": registration.phone,
            "image": registration.image or default_avatar(registration.gender),
        },
        profile_data={"condition": registration.condition},
    )
    logger.info("patient.registered", patient_id=patient.id)

    if walk_in:
        mode = models.AppointmentMode.online if "video" in registration.mode.lower() else models.AppointmentMode.in_person
        appointment = crud.create_appointment(
            db,
            patient_id=patient.id,
            doctor_id=doctor.id,
            scheduled_at=datetime.now().replace(second=0, microsecond=0),
            visit_type=registration.condition,
            mode=mode,
            status=models.AppointmentStatus.today,
        )
        logger.info("appointment.walk_in", appointment_id=appointment.id, patient_id=patient.id, doctor_id=doctor.id)
    return patient

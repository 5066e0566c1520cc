# carebridge/crud.py - entity store access
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from typing import Optional, List, Dict, Any, Iterable
from datetime import datetime
import logging

from . import models, schemas

logger = logging.getLogger(__name__)


class CRUDError(Exception):
    pass


class NotFoundError(CRUDError):
    """Raised when an id does not resolve to a stored record."""


def _save(db: Session, instance, label: str):
    """Add, commit and refresh a single row, translating store failures to CRUDError."""
    try:
        db.add(instance)
        db.commit()
        db.refresh(instance)
        return instance
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error saving {label}: {e}")
        raise CRUDError(f"Database error: {str(e)}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error saving {label}: {e}")
        raise CRUDError(f"Database error: {str(e)}")


def _commit(db: Session, label: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating {label}: {e}")
        raise CRUDError(f"Database error: {str(e)}")

# ==================== USER CRUD OPERATIONS ====================

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    """Get user by ID with its role profile loaded."""
    try:
        return db.query(models.User).options(
            joinedload(models.User.doctor_profile),
            joinedload(models.User.patient_profile)
        ).filter(models.User.id == user_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user {user_id}: {str(e)}")
        raise CRUDError(f"Database error: {str(e)}")


def resolve_user(db: Session, user_id: Optional[int], role: models.UserRole) -> models.User:
    """Return the user with this id and role, or raise NotFoundError ('Doctor not found')."""
    user = get_user(db, user_id) if user_id is not None else None
    if user is None or user.role != role:
        raise NotFoundError(f"{role.value.capitalize()} not found")
    return user


def get_users_by_role(db: Session, role: models.UserRole) -> List[models.User]:
    try:
        return db.query(models.User).options(
            joinedload(models.User.patient_profile),
            joinedload(models.User.doctor_profile)
        ).filter(models.User.role == role).order_by(models.User.id).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching {role.value} users: {str(e)}")
        raise CRUDError(f"Database error: {str(e)}")


def get_first_doctor(db: Session) -> Optional[models.User]:
    return db.query(models.User).filter(
        models.User.role == models.UserRole.doctor
    ).order_by(models.User.id).first()


def create_user(
    db: Session,
    role: models.UserRole,
    user_data: Dict[str, Any],
    profile_data: Optional[Dict[str, Any]] = None
) -> models.User:
    """Create a user together with the profile row that matches its role."""
    db_user = models.User(role=role, **user_data)
    if role == models.UserRole.doctor:
        db_user.doctor_profile = models.DoctorProfile(**(profile_data or {}))
    else:
        db_user.patient_profile = models.PatientProfile(**(profile_data or {}))
    _save(db, db_user, "User")
    logger.info(f"Created {role.value} user {db_user.id}")
    return db_user


def update_user(
    db: Session,
    db_user: models.User,
    user_updates: Dict[str, Any],
    profile_updates: Dict[str, Any]
) -> models.User:
    for key, value in user_updates.items():
        setattr(db_user, key, value)
    profile = db_user.profile
    if profile_updates and profile is None:
        profile = models.DoctorProfile() if db_user.role == models.UserRole.doctor else models.PatientProfile()
        if db_user.role == models.UserRole.doctor:
            db_user.doctor_profile = profile
        else:
            db_user.patient_profile = profile
    for key, value in profile_updates.items():
        setattr(profile, key, value)
    return _save(db, db_user, "User")

# ==================== APPOINTMENT CRUD OPERATIONS ====================

def create_appointment(db: Session, **fields) -> models.Appointment:
    db_appointment = models.Appointment(**fields)
    _save(db, db_appointment, "Appointment")
    logger.info(f"Created appointment {db_appointment.id} for patient {db_appointment.patient_id}")
    return db_appointment


def get_appointment(db: Session, appointment_id: int) -> Optional[models.Appointment]:
    return db.query(models.Appointment).filter(models.Appointment.id == appointment_id).first()


def _appointment_query(
    db: Session,
    patient_id: Optional[int] = None,
    doctor_id: Optional[int] = None,
    statuses: Optional[Iterable[models.AppointmentStatus]] = None,
    mode: Optional[models.AppointmentMode] = None
):
    query = db.query(models.Appointment).options(
        joinedload(models.Appointment.patient),
        joinedload(models.Appointment.doctor).joinedload(models.User.doctor_profile)
    )
    if patient_id is not None:
        query = query.filter(models.Appointment.patient_id == patient_id)
    if doctor_id is not None:
        query = query.filter(models.Appointment.doctor_id == doctor_id)
    if statuses:
        query = query.filter(models.Appointment.status.in_(list(statuses)))
    if mode is not None:
        query = query.filter(models.Appointment.mode == mode)
    return query


def get_appointments(db: Session, **filters) -> List[models.Appointment]:
    """Appointments matching the filters, most recently created first."""
    try:
        return _appointment_query(db, **filters).order_by(models.Appointment.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching appointments: {e}")
        raise CRUDError(f"Database error: {str(e)}")


def get_next_appointment(db: Session, **filters) -> Optional[models.Appointment]:
    """Earliest scheduled appointment matching the filters."""
    try:
        return _appointment_query(db, **filters).order_by(
            models.Appointment.scheduled_at.asc(), models.Appointment.id.asc()
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching next appointment: {e}")
        raise CRUDError(f"Database error: {str(e)}")


def update_appointment(db: Session, db_appointment: models.Appointment, **changes) -> models.Appointment:
    for key, value in changes.items():
        setattr(db_appointment, key, value)
    return _save(db, db_appointment, "Appointment")


def get_last_visit_by_patient(db: Session) -> Dict[int, datetime]:
    """Latest scheduled appointment time per patient id."""
    rows = db.query(
        models.Appointment.patient_id, func.max(models.Appointment.scheduled_at)
    ).group_by(models.Appointment.patient_id).all()
    return {patient_id: last for patient_id, last in rows}

# ==================== PAYMENT CRUD OPERATIONS ====================

def create_payment(db: Session, payment: schemas.PaymentCreate) -> models.Payment:
    resolve_user(db, payment.payer_id, models.UserRole.patient)
    resolve_user(db, payment.payee_id, models.UserRole.doctor)
    data = payment.model_dump()
    data["payment_type"] = data.pop("type")
    return _save(db, models.Payment(**data), "Payment")


def get_payments(db: Session, payer_id: Optional[int] = None, payee_id: Optional[int] = None) -> List[models.Payment]:
    """Ledger entries for one side of the payment, newest first."""
    try:
        query = db.query(models.Payment).options(
            joinedload(models.Payment.payer),
            joinedload(models.Payment.payee)
        )
        if payer_id is not None:
            query = query.filter(models.Payment.payer_id == payer_id)
        if payee_id is not None:
            query = query.filter(models.Payment.payee_id == payee_id)
        return query.order_by(models.Payment.created_at.desc(), models.Payment.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching payments: {e}")
        raise CRUDError(f"Database error: {str(e)}")

# ==================== NOTIFICATION CRUD OPERATIONS ====================

def create_notification(db: Session, notification: schemas.NotificationCreate) -> models.Notification:
    return _save(db, models.Notification(**notification.model_dump(), unread=True), "Notification")


def get_notification(db: Session, notification_id: int) -> Optional[models.Notification]:
    return db.query(models.Notification).filter(models.Notification.id == notification_id).first()


def get_notifications_for_user(db: Session, user_id: int) -> List[models.Notification]:
    return db.query(models.Notification).filter(
        models.Notification.user_id == user_id
    ).order_by(models.Notification.created_at.desc(), models.Notification.id.desc()).all()


def set_notification_unread(db: Session, db_notification: models.Notification, unread: bool) -> models.Notification:
    db_notification.unread = unread
    return _save(db, db_notification, "Notification")


def delete_notification(db: Session, db_notification: models.Notification) -> None:
    try:
        db.delete(db_notification)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting notification {db_notification.id}: {e}")
        raise CRUDError(f"Database error: {str(e)}")


def mark_all_notifications_read(db: Session, user_id: int) -> int:
    """Bulk update; returns how many rows belong to the recipient."""
    try:
        updated = db.query(models.Notification).filter(
            models.Notification.user_id == user_id
        ).update({models.Notification.unread: False}, synchronize_session=False)
        db.commit()
        return updated
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error marking notifications read for user {user_id}: {e}")
        raise CRUDError(f"Database error: {str(e)}")

# ==================== HEALTH RECORD CRUD OPERATIONS ====================

def create_vital(db: Session, **fields) -> models.Vital:
    return _save(db, models.Vital(**fields), "Vital")


def get_vitals_for_patient(db: Session, patient_id: int) -> List[models.Vital]:
    return db.query(models.Vital).filter(
        models.Vital.patient_id == patient_id
    ).order_by(models.Vital.recorded_at.desc(), models.Vital.id.desc()).all()


def create_document(db: Session, **fields) -> models.Document:
    return _save(db, models.Document(**fields), "Document")


def get_documents_for_patient(db: Session, patient_id: int) -> List[models.Document]:
    return db.query(models.Document).options(
        joinedload(models.Document.doctor)
    ).filter(
        models.Document.patient_id == patient_id
    ).order_by(models.Document.created_at.desc(), models.Document.id.desc()).all()


def create_prescription(db: Session, **fields) -> models.MedicalPrescription:
    return _save(db, models.MedicalPrescription(**fields), "Prescription")


def get_prescriptions_for_patient(db: Session, patient_id: int) -> List[models.MedicalPrescription]:
    return db.query(models.MedicalPrescription).options(
        joinedload(models.MedicalPrescription.doctor)
    ).filter(
        models.MedicalPrescription.patient_id == patient_id
    ).order_by(models.MedicalPrescription.created_at.desc(), models.MedicalPrescription.id.desc()).all()

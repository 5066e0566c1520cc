# carebridge/services/records_service.py
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..config import get_settings
from . import appointment_service

logger = structlog.get_logger(__name__)

VITAL_DEFAULTS = {"status": "normal", "trend": "stable"}
DOCUMENT_DEFAULTS = {
    "size": "1.2 MB",
    "file_url": "https://example.com/mock-file.pdf",
    "extension": "PDF",
}


def _bounded_history(history: Optional[List[str]], limit: int) -> List[str]:
    """Keep the most recent readings; history is ordered oldest first."""
    history = list(history or [])
    return history[-limit:]

# --- Vitals ---

def add_vital(db: Session, patient_id: int, vital: schemas.VitalCreate) -> models.Vital:
    crud.resolve_user(db, patient_id, models.UserRole.patient)
    db_vital = crud.create_vital(
        db,
        patient_id=patient_id,
        label=vital.label,
        value=vital.value,
        unit=vital.unit,
        status=vital.status or VITAL_DEFAULTS["status"],
        trend=vital.trend or VITAL_DEFAULTS["trend"],
        history=_bounded_history(vital.history, get_settings().vital_history_limit),
    )
    logger.info("vital.recorded", vital_id=db_vital.id, patient_id=patient_id, label=vital.label)
    return db_vital


def list_vitals(db: Session, patient_id: int) -> List[models.Vital]:
    return crud.get_vitals_for_patient(db, patient_id)

# --- Documents ---

def upload_document(db: Session, patient_id: int, document: schemas.DocumentCreate) -> models.Document:
    """Store document metadata only; the file itself lives elsewhere."""
    crud.resolve_user(db, patient_id, models.UserRole.patient)
    if document.doctor_id is not None:
        crud.resolve_user(db, document.doctor_id, models.UserRole.doctor)
    db_document = crud.create_document(
        db,
        patient_id=patient_id,
        doctor_id=document.doctor_id,
        name=document.name,
        type=document.type,
        size=document.size or DOCUMENT_DEFAULTS["size"],
        issued_on=document.date or date.today(),
        file_url=document.file_url or DOCUMENT_DEFAULTS["file_url"],
        extension=document.extension or DOCUMENT_DEFAULTS["extension"],
    )
    logger.info("document.uploaded", document_id=db_document.id, patient_id=patient_id)
    return db_document


def list_documents(db: Session, patient_id: int) -> List[models.Document]:
    return crud.get_documents_for_patient(db, patient_id)

# --- Prescriptions ---

def create_prescription(db: Session, prescription: schemas.PrescriptionCreate) -> models.MedicalPrescription:
    crud.resolve_user(db, prescription.patient_id, models.UserRole.patient)
    crud.resolve_user(db, prescription.doctor_id, models.UserRole.doctor)
    db_prescription = crud.create_prescription(
        db,
        patient_id=prescription.patient_id,
        doctor_id=prescription.doctor_id,
        prescribed_on=date.today(),
        diagnosis=prescription.diagnosis,
        status=models.PrescriptionStatus.active,
        medicines=[m.model_dump() for m in prescription.medicines],
        notes=prescription.notes,
    )
    logger.info(
        "prescription.created",
        prescription_id=db_prescription.id,
        patient_id=prescription.patient_id,
        medicines=len(prescription.medicines),
    )
    return db_prescription


def list_prescriptions(db: Session, patient_id: int) -> List[models.MedicalPrescription]:
    return crud.get_prescriptions_for_patient(db, patient_id)

# --- Payments ---

def payments_received(db: Session, doctor_id: int) -> List[models.Payment]:
    return crud.get_payments(db, payee_id=doctor_id)


def payments_made(db: Session, patient_id: int) -> List[models.Payment]:
    return crud.get_payments(db, payer_id=patient_id)

# --- Doctor views of patients ---

def list_patients(db: Session) -> Tuple[List[models.User], Dict[int, datetime]]:
    """Every patient in the store, not only the requesting doctor's."""
    return crud.get_users_by_role(db, models.UserRole.patient), crud.get_last_visit_by_patient(db)


def patient_history(db: Session, patient_id: int):
    crud.resolve_user(db, patient_id, models.UserRole.patient)
    return (
        crud.get_vitals_for_patient(db, patient_id),
        appointment_service.visits_for_patient(db, patient_id),
        crud.get_documents_for_patient(db, patient_id),
    )

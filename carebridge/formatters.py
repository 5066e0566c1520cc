"""
Response shaping for the patient and doctor apps.

Each function maps a stored entity (plus the User it references) to the
schema a single endpoint returns. Anything the referenced record does not
carry is filled from the default tables below; nothing here touches the
database.
"""
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from . import models, schemas

# --- Default tables ---
PATIENT_APPOINTMENT_DEFAULTS = {"rating": 4.9, "fee": 800.0}
DOCTOR_APPOINTMENT_DEFAULTS = {"duration": "30 min", "age": 28}
CHECKED_IN_DEFAULTS = {"age": 30, "status": "checked-in", "wait_time": "10 min"}
DOCTOR_STATS_DEFAULTS = {"next_appt_time": "None"}

PATIENT_LIST_BASE_AGE = 25
PATIENT_LIST_AGE_SPREAD = 20
PATIENT_LIST_CONDITIONS = ("Fever & Cold", "Regular Checkup")
PATIENT_LIST_STATUSES = ("active", "inactive")
PATIENT_LIST_CATEGORIES = ("followup", "new", "today")
PATIENT_LIST_LAST_VISIT = "N/A"

PAYMENT_DEFAULTS = {
    "patient_name": "Unknown Patient",
    "doctor_name": "Unknown Doctor",
    "type": "Consultation",
    "category": "today",
}

UNKNOWN_DOCTOR = "Unknown Doctor"
SELF_UPLOADED = "Self Uploaded"

DOCUMENT_COLORS = {
    "Lab Report": ["#EF4444", "#DB2777"],
    "Prescription": ["#0A6659", "#0D8B7A"],
}
DEFAULT_DOCUMENT_COLORS = ["#3B82F6", "#9333EA"]

HISTORY_SUMMARY = "Patient has been under regular care. Recent vitals are stable."
HISTORY_VISIT_STATUS = "Healthy"
HISTORY_DOCUMENT_DEFAULTS = {"size": "1MB", "ext": "PDF", "color": "#3B82F6"}

EARNINGS_CHART = (
    ("9AM", 50), ("10AM", 75), ("11AM", 60),
    ("12PM", 90), ("1PM", 70), ("2PM", 85),
)


def display_date(value: Optional[date]) -> Optional[str]:
    """'Feb 5, 2026'"""
    if value is None:
        return None
    return f"{value:%b} {value.day}, {value.year}"


def display_time(value: Optional[datetime]) -> Optional[str]:
    """'9:00 AM'"""
    if value is None:
        return None
    return value.strftime("%I:%M %p").lstrip("0")


def _doctor_fee(doctor: Optional[models.User]) -> Optional[float]:
    profile = doctor.doctor_profile if doctor is not None else None
    return profile.consultation_fee if profile is not None else None


def _name(user: Optional[models.User], default: str) -> str:
    return user.name if user is not None and user.name else default

# --- Appointments ---

def appointment_response(appointment: models.Appointment) -> schemas.AppointmentResponse:
    return schemas.AppointmentResponse(
        id=appointment.id,
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
        date=display_date(appointment.scheduled_at),
        time=display_time(appointment.scheduled_at),
        type=appointment.visit_type,
        mode=appointment.mode,
        status=appointment.status,
        duration=appointment.duration,
        notes=appointment.notes,
        created_at=appointment.created_at,
    )


def patient_appointment_row(appointment: models.Appointment) -> schemas.PatientAppointmentRow:
    doctor = appointment.doctor
    profile = doctor.doctor_profile if doctor is not None else None
    fee = _doctor_fee(doctor)
    return schemas.PatientAppointmentRow(
        id=appointment.id,
        doctor_name=_name(doctor, UNKNOWN_DOCTOR),
        specialty=profile.specialization if profile else None,
        doctor_image=doctor.image if doctor else None,
        rating=(profile.rating if profile and profile.rating else PATIENT_APPOINTMENT_DEFAULTS["rating"]),
        date=display_date(appointment.scheduled_at),
        time=display_time(appointment.scheduled_at),
        status=appointment.status,
        # the patient app renders the visit mode icon from 'type'
        type=appointment.mode,
        fee=fee if fee is not None else PATIENT_APPOINTMENT_DEFAULTS["fee"],
    )


def doctor_appointment_row(appointment: models.Appointment) -> schemas.DoctorAppointmentRow:
    patient = appointment.patient
    return schemas.DoctorAppointmentRow(
        id=appointment.id,
        patient_id=appointment.patient_id,
        patient_name=_name(patient, ""),
        patient_image=patient.image if patient else None,
        time=display_time(appointment.scheduled_at),
        date=display_date(appointment.scheduled_at),
        type=appointment.visit_type,
        mode=appointment.mode,
        duration=appointment.duration or DOCTOR_APPOINTMENT_DEFAULTS["duration"],
        status=appointment.status,
        age=(patient.age if patient and patient.age else DOCTOR_APPOINTMENT_DEFAULTS["age"]),
    )

# --- Dashboards ---

def patient_dashboard(patient: models.User, upcoming: Optional[models.Appointment]) -> schemas.PatientDashboard:
    card = None
    if upcoming is not None:
        doctor = upcoming.doctor
        profile = doctor.doctor_profile if doctor is not None else None
        card = schemas.PatientUpcomingCard(
            id=upcoming.id,
            doctor_name=_name(doctor, UNKNOWN_DOCTOR),
            specialty=profile.specialization if profile else None,
            rating=profile.rating if profile else None,
            reviews=profile.reviews if profile else None,
            doctor_image=doctor.image if doctor else None,
            date=display_date(upcoming.scheduled_at),
            time=display_time(upcoming.scheduled_at),
            type=upcoming.visit_type,
        )
    return schemas.PatientDashboard(
        patient_name=patient.name,
        patient_image=patient.image,
        upcoming_appointment=card,
    )


def checked_in_patient(appointment: models.Appointment) -> schemas.CheckedInPatient:
    patient = appointment.patient
    return schemas.CheckedInPatient(
        id=appointment.patient_id,
        name=_name(patient, ""),
        image=patient.image if patient else None,
        gender=patient.gender if patient else None,
        case=appointment.visit_type,
        status=CHECKED_IN_DEFAULTS["status"],
        wait_time=CHECKED_IN_DEFAULTS["wait_time"],
        age=(patient.age if patient and patient.age else CHECKED_IN_DEFAULTS["age"]),
    )


def doctor_dashboard(
    doctor: models.User,
    today: List[models.Appointment],
    upcoming: Optional[models.Appointment]
) -> schemas.DoctorDashboard:
    card = None
    if upcoming is not None:
        patient = upcoming.patient
        card = schemas.DoctorUpcomingCard(
            patient_name=_name(patient, ""),
            patient_image=patient.image if patient else None,
            patient_gender=patient.gender if patient else None,
            time=display_time(upcoming.scheduled_at),
            date=display_date(upcoming.scheduled_at),
            type=upcoming.visit_type,
            age=(patient.age if patient and patient.age else DOCTOR_APPOINTMENT_DEFAULTS["age"]),
        )
    return schemas.DoctorDashboard(
        doctor_name=doctor.name,
        doctor_image=doctor.image,
        stats=schemas.DoctorStats(
            patients_waiting=len(today),
            next_appt_time=display_time(upcoming.scheduled_at) if upcoming else DOCTOR_STATS_DEFAULTS["next_appt_time"],
        ),
        checked_in_patients=[checked_in_patient(a) for a in today],
        upcoming_appointment=card,
        earnings_chart=[schemas.EarningsPoint(time=t, amount=amount) for t, amount in EARNINGS_CHART],
    )


def patient_list(patients: Iterable[models.User], last_visits: Dict[int, datetime]) -> List[schemas.PatientListRow]:
    rows = []
    for idx, patient in enumerate(patients):
        profile = patient.patient_profile
        condition = profile.condition if profile and profile.condition else None
        rows.append(schemas.PatientListRow(
            id=patient.id,
            name=patient.name,
            age=patient.age or (PATIENT_LIST_BASE_AGE + idx % PATIENT_LIST_AGE_SPREAD),
            last_visit=display_date(last_visits.get(patient.id)) or PATIENT_LIST_LAST_VISIT,
            condition=condition or PATIENT_LIST_CONDITIONS[idx % len(PATIENT_LIST_CONDITIONS)],
            image=patient.image,
            status=PATIENT_LIST_STATUSES[idx % len(PATIENT_LIST_STATUSES)],
            category=PATIENT_LIST_CATEGORIES[idx % len(PATIENT_LIST_CATEGORIES)],
        ))
    return rows

# --- Payments ---

def doctor_payment_row(payment: models.Payment) -> schemas.DoctorPaymentRow:
    return schemas.DoctorPaymentRow(
        id=payment.id,
        patient_name=_name(payment.payer, PAYMENT_DEFAULTS["patient_name"]),
        amount=payment.amount,
        date=display_date(payment.paid_at),
        time=display_time(payment.paid_at),
        mode=payment.mode,
        status=payment.status,
        type=payment.payment_type or PAYMENT_DEFAULTS["type"],
        category=payment.category or PAYMENT_DEFAULTS["category"],
    )


def patient_payment_row(payment: models.Payment) -> schemas.PatientPaymentRow:
    return schemas.PatientPaymentRow(
        id=payment.id,
        doctor_name=_name(payment.payee, PAYMENT_DEFAULTS["doctor_name"]),
        amount=payment.amount,
        date=display_date(payment.paid_at),
        time=display_time(payment.paid_at),
        mode=payment.mode,
        status=payment.status,
        type=payment.payment_type or PAYMENT_DEFAULTS["type"],
    )

# --- Records ---

def document_colors(document_type: Optional[str]) -> List[str]:
    return list(DOCUMENT_COLORS.get(document_type, DEFAULT_DOCUMENT_COLORS))


def document_row(document: models.Document, uploaded: bool = False) -> schemas.DocumentRow:
    if uploaded:
        doctor_name = SELF_UPLOADED
    else:
        doctor_name = _name(document.doctor, UNKNOWN_DOCTOR)
    return schemas.DocumentRow(
        id=document.id,
        title=document.name,
        type=document.type,
        doctor_name=doctor_name,
        date=display_date(document.issued_on),
        file_size=document.size,
        color=document_colors(document.type),
    )


def prescription_response(prescription: models.MedicalPrescription) -> schemas.PrescriptionResponse:
    return schemas.PrescriptionResponse(
        id=prescription.id,
        patient_id=prescription.patient_id,
        doctor_id=prescription.doctor_id,
        date=display_date(prescription.prescribed_on),
        diagnosis=prescription.diagnosis,
        status=prescription.status,
        medicines=prescription.medicines or [],
        notes=prescription.notes,
        created_at=prescription.created_at,
    )


def prescription_row(prescription: models.MedicalPrescription) -> schemas.PrescriptionRow:
    doctor = prescription.doctor
    return schemas.PrescriptionRow(
        id=prescription.id,
        date=display_date(prescription.prescribed_on),
        doctor_name=_name(doctor, UNKNOWN_DOCTOR),
        doctor=doctor.name if doctor else None,
        diagnosis=prescription.diagnosis,
        medicines=prescription.medicines or [],
        status=prescription.status,
    )


def history_visit(appointment: models.Appointment) -> schemas.HistoryVisit:
    fee = _doctor_fee(appointment.doctor)
    if fee is None:
        fee = PATIENT_APPOINTMENT_DEFAULTS["fee"]
    return schemas.HistoryVisit(
        title=appointment.visit_type,
        date=f"{display_date(appointment.scheduled_at)} • {display_time(appointment.scheduled_at)}",
        status=HISTORY_VISIT_STATUS,
        fee=f"₹{fee:.10g}",
    )


def history_document(document: models.Document) -> schemas.HistoryDocument:
    return schemas.HistoryDocument(
        name=document.name,
        size=document.size or HISTORY_DOCUMENT_DEFAULTS["size"],
        date=display_date(document.issued_on),
        type=document.type,
        ext=document.extension or HISTORY_DOCUMENT_DEFAULTS["ext"],
        color=document.color or HISTORY_DOCUMENT_DEFAULTS["color"],
    )


def patient_history(
    vitals: List[models.Vital],
    visits: List[models.Appointment],
    documents: List[models.Document]
) -> schemas.PatientHistory:
    return schemas.PatientHistory(
        summary=HISTORY_SUMMARY,
        vitals=[schemas.VitalResponse.model_validate(v) for v in vitals],
        visits=[history_visit(v) for v in visits],
        documents=[history_document(d) for d in documents],
    )

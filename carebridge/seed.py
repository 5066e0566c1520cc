# carebridge/seed.py
# Resets the store and loads a small demo clinic. Run with: python -m carebridge.seed
from datetime import date, datetime
from typing import Dict

from sqlalchemy.orm import Session

from . import crud, models, schemas
from .core.logging import setup_logging
from .database import SessionLocal, create_tables, drop_tables

DOCTOR = {
    "user": {
        "name": "Dr. Amit Verma",
        "email": "amit.verma@zenith.com",
        "phone": "+91 98765 43210",
        "gender": "Male",
        "age": 42,
        "address": "Verma Clinic, Vijay Nagar, Indore",
        "bio": "General physician with 14+ years of experience.",
        "image": "https://i.pinimg.com/736x/47/a4/44/47a4448f2df0046ee1f7bed28f87e551.jpg",
    },
    "profile": {
        "specialization": "General Medicine",
        "hospital": "Zenith Multi-specialty Hospital",
        "rating": 4.8,
        "reviews": 210,
        "experience": "14 yrs",
        "total_patients": 1100,
        "consultation_fee": 800,
    },
}

PATIENTS = [
    {
        "name": "Rahul Sharma", "email": "rahul.sharma@gmail.com", "phone": "+91 88888 77777",
        "gender": "Male", "age": 27, "address": "Vijay Nagar, Indore",
        "bio": "IT professional and fitness enthusiast.",
        "image": "https://i.pinimg.com/1200x/fb/a6/4b/fba64b5c2a843b3f68d5cf04e4e9913b.jpg",
    },
    {
        "name": "Neha Gupta", "email": "neha.gupta@gmail.com", "phone": "+91 99999 00000",
        "gender": "Female", "age": 31, "address": "Palasia, Indore",
        "bio": "Marketing executive, yoga lover.",
        "image": "https://i.pinimg.com/736x/24/0f/10/240f10fc470a4830af234d1fdf2ba6ed.jpg",
    },
    {
        "name": "Suresh Yadav", "email": "suresh.yadav@gmail.com", "phone": "+91 77777 66666",
        "gender": "Male", "age": 44, "address": "Bhawarkua, Indore",
        "bio": "Small business owner.",
        "image": "https://i.pinimg.com/736x/34/a7/9f/34a79ffb957216f5ab1fde3a760a903b.jpg",
    },
]

# (patient index, scheduled_at, visit type, status, mode)
APPOINTMENTS = [
    (0, datetime(2026, 2, 5, 10, 0), "General Checkup", models.AppointmentStatus.upcoming, models.AppointmentMode.in_person),
    (1, datetime(2026, 2, 2, 10, 30), "Cold & Fever", models.AppointmentStatus.today, models.AppointmentMode.in_person),
    (2, datetime(2026, 2, 2, 11, 0), "Stomach Pain", models.AppointmentStatus.today, models.AppointmentMode.in_person),
    (0, datetime(2026, 1, 20, 9, 0), "Online Consultation", models.AppointmentStatus.completed, models.AppointmentMode.online),
]

# (patient index, amount, paid_at)
PAYMENTS = [
    (0, 800, datetime(2026, 2, 2, 10, 30)),
    (1, 600, datetime(2026, 2, 2, 11, 15)),
    (2, 1000, datetime(2026, 2, 2, 12, 0)),
]

VITALS = [
    (0, {"label": "Blood Pressure", "value": "120/80", "unit": "mmHg", "status": "normal", "trend": "stable", "history": ["118/78", "120/80"]}),
    (1, {"label": "Blood Pressure", "value": "122/82", "unit": "mmHg", "status": "normal", "trend": "stable", "history": ["120/80", "122/82"]}),
    (2, {"label": "Blood Pressure", "value": "130/85", "unit": "mmHg", "status": "high", "trend": "up", "history": ["125/82", "130/85"]}),
]

DOCUMENTS = [
    (0, {"name": "Blood Test Report", "type": "Lab Report", "size": "1.8 MB", "issued_on": date(2026, 1, 18), "extension": "PDF", "color": "#EF4444"}),
    (1, {"name": "X-Ray Report", "type": "Lab Report", "size": "2.1 MB", "issued_on": date(2026, 1, 10), "extension": "PDF", "color": "#3B82F6"}),
]


def seed_demo_data(db: Session) -> Dict[str, object]:
    """Insert the demo clinic into an empty store and return the created users."""
    doctor = crud.create_user(db, models.UserRole.doctor, DOCTOR["user"], DOCTOR["profile"])
    patients = [crud.create_user(db, models.UserRole.patient, data) for data in PATIENTS]

    for idx, scheduled_at, visit_type, status, mode in APPOINTMENTS:
        crud.create_appointment(
            db, patient_id=patients[idx].id, doctor_id=doctor.id, scheduled_at=scheduled_at,
            visit_type=visit_type, status=status, mode=mode,
        )

    for idx, amount, paid_at in PAYMENTS:
        crud.create_payment(db, schemas.PaymentCreate(
            payer_id=patients[idx].id, payee_id=doctor.id, amount=amount, paid_at=paid_at,
            type="Consultation", category="today",
        ))

    notifications = [
        (doctor.id, models.NotificationType.appointment, "New Appointment", "Rahul Sharma booked an appointment.", "1 hour ago", True),
        (doctor.id, models.NotificationType.patient, "Patient Checked In", "Neha Gupta has arrived for consultation.", "10 mins ago", True),
        (patients[0].id, models.NotificationType.appointment, "Appointment Confirmed", "Your appointment with Dr. Amit Verma is confirmed.", "2 hours ago", False),
    ]
    for user_id, type_, title, message, time_label, unread in notifications:
        notification = crud.create_notification(db, schemas.NotificationCreate(
            user_id=user_id, type=type_, title=title, message=message, time_label=time_label
        ))
        if not unread:
            crud.set_notification_unread(db, notification, False)

    for idx, fields in VITALS:
        crud.create_vital(db, patient_id=patients[idx].id, **fields)

    for idx, fields in DOCUMENTS:
        crud.create_document(db, patient_id=patients[idx].id, **fields)

    crud.create_prescription(
        db, patient_id=patients[0].id, doctor_id=doctor.id, prescribed_on=date(2026, 2, 2),
        diagnosis="Viral Fever", status=models.PrescriptionStatus.active,
        medicines=[{"name": "Paracetamol 500mg", "type": "Tablet", "dosage": "1-0-1", "timing": "After meals", "duration": "5 days"}],
        notes="Drink plenty of fluids and rest.",
    )
    return {"doctor": doctor, "patients": patients}


def main():
    logger = setup_logging()
    drop_tables()
    create_tables()
    db = SessionLocal()
    try:
        created = seed_demo_data(db)
        logger.info("seed.complete", doctor_id=created["doctor"].id, patients=len(created["patients"]))
    finally:
        db.close()


if __name__ == "__main__":
    main()

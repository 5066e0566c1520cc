# carebridge/models.py
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text,
    Enum as SQLAlchemyEnum, Boolean, JSON, Float, Index, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .database import Base
import enum


class UserRole(str, enum.Enum):
    doctor = "doctor"
    patient = "patient"


class AppointmentStatus(str, enum.Enum):
    upcoming = "upcoming"
    today = "today"
    completed = "completed"
    cancelled = "cancelled"


class AppointmentMode(str, enum.Enum):
    in_person = "in-person"
    online = "online"


class PaymentMode(str, enum.Enum):
    upi = "UPI"
    cash = "Cash"
    card = "Card"


class PaymentStatus(str, enum.Enum):
    completed = "completed"
    pending = "pending"
    failed = "failed"


class NotificationType(str, enum.Enum):
    appointment = "appointment"
    patient = "patient"
    message = "message"
    alert = "alert"


class PrescriptionStatus(str, enum.Enum):
    active = "active"
    completed = "completed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# ==================== Accounts ====================

class User(Base):
    """Identity shared by both roles. Role-specific data lives in exactly one profile row."""
    __tablename__ = "users"
    __table_args__ = (
        Index('idx_users_role', 'role'),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(SQLAlchemyEnum(UserRole, name='user_role'), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(30), nullable=True)
    gender = Column(String(20), nullable=True)
    age = Column(Integer, nullable=True)
    address = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    doctor_profile = relationship("DoctorProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    patient_profile = relationship("PatientProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def profile(self):
        return self.doctor_profile if self.role == UserRole.doctor else self.patient_profile


class DoctorProfile(Base):
    """Doctor-only attributes (One-to-one with User)."""
    __tablename__ = "doctor_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    specialization = Column(String(255), nullable=True)
    hospital = Column(String(255), nullable=True)
    experience = Column(String(50), nullable=True)  # "14 yrs"
    qualification = Column(String(255), nullable=True)
    registration_number = Column(String(100), nullable=True)
    languages = Column(JSON, nullable=True)
    consultation_fee = Column(Float, nullable=True)
    rating = Column(Float, nullable=True)
    reviews = Column(Integer, nullable=True)
    total_patients = Column(Integer, default=0)
    is_available = Column(Boolean, default=True)

    user = relationship("User", back_populates="doctor_profile")


class PatientProfile(Base):
    """Patient-only attributes (One-to-one with User)."""
    __tablename__ = "patient_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    blood_group = Column(String(10), nullable=True)
    height = Column(String(20), nullable=True)
    weight = Column(String(20), nullable=True)
    emergency_contact = Column(String(30), nullable=True)
    emergency_name = Column(String(255), nullable=True)
    condition = Column(String(255), nullable=True)

    user = relationship("User", back_populates="patient_profile")


# ==================== Scheduling ====================

class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index('idx_appointments_patient', 'patient_id'),
        Index('idx_appointments_doctor', 'doctor_id'),
        Index('idx_appointments_status', 'status'),
        Index('idx_appointments_doctor_status', 'doctor_id', 'status'),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    scheduled_at = Column(DateTime, nullable=False)
    visit_type = Column(String(255), nullable=False)  # 'Regular Checkup', 'Fever', ...
    mode = Column(
        SQLAlchemyEnum(AppointmentMode, name='appointment_mode', values_callable=_enum_values),
        default=AppointmentMode.in_person, nullable=False
    )
    status = Column(SQLAlchemyEnum(AppointmentStatus, name='appointment_status'), default=AppointmentStatus.upcoming, nullable=False)
    duration = Column(String(20), nullable=True)  # '30 min'
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])


# ==================== Ledger ====================

class Payment(Base):
    """A payment from a patient (payer) to a doctor (payee)."""
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint('amount >= 0', name='ck_payments_amount_non_negative'),
        Index('idx_payments_payer', 'payer_id'),
        Index('idx_payments_payee', 'payee_id'),
    )

    id = Column(Integer, primary_key=True, index=True)
    payer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    payee_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Float, nullable=False)
    paid_at = Column(DateTime, nullable=False)
    mode = Column(
        SQLAlchemyEnum(PaymentMode, name='payment_mode', values_callable=_enum_values),
        default=PaymentMode.upi, nullable=False
    )
    status = Column(SQLAlchemyEnum(PaymentStatus, name='payment_status'), default=PaymentStatus.completed, nullable=False)
    payment_type = Column(String(100), nullable=True)  # 'Consultation', 'Follow-up'
    category = Column(String(50), nullable=True)  # 'today', 'week', 'month'
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    payer = relationship("User", foreign_keys=[payer_id])
    payee = relationship("User", foreign_keys=[payee_id])


# ==================== Inbox ====================

class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index('idx_notifications_user_created', 'user_id', 'created_at'),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)  # Recipient
    type = Column(SQLAlchemyEnum(NotificationType, name='notification_type'), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    time_label = Column(String(50), nullable=True)  # 'Just now', display only
    unread = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")


# ==================== Health records ====================

class Vital(Base):
    __tablename__ = "vitals"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)  # 'Blood Pressure', 'Heart Rate'
    value = Column(String(50), nullable=False)
    unit = Column(String(20), nullable=False)
    status = Column(String(30), default="normal")
    trend = Column(String(30), default="stable")
    history = Column(JSON, nullable=False, default=list)  # prior values, oldest first
    recorded_at = Column(DateTime(timezone=True), server_default=func.now())


class Document(Base):
    """Metadata for a patient health record file."""
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # issuing doctor, if any
    name = Column(String(255), nullable=False)  # "Chest X-Ray"
    type = Column(String(100), nullable=False)  # "X-Ray", "Lab Report", "Prescription"
    size = Column(String(20), nullable=True)  # "2.4 MB"
    issued_on = Column(Date, nullable=True)
    file_url = Column(String(500), nullable=True)
    extension = Column(String(10), nullable=True)  # "JPG", "PDF"
    color = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    doctor = relationship("User", foreign_keys=[doctor_id])


class MedicalPrescription(Base):
    __tablename__ = "medical_prescriptions"
    __table_args__ = (
        Index('idx_prescriptions_patient', 'patient_id'),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    prescribed_on = Column(Date, nullable=False)
    diagnosis = Column(Text, nullable=True)
    status = Column(SQLAlchemyEnum(PrescriptionStatus, name='prescription_status'), default=PrescriptionStatus.active, nullable=False)
    medicines = Column(JSON, nullable=False, default=list)  # [{name, type, dosage, timing, duration}]
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    doctor = relationship("User", foreign_keys=[doctor_id])

# carebridge/schemas.py
from datetime import datetime, date as Date, time as Time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from .models import (
    UserRole, AppointmentStatus, AppointmentMode, PaymentMode, PaymentStatus,
    NotificationType, PrescriptionStatus,
)

DATE_INPUT_FORMATS = ("%b %d, %Y", "%B %d, %Y")
TIME_INPUT_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M%p")


def parse_date_input(value):
    """Accept ISO dates as well as the display form 'Feb 5, 2026'."""
    if not isinstance(value, str):
        return value
    value = value.strip()
    try:
        return Date.fromisoformat(value)
    except ValueError:
        pass
    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date '{value}'")


def parse_time_input(value):
    """Accept 24h '14:30' as well as the display form '2:30 PM'."""
    if not isinstance(value, str):
        return value
    value = value.strip().upper()
    for fmt in TIME_INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised time '{value}'")


# --- Base Schemas ---
class BaseSchema(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(BaseSchema):
    message: str


class BulkReadResponse(MessageResponse):
    updated: int


# --- Profile Schemas ---
class DoctorProfileResponse(BaseSchema):
    specialization: Optional[str] = None
    hospital: Optional[str] = None
    experience: Optional[str] = None
    qualification: Optional[str] = None
    registration_number: Optional[str] = None
    languages: Optional[List[str]] = None
    consultation_fee: Optional[float] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    total_patients: Optional[int] = 0
    is_available: Optional[bool] = True


class PatientProfileResponse(BaseSchema):
    blood_group: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_name: Optional[str] = None
    condition: Optional[str] = None


class UserResponse(BaseSchema):
    id: int
    name: str
    role: UserRole
    email: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    doctor_profile: Optional[DoctorProfileResponse] = None
    patient_profile: Optional[PatientProfileResponse] = None


class ProfileUpdateBase(BaseSchema):
    """Fields any account may edit. Unknown keys are dropped, never stored."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    gender: Optional[str] = Field(None, max_length=20)
    age: Optional[int] = Field(None, ge=0, le=150)
    address: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None


class DoctorProfileUpdate(ProfileUpdateBase):
    specialization: Optional[str] = None
    hospital: Optional[str] = None
    experience: Optional[str] = None
    is_available: Optional[bool] = None
    qualification: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, ge=0)
    registration_number: Optional[str] = None
    languages: Optional[List[str]] = None


class PatientProfileUpdate(ProfileUpdateBase):
    height: Optional[str] = None
    weight: Optional[str] = None
    blood_group: Optional[str] = Field(None, max_length=10)
    emergency_contact: Optional[str] = None
    emergency_name: Optional[str] = None
    condition: Optional[str] = None

    @field_validator("height", "weight", mode="before")
    @classmethod
    def stringify_measurement(cls, v):
        return str(v) if isinstance(v, (int, float)) else v


class PatientRegister(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    condition: Optional[str] = None
    image: Optional[str] = None
    mode: Optional[str] = None  # "Video Call", "In-Person"
    doctor_id: Optional[int] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v):
        # registration forms post "" for an untouched field
        if isinstance(v, str) and not v.strip():
            return None
        return v


# --- Appointment Schemas ---
class AppointmentSchedule(BaseSchema):
    date: Date
    time: Time

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return parse_date_input(v)

    @field_validator("time", mode="before")
    @classmethod
    def parse_time(cls, v):
        return parse_time_input(v)

    @property
    def scheduled_at(self) -> datetime:
        return datetime.combine(self.date, self.time)


class AppointmentCreate(AppointmentSchedule):
    patient_id: int
    doctor_id: int
    type: str = Field(..., min_length=1, max_length=255)
    mode: AppointmentMode = AppointmentMode.in_person
    duration: Optional[str] = None
    notes: Optional[str] = None


class AppointmentReschedule(AppointmentSchedule):
    reason: Optional[str] = None


class AppointmentResponse(BaseSchema):
    id: int
    patient_id: int
    doctor_id: int
    date: str
    time: str
    type: str
    mode: AppointmentMode
    status: AppointmentStatus
    duration: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class PatientAppointmentRow(BaseSchema):
    id: int
    doctor_name: str
    specialty: Optional[str] = None
    doctor_image: Optional[str] = None
    rating: float
    date: str
    time: str
    status: AppointmentStatus
    type: AppointmentMode
    fee: float


class DoctorAppointmentRow(BaseSchema):
    id: int
    patient_id: int
    patient_name: str
    patient_image: Optional[str] = None
    time: str
    date: str
    type: str
    mode: AppointmentMode
    duration: str
    status: AppointmentStatus
    age: int


# --- Dashboard Schemas ---
class PatientUpcomingCard(BaseSchema):
    id: int
    doctor_name: str
    specialty: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    doctor_image: Optional[str] = None
    date: str
    time: str
    type: str


class PatientDashboard(BaseSchema):
    patient_name: str
    patient_image: Optional[str] = None
    upcoming_appointment: Optional[PatientUpcomingCard] = None


class DoctorStats(BaseSchema):
    patients_waiting: int
    next_appt_time: str


class CheckedInPatient(BaseSchema):
    id: int
    name: str
    image: Optional[str] = None
    gender: Optional[str] = None
    case: str
    status: str
    wait_time: str
    age: int


class DoctorUpcomingCard(BaseSchema):
    patient_name: str
    patient_image: Optional[str] = None
    patient_gender: Optional[str] = None
    time: str
    date: str
    type: str
    age: int


class EarningsPoint(BaseSchema):
    time: str
    amount: float


class DoctorDashboard(BaseSchema):
    doctor_name: str
    doctor_image: Optional[str] = None
    stats: DoctorStats
    checked_in_patients: List[CheckedInPatient]
    upcoming_appointment: Optional[DoctorUpcomingCard] = None
    earnings_chart: List[EarningsPoint]


class PatientListRow(BaseSchema):
    id: int
    name: str
    age: int
    last_visit: str
    condition: str
    image: Optional[str] = None
    status: str
    category: str


# --- Payment Schemas ---
class PaymentCreate(BaseSchema):
    payer_id: int
    payee_id: int
    amount: float = Field(..., ge=0)
    paid_at: datetime
    mode: PaymentMode = PaymentMode.upi
    status: PaymentStatus = PaymentStatus.completed
    type: Optional[str] = None
    category: Optional[str] = None


class DoctorPaymentRow(BaseSchema):
    id: int
    patient_name: str
    amount: float
    date: str
    time: str
    mode: PaymentMode
    status: PaymentStatus
    type: str
    category: str


class PatientPaymentRow(BaseSchema):
    id: int
    doctor_name: str
    amount: float
    date: str
    time: str
    mode: PaymentMode
    status: PaymentStatus
    type: str


# --- Notification Schemas ---
class NotificationCreate(BaseSchema):
    user_id: int
    type: NotificationType
    title: str
    message: str
    time_label: Optional[str] = None


class NotificationResponse(BaseSchema):
    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    time_label: Optional[str] = Field(None, serialization_alias="time")
    unread: bool
    created_at: Optional[datetime] = None


# --- Vital Schemas ---
class VitalCreate(BaseSchema):
    label: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1)
    status: Optional[str] = None
    trend: Optional[str] = None
    history: Optional[List[str]] = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v):
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("history", mode="before")
    @classmethod
    def stringify_history(cls, v):
        if isinstance(v, list):
            return [str(item) if isinstance(item, (int, float)) else item for item in v]
        return v


class VitalResponse(BaseSchema):
    id: int
    patient_id: int
    label: str
    value: str
    unit: str
    status: Optional[str] = None
    trend: Optional[str] = None
    history: List[str] = []
    recorded_at: Optional[datetime] = None


# --- Document Schemas ---
class DocumentCreate(BaseSchema):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    size: Optional[str] = None
    date: Optional[Date] = None
    file_url: Optional[str] = None
    extension: Optional[str] = None
    doctor_id: Optional[int] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return parse_date_input(v)


class DocumentRow(BaseSchema):
    id: int
    title: str
    type: str
    doctor_name: str
    date: Optional[str] = None
    file_size: Optional[str] = None
    color: List[str]


# --- Prescription Schemas ---
class MedicineItem(BaseSchema):
    name: str = Field(..., min_length=1)
    type: Optional[str] = None  # 'Tablet', 'Syrup'
    dosage: Optional[str] = None  # '1-0-1'
    timing: Optional[str] = None  # 'After meals'
    duration: Optional[str] = None  # '5 days'


class PrescriptionCreate(BaseSchema):
    patient_id: int
    doctor_id: int
    diagnosis: Optional[str] = None
    medicines: List[MedicineItem] = []
    notes: Optional[str] = None


class PrescriptionResponse(BaseSchema):
    id: int
    patient_id: int
    doctor_id: int
    date: str
    diagnosis: Optional[str] = None
    status: PrescriptionStatus
    medicines: List[MedicineItem]
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class PrescriptionRow(BaseSchema):
    id: int
    date: str
    doctor_name: str
    doctor: Optional[str] = None
    diagnosis: Optional[str] = None
    medicines: List[MedicineItem]
    status: PrescriptionStatus


# --- Patient History (doctor view) ---
class HistoryVisit(BaseSchema):
    title: str
    date: str
    status: str
    fee: str


class HistoryDocument(BaseSchema):
    name: str
    size: str
    date: Optional[str] = None
    type: str
    ext: str
    color: str


class PatientHistory(BaseSchema):
    summary: str
    vitals: List[VitalResponse]
    visits: List[HistoryVisit]
    documents: List[HistoryDocument]

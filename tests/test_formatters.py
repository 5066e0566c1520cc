# tests/test_formatters.py
from datetime import date, datetime

from carebridge import formatters, models


def _doctor(**profile):
    doctor = models.User(id=1, name="Dr. Amit Verma", role=models.UserRole.doctor, image="doc.jpg")
    doctor.doctor_profile = models.DoctorProfile(**profile)
    return doctor


def _patient(**fields):
    fields.setdefault("name", "Rahul Sharma")
    patient = models.User(id=2, role=models.UserRole.patient, **fields)
    patient.patient_profile = models.PatientProfile()
    return patient


def _appointment(doctor=None, patient=None, **fields):
    fields.setdefault("scheduled_at", datetime(2026, 2, 5, 9, 0))
    fields.setdefault("visit_type", "General Checkup")
    fields.setdefault("mode", models.AppointmentMode.in_person)
    fields.setdefault("status", models.AppointmentStatus.upcoming)
    appointment = models.Appointment(id=10, patient_id=2, doctor_id=1, **fields)
    appointment.doctor = doctor
    appointment.patient = patient
    return appointment


def test_display_date_and_time():
    assert formatters.display_date(date(2026, 2, 5)) == "Feb 5, 2026"
    assert formatters.display_time(datetime(2026, 2, 5, 9, 0)) == "9:00 AM"
    assert formatters.display_time(datetime(2026, 2, 5, 16, 15)) == "4:15 PM"
    assert formatters.display_date(None) is None


def test_patient_row_falls_back_to_defaults():
    row = formatters.patient_appointment_row(_appointment(doctor=_doctor()))

    assert row.doctor_name == "Dr. Amit Verma"
    assert row.rating == 4.9
    assert row.fee == 800.0
    assert row.type == models.AppointmentMode.in_person
    assert (row.date, row.time) == ("Feb 5, 2026", "9:00 AM")


def test_patient_row_uses_doctor_profile():
    row = formatters.patient_appointment_row(
        _appointment(doctor=_doctor(rating=4.5, consultation_fee=650, specialization="ENT"))
    )
    assert (row.rating, row.fee, row.specialty) == (4.5, 650, "ENT")


def test_doctor_row_defaults():
    row = formatters.doctor_appointment_row(_appointment(patient=_patient()))

    assert row.duration == "30 min"
    assert row.age == 28
    assert row.patient_name == "Rahul Sharma"


def test_doctor_dashboard_without_upcoming():
    today = [_appointment(patient=_patient(gender="Male"), visit_type="Fever", status=models.AppointmentStatus.today)]

    dashboard = formatters.doctor_dashboard(_doctor(), today, None)

    assert dashboard.stats.patients_waiting == 1
    assert dashboard.stats.next_appt_time == "None"
    assert dashboard.upcoming_appointment is None
    checked_in = dashboard.checked_in_patients[0]
    assert (checked_in.case, checked_in.age, checked_in.wait_time) == ("Fever", 30, "10 min")
    assert len(dashboard.earnings_chart) == len(formatters.EARNINGS_CHART)


def test_patient_list_rotates_placeholders():
    patients = [_patient(name=f"P{i}") for i in range(3)]
    for i, p in enumerate(patients):
        p.id = i + 1

    rows = formatters.patient_list(patients, {1: datetime(2026, 1, 20, 9, 0)})

    assert [r.age for r in rows] == [25, 26, 27]
    assert [r.status for r in rows] == ["active", "inactive", "active"]
    assert [r.category for r in rows] == ["followup", "new", "today"]
    assert rows[0].last_visit == "Jan 20, 2026"
    assert rows[1].last_visit == "N/A"
    assert rows[0].condition == "Fever & Cold"


def test_payment_rows_name_the_other_party():
    payment = models.Payment(
        id=3, amount=800, paid_at=datetime(2026, 2, 2, 10, 30),
        mode=models.PaymentMode.upi, status=models.PaymentStatus.completed,
    )
    payment.payer = _patient()
    payment.payee = None

    assert formatters.doctor_payment_row(payment).patient_name == "Rahul Sharma"
    assert formatters.patient_payment_row(payment).doctor_name == "Unknown Doctor"
    assert formatters.doctor_payment_row(payment).category == "today"


def test_document_rows():
    document = models.Document(id=4, name="Blood Test", type="Lab Report", size="1.8 MB", issued_on=date(2026, 1, 18))
    document.doctor = None

    row = formatters.document_row(document)
    uploaded = formatters.document_row(document, uploaded=True)

    assert row.doctor_name == "Unknown Doctor"
    assert uploaded.doctor_name == "Self Uploaded"
    assert row.color == ["#EF4444", "#DB2777"]
    assert formatters.document_colors("X-Ray") == ["#3B82F6", "#9333EA"]


def test_history_visit_and_document():
    visit = formatters.history_visit(_appointment(doctor=_doctor(consultation_fee=650)))
    assert visit.date == "Feb 5, 2026 • 9:00 AM"
    assert visit.fee == "₹650"
    assert visit.status == "Healthy"

    document = models.Document(name="Report", type="Lab Report", issued_on=date(2026, 1, 10))
    assert formatters.history_document(document).size == "1MB"
    assert formatters.history_document(document).color == "#3B82F6"


def test_history_visit_large_fee_stays_plain():
    visit = formatters.history_visit(_appointment(doctor=_doctor(consultation_fee=1500000)))
    assert visit.fee == "₹1500000"

    visit = formatters.history_visit(_appointment(doctor=_doctor(consultation_fee=650.5)))
    assert visit.fee == "₹650.5"

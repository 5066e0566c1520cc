# tests/test_notification_service.py
import pytest

from carebridge import crud, models
from carebridge.services import notification_service


def _notify(db, user, title="Reminder"):
    return notification_service.notify(
        db, user_id=user.id, type=models.NotificationType.alert, title=title, message="Take your medicine."
    )


def test_notify_defaults_to_unread_just_now(db, patient):
    notification = _notify(db, patient)

    assert notification.unread is True
    assert notification.time_label == notification_service.JUST_NOW


def test_list_for_user_is_newest_first_and_scoped(db, patient, other_patient):
    first = _notify(db, patient, "First")
    second = _notify(db, patient, "Second")
    _notify(db, other_patient, "Not mine")

    listed = notification_service.list_for_user(db, patient.id)

    assert [n.id for n in listed] == [second.id, first.id]


def test_mark_read_is_idempotent(db, patient):
    notification = _notify(db, patient)

    notification_service.mark_read(db, notification.id)
    again = notification_service.mark_read(db, notification.id)

    assert again.unread is False


def test_mark_read_unknown(db):
    with pytest.raises(crud.NotFoundError, match="Notification not found"):
        notification_service.mark_read(db, 404)


def test_delete_removes_only_that_notification(db, patient):
    keep = _notify(db, patient, "Keep")
    drop = _notify(db, patient, "Drop")

    notification_service.delete(db, drop.id)

    assert [n.id for n in notification_service.list_for_user(db, patient.id)] == [keep.id]
    with pytest.raises(crud.NotFoundError):
        notification_service.delete(db, drop.id)


def test_mark_all_read_counts_every_owned_row_and_repeats_cleanly(db, patient, other_patient):
    _notify(db, patient)
    already_read = _notify(db, patient)
    notification_service.mark_read(db, already_read.id)
    untouched = _notify(db, other_patient)

    assert notification_service.mark_all_read(db, patient.id) == 2
    assert notification_service.mark_all_read(db, patient.id) == 2

    db.expire_all()
    assert all(not n.unread for n in notification_service.list_for_user(db, patient.id))
    assert crud.get_notification(db, untouched.id).unread is True


def test_mark_all_read_with_empty_inbox(db, patient):
    assert notification_service.mark_all_read(db, patient.id) == 0

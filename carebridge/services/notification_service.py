# carebridge/services/notification_service.py
from typing import List

import structlog
from sqlalchemy.orm import Session

from .. import crud, models, schemas

logger = structlog.get_logger(__name__)

JUST_NOW = "Just now"


def notify(
    db: Session,
    user_id: int,
    type: models.NotificationType,
    title: str,
    message: str,
    time_label: str = JUST_NOW
) -> models.Notification:
    """Drop an unread notification into the recipient's inbox."""
    notification = crud.create_notification(db, schemas.NotificationCreate(
        user_id=user_id, type=type, title=title, message=message, time_label=time_label
    ))
    logger.info("notification.created", notification_id=notification.id, user_id=user_id, type=type.value)
    return notification


def list_for_user(db: Session, user_id: int) -> List[models.Notification]:
    return crud.get_notifications_for_user(db, user_id)


def _get_or_404(db: Session, notification_id: int) -> models.Notification:
    notification = crud.get_notification(db, notification_id)
    if notification is None:
        raise crud.NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, notification_id: int) -> models.Notification:
    # Marking an already-read notification is a no-op success
    notification = _get_or_404(db, notification_id)
    return crud.set_notification_unread(db, notification, False)


def delete(db: Session, notification_id: int) -> None:
    notification = _get_or_404(db, notification_id)
    crud.delete_notification(db, notification)
    logger.info("notification.deleted", notification_id=notification_id)


def mark_all_read(db: Session, user_id: int) -> int:
    """Clear the unread flag on every notification the user owns, read or not."""
    updated = crud.mark_all_notifications_read(db, user_id)
    logger.info("notification.read_all", user_id=user_id, updated=updated)
    return updated

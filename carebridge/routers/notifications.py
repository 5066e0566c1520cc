# carebridge/routers/notifications.py
# Mounted once under /api/patient and once under /api/doctor; behaviour is identical for both roles.
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from .. import schemas
from ..database import get_db
from ..services import notification_service

router = APIRouter(
    prefix="/notifications",
    responses={404: {"description": "Not found"}},
)


@router.get("/{user_id}", response_model=List[schemas.NotificationResponse])
def read_notifications(user_id: int, db: Session = Depends(get_db)):
    """Recipient's inbox, newest first."""
    return notification_service.list_for_user(db, user_id)


@router.put("/{notification_id}/read", response_model=schemas.NotificationResponse)
def mark_notification_read(notification_id: int, db: Session = Depends(get_db)):
    return notification_service.mark_read(db, notification_id)


@router.delete("/{notification_id}", response_model=schemas.MessageResponse)
def delete_notification(notification_id: int, db: Session = Depends(get_db)):
    notification_service.delete(db, notification_id)
    return {"message": "Notification deleted"}


@router.put("/user/{user_id}/read-all", response_model=schemas.BulkReadResponse)
def mark_all_notifications_read(user_id: int, db: Session = Depends(get_db)):
    updated = notification_service.mark_all_read(db, user_id)
    return {"message": "All notifications marked as read", "updated": updated}

# carebridge/services/profile_service.py
from typing import Any, Dict, Union

import structlog
from sqlalchemy.orm import Session

from .. import crud, models, schemas

logger = structlog.get_logger(__name__)

PROFILE_UPDATE_SCHEMAS = {
    models.UserRole.doctor: schemas.DoctorProfileUpdate,
    models.UserRole.patient: schemas.PatientProfileUpdate,
}

SHARED_FIELDS = frozenset(schemas.ProfileUpdateBase.model_fields)
ROLE_FIELDS = {
    role: frozenset(schema.model_fields) - SHARED_FIELDS
    for role, schema in PROFILE_UPDATE_SCHEMAS.items()
}


def get_profile(db: Session, user_id: int, role: models.UserRole) -> models.User:
    return crud.resolve_user(db, user_id, role)


def update_profile(
    db: Session,
    user_id: int,
    role: models.UserRole,
    payload: Union[schemas.ProfileUpdateBase, Dict[str, Any]]
) -> models.User:
    """Partial update restricted to the role's allow-list; everything else is dropped."""
    user = crud.resolve_user(db, user_id, role)
    schema = PROFILE_UPDATE_SCHEMAS[role]
    if not isinstance(payload, schema):
        data = payload if isinstance(payload, dict) else payload.model_dump(exclude_unset=True)
        payload = schema.model_validate(data)

    changes = payload.model_dump(exclude_unset=True)
    user_updates = {k: v for k, v in changes.items() if k in SHARED_FIELDS}
    profile_updates = {k: v for k, v in changes.items() if k in ROLE_FIELDS[role]}

    updated = crud.update_user(db, user, user_updates, profile_updates)
    logger.info(
        "profile.updated",
        user_id=user_id,
        role=role.value,
        fields=sorted(user_updates) + sorted(profile_updates),
    )
    return updated

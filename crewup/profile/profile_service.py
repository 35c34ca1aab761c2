from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crewup.models.profile import Profile
from crewup.project.access import Actor
from crewup.project.errors import AuthRequired, NotFound, ServiceResult
from crewup.project.store_guard import store_errors
from crewup.schemas.profile_schema import ProfileUpdate

logger = logging.getLogger("crewup.profile")


def default_display_name(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.split("@", 1)[0] or None


def normalize_skills(skills: Optional[str]) -> Optional[str]:
    # "python ,  sql,," -> "python, sql"
    if skills is None:
        return None
    parts = [s.strip() for s in skills.split(",")]
    return ", ".join(p for p in parts if p) or None


def get_or_create_profile(db: Session, actor: Optional[Actor]) -> ServiceResult:
    """The actor's profile, created on first visit with a name taken from the email."""
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to see your profile."))

    profile = db.get(Profile, actor.id)
    if profile is not None:
        return ServiceResult.success(profile)

    with store_errors(db, "create_profile", user_id=actor.id):
        profile = Profile(id=actor.id, display_name=default_display_name(actor.email))
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            # created by a parallel request
            db.rollback()
            existing = db.get(Profile, actor.id)
            if existing is None:
                raise
            return ServiceResult.success(existing)
        db.refresh(profile)

    logger.info("profile_created", extra={"user_id": actor.id})
    return ServiceResult.success(profile)


def update_profile(db: Session, actor: Optional[Actor], patch: ProfileUpdate) -> ServiceResult:
    result = get_or_create_profile(db, actor)
    if not result.ok:
        return result
    profile = result.value

    changes = patch.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field == "skills":
            value = normalize_skills(value)
        elif value is not None:
            value = value.strip() or None
        changes[field] = value

    with store_errors(db, "update_profile", user_id=actor.id):
        for field, value in changes.items():
            setattr(profile, field, value)
        db.commit()
        db.refresh(profile)

    logger.info("profile_updated", extra={"user_id": actor.id, "fields": sorted(changes)})
    return ServiceResult.success(profile, "Profile saved.")


def get_profile(db: Session, user_id: int) -> ServiceResult:
    profile = db.get(Profile, user_id)
    if profile is None:
        return ServiceResult.failure(NotFound("Profile not found."))
    return ServiceResult.success(profile)

# crewup/profile/profile_router.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crewup.database import get_db
from crewup.auth.auth_router import require_actor
from crewup.profile import profile_service
from crewup.project.access import Actor
from crewup.responses import unwrap
from crewup.schemas.profile_schema import ProfileRead, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileRead)
def get_my_profile(actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    return unwrap(profile_service.get_or_create_profile(db, actor))


@router.patch("/me", response_model=ProfileRead)
def update_my_profile(data: ProfileUpdate, actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    return unwrap(profile_service.update_profile(db, actor, data))


@router.get("/{user_id}", response_model=ProfileRead)
def get_profile(user_id: int, actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    return unwrap(profile_service.get_profile(db, user_id))

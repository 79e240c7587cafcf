"""Profile routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas import ProfileUpdateRequest, User
from ..services import Repository, SessionManager, get_current_user, get_repository, get_session_manager

router = APIRouter(prefix="/profiles", tags=["profiles"])

logger = logging.getLogger(__name__)


@router.patch("/me", response_model=User)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
    manager: SessionManager = Depends(get_session_manager),
) -> User:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name cannot be empty")
    # connections and requests always come from the stored record
    stored = repository.get_user(current_user.id) or current_user
    updated = stored.model_copy(update=changes)
    if not manager.update_profile(updated):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Updated profile for %s (%s)", current_user.id, ", ".join(sorted(changes)) or "no fields")
    return updated


@router.get("/{user_id}", response_model=User)
async def get_profile(
    user_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> User:
    user = repository.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

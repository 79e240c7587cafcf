"""Registration and email sign-in."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..constants import REGISTRATION_REQUIRED_DETAIL
from ..schemas import RegisterRequest, User
from .repository import Repository

logger = logging.getLogger(__name__)


def register_user(repository: Repository, payload: RegisterRequest) -> User:
    """Validate a registration form and persist the new user."""

    name = (payload.name or "").strip()
    if not name or payload.email is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=REGISTRATION_REQUIRED_DETAIL)

    email = str(payload.email)
    if repository.login(email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = repository.create_user(
        {
            "name": name,
            "email": email,
            "role": payload.role,
            "headline": payload.headline.strip(),
            "about": payload.about.strip() if payload.about else None,
            "location": payload.location.strip() if payload.location else None,
            "skills": payload.skills,
        }
    )
    logger.info("Registered %s user %s", user.role, user.id)
    return user


__all__ = ["register_user"]

"""
User endpoints.

Any authenticated user may read profiles; only the user
themselves may update or delete their own profile.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_api.api.deps import get_current_user
from bank_api.errors import BankingError, Forbidden
from bank_api.models import User
from bank_api.models.base import get_db
from bank_api.schemas.user import UserResponse, UserUpdate
from bank_api.services import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def _ensure_self(user_id: uuid.UUID, current_user: User) -> None:
    if user_id != current_user.id:
        raise Forbidden("users may only modify their own profile")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    return current_user


@router.get("", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return UserService.with_session(db).get_all_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return UserService.with_session(db).get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: uuid.UUID,
    request: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Partially update the authenticated user's profile."""
    _ensure_self(user_id, current_user)
    service = UserService.with_session(db)
    try:
        user = service.update_user(user_id, request)
        db.commit()
        return user
    except BankingError:
        db.rollback()
        raise


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Soft-delete the authenticated user."""
    _ensure_self(user_id, current_user)
    service = UserService.with_session(db)
    try:
        service.delete_user(user_id)
        db.commit()
    except BankingError:
        db.rollback()
        raise

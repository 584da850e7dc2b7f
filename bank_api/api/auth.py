"""
Authentication endpoints.

Registration creates a user; login exchanges credentials for
a bearer token carrying the user id.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_api.errors import BankingError
from bank_api.models.base import get_db
from bank_api.schemas.user import LoginRequest, LoginResponse, UserCreate, UserResponse
from bank_api.security import create_access_token
from bank_api.services import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=201)
def register(
    request: UserCreate,
    db: Session = Depends(get_db),
):
    """Create a new user."""
    service = UserService.with_session(db)
    try:
        user = service.create_user(request)
        db.commit()
        return user
    except BankingError:
        db.rollback()
        raise


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
):
    """Exchange email and password for a bearer token."""
    service = UserService.with_session(db)
    user = service.authenticate(request.email, request.password)
    token = create_access_token(user.id, user.email)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))

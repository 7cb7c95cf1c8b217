"""
User HTTP routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobtracker.auth import get_current_user
from jobtracker.database import get_db
from jobtracker.exceptions import DuplicateUserException
from jobtracker.models import User
from jobtracker.schemas import UserCreate, UserCreatedResponse, UserResponse
from jobtracker.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Register a user; the API key is only returned here."""
    try:
        return UserService(db).register(payload.email)
    except DuplicateUserException as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return user

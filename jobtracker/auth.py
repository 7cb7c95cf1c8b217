from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from jobtracker.constants import API_KEY_HEADER
from jobtracker.database import get_db
from jobtracker.models import User
from jobtracker.services.user_service import UserService

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def get_current_user(
    api_key: str = Security(api_key_header),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the X-API-Key header to its user"""
    user = UserService(db).authenticate(api_key)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return user

from fastapi import Depends, HTTPException, status
from fastapi_jwt import JwtAccessBearerCookie, JwtAuthorizationCredentials
from pydantic import BaseModel
from sqlmodel import Session
from typing import Optional
from manzana.db.session import engine
from manzana.core.config import settings

# Tokens are issued by the external auth provider; we only verify them
access_security = JwtAccessBearerCookie(
    secret_key=settings.SECRET_KEY,
    auto_error=False
)


class CurrentUser(BaseModel):
    id: str
    role: str = "customer"
    user_type: Optional[str] = None


def get_db():
    with Session(engine) as session:
        yield session


def _user_from_credentials(credentials: Optional[JwtAuthorizationCredentials]) -> Optional[CurrentUser]:
    if credentials is None:
        return None

    subject = credentials.subject or {}
    user_id = subject.get("id")
    if not user_id:
        return None

    return CurrentUser(
        id=str(user_id),
        role=subject.get("role") or "customer",
        user_type=subject.get("user_type"),
    )


async def get_current_user(
    credentials: JwtAuthorizationCredentials = Depends(access_security),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    user = _user_from_credentials(credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    return user


async def get_current_user_optional(
    credentials: JwtAuthorizationCredentials = Depends(access_security),
) -> CurrentUser | None:
    return _user_from_credentials(credentials)


async def admin_required(
    current_user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user

"""Auth endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobportal.api.deps import get_current_user
from jobportal.api.limiter import limiter
from jobportal.api.schemas import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserResponse
from jobportal.config import settings
from jobportal.db import Role, User, get_db
from jobportal.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()

# Admins are promoted by another admin, never self-registered
SELF_REGISTER_ROLES = (Role.JOB_SEEKER, Role.RECRUITER)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
def register(
    request: Request,
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Create an account and return a token for it."""
    if not data.email or not data.password or not data.name:
        raise HTTPException(status_code=400, detail="Email, password and name are required")

    role = data.role or Role.JOB_SEEKER.value
    if role not in SELF_REGISTER_ROLES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid role. Use one of: {', '.join(SELF_REGISTER_ROLES)}",
        )

    email = _normalize_email(data.email)
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        name=data.name.strip(),
        password_hash=hash_password(data.password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")
    db.refresh(user)

    logger.info(f"User registered: {user.id} ({user.role})")

    return AuthResponse(
        message="User registered",
        token=create_access_token(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.auth_rate_limit)
def login(
    request: Request,
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Exchange email and password for a token."""
    if not data.email or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = db.query(User).filter(User.email == _normalize_email(data.email)).first()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)):
    """Return the identity behind the bearer token."""
    return MeResponse(user=UserResponse.model_validate(user))

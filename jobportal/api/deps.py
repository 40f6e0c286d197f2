"""Authentication and authorization dependencies.

Every protected route resolves the bearer token to a User row with
``get_current_user`` and then applies a role gate (``require_role``) and,
where the resource has an owner, an ownership check (``ensure_owner``)
before touching the store.
"""

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from jobportal.db import Role, User, get_db
from jobportal.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the Authorization bearer token to the calling user."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="No token provided")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == payload["userId"]).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


def require_role(*roles: Role):
    """Build a dependency that only lets the given roles through."""

    def role_gate(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Access denied")
        return user

    return role_gate


def ensure_owner(user: User, owner_id: str, *, bypass_roles: tuple[Role, ...] = ()) -> None:
    """Raise 403 unless the user owns the resource or holds a bypass role."""
    if user.role in bypass_roles:
        return
    if owner_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized")

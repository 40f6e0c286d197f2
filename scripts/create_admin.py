"""
Create (or promote) an admin account.

Admins cannot self-register, so the first one is bootstrapped here.
Requires: DATABASE_URL configured.
Usage: python scripts/create_admin.py <email> <name> <password>
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv()

from jobportal.db import Role, User, get_db, init_db
from jobportal.utils.security import hash_password


def create_admin(email: str, name: str, password: str) -> User:
    """Create an admin user, or promote the existing account with that email."""
    init_db()
    db = next(get_db())
    try:
        email = email.strip().lower()
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.role = Role.ADMIN.value
            print(f"[OK] Promoted existing user {user.id} to ADMIN")
        else:
            user = User(email=email, name=name, password_hash=hash_password(password), role=Role.ADMIN.value)
            db.add(user)
            print(f"[OK] Created admin {email}")
        db.commit()
        db.refresh(user)
        return user
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    create_admin(*sys.argv[1:])

"""Admin endpoints: stats, user management and moderation."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobportal.api.deps import require_role
from jobportal.api.routes.jobs import with_application_counts
from jobportal.api.schemas import (
    AdminApplicationListResponse,
    AdminApplicationResponse,
    AdminUserListResponse,
    AdminUserResponse,
    JobWithCountListResponse,
    MessageResponse,
    RoleUpdate,
    RoleUpdateResponse,
    Stats,
    StatsResponse,
    UserResponse,
)
from jobportal.db import Application, Job, Role, User, get_db
from jobportal.db.cascades import delete_jobs, delete_user

logger = logging.getLogger(__name__)

# Every route in this module is admin-only
router = APIRouter(dependencies=[Depends(require_role(Role.ADMIN))])

VALID_ROLES = [r.value for r in Role]


def _count_by(db: Session, column) -> dict[str, int]:
    return dict(db.query(column, func.count()).group_by(column).all())


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """Dashboard totals."""
    by_role = _count_by(db, User.role)
    return StatsResponse(
        stats=Stats(
            total_users=db.query(User).count(),
            total_jobs=db.query(Job).count(),
            total_applications=db.query(Application).count(),
            users_by_role={role: by_role.get(role, 0) for role in VALID_ROLES},
        )
    )


@router.get("/users", response_model=AdminUserListResponse)
def list_users(db: Session = Depends(get_db)):
    """List all users with their job and application counts."""
    users = db.query(User).order_by(User.created_at.desc()).all()
    job_counts = _count_by(db, Job.recruiter_id)
    application_counts = _count_by(db, Application.user_id)
    return AdminUserListResponse(
        users=[
            AdminUserResponse(
                **UserResponse.model_validate(u).model_dump(),
                job_count=job_counts.get(u.id, 0),
                application_count=application_counts.get(u.id, 0),
            )
            for u in users
        ]
    )


@router.patch("/users/{user_id}/role", response_model=RoleUpdateResponse)
def update_user_role(user_id: str, data: RoleUpdate, db: Session = Depends(get_db)):
    """Change a user's role."""
    if data.role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.role = data.role
    db.commit()
    db.refresh(user)

    logger.info(f"User role updated: {user.id} -> {user.role}")
    return RoleUpdateResponse(message="Role updated", user=UserResponse.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def remove_user(user_id: str, db: Session = Depends(get_db)):
    """Delete a user and everything they own."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        delete_user(db, user)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User deleted: {user_id}")
    return MessageResponse(message="User deleted")


@router.get("/jobs", response_model=JobWithCountListResponse)
def list_jobs(db: Session = Depends(get_db)):
    """List every job with recruiter and application count."""
    jobs = db.query(Job).order_by(Job.created_at.desc()).all()
    return JobWithCountListResponse(jobs=with_application_counts(db, jobs))


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
def remove_job(job_id: str, db: Session = Depends(get_db)):
    """Delete any job."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        delete_jobs(db, [job_id])
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Job deleted by admin: {job_id}")
    return MessageResponse(message="Job deleted")


@router.get("/applications", response_model=AdminApplicationListResponse)
def list_applications(db: Session = Depends(get_db)):
    """List every application with applicant and job summary."""
    applications = db.query(Application).order_by(Application.created_at.desc()).all()
    return AdminApplicationListResponse(
        applications=[AdminApplicationResponse.model_validate(a) for a in applications]
    )

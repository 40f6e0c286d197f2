"""Saved job (bookmark) endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobportal.api.deps import require_role
from jobportal.api.schemas import MessageResponse, SavedJobCheckResponse, SavedJobListResponse, SavedJobResponse
from jobportal.db import Job, Role, SavedJob, User, get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_saved(db: Session, user_id: str, job_id: str) -> SavedJob | None:
    return db.query(SavedJob).filter(SavedJob.user_id == user_id, SavedJob.job_id == job_id).first()


@router.post("/{job_id}", response_model=MessageResponse)
def save_job(
    job_id: str,
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """Bookmark a job."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if _find_saved(db, user.id, job_id):
        raise HTTPException(status_code=409, detail="Job already saved")

    db.add(SavedJob(user_id=user.id, job_id=job_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Job already saved")

    logger.info(f"Job saved: {job_id} (user {user.id})")
    return MessageResponse(message="Job saved")


@router.get("", response_model=SavedJobListResponse)
def list_saved_jobs(
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """List the caller's saved jobs, most recently saved first."""
    saved = (
        db.query(SavedJob)
        .filter(SavedJob.user_id == user.id)
        .order_by(SavedJob.created_at.desc())
        .all()
    )
    return SavedJobListResponse(saved_jobs=[SavedJobResponse.model_validate(s) for s in saved])


@router.delete("/{job_id}", response_model=MessageResponse)
def remove_saved_job(
    job_id: str,
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """Remove a job from the caller's saved list."""
    saved = _find_saved(db, user.id, job_id)
    if not saved:
        raise HTTPException(status_code=404, detail="Saved job not found")

    db.delete(saved)
    db.commit()

    logger.info(f"Job removed from saved: {job_id} (user {user.id})")
    return MessageResponse(message="Job removed from saved")


@router.get("/check/{job_id}", response_model=SavedJobCheckResponse)
def check_saved_job(
    job_id: str,
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """Check if a job is in the caller's saved list."""
    return SavedJobCheckResponse(is_saved=_find_saved(db, user.id, job_id) is not None)

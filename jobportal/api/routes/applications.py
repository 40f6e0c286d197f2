"""Job application endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobportal.api.deps import ensure_owner, get_current_user, require_role
from jobportal.api.schemas import (
    ApplicationDetailResponse,
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationMessageResponse,
    ApplicationResponse,
    ApplicationWithJobResponse,
    ApplyRequest,
    MessageResponse,
    StatusUpdate,
)
from jobportal.db import Application, ApplicationStatus, Job, Role, User, get_db

logger = logging.getLogger(__name__)

router = APIRouter()

VALID_STATUSES = [s.value for s in ApplicationStatus]


def _find_application(db: Session, user_id: str, job_id: str) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.user_id == user_id, Application.job_id == job_id)
        .first()
    )


def _get_application(db: Session, application_id: str) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.post("/job/{job_id}", response_model=ApplicationMessageResponse, status_code=201)
def apply(
    job_id: str,
    data: ApplyRequest | None = None,
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """Apply to a job."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    # Fast path; the unique constraint on (user_id, job_id) is what actually guarantees it
    if _find_application(db, user.id, job_id):
        raise HTTPException(status_code=409, detail="Already applied to this job")

    application = Application(
        user_id=user.id,
        job_id=job_id,
        cover_letter=data.cover_letter if data else None,
        status=ApplicationStatus.PENDING.value,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already applied to this job")
    db.refresh(application)

    logger.info(f"Application submitted: {application.id} (user {user.id}, job {job_id})")
    return ApplicationMessageResponse(
        message="Application submitted",
        application=ApplicationResponse.model_validate(application),
    )


@router.get("/my-applications", response_model=ApplicationListResponse)
def list_my_applications(
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """List the caller's applications with their jobs."""
    applications = (
        db.query(Application)
        .filter(Application.user_id == user.id)
        .order_by(Application.created_at.desc())
        .all()
    )
    return ApplicationListResponse(
        applications=[ApplicationWithJobResponse.model_validate(a) for a in applications]
    )


@router.get("/{application_id}", response_model=ApplicationEnvelope)
def get_application(
    application_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get one application.

    Visible to the applicant, the recruiter who owns the job, and admins.
    """
    application = _get_application(db, application_id)
    if user.id not in (application.user_id, application.job.recruiter_id) and user.role != Role.ADMIN:
        raise HTTPException(status_code=403, detail="Not authorized")
    return ApplicationEnvelope(application=ApplicationDetailResponse.model_validate(application))


@router.patch("/{application_id}/status", response_model=ApplicationMessageResponse)
def update_status(
    application_id: str,
    data: StatusUpdate,
    user: User = Depends(require_role(Role.RECRUITER)),
    db: Session = Depends(get_db),
):
    """Move an application through the review workflow."""
    if data.status not in VALID_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    application = _get_application(db, application_id)
    ensure_owner(user, application.job.recruiter_id)

    application.status = data.status
    db.commit()
    db.refresh(application)

    logger.info(f"Application status updated: {application.id} -> {application.status}")
    return ApplicationMessageResponse(
        message="Status updated",
        application=ApplicationResponse.model_validate(application),
    )


@router.delete("/{application_id}", response_model=MessageResponse)
def withdraw(
    application_id: str,
    user: User = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db),
):
    """Withdraw (delete) one of the caller's applications."""
    application = _get_application(db, application_id)
    ensure_owner(user, application.user_id)

    db.delete(application)
    db.commit()

    logger.info(f"Application withdrawn: {application_id}")
    return MessageResponse(message="Application withdrawn")

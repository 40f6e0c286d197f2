"""Job posting endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobportal.api.deps import ensure_owner, require_role
from jobportal.api.schemas import (
    ApplicantListResponse,
    ApplicantResponse,
    JobEnvelope,
    JobIn,
    JobListResponse,
    JobMessageResponse,
    JobResponse,
    JobWithCountListResponse,
    JobWithCountResponse,
    MessageResponse,
)
from jobportal.db import Application, Job, JobCategory, JobType, Role, User, get_db
from jobportal.db.cascades import delete_jobs

logger = logging.getLogger(__name__)

router = APIRouter()

JOB_CATEGORIES = [c.value for c in JobCategory]
INVALID_CATEGORY_MESSAGE = f"Invalid role. Use one of: {', '.join(JOB_CATEGORIES)}"


def normalize_category(value: str | None) -> str | None:
    """Trim and lowercase a category, returning None unless it is a known one."""
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    if value not in JOB_CATEGORIES:
        return None
    return value


def _requested_category(data: JobIn) -> str | None:
    # "role" is accepted as an alias of "category" and wins when both are sent
    return data.role if data.role is not None else data.category


def with_application_counts(db: Session, jobs: list[Job]) -> list[JobWithCountResponse]:
    """Attach the number of applications to each job."""
    job_ids = [job.id for job in jobs]
    counts = {}
    if job_ids:
        counts = dict(
            db.query(Application.job_id, func.count(Application.id))
            .filter(Application.job_id.in_(job_ids))
            .group_by(Application.job_id)
            .all()
        )
    return [
        JobWithCountResponse(
            **JobResponse.model_validate(job).model_dump(),
            application_count=counts.get(job.id, 0),
        )
        for job in jobs
    ]


@router.get("", response_model=JobListResponse)
def list_jobs(
    role: str | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
):
    """List all jobs, newest first, optionally filtered by category."""
    requested = role if role is not None else category
    normalized = normalize_category(requested)
    if requested is not None and normalized is None:
        raise HTTPException(status_code=400, detail=INVALID_CATEGORY_MESSAGE)

    query = db.query(Job)
    if normalized:
        query = query.filter(Job.category == normalized)
    jobs = query.order_by(Job.created_at.desc()).all()
    return JobListResponse(jobs=[JobResponse.model_validate(j) for j in jobs])


@router.get("/my-jobs", response_model=JobWithCountListResponse)
def list_my_jobs(
    user: User = Depends(require_role(Role.RECRUITER)),
    db: Session = Depends(get_db),
):
    """List the calling recruiter's jobs with application counts."""
    jobs = db.query(Job).filter(Job.recruiter_id == user.id).order_by(Job.created_at.desc()).all()
    return JobWithCountListResponse(jobs=with_application_counts(db, jobs))


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """Get a single job."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobEnvelope(job=JobResponse.model_validate(job))


@router.post("", response_model=JobMessageResponse, status_code=201)
def create_job(
    data: JobIn,
    user: User = Depends(require_role(Role.RECRUITER)),
    db: Session = Depends(get_db),
):
    """Create a job posting."""
    if not data.title or not data.company or not data.location or not data.salary or not data.description:
        raise HTTPException(status_code=400, detail="Required fields missing")

    requested = _requested_category(data)
    category = normalize_category(requested)
    if requested is not None and category is None:
        raise HTTPException(status_code=400, detail=INVALID_CATEGORY_MESSAGE)

    job = Job(
        recruiter_id=user.id,
        title=data.title,
        company=data.company,
        location=data.location,
        category=category or JobCategory.FULLSTACK.value,
        type=(data.type or JobType.FULL_TIME).value,
        salary=data.salary,
        description=data.description,
        requirements=data.requirements,
    )
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(f"Job created: {job.id} ({job.title})")
    return JobMessageResponse(message="Job created", job=JobResponse.model_validate(job))


@router.put("/{job_id}", response_model=JobMessageResponse)
def update_job(
    job_id: str,
    data: JobIn,
    user: User = Depends(require_role(Role.RECRUITER)),
    db: Session = Depends(get_db),
):
    """Update a job owned by the calling recruiter."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_owner(user, job.recruiter_id)

    changes = data.model_dump(exclude_unset=True, mode="json")
    role_alias = changes.pop("role", None)
    category_field = changes.pop("category", None)
    raw_category = role_alias if role_alias is not None else category_field
    if raw_category is not None:
        category = normalize_category(raw_category)
        if category is None:
            raise HTTPException(status_code=400, detail=INVALID_CATEGORY_MESSAGE)
        changes["category"] = category

    for field, value in changes.items():
        # Required columns keep their value when sent as null
        if value is None and field != "requirements":
            continue
        setattr(job, field, value)

    db.commit()
    db.refresh(job)

    logger.info(f"Job updated: {job.id} ({job.title})")
    return JobMessageResponse(message="Job updated", job=JobResponse.model_validate(job))


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: str,
    user: User = Depends(require_role(Role.RECRUITER, Role.ADMIN)),
    db: Session = Depends(get_db),
):
    """Delete a job. Recruiters may delete their own jobs, admins any job."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_owner(user, job.recruiter_id, bypass_roles=(Role.ADMIN,))

    try:
        delete_jobs(db, [job_id])
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Job deleted: {job_id}")
    return MessageResponse(message="Job deleted")


@router.get("/{job_id}/applicants", response_model=ApplicantListResponse)
def list_applicants(
    job_id: str,
    user: User = Depends(require_role(Role.RECRUITER)),
    db: Session = Depends(get_db),
):
    """List applications to a job owned by the calling recruiter."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_owner(user, job.recruiter_id)

    applications = (
        db.query(Application)
        .filter(Application.job_id == job_id)
        .order_by(Application.created_at.desc())
        .all()
    )
    return ApplicantListResponse(applicants=[ApplicantResponse.model_validate(a) for a in applications])

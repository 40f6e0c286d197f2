"""Profile endpoints: basic info, experience, education, resume and avatar."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobportal.api.deps import ensure_owner, get_current_user
from jobportal.api.schemas import (
    AvatarUploadResponse,
    EducationEnvelope,
    EducationIn,
    EducationResponse,
    ExperienceEnvelope,
    ExperienceIn,
    ExperienceResponse,
    MessageResponse,
    ProfileAboutUpdate,
    ProfileBasicUpdate,
    ProfileEnvelope,
    ProfileResponse,
    ProfileSkillsUpdate,
    ProfileUpdateResponse,
    ResumeInfo,
    ResumeUploadResponse,
)
from jobportal.config import settings
from jobportal.db import Education, Experience, Profile, User, get_db
from jobportal.utils.uploads import UploadRejected, delete_upload, save_upload

logger = logging.getLogger(__name__)

router = APIRouter()

# Columns that may be changed on update but never cleared
_EXPERIENCE_REQUIRED = ("title", "company", "start_date")
_EDUCATION_REQUIRED = ("institution", "degree", "field_of_study", "start_year")


def _find_profile(db: Session, user_id: str) -> Profile | None:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def _get_or_create_profile(db: Session, user: User) -> Profile:
    """Return the user's profile, creating an empty one on first use."""
    profile = _find_profile(db, user.id)
    if profile:
        return profile

    profile = Profile(user_id=user.id, name=user.name, skills=[])
    db.add(profile)
    try:
        db.commit()
    except IntegrityError:
        # Another request created it first
        db.rollback()
        return _find_profile(db, user.id)
    db.refresh(profile)
    logger.info(f"Profile created for user {user.id}")
    return profile


def _apply_changes(target, changes: dict, required: tuple[str, ...]) -> None:
    for field, value in changes.items():
        if value is None and field in required:
            continue
        setattr(target, field, value)


def _upsert_profile(db: Session, user: User, changes: dict) -> Profile:
    profile = _get_or_create_profile(db, user)
    for field, value in changes.items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


# ==================== PROFILE ====================


@router.get("", response_model=ProfileEnvelope)
def get_my_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the caller's profile, creating it if needed."""
    profile = _get_or_create_profile(db, user)
    return ProfileEnvelope(profile=ProfileResponse.model_validate(profile))


@router.get("/{user_id}", response_model=ProfileEnvelope)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    """Get any user's profile (public)."""
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileEnvelope(profile=ProfileResponse.model_validate(profile))


@router.put("/basic", response_model=ProfileUpdateResponse)
def update_basic(
    data: ProfileBasicUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update name, headline, location and phone."""
    profile = _upsert_profile(db, user, data.model_dump(exclude_unset=True))
    logger.info(f"Profile basic info updated: {user.id}")
    return ProfileUpdateResponse(message="Profile updated", profile=ProfileResponse.model_validate(profile))


@router.put("/about", response_model=ProfileUpdateResponse)
def update_about(
    data: ProfileAboutUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the about section."""
    profile = _upsert_profile(db, user, data.model_dump(exclude_unset=True))
    logger.info(f"Profile about updated: {user.id}")
    return ProfileUpdateResponse(message="About section updated", profile=ProfileResponse.model_validate(profile))


@router.put("/skills", response_model=ProfileUpdateResponse)
def update_skills(
    data: ProfileSkillsUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the skills list."""
    if not isinstance(data.skills, list):
        raise HTTPException(status_code=400, detail="Skills must be an array")
    if not all(isinstance(s, str) for s in data.skills):
        raise HTTPException(status_code=400, detail="Skills must be an array of strings")

    profile = _upsert_profile(db, user, {"skills": list(data.skills)})
    logger.info(f"Profile skills updated: {user.id} ({len(data.skills)} skills)")
    return ProfileUpdateResponse(message="Skills updated", profile=ProfileResponse.model_validate(profile))


# ==================== EXPERIENCE ====================


def _get_owned_experience(db: Session, experience_id: str, user: User) -> Experience:
    experience = db.query(Experience).filter(Experience.id == experience_id).first()
    if not experience:
        raise HTTPException(status_code=404, detail="Experience not found")
    ensure_owner(user, experience.profile.user_id)
    return experience


@router.post("/experience", response_model=ExperienceEnvelope, status_code=201)
def add_experience(
    data: ExperienceIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a work experience entry."""
    if not data.title or not data.company or not data.start_date:
        raise HTTPException(status_code=400, detail="Title, company, and start date are required")

    profile = _get_or_create_profile(db, user)
    current = bool(data.current)
    experience = Experience(
        profile_id=profile.id,
        title=data.title,
        company=data.company,
        location=data.location,
        start_date=data.start_date,
        end_date=None if current else data.end_date,
        current=current,
        description=data.description,
    )
    db.add(experience)
    db.commit()
    db.refresh(experience)

    logger.info(f"Experience added: {experience.id} ({experience.title})")
    return ExperienceEnvelope(message="Experience added", experience=ExperienceResponse.model_validate(experience))


@router.put("/experience/{experience_id}", response_model=ExperienceEnvelope)
def update_experience(
    experience_id: str,
    data: ExperienceIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update one of the caller's experience entries."""
    experience = _get_owned_experience(db, experience_id, user)

    changes = data.model_dump(exclude_unset=True)
    if "current" in changes:
        changes["current"] = bool(changes["current"])
    _apply_changes(experience, changes, _EXPERIENCE_REQUIRED)
    if experience.current:
        experience.end_date = None

    db.commit()
    db.refresh(experience)

    logger.info(f"Experience updated: {experience.id}")
    return ExperienceEnvelope(message="Experience updated", experience=ExperienceResponse.model_validate(experience))


@router.delete("/experience/{experience_id}", response_model=MessageResponse)
def delete_experience(
    experience_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's experience entries."""
    experience = _get_owned_experience(db, experience_id, user)
    db.delete(experience)
    db.commit()

    logger.info(f"Experience deleted: {experience_id}")
    return MessageResponse(message="Experience deleted")


# ==================== EDUCATION ====================


def _get_owned_education(db: Session, education_id: str, user: User) -> Education:
    education = db.query(Education).filter(Education.id == education_id).first()
    if not education:
        raise HTTPException(status_code=404, detail="Education not found")
    ensure_owner(user, education.profile.user_id)
    return education


@router.post("/education", response_model=EducationEnvelope, status_code=201)
def add_education(
    data: EducationIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an education entry."""
    if not data.institution or not data.degree or not data.field_of_study or not data.start_year:
        raise HTTPException(
            status_code=400,
            detail="Institution, degree, field of study, and start year are required",
        )

    profile = _get_or_create_profile(db, user)
    education = Education(
        profile_id=profile.id,
        institution=data.institution,
        degree=data.degree,
        field_of_study=data.field_of_study,
        start_year=data.start_year,
        end_year=data.end_year,
        grade=data.grade,
    )
    db.add(education)
    db.commit()
    db.refresh(education)

    logger.info(f"Education added: {education.id} ({education.institution})")
    return EducationEnvelope(message="Education added", education=EducationResponse.model_validate(education))


@router.put("/education/{education_id}", response_model=EducationEnvelope)
def update_education(
    education_id: str,
    data: EducationIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update one of the caller's education entries."""
    education = _get_owned_education(db, education_id, user)
    _apply_changes(education, data.model_dump(exclude_unset=True), _EDUCATION_REQUIRED)
    db.commit()
    db.refresh(education)

    logger.info(f"Education updated: {education.id}")
    return EducationEnvelope(message="Education updated", education=EducationResponse.model_validate(education))


@router.delete("/education/{education_id}", response_model=MessageResponse)
def delete_education(
    education_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's education entries."""
    education = _get_owned_education(db, education_id, user)
    db.delete(education)
    db.commit()

    logger.info(f"Education deleted: {education_id}")
    return MessageResponse(message="Education deleted")


# ==================== RESUME ====================


async def _store_upload(kind: str, file: UploadFile | None, user: User) -> tuple[str, str]:
    """Validate and write an upload, returning (url, original filename)."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    # One byte past the limit is enough to reject an oversized file
    content = await file.read(settings.max_upload_size + 1)
    try:
        url = save_upload(kind, user.id, file.filename, content)
    except UploadRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    return url, file.filename


@router.post("/resume", response_model=ResumeUploadResponse)
async def upload_resume(
    resume: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Upload a resume (PDF, DOC or DOCX)."""
    url, original_name = await _store_upload("resume", resume, user)

    profile = _get_or_create_profile(db, user)
    profile.resume = url
    profile.resume_name = original_name
    profile.resume_updated_at = datetime.now(UTC)
    db.commit()
    db.refresh(profile)

    logger.info(f"Resume uploaded: {user.id} ({original_name})")
    return ResumeUploadResponse(
        message="Resume uploaded",
        resume=ResumeInfo(url=url, name=original_name, updated_at=profile.resume_updated_at),
    )


@router.delete("/resume", response_model=MessageResponse)
def delete_resume(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete the caller's resume file and reference."""
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if not profile or not profile.resume:
        raise HTTPException(status_code=404, detail="No resume found")

    delete_upload(profile.resume)
    profile.resume = None
    profile.resume_name = None
    profile.resume_updated_at = None
    db.commit()

    logger.info(f"Resume deleted: {user.id}")
    return MessageResponse(message="Resume deleted")


# ==================== AVATAR ====================


@router.post("/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    avatar: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Upload an avatar image, replacing any previous one."""
    url, _ = await _store_upload("avatar", avatar, user)

    profile = _get_or_create_profile(db, user)
    if profile.avatar:
        delete_upload(profile.avatar)
    profile.avatar = url
    db.commit()

    logger.info(f"Avatar uploaded: {user.id}")
    return AvatarUploadResponse(message="Avatar uploaded", avatar=url)


@router.delete("/avatar", response_model=MessageResponse)
def delete_avatar(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete the caller's avatar file and reference."""
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if not profile or not profile.avatar:
        raise HTTPException(status_code=404, detail="No avatar found")

    delete_upload(profile.avatar)
    profile.avatar = None
    db.commit()

    logger.info(f"Avatar deleted: {user.id}")
    return MessageResponse(message="Avatar deleted")

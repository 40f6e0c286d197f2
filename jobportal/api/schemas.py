"""API request/response schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from jobportal.db import JobType


# Shared
class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


# Auth schemas
class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    role: str | None = Field(default=None, description="JOB_SEEKER or RECRUITER")


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse


# Profile schemas
class ProfileBasicUpdate(BaseModel):
    name: str | None = None
    headline: str | None = None
    location: str | None = None
    phone: str | None = None


class ProfileAboutUpdate(BaseModel):
    about: str | None = None


class ProfileSkillsUpdate(BaseModel):
    # Shape is checked by the handler so a non-list gets a specific message
    skills: Any = None


class ExperienceIn(BaseModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current: bool | None = None
    description: str | None = None


class ExperienceResponse(BaseModel):
    id: str
    profile_id: str
    title: str
    company: str
    location: str | None
    start_date: date
    end_date: date | None
    current: bool
    description: str | None

    class Config:
        from_attributes = True


class EducationIn(BaseModel):
    institution: str | None = None
    degree: str | None = None
    field_of_study: str | None = None
    start_year: int | None = None
    end_year: int | None = None
    grade: str | None = None


class EducationResponse(BaseModel):
    id: str
    profile_id: str
    institution: str
    degree: str
    field_of_study: str
    start_year: int
    end_year: int | None
    grade: str | None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    name: str | None
    headline: str | None
    location: str | None
    phone: str | None
    about: str | None
    skills: list[str]
    resume: str | None
    resume_name: str | None
    resume_updated_at: datetime | None
    avatar: str | None
    experiences: list[ExperienceResponse]
    education: list[EducationResponse]
    user: UserSummary
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse


class ProfileUpdateResponse(BaseModel):
    message: str
    profile: ProfileResponse


class ExperienceEnvelope(BaseModel):
    message: str
    experience: ExperienceResponse


class EducationEnvelope(BaseModel):
    message: str
    education: EducationResponse


class ResumeInfo(BaseModel):
    url: str
    name: str
    updated_at: datetime


class ResumeUploadResponse(BaseModel):
    message: str
    resume: ResumeInfo


class AvatarUploadResponse(BaseModel):
    message: str
    avatar: str


# Job schemas
class JobIn(BaseModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    category: str | None = Field(default=None, description="frontend/backend/fullstack")
    role: str | None = Field(default=None, description="Alias of category")
    type: JobType | None = None
    salary: str | None = None
    description: str | None = None
    requirements: str | None = None


class JobResponse(BaseModel):
    id: str
    recruiter_id: str
    title: str
    company: str
    location: str
    category: str
    type: str
    salary: str
    description: str
    requirements: str | None
    created_at: datetime
    updated_at: datetime
    recruiter: UserSummary | None = None

    class Config:
        from_attributes = True


class JobWithCountResponse(JobResponse):
    application_count: int = 0


class JobListResponse(BaseModel):
    jobs: list[JobResponse]


class JobWithCountListResponse(BaseModel):
    jobs: list[JobWithCountResponse]


class JobEnvelope(BaseModel):
    job: JobResponse


class JobMessageResponse(BaseModel):
    message: str
    job: JobResponse


class JobBrief(BaseModel):
    id: str
    title: str
    company: str

    class Config:
        from_attributes = True


# Application schemas
class ApplyRequest(BaseModel):
    cover_letter: str | None = None


class StatusUpdate(BaseModel):
    status: str | None = Field(default=None, description="PENDING/REVIEWED/ACCEPTED/REJECTED")


class ApplicationResponse(BaseModel):
    id: str
    user_id: str
    job_id: str
    cover_letter: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ApplicantResponse(ApplicationResponse):
    user: UserSummary


class ApplicationWithJobResponse(ApplicationResponse):
    job: JobResponse


class ApplicationDetailResponse(ApplicationResponse):
    job: JobResponse
    user: UserSummary


class AdminApplicationResponse(ApplicationResponse):
    user: UserSummary
    job: JobBrief


class ApplicationMessageResponse(BaseModel):
    message: str
    application: ApplicationResponse


class ApplicationEnvelope(BaseModel):
    application: ApplicationDetailResponse


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationWithJobResponse]


class ApplicantListResponse(BaseModel):
    applicants: list[ApplicantResponse]


class AdminApplicationListResponse(BaseModel):
    applications: list[AdminApplicationResponse]


# Saved job schemas
class SavedJobResponse(BaseModel):
    id: str
    job_id: str
    created_at: datetime
    job: JobResponse

    class Config:
        from_attributes = True


class SavedJobListResponse(BaseModel):
    saved_jobs: list[SavedJobResponse]


class SavedJobCheckResponse(BaseModel):
    is_saved: bool


# Admin schemas
class RoleUpdate(BaseModel):
    role: str | None = Field(default=None, description="JOB_SEEKER/RECRUITER/ADMIN")


class AdminUserResponse(UserResponse):
    job_count: int = 0
    application_count: int = 0


class AdminUserListResponse(BaseModel):
    users: list[AdminUserResponse]


class RoleUpdateResponse(BaseModel):
    message: str
    user: UserResponse


class Stats(BaseModel):
    total_users: int
    total_jobs: int
    total_applications: int
    users_by_role: dict[str, int]


class StatsResponse(BaseModel):
    stats: Stats

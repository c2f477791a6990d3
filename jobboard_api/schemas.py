from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Literal, Optional, List, Union
from datetime import datetime

from .models import ApplicationStatus, JobStatus, Role


# -----------------------
# Accounts
# -----------------------
class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    phone_number: Optional[str] = None
    role: Role
    # role specific; which ones are required depends on `role`
    company_name: Optional[str] = None
    business_registration_number: Optional[str] = None
    resume_url: Optional[str] = None


class EmployerProfile(BaseModel):
    role: Literal[Role.EMPLOYER] = Role.EMPLOYER
    company_name: str = Field(..., min_length=1)
    business_registration_number: str = Field(..., min_length=1)


class EmployeeProfile(BaseModel):
    role: Literal[Role.EMPLOYEE] = Role.EMPLOYEE
    resume_url: str = Field(..., min_length=1)


Profile = Annotated[Union[EmployerProfile, EmployeeProfile], Field(discriminator="role")]


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str
    phone_number: Optional[str] = None
    role: Role
    company_name: Optional[str] = None
    business_registration_number: Optional[str] = None
    resume_url: Optional[str] = None
    created_at: datetime


class AuthResponse(BaseModel):
    token: str
    user: UserOut


class UserEnvelope(BaseModel):
    success: bool = True
    data: UserOut


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# -----------------------
# Jobs
# -----------------------
class EmployerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str
    company_name: Optional[str] = None


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    category: str
    tags: List[str] = []
    location: Optional[str] = None
    is_remote: bool = False
    deadline: datetime
    budget: Optional[float] = None
    media_urls: List[str] = []
    employer_id: int
    employer: Optional[EmployerSummary] = None
    applicants: List[int] = []
    status: JobStatus
    created_at: datetime


class JobEnvelope(BaseModel):
    success: bool = True
    data: JobOut


class JobListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[JobOut]


# -----------------------
# Applications
# -----------------------
class ApplyToJobRequest(BaseModel):
    resume_url: Optional[str] = None


class ApplyRequest(BaseModel):
    job_id: int
    # defaults to the caller; kept for clients that send it explicitly
    applicant_id: Optional[int] = None
    resume_url: Optional[str] = None


class StatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    applicant_id: int
    applicant_rating: float = 0
    resume_url: str = ""
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime


class ApplicationWithJob(ApplicationOut):
    # None once the job has been deleted
    job: Optional[JobOut] = None


class ApplicationWithApplicant(ApplicationOut):
    applicant: Optional[UserOut] = None


class ApplicationEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: ApplicationOut


__all__ = [
    "RegisterRequest",
    "EmployerProfile",
    "EmployeeProfile",
    "Profile",
    "LoginRequest",
    "UserOut",
    "AuthResponse",
    "UserEnvelope",
    "MessageResponse",
    "EmployerSummary",
    "JobOut",
    "JobEnvelope",
    "JobListEnvelope",
    "ApplyToJobRequest",
    "ApplyRequest",
    "StatusUpdate",
    "ApplicationOut",
    "ApplicationWithJob",
    "ApplicationWithApplicant",
    "ApplicationEnvelope",
]

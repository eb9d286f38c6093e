"""
Core data models for the bug bounty platform.

Three entities: Users (actors), Programs (owned by a COMPANY actor) and
Reports (submitted by a RESEARCHER actor against a Program). Role,
severity and status are closed enums so invalid values are rejected at
the request boundary.

Attributes are snake_case in Python and camelCase on the wire
(rewardMin, companyId, researcherId, ...).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bugbounty.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Platform-wide role of an actor."""

    RESEARCHER = "RESEARCHER"
    COMPANY = "COMPANY"
    ADMIN = "ADMIN"


class Severity(str, Enum):
    """Severity assigned to a report."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ReportStatus(str, Enum):
    """Triage status of a report. Any status may follow any other."""

    OPEN = "OPEN"
    IN_REVIEW = "IN_REVIEW"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Entities
# =============================================================================


class User(CamelModel):
    """User stored in the database."""

    id: str = Field(default_factory=lambda: generate_id("user"))
    email: str
    name: str
    password_hash: str
    role: Role = Role.RESEARCHER
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class UserResponse(CamelModel):
    """User data returned to clients (no credential)."""

    id: str
    email: str
    name: str
    role: Role
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


class Program(CamelModel):
    """A company's bug bounty scope definition."""

    id: str = Field(default_factory=lambda: generate_id("prog"))
    name: str
    description: str
    scope: str
    reward_min: int
    reward_max: int
    company_id: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Report(CamelModel):
    """A researcher's vulnerability submission against a program."""

    id: str = Field(default_factory=lambda: generate_id("rep"))
    title: str
    description: str
    severity: Severity = Severity.LOW
    status: ReportStatus = ReportStatus.OPEN
    program_id: str
    researcher_id: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ReportWithProgram(Report):
    """A report with its parent program attached."""

    program: Program


# =============================================================================
# Requests
# =============================================================================
#
# Required fields are declared optional here: a missing or empty field is a
# 400 raised by the handler, not a framework 422.


class RequestModel(CamelModel):
    """Request body where an empty string counts as an absent field."""

    @field_validator("*", mode="before")
    @classmethod
    def empty_is_missing(cls, value):
        if value == "":
            return None
        return value


class RegisterRequest(RequestModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: Role | None = None


class LoginRequest(RequestModel):
    email: str | None = None
    password: str | None = None


class ProgramCreate(RequestModel):
    name: str | None = None
    description: str | None = None
    scope: str | None = None
    reward_min: int | None = None
    reward_max: int | None = None


class ProgramUpdate(CamelModel):
    """Partial program update. The owner cannot be changed."""

    name: str | None = None
    description: str | None = None
    scope: str | None = None
    reward_min: int | None = None
    reward_max: int | None = None


class ReportCreate(RequestModel):
    program_id: str | None = None
    title: str | None = None
    description: str | None = None


class ReportStatusUpdate(RequestModel):
    status: ReportStatus | None = None
    severity: Severity | None = None


# =============================================================================
# Responses
# =============================================================================


class AuthResponse(CamelModel):
    token: str
    user: UserResponse


class MeResponse(CamelModel):
    user: UserResponse

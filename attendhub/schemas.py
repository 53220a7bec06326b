"""
Pydantic schemas for the HTTP API.

Request and response bodies are camelCase on the wire. Each response model
owns a ``from_record`` adapter, the only place store records are mapped to
the API shape.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

from attendhub.records import (
    AnnouncementRecord,
    AttendanceRecord,
    CaseRecord,
    CommentRecord,
    CompanyRecord,
    IdeaRecord,
    MemberRecord,
    PermissionRecord,
    UserRecord,
)
from attendhub.types import (
    AnnouncementCategory,
    AttendanceStatus,
    CaseStatus,
    IdeaCategory,
    IdeaStatus,
    PermissionStatus,
    Role,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# Required text fields reject empty strings as well as missing keys.
RequiredStr = Annotated[str, StringConstraints(min_length=1)]


# Requests


class LoginRequest(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None


class CompanyCreate(ApiModel):
    name: RequiredStr
    email: RequiredStr
    phone: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None


class UserCreate(ApiModel):
    company_id: RequiredStr
    name: RequiredStr
    email: RequiredStr
    role: Role
    password: Optional[str] = None


class MemberCreate(ApiModel):
    company_id: RequiredStr
    name: RequiredStr
    registration_number: RequiredStr
    department: Optional[str] = None
    joined_year: Optional[str] = None
    email: Optional[str] = None


class MemberSuspensionUpdate(ApiModel):
    suspended: Any = None
    suspension_reason: Optional[str] = None


class AttendanceEntry(ApiModel):
    member_id: RequiredStr
    # Any value is accepted here; it is normalized to present/absent.
    status: Any = None


class AttendanceDaySave(ApiModel):
    records: List[AttendanceEntry]
    date: RequiredStr
    marked_by: Optional[str] = None


class AnnouncementCreate(ApiModel):
    committee_id: RequiredStr
    committee_name: Optional[str] = None
    title: RequiredStr
    content: RequiredStr
    category: AnnouncementCategory = AnnouncementCategory.GENERAL


class CommentCreate(ApiModel):
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    content: Optional[str] = None


class PermissionCreate(ApiModel):
    user_id: RequiredStr
    user_name: Optional[str] = None
    reason: RequiredStr
    date: RequiredStr


class PermissionStatusUpdate(ApiModel):
    status: Any = None


class CaseCreate(ApiModel):
    company_id: RequiredStr
    reported_by: RequiredStr
    reporter_name: Optional[str] = None
    reporter_role: Optional[str] = None
    member_id: RequiredStr
    member_name: Optional[str] = None
    title: RequiredStr
    description: RequiredStr
    date: RequiredStr


class CaseDecision(ApiModel):
    decision: Any = None
    decision_text: Optional[str] = None
    decided_by: Optional[str] = None


class IdeaCreate(ApiModel):
    user_id: RequiredStr
    user_name: Optional[str] = None
    category: IdeaCategory = IdeaCategory.SUGGESTION
    title: RequiredStr
    description: RequiredStr


class IdeaStatusUpdate(ApiModel):
    status: IdeaStatus


# Responses


class HealthResponse(ApiModel):
    ok: bool
    timestamp: str


class CompanyResponse(ApiModel):
    id: str
    name: str
    email: str
    phone: str
    type: str
    description: str
    location: str
    created_at: str

    @classmethod
    def from_record(cls, record: CompanyRecord) -> "CompanyResponse":
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            phone=record.phone,
            type=record.type,
            description=record.description,
            location=record.location,
            created_at=record.created_at,
        )


class UserResponse(ApiModel):
    """Public projection of a user; the password never leaves the store."""

    id: str
    company_id: str
    name: str
    email: str
    role: Role
    suspended: bool = False

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserResponse":
        return cls(
            id=record.id,
            company_id=record.company_id,
            name=record.name,
            email=record.email,
            role=record.role,
            suspended=record.suspended,
        )


class LoginResponse(ApiModel):
    user: UserResponse
    token: str


class MemberResponse(ApiModel):
    id: str
    company_id: str
    name: str
    registration_number: str
    department: str
    joined_year: str
    email: Optional[str] = None
    suspended: bool = False
    suspension_reason: Optional[str] = None

    @classmethod
    def from_record(cls, record: MemberRecord) -> "MemberResponse":
        return cls(
            id=record.id,
            company_id=record.company_id,
            name=record.name,
            registration_number=record.registration_number,
            department=record.department,
            joined_year=record.joined_year,
            email=record.email or None,
            suspended=record.suspended,
            suspension_reason=record.suspension_reason or None,
        )


class AttendanceResponse(ApiModel):
    id: str
    member_id: str
    member_name: str
    registration_number: str
    department: str
    date: str
    status: AttendanceStatus
    marked_by: str
    timestamp: str

    @classmethod
    def from_record(cls, record: AttendanceRecord) -> "AttendanceResponse":
        return cls(
            id=record.id,
            member_id=record.member_id,
            member_name=record.member_name or f"Member {record.member_id}",
            registration_number=record.registration_number or "",
            department=record.department or "",
            date=record.date,
            status=record.status,
            marked_by=record.marked_by or "",
            timestamp=record.timestamp,
        )


class CommentResponse(ApiModel):
    id: str
    user_id: str
    user_name: str
    content: str
    timestamp: str

    @classmethod
    def from_record(cls, record: CommentRecord) -> "CommentResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            user_name=record.user_name,
            content=record.content,
            timestamp=record.timestamp,
        )


class AnnouncementResponse(ApiModel):
    id: str
    committee_id: str
    committee_name: str
    title: str
    content: str
    category: AnnouncementCategory
    timestamp: str
    comments: List[CommentResponse] = []

    @classmethod
    def from_record(cls, record: AnnouncementRecord) -> "AnnouncementResponse":
        return cls(
            id=record.id,
            committee_id=record.committee_id,
            committee_name=record.committee_name,
            title=record.title,
            content=record.content,
            category=record.category,
            timestamp=record.timestamp,
            comments=[CommentResponse.from_record(c) for c in record.comments],
        )


class PermissionResponse(ApiModel):
    id: str
    user_id: str
    user_name: str
    reason: str
    date: str
    timestamp: str
    status: PermissionStatus

    @classmethod
    def from_record(cls, record: PermissionRecord) -> "PermissionResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            user_name=record.user_name,
            reason=record.reason,
            date=record.date,
            timestamp=record.timestamp,
            status=record.status,
        )


class CaseResponse(ApiModel):
    id: str
    company_id: str
    reported_by: str
    reporter_name: str
    reporter_role: str
    member_id: str
    member_name: str
    title: str
    description: str
    date: str
    timestamp: str
    status: CaseStatus
    decision: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[str] = None
    comments: List[CommentResponse] = []

    @classmethod
    def from_record(cls, record: CaseRecord) -> "CaseResponse":
        return cls(
            id=record.id,
            company_id=record.company_id,
            reported_by=record.reported_by,
            reporter_name=record.reporter_name,
            reporter_role=record.reporter_role,
            member_id=record.member_id,
            member_name=record.member_name,
            title=record.title,
            description=record.description,
            date=record.date,
            timestamp=record.timestamp,
            status=record.status,
            decision=record.decision,
            decided_by=record.decided_by,
            decided_at=record.decided_at,
            comments=[CommentResponse.from_record(c) for c in record.comments],
        )


class IdeaResponse(ApiModel):
    id: str
    user_id: str
    user_name: str
    category: IdeaCategory
    title: str
    description: str
    timestamp: str
    status: IdeaStatus

    @classmethod
    def from_record(cls, record: IdeaRecord) -> "IdeaResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            user_name=record.user_name,
            category=record.category,
            title=record.title,
            description=record.description,
            timestamp=record.timestamp,
            status=record.status,
        )

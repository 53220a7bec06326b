"""
Storage-shaped records returned by every ``DbClient`` implementation.

Field names follow the table columns (snake_case); the camelCase API shape
is produced by the adapters in ``attendhub.schemas``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from attendhub.types import (
    AnnouncementCategory,
    AttendanceStatus,
    CaseStatus,
    IdeaCategory,
    IdeaStatus,
    PermissionStatus,
    Role,
    utc_now_iso,
)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class CompanyRecord:
    name: str
    email: str
    phone: str = ""
    type: str = ""
    description: str = ""
    location: str = ""
    created_at: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=new_id)


@dataclass
class UserRecord:
    company_id: str
    name: str
    email: str
    role: Role
    # Stored as given; see the login handler for how it is compared.
    password: Optional[str] = None
    suspended: bool = False
    id: str = field(default_factory=new_id)


@dataclass
class MemberRecord:
    company_id: str
    name: str
    registration_number: str
    department: str = ""
    joined_year: str = ""
    email: Optional[str] = None
    suspended: bool = False
    suspension_reason: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class AttendanceRecord:
    member_id: str
    date: str
    status: AttendanceStatus
    marked_by: str = ""
    timestamp: str = field(default_factory=utc_now_iso)
    # Joined from the member on reads; None when the member is unknown.
    member_name: Optional[str] = None
    registration_number: Optional[str] = None
    department: Optional[str] = None
    id: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = attendance_id(self.member_id, self.date)


def attendance_id(member_id: str, date: str) -> str:
    return f"{member_id}-{date}"


@dataclass
class CommentRecord:
    user_id: str = ""
    user_name: str = ""
    content: str = ""
    timestamp: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=new_id)


@dataclass
class AnnouncementRecord:
    committee_id: str
    title: str
    content: str
    committee_name: str = ""
    category: AnnouncementCategory = AnnouncementCategory.GENERAL
    timestamp: str = field(default_factory=utc_now_iso)
    comments: List[CommentRecord] = field(default_factory=list)
    id: str = field(default_factory=new_id)


@dataclass
class PermissionRecord:
    user_id: str
    reason: str
    date: str
    user_name: str = ""
    status: PermissionStatus = PermissionStatus.PENDING
    timestamp: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=new_id)


@dataclass
class CaseRecord:
    company_id: str
    reported_by: str
    member_id: str
    title: str
    description: str
    date: str
    reporter_name: str = ""
    reporter_role: str = Role.DISCIPLINE.value
    member_name: str = ""
    status: CaseStatus = CaseStatus.PENDING
    decision: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[str] = None
    timestamp: str = field(default_factory=utc_now_iso)
    comments: List[CommentRecord] = field(default_factory=list)
    id: str = field(default_factory=new_id)


@dataclass
class IdeaRecord:
    user_id: str
    title: str
    description: str
    user_name: str = ""
    category: IdeaCategory = IdeaCategory.SUGGESTION
    status: IdeaStatus = IdeaStatus.PENDING
    timestamp: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=new_id)

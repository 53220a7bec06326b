"""
Enumerations shared by the store, schemas and routes.

The ``parse_*`` helpers are deliberately permissive: unrecognized input
falls back to the safe default instead of raising.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Role(str, Enum):
    CEO = "ceo"
    DISCIPLINE = "discipline"
    COMMITTEE = "committee"
    MEMBER = "member"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class AnnouncementCategory(str, Enum):
    GENERAL = "general"
    URGENT = "urgent"
    EVENT = "event"
    ACADEMIC = "academic"


class PermissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CaseStatus(str, Enum):
    PENDING = "pending"
    SUSPENDED = "suspended"
    FORGIVEN = "forgiven"

    @property
    def is_terminal(self) -> bool:
        return self is not CaseStatus.PENDING


class IdeaCategory(str, Enum):
    SUGGESTION = "suggestion"
    COMPLAINT = "complaint"
    QUESTION = "question"
    FEEDBACK = "feedback"


class IdeaStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"


def parse_attendance_status(value: Any) -> AttendanceStatus:
    """Only the exact string "present" counts as present."""
    if value == AttendanceStatus.PRESENT.value:
        return AttendanceStatus.PRESENT
    return AttendanceStatus.ABSENT


def parse_permission_status(value: Any) -> PermissionStatus:
    if value == PermissionStatus.APPROVED.value:
        return PermissionStatus.APPROVED
    if value == PermissionStatus.REJECTED.value:
        return PermissionStatus.REJECTED
    return PermissionStatus.PENDING


def parse_case_decision(value: Any) -> CaseStatus:
    if value == CaseStatus.SUSPENDED.value:
        return CaseStatus.SUSPENDED
    if value == CaseStatus.FORGIVEN.value:
        return CaseStatus.FORGIVEN
    return CaseStatus.PENDING


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

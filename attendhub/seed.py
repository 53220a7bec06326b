"""
Demo organization used to seed a fresh store.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from attendhub.records import (
    AnnouncementRecord,
    AttendanceRecord,
    CompanyRecord,
    MemberRecord,
    UserRecord,
)
from attendhub.types import AnnouncementCategory, AttendanceStatus, Role

SEED_ATTENDANCE_DAYS = 14
SEED_PRESENT_PROBABILITY = 0.8
SEED_MARKED_BY = "John Discipline"

_USERS = [
    ("1", "Ellen CEO", "ceo@techhub.com", Role.CEO),
    ("2", "Jane Committee", "committee@techhub.com", Role.COMMITTEE),
    ("3", "John Discipline", "discipline@techhub.com", Role.DISCIPLINE),
    ("4", "Mark Member", "member@techhub.com", Role.MEMBER),
]

_MEMBERS = [
    ("1", "Alice Johnson", "REG001", "Engineering", "2023"),
    ("2", "Bob Smith", "REG002", "Marketing", "2023"),
    ("3", "Carol Williams", "REG003", "Sales", "2022"),
    ("4", "David Brown", "REG004", "Engineering", "2023"),
    ("5", "Emma Davis", "REG005", "Operations", "2021"),
    ("6", "Frank Miller", "REG006", "Marketing", "2022"),
    ("7", "Grace Wilson", "REG007", "Design", "2023"),
    ("8", "Henry Moore", "REG008", "Sales", "2022"),
    ("9", "Isabel Taylor", "REG009", "Engineering", "2021"),
    ("10", "Jack Anderson", "REG010", "Operations", "2023"),
]


@dataclass
class DemoDataset:
    companies: List[CompanyRecord] = field(default_factory=list)
    users: List[UserRecord] = field(default_factory=list)
    members: List[MemberRecord] = field(default_factory=list)
    attendance: List[AttendanceRecord] = field(default_factory=list)
    announcements: List[AnnouncementRecord] = field(default_factory=list)


def demo_dataset(
    today: Optional[date] = None, rng: Optional[random.Random] = None
) -> DemoDataset:
    """
    Build the demo company with its users, members, two weeks of
    randomized attendance ending at ``today`` and a welcome announcement.
    """
    today = today or date.today()
    rng = rng or random.Random()

    company = CompanyRecord(
        id="1",
        name="Tech Innovation Hub",
        email="admin@techhub.com",
        phone="+1 (555) 123-4567",
        type="Technology Organization",
        description="A community of tech enthusiasts and innovators",
        location="San Francisco, CA",
        created_at="2024-01-15T10:00:00",
    )
    users = [
        UserRecord(id=uid, company_id=company.id, name=name, email=email, role=role)
        for uid, name, email, role in _USERS
    ]
    members = [
        MemberRecord(
            id=mid,
            company_id=company.id,
            name=name,
            registration_number=reg,
            department=dept,
            joined_year=year,
        )
        for mid, name, reg, dept, year in _MEMBERS
    ]

    attendance: List[AttendanceRecord] = []
    for offset in range(SEED_ATTENDANCE_DAYS):
        day = (today - timedelta(days=offset)).isoformat()
        for member in members:
            present = rng.random() < SEED_PRESENT_PROBABILITY
            attendance.append(
                AttendanceRecord(
                    member_id=member.id,
                    date=day,
                    status=(
                        AttendanceStatus.PRESENT if present else AttendanceStatus.ABSENT
                    ),
                    marked_by=SEED_MARKED_BY,
                    timestamp=f"{day}T09:00:00",
                )
            )

    announcement = AnnouncementRecord(
        id="1",
        committee_id="2",
        committee_name="Jane Committee",
        title="Welcome to New Semester",
        content="We are excited to welcome everyone to the new academic semester.",
        category=AnnouncementCategory.GENERAL,
        timestamp="2024-11-10T09:00:00",
    )

    return DemoDataset(
        companies=[company],
        users=users,
        members=members,
        attendance=attendance,
        announcements=[announcement],
    )

"""
Database abstraction for Postgres and an in-memory fallback implementation.
"""

from __future__ import annotations

import copy
import logging
import random
import threading
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    String,
    Text,
    create_engine,
    delete,
    func,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

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
from attendhub.seed import DemoDataset, demo_dataset
from attendhub.types import (
    AnnouncementCategory,
    AttendanceStatus,
    CaseStatus,
    IdeaCategory,
    IdeaStatus,
    PermissionStatus,
    Role,
)

logger = logging.getLogger(__name__)


class DuplicateRecordError(Exception):
    """A unique field (user email, member registration number) is taken."""


class CaseAlreadyDecidedError(Exception):
    """The case has already left the pending state."""


class DbClient(Protocol):
    """Interface for database access."""

    def list_companies(self) -> list[CompanyRecord]:
        ...

    def create_company(self, company: CompanyRecord) -> CompanyRecord:
        ...

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    def list_users(self, company_id: str | None = None) -> list[UserRecord]:
        ...

    def create_user(self, user: UserRecord) -> UserRecord:
        ...

    def list_members(self, company_id: str | None = None) -> list[MemberRecord]:
        ...

    def create_member(self, member: MemberRecord) -> MemberRecord:
        ...

    def update_member_suspension(
        self, member_id: str, suspended: bool, reason: Optional[str]
    ) -> Optional[MemberRecord]:
        ...

    def list_attendance(
        self, *, date: str | None = None, member_id: str | None = None
    ) -> list[AttendanceRecord]:
        ...

    def replace_attendance_day(
        self, date: str, records: list[AttendanceRecord]
    ) -> list[AttendanceRecord]:
        ...

    def list_announcements(self) -> list[AnnouncementRecord]:
        ...

    def get_announcement(self, announcement_id: str) -> Optional[AnnouncementRecord]:
        ...

    def create_announcement(
        self, announcement: AnnouncementRecord
    ) -> AnnouncementRecord:
        ...

    def add_announcement_comment(
        self, announcement_id: str, comment: CommentRecord
    ) -> Optional[CommentRecord]:
        ...

    def list_permissions(self, user_id: str | None = None) -> list[PermissionRecord]:
        ...

    def create_permission(self, permission: PermissionRecord) -> PermissionRecord:
        ...

    def set_permission_status(
        self, permission_id: str, status: PermissionStatus
    ) -> Optional[PermissionRecord]:
        ...

    def list_cases(
        self, *, company_id: str | None = None, member_id: str | None = None
    ) -> list[CaseRecord]:
        ...

    def get_case(self, case_id: str) -> Optional[CaseRecord]:
        ...

    def create_case(self, case: CaseRecord) -> CaseRecord:
        ...

    def decide_case(
        self,
        case_id: str,
        *,
        status: CaseStatus,
        decision: str,
        decided_by: str,
        decided_at: str,
    ) -> Optional[CaseRecord]:
        ...

    def add_case_comment(
        self, case_id: str, comment: CommentRecord
    ) -> Optional[CommentRecord]:
        ...

    def list_ideas(self, user_id: str | None = None) -> list[IdeaRecord]:
        ...

    def create_idea(self, idea: IdeaRecord) -> IdeaRecord:
        ...

    def set_idea_status(
        self, idea_id: str, status: IdeaStatus
    ) -> Optional[IdeaRecord]:
        ...


def _newest_first(items: Iterable, attr: str = "timestamp") -> list:
    return sorted(items, key=lambda item: getattr(item, attr), reverse=True)


def _by_name(items: Iterable) -> list:
    return sorted(items, key=lambda item: item.name)


class InMemoryDbClient:
    """
    Process-local store used when no DATABASE_URL is configured.

    State is lost on restart and is not shared between processes. FastAPI
    runs sync handlers on a thread pool, so every operation holds a lock and
    returns copies rather than the stored objects.
    """

    def __init__(
        self,
        seed_demo_data: bool = False,
        *,
        today: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ):
        self._lock = threading.RLock()
        self.companies: Dict[str, CompanyRecord] = {}
        self.users: Dict[str, UserRecord] = {}
        self.members: Dict[str, MemberRecord] = {}
        self.attendance: Dict[str, AttendanceRecord] = {}
        self.announcements: Dict[str, AnnouncementRecord] = {}
        self.permissions: Dict[str, PermissionRecord] = {}
        self.cases: Dict[str, CaseRecord] = {}
        self.ideas: Dict[str, IdeaRecord] = {}
        if seed_demo_data:
            self.load(demo_dataset(today=today, rng=rng))

    def load(self, dataset: DemoDataset) -> None:
        with self._lock:
            for company in dataset.companies:
                self.companies[company.id] = company
            for user in dataset.users:
                self.users[user.id] = user
            for member in dataset.members:
                self.members[member.id] = member
            for record in dataset.attendance:
                self.attendance[record.id] = record
            for announcement in dataset.announcements:
                self.announcements[announcement.id] = announcement

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.companies.clear()
            self.users.clear()
            self.members.clear()
            self.attendance.clear()
            self.announcements.clear()
            self.permissions.clear()
            self.cases.clear()
            self.ideas.clear()

    # Companies

    def list_companies(self) -> list[CompanyRecord]:
        with self._lock:
            return copy.deepcopy(
                _newest_first(self.companies.values(), attr="created_at")
            )

    def create_company(self, company: CompanyRecord) -> CompanyRecord:
        with self._lock:
            self.companies[company.id] = copy.deepcopy(company)
            return copy.deepcopy(company)

    # Users

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            for user in self.users.values():
                if user.email == email:
                    return copy.deepcopy(user)
            return None

    def list_users(self, company_id: str | None = None) -> list[UserRecord]:
        with self._lock:
            users = [
                u
                for u in self.users.values()
                if company_id is None or u.company_id == company_id
            ]
            return copy.deepcopy(_by_name(users))

    def create_user(self, user: UserRecord) -> UserRecord:
        with self._lock:
            if any(u.email == user.email for u in self.users.values()):
                raise DuplicateRecordError(f"email already registered: {user.email}")
            self.users[user.id] = copy.deepcopy(user)
            return copy.deepcopy(user)

    # Members

    def list_members(self, company_id: str | None = None) -> list[MemberRecord]:
        with self._lock:
            members = [
                m
                for m in self.members.values()
                if company_id is None or m.company_id == company_id
            ]
            return copy.deepcopy(_by_name(members))

    def create_member(self, member: MemberRecord) -> MemberRecord:
        with self._lock:
            if any(
                m.registration_number == member.registration_number
                for m in self.members.values()
            ):
                raise DuplicateRecordError(
                    f"registration number already used: {member.registration_number}"
                )
            self.members[member.id] = copy.deepcopy(member)
            return copy.deepcopy(member)

    def update_member_suspension(
        self, member_id: str, suspended: bool, reason: Optional[str]
    ) -> Optional[MemberRecord]:
        with self._lock:
            member = self.members.get(member_id)
            if not member:
                return None
            member.suspended = suspended
            member.suspension_reason = reason
            return copy.deepcopy(member)

    # Attendance

    def _joined(self, record: AttendanceRecord) -> AttendanceRecord:
        joined = copy.deepcopy(record)
        member = self.members.get(record.member_id)
        if member:
            joined.member_name = member.name
            joined.registration_number = member.registration_number
            joined.department = member.department
        return joined

    def list_attendance(
        self, *, date: str | None = None, member_id: str | None = None
    ) -> list[AttendanceRecord]:
        with self._lock:
            records = [
                r
                for r in self.attendance.values()
                if (date is None or r.date == date)
                and (member_id is None or r.member_id == member_id)
            ]
            records.sort(key=lambda r: r.member_id)
            records.sort(key=lambda r: r.date, reverse=True)
            return [self._joined(r) for r in records]

    def replace_attendance_day(
        self, date: str, records: list[AttendanceRecord]
    ) -> list[AttendanceRecord]:
        with self._lock:
            # Ids are "{member}-{date}", so a record of another day can share one.
            for record in records:
                held = self.attendance.get(record.id)
                if held is not None and held.date != date:
                    raise DuplicateRecordError(f"attendance {record.id}")
            for record_id in [k for k, r in self.attendance.items() if r.date == date]:
                del self.attendance[record_id]
            for record in records:
                self.attendance[record.id] = copy.deepcopy(record)
            return copy.deepcopy(records)

    # Announcements

    def list_announcements(self) -> list[AnnouncementRecord]:
        with self._lock:
            return copy.deepcopy(_newest_first(self.announcements.values()))

    def get_announcement(self, announcement_id: str) -> Optional[AnnouncementRecord]:
        with self._lock:
            return copy.deepcopy(self.announcements.get(announcement_id))

    def create_announcement(
        self, announcement: AnnouncementRecord
    ) -> AnnouncementRecord:
        with self._lock:
            self.announcements[announcement.id] = copy.deepcopy(announcement)
            return copy.deepcopy(announcement)

    def add_announcement_comment(
        self, announcement_id: str, comment: CommentRecord
    ) -> Optional[CommentRecord]:
        with self._lock:
            announcement = self.announcements.get(announcement_id)
            if not announcement:
                return None
            announcement.comments.append(copy.deepcopy(comment))
            return copy.deepcopy(comment)

    # Permission requests

    def list_permissions(self, user_id: str | None = None) -> list[PermissionRecord]:
        with self._lock:
            permissions = [
                p
                for p in self.permissions.values()
                if user_id is None or p.user_id == user_id
            ]
            return copy.deepcopy(_newest_first(permissions))

    def create_permission(self, permission: PermissionRecord) -> PermissionRecord:
        with self._lock:
            self.permissions[permission.id] = copy.deepcopy(permission)
            return copy.deepcopy(permission)

    def set_permission_status(
        self, permission_id: str, status: PermissionStatus
    ) -> Optional[PermissionRecord]:
        with self._lock:
            permission = self.permissions.get(permission_id)
            if not permission:
                return None
            permission.status = status
            return copy.deepcopy(permission)

    # Cases

    def list_cases(
        self, *, company_id: str | None = None, member_id: str | None = None
    ) -> list[CaseRecord]:
        with self._lock:
            cases = [
                c
                for c in self.cases.values()
                if (company_id is None or c.company_id == company_id)
                and (member_id is None or c.member_id == member_id)
            ]
            return copy.deepcopy(_newest_first(cases))

    def get_case(self, case_id: str) -> Optional[CaseRecord]:
        with self._lock:
            return copy.deepcopy(self.cases.get(case_id))

    def create_case(self, case: CaseRecord) -> CaseRecord:
        with self._lock:
            self.cases[case.id] = copy.deepcopy(case)
            return copy.deepcopy(case)

    def decide_case(
        self,
        case_id: str,
        *,
        status: CaseStatus,
        decision: str,
        decided_by: str,
        decided_at: str,
    ) -> Optional[CaseRecord]:
        with self._lock:
            case = self.cases.get(case_id)
            if not case:
                return None
            if case.status.is_terminal:
                raise CaseAlreadyDecidedError(case_id)
            case.status = status
            case.decision = decision
            case.decided_by = decided_by
            case.decided_at = decided_at
            return copy.deepcopy(case)

    def add_case_comment(
        self, case_id: str, comment: CommentRecord
    ) -> Optional[CommentRecord]:
        with self._lock:
            case = self.cases.get(case_id)
            if not case:
                return None
            case.comments.append(copy.deepcopy(comment))
            return copy.deepcopy(comment)

    # Ideas

    def list_ideas(self, user_id: str | None = None) -> list[IdeaRecord]:
        with self._lock:
            ideas = [
                i
                for i in self.ideas.values()
                if user_id is None or i.user_id == user_id
            ]
            return copy.deepcopy(_newest_first(ideas))

    def create_idea(self, idea: IdeaRecord) -> IdeaRecord:
        with self._lock:
            self.ideas[idea.id] = copy.deepcopy(idea)
            return copy.deepcopy(idea)

    def set_idea_status(
        self, idea_id: str, status: IdeaStatus
    ) -> Optional[IdeaRecord]:
        with self._lock:
            idea = self.ideas.get(idea_id)
            if not idea:
                return None
            idea.status = status
            return copy.deepcopy(idea)


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )

    def ensure_schema(
        self,
        seed_demo_data: bool = True,
        *,
        today: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ) -> bool:
        """
        Create missing tables and seed the demo organization into an empty
        database. Safe to call on every boot; returns True when it seeded.
        """
        Base.metadata.create_all(self.engine)
        if not seed_demo_data:
            return False
        with self.Session() as session:
            count = session.execute(select(func.count()).select_from(CompanyRow)).scalar_one()
        if count:
            return False
        self._seed(demo_dataset(today=today, rng=rng))
        return True

    def _seed(self, dataset: DemoDataset) -> None:
        with self.Session() as session:
            for company in dataset.companies:
                session.add(_company_row(company))
            taken_emails = set(session.execute(select(UserRow.email)).scalars())
            for user in dataset.users:
                if user.email not in taken_emails:
                    session.add(_user_row(user))
            taken_regs = set(
                session.execute(select(MemberRow.registration_number)).scalars()
            )
            for member in dataset.members:
                if member.registration_number not in taken_regs:
                    session.add(_member_row(member))
            taken_ids = set(session.execute(select(AttendanceRow.id)).scalars())
            for record in dataset.attendance:
                if record.id not in taken_ids:
                    session.add(_attendance_row(record))
            for announcement in dataset.announcements:
                session.add(_announcement_row(announcement))
            session.commit()
        logger.info(
            "Seeded demo data: %d users, %d members, %d attendance records",
            len(dataset.users),
            len(dataset.members),
            len(dataset.attendance),
        )

    def _insert_unique(self, row, what: str) -> None:
        with self.Session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateRecordError(what) from exc

    # Companies

    def list_companies(self) -> list[CompanyRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(CompanyRow).order_by(CompanyRow.created_at.desc())
            ).scalars()
            return [_to_company(row) for row in rows]

    def create_company(self, company: CompanyRecord) -> CompanyRecord:
        with self.Session() as session:
            session.add(_company_row(company))
            session.commit()
        return company

    # Users

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.email == email).limit(1)
            ).scalar_one_or_none()
            return _to_user(row) if row else None

    def list_users(self, company_id: str | None = None) -> list[UserRecord]:
        stmt = select(UserRow).order_by(UserRow.name.asc())
        if company_id is not None:
            stmt = stmt.where(UserRow.company_id == company_id)
        with self.Session() as session:
            return [_to_user(row) for row in session.execute(stmt).scalars()]

    def create_user(self, user: UserRecord) -> UserRecord:
        self._insert_unique(_user_row(user), f"email already registered: {user.email}")
        return user

    # Members

    def list_members(self, company_id: str | None = None) -> list[MemberRecord]:
        stmt = select(MemberRow).order_by(MemberRow.name.asc())
        if company_id is not None:
            stmt = stmt.where(MemberRow.company_id == company_id)
        with self.Session() as session:
            return [_to_member(row) for row in session.execute(stmt).scalars()]

    def create_member(self, member: MemberRecord) -> MemberRecord:
        self._insert_unique(
            _member_row(member),
            f"registration number already used: {member.registration_number}",
        )
        return member

    def update_member_suspension(
        self, member_id: str, suspended: bool, reason: Optional[str]
    ) -> Optional[MemberRecord]:
        with self.Session() as session:
            row = session.get(MemberRow, member_id)
            if not row:
                return None
            row.suspended = suspended
            row.suspension_reason = reason
            session.commit()
            return _to_member(row)

    # Attendance

    def list_attendance(
        self, *, date: str | None = None, member_id: str | None = None
    ) -> list[AttendanceRecord]:
        stmt = (
            select(
                AttendanceRow,
                MemberRow.name,
                MemberRow.registration_number,
                MemberRow.department,
            )
            .outerjoin(MemberRow, MemberRow.id == AttendanceRow.member_id)
            .order_by(AttendanceRow.date.desc(), AttendanceRow.member_id.asc())
        )
        if date is not None:
            stmt = stmt.where(AttendanceRow.date == date)
        if member_id is not None:
            stmt = stmt.where(AttendanceRow.member_id == member_id)
        with self.Session() as session:
            results = []
            for row, member_name, registration_number, department in session.execute(stmt):
                record = _to_attendance(row)
                record.member_name = member_name
                record.registration_number = registration_number
                record.department = department
                results.append(record)
            return results

    def replace_attendance_day(
        self, date: str, records: list[AttendanceRecord]
    ) -> list[AttendanceRecord]:
        # Delete and re-insert commit together, so a failed save leaves the
        # previous day intact.
        with self.Session() as session:
            session.execute(delete(AttendanceRow).where(AttendanceRow.date == date))
            session.add_all([_attendance_row(record) for record in records])
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateRecordError("attendance") from exc
        return records

    # Announcements

    def _announcement_comments(
        self, session: Session, announcement_ids: list[str]
    ) -> Dict[str, List[CommentRecord]]:
        comments: Dict[str, List[CommentRecord]] = {i: [] for i in announcement_ids}
        if not announcement_ids:
            return comments
        rows = session.execute(
            select(AnnouncementCommentRow)
            .where(AnnouncementCommentRow.announcement_id.in_(announcement_ids))
            .order_by(AnnouncementCommentRow.timestamp.asc())
        ).scalars()
        for row in rows:
            comments[row.announcement_id].append(_to_comment(row))
        return comments

    def list_announcements(self) -> list[AnnouncementRecord]:
        with self.Session() as session:
            rows = list(
                session.execute(
                    select(AnnouncementRow).order_by(AnnouncementRow.timestamp.desc())
                ).scalars()
            )
            comments = self._announcement_comments(session, [row.id for row in rows])
            return [_to_announcement(row, comments[row.id]) for row in rows]

    def get_announcement(self, announcement_id: str) -> Optional[AnnouncementRecord]:
        with self.Session() as session:
            row = session.get(AnnouncementRow, announcement_id)
            if not row:
                return None
            comments = self._announcement_comments(session, [row.id])
            return _to_announcement(row, comments[row.id])

    def create_announcement(
        self, announcement: AnnouncementRecord
    ) -> AnnouncementRecord:
        with self.Session() as session:
            session.add(_announcement_row(announcement))
            session.commit()
        return announcement

    def add_announcement_comment(
        self, announcement_id: str, comment: CommentRecord
    ) -> Optional[CommentRecord]:
        with self.Session() as session:
            if not session.get(AnnouncementRow, announcement_id):
                return None
            session.add(
                AnnouncementCommentRow(
                    id=comment.id,
                    announcement_id=announcement_id,
                    user_id=comment.user_id,
                    user_name=comment.user_name,
                    content=comment.content,
                    timestamp=comment.timestamp,
                )
            )
            session.commit()
        return comment

    # Permission requests

    def list_permissions(self, user_id: str | None = None) -> list[PermissionRecord]:
        stmt = select(PermissionRow).order_by(PermissionRow.timestamp.desc())
        if user_id is not None:
            stmt = stmt.where(PermissionRow.user_id == user_id)
        with self.Session() as session:
            return [_to_permission(row) for row in session.execute(stmt).scalars()]

    def create_permission(self, permission: PermissionRecord) -> PermissionRecord:
        with self.Session() as session:
            session.add(
                PermissionRow(
                    id=permission.id,
                    user_id=permission.user_id,
                    user_name=permission.user_name,
                    reason=permission.reason,
                    date=permission.date,
                    timestamp=permission.timestamp,
                    status=permission.status.value,
                )
            )
            session.commit()
        return permission

    def set_permission_status(
        self, permission_id: str, status: PermissionStatus
    ) -> Optional[PermissionRecord]:
        with self.Session() as session:
            row = session.get(PermissionRow, permission_id)
            if not row:
                return None
            row.status = status.value
            session.commit()
            return _to_permission(row)

    # Cases

    def _case_comments(
        self, session: Session, case_ids: list[str]
    ) -> Dict[str, List[CommentRecord]]:
        comments: Dict[str, List[CommentRecord]] = {i: [] for i in case_ids}
        if not case_ids:
            return comments
        rows = session.execute(
            select(CaseCommentRow)
            .where(CaseCommentRow.case_id.in_(case_ids))
            .order_by(CaseCommentRow.timestamp.asc())
        ).scalars()
        for row in rows:
            comments[row.case_id].append(_to_comment(row))
        return comments

    def list_cases(
        self, *, company_id: str | None = None, member_id: str | None = None
    ) -> list[CaseRecord]:
        stmt = select(CaseRow).order_by(CaseRow.timestamp.desc())
        if company_id is not None:
            stmt = stmt.where(CaseRow.company_id == company_id)
        if member_id is not None:
            stmt = stmt.where(CaseRow.member_id == member_id)
        with self.Session() as session:
            rows = list(session.execute(stmt).scalars())
            comments = self._case_comments(session, [row.id for row in rows])
            return [_to_case(row, comments[row.id]) for row in rows]

    def get_case(self, case_id: str) -> Optional[CaseRecord]:
        with self.Session() as session:
            row = session.get(CaseRow, case_id)
            if not row:
                return None
            return _to_case(row, self._case_comments(session, [row.id])[row.id])

    def create_case(self, case: CaseRecord) -> CaseRecord:
        with self.Session() as session:
            session.add(
                CaseRow(
                    id=case.id,
                    company_id=case.company_id,
                    reported_by=case.reported_by,
                    reporter_name=case.reporter_name,
                    reporter_role=case.reporter_role,
                    member_id=case.member_id,
                    member_name=case.member_name,
                    title=case.title,
                    description=case.description,
                    date=case.date,
                    timestamp=case.timestamp,
                    status=case.status.value,
                )
            )
            session.commit()
        return case

    def decide_case(
        self,
        case_id: str,
        *,
        status: CaseStatus,
        decision: str,
        decided_by: str,
        decided_at: str,
    ) -> Optional[CaseRecord]:
        with self.Session() as session:
            row = session.get(CaseRow, case_id, with_for_update=True)
            if not row:
                return None
            if CaseStatus(row.status).is_terminal:
                raise CaseAlreadyDecidedError(case_id)
            row.status = status.value
            row.decision = decision
            row.decided_by = decided_by
            row.decided_at = decided_at
            session.commit()
            return _to_case(row, self._case_comments(session, [row.id])[row.id])

    def add_case_comment(
        self, case_id: str, comment: CommentRecord
    ) -> Optional[CommentRecord]:
        with self.Session() as session:
            if not session.get(CaseRow, case_id):
                return None
            session.add(
                CaseCommentRow(
                    id=comment.id,
                    case_id=case_id,
                    user_id=comment.user_id,
                    user_name=comment.user_name,
                    content=comment.content,
                    timestamp=comment.timestamp,
                )
            )
            session.commit()
        return comment

    # Ideas

    def list_ideas(self, user_id: str | None = None) -> list[IdeaRecord]:
        stmt = select(IdeaRow).order_by(IdeaRow.timestamp.desc())
        if user_id is not None:
            stmt = stmt.where(IdeaRow.user_id == user_id)
        with self.Session() as session:
            return [_to_idea(row) for row in session.execute(stmt).scalars()]

    def create_idea(self, idea: IdeaRecord) -> IdeaRecord:
        with self.Session() as session:
            session.add(
                IdeaRow(
                    id=idea.id,
                    user_id=idea.user_id,
                    user_name=idea.user_name,
                    category=idea.category.value,
                    title=idea.title,
                    description=idea.description,
                    timestamp=idea.timestamp,
                    status=idea.status.value,
                )
            )
            session.commit()
        return idea

    def set_idea_status(
        self, idea_id: str, status: IdeaStatus
    ) -> Optional[IdeaRecord]:
        with self.Session() as session:
            row = session.get(IdeaRow, idea_id)
            if not row:
                return None
            row.status = status.value
            session.commit()
            return _to_idea(row)


Base = declarative_base()


class CompanyRow(Base):
    __tablename__ = "companies"

    id = Column(String, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text)
    type = Column(Text)
    description = Column(Text)
    location = Column(Text)
    created_at = Column(String, nullable=False)


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    company_id = Column(String, nullable=False, index=True)
    name = Column(Text, nullable=False)
    email = Column(String, nullable=False, unique=True)
    role = Column(String, nullable=False)
    password_hash = Column(Text)
    suspended = Column(Boolean, default=False)


class MemberRow(Base):
    __tablename__ = "members"

    id = Column(String, primary_key=True)
    company_id = Column(String, nullable=False, index=True)
    name = Column(Text, nullable=False)
    registration_number = Column(String, nullable=False, unique=True)
    department = Column(Text)
    joined_year = Column(String)
    email = Column(Text)
    suspended = Column(Boolean, default=False)
    suspension_reason = Column(Text)


class AttendanceRow(Base):
    __tablename__ = "attendance_records"

    id = Column(String, primary_key=True)
    member_id = Column(String, nullable=False, index=True)
    date = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False)
    marked_by = Column(Text)
    timestamp = Column(String, nullable=False)


class AnnouncementRow(Base):
    __tablename__ = "announcements"

    id = Column(String, primary_key=True)
    committee_id = Column(String, nullable=False)
    committee_name = Column(Text)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String)
    timestamp = Column(String, nullable=False)


class AnnouncementCommentRow(Base):
    __tablename__ = "announcement_comments"

    id = Column(String, primary_key=True)
    announcement_id = Column(String, nullable=False, index=True)
    user_id = Column(String)
    user_name = Column(Text)
    content = Column(Text, nullable=False)
    timestamp = Column(String, nullable=False)


class PermissionRow(Base):
    __tablename__ = "permission_requests"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    user_name = Column(Text)
    reason = Column(Text, nullable=False)
    date = Column(String, nullable=False)
    timestamp = Column(String, nullable=False)
    status = Column(String, nullable=False)


class CaseRow(Base):
    __tablename__ = "cases"

    id = Column(String, primary_key=True)
    company_id = Column(String, nullable=False, index=True)
    reported_by = Column(String, nullable=False)
    reporter_name = Column(Text)
    reporter_role = Column(String)
    member_id = Column(String, nullable=False, index=True)
    member_name = Column(Text)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    date = Column(String, nullable=False)
    timestamp = Column(String, nullable=False)
    status = Column(String, nullable=False)
    decision = Column(Text)
    decided_by = Column(Text)
    decided_at = Column(String)


class CaseCommentRow(Base):
    __tablename__ = "case_comments"

    id = Column(String, primary_key=True)
    case_id = Column(String, nullable=False, index=True)
    user_id = Column(String)
    user_name = Column(Text)
    content = Column(Text, nullable=False)
    timestamp = Column(String, nullable=False)


class IdeaRow(Base):
    __tablename__ = "ideas"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    user_name = Column(Text)
    category = Column(String)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    timestamp = Column(String, nullable=False)
    status = Column(String, nullable=False)


def _company_row(company: CompanyRecord) -> CompanyRow:
    return CompanyRow(
        id=company.id,
        name=company.name,
        email=company.email,
        phone=company.phone,
        type=company.type,
        description=company.description,
        location=company.location,
        created_at=company.created_at,
    )


def _to_company(row: CompanyRow) -> CompanyRecord:
    return CompanyRecord(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone or "",
        type=row.type or "",
        description=row.description or "",
        location=row.location or "",
        created_at=row.created_at,
    )


def _user_row(user: UserRecord) -> UserRow:
    return UserRow(
        id=user.id,
        company_id=user.company_id,
        name=user.name,
        email=user.email,
        role=user.role.value,
        password_hash=user.password,
        suspended=user.suspended,
    )


def _to_user(row: UserRow) -> UserRecord:
    return UserRecord(
        id=row.id,
        company_id=row.company_id,
        name=row.name,
        email=row.email,
        role=Role(row.role),
        password=row.password_hash,
        suspended=bool(row.suspended),
    )


def _member_row(member: MemberRecord) -> MemberRow:
    return MemberRow(
        id=member.id,
        company_id=member.company_id,
        name=member.name,
        registration_number=member.registration_number,
        department=member.department,
        joined_year=member.joined_year,
        email=member.email,
        suspended=member.suspended,
        suspension_reason=member.suspension_reason,
    )


def _to_member(row: MemberRow) -> MemberRecord:
    return MemberRecord(
        id=row.id,
        company_id=row.company_id,
        name=row.name,
        registration_number=row.registration_number,
        department=row.department or "",
        joined_year=row.joined_year or "",
        email=row.email,
        suspended=bool(row.suspended),
        suspension_reason=row.suspension_reason,
    )


def _attendance_row(record: AttendanceRecord) -> AttendanceRow:
    return AttendanceRow(
        id=record.id,
        member_id=record.member_id,
        date=record.date,
        status=record.status.value,
        marked_by=record.marked_by,
        timestamp=record.timestamp,
    )


def _to_attendance(row: AttendanceRow) -> AttendanceRecord:
    return AttendanceRecord(
        id=row.id,
        member_id=row.member_id,
        date=row.date,
        status=AttendanceStatus(row.status),
        marked_by=row.marked_by or "",
        timestamp=row.timestamp,
    )


def _announcement_row(announcement: AnnouncementRecord) -> AnnouncementRow:
    return AnnouncementRow(
        id=announcement.id,
        committee_id=announcement.committee_id,
        committee_name=announcement.committee_name,
        title=announcement.title,
        content=announcement.content,
        category=announcement.category.value,
        timestamp=announcement.timestamp,
    )


def _to_announcement(
    row: AnnouncementRow, comments: List[CommentRecord]
) -> AnnouncementRecord:
    return AnnouncementRecord(
        id=row.id,
        committee_id=row.committee_id,
        committee_name=row.committee_name or "",
        title=row.title,
        content=row.content,
        category=AnnouncementCategory(row.category or "general"),
        timestamp=row.timestamp,
        comments=comments,
    )


def _to_comment(row) -> CommentRecord:
    return CommentRecord(
        id=row.id,
        user_id=row.user_id or "",
        user_name=row.user_name or "",
        content=row.content,
        timestamp=row.timestamp,
    )


def _to_permission(row: PermissionRow) -> PermissionRecord:
    return PermissionRecord(
        id=row.id,
        user_id=row.user_id,
        user_name=row.user_name or "",
        reason=row.reason,
        date=row.date,
        timestamp=row.timestamp,
        status=PermissionStatus(row.status),
    )


def _to_case(row: CaseRow, comments: List[CommentRecord]) -> CaseRecord:
    return CaseRecord(
        id=row.id,
        company_id=row.company_id,
        reported_by=row.reported_by,
        reporter_name=row.reporter_name or "",
        reporter_role=row.reporter_role or Role.DISCIPLINE.value,
        member_id=row.member_id,
        member_name=row.member_name or "",
        title=row.title,
        description=row.description,
        date=row.date,
        timestamp=row.timestamp,
        status=CaseStatus(row.status),
        decision=row.decision,
        decided_by=row.decided_by,
        decided_at=row.decided_at,
        comments=comments,
    )


def _to_idea(row: IdeaRow) -> IdeaRecord:
    return IdeaRecord(
        id=row.id,
        user_id=row.user_id,
        user_name=row.user_name or "",
        category=IdeaCategory(row.category or "suggestion"),
        title=row.title,
        description=row.description,
        timestamp=row.timestamp,
        status=IdeaStatus(row.status),
    )

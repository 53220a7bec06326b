"""
HTTP routes for the attendance API.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query

from attendhub.db import CaseAlreadyDecidedError, DbClient, DuplicateRecordError
from attendhub.dependencies import get_db_client
from attendhub.errors import (
    CONFLICT,
    EMAIL_REQUIRED,
    INVALID_CREDENTIALS,
    NOT_FOUND,
    USER_NOT_FOUND,
)
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
from attendhub.schemas import (
    AnnouncementCreate,
    AnnouncementResponse,
    AttendanceDaySave,
    AttendanceResponse,
    CaseCreate,
    CaseDecision,
    CaseResponse,
    CommentCreate,
    CommentResponse,
    CompanyCreate,
    CompanyResponse,
    HealthResponse,
    IdeaCreate,
    IdeaResponse,
    IdeaStatusUpdate,
    LoginRequest,
    LoginResponse,
    MemberCreate,
    MemberResponse,
    MemberSuspensionUpdate,
    PermissionCreate,
    PermissionResponse,
    PermissionStatusUpdate,
    UserCreate,
    UserResponse,
)
from attendhub.types import (
    CaseStatus,
    parse_attendance_status,
    parse_case_decision,
    parse_permission_status,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail=NOT_FOUND)


def _conflict() -> HTTPException:
    return HTTPException(status_code=409, detail=CONFLICT)


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(ok=True, timestamp=utc_now_iso())


@router.post("/login", response_model=LoginResponse)
def login(
    payload: Optional[LoginRequest] = None, db: DbClient = Depends(get_db_client)
):
    """
    Demo-grade login: look the user up by email. The password is only
    checked when both the request and the stored user carry one, and it is
    compared as plain text. The returned token is not persisted.
    """
    email = payload.email if payload else None
    password = payload.password if payload else None
    if not email:
        raise HTTPException(status_code=400, detail=EMAIL_REQUIRED)

    user = db.get_user_by_email(email)
    if not user:
        logger.info("Login for unknown email")
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    if password and user.password and user.password != password:
        logger.info("Login rejected for user %s", user.id)
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    return LoginResponse(user=UserResponse.from_record(user), token=str(uuid4()))


# Companies


@router.get("/companies", response_model=list[CompanyResponse])
def list_companies(db: DbClient = Depends(get_db_client)):
    return [CompanyResponse.from_record(c) for c in db.list_companies()]


@router.post("/companies", response_model=CompanyResponse, status_code=201)
def create_company(payload: CompanyCreate, db: DbClient = Depends(get_db_client)):
    company = db.create_company(
        CompanyRecord(
            name=payload.name,
            email=payload.email,
            phone=payload.phone or "",
            type=payload.type or "",
            description=payload.description or "",
            location=payload.location or "",
        )
    )
    return CompanyResponse.from_record(company)


# Users


@router.get("/users", response_model=list[UserResponse])
def list_users(
    company_id: Optional[str] = Query(None, alias="companyId"),
    db: DbClient = Depends(get_db_client),
):
    return [UserResponse.from_record(u) for u in db.list_users(company_id or None)]


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(payload: UserCreate, db: DbClient = Depends(get_db_client)):
    try:
        user = db.create_user(
            UserRecord(
                company_id=payload.company_id,
                name=payload.name,
                email=payload.email,
                role=payload.role,
                password=payload.password or None,
            )
        )
    except DuplicateRecordError:
        raise _conflict()
    return UserResponse.from_record(user)


# Members


@router.get("/members", response_model=list[MemberResponse])
def list_members(
    company_id: Optional[str] = Query(None, alias="companyId"),
    db: DbClient = Depends(get_db_client),
):
    members = db.list_members(company_id or None)
    return [MemberResponse.from_record(m) for m in members]


@router.post("/members", response_model=MemberResponse, status_code=201)
def create_member(payload: MemberCreate, db: DbClient = Depends(get_db_client)):
    try:
        member = db.create_member(
            MemberRecord(
                company_id=payload.company_id,
                name=payload.name,
                registration_number=payload.registration_number,
                department=payload.department or "",
                joined_year=payload.joined_year or "",
                email=payload.email or None,
            )
        )
    except DuplicateRecordError:
        raise _conflict()
    return MemberResponse.from_record(member)


@router.patch("/members/{member_id}", response_model=MemberResponse)
def update_member(
    member_id: str,
    payload: Optional[MemberSuspensionUpdate] = None,
    db: DbClient = Depends(get_db_client),
):
    payload = payload or MemberSuspensionUpdate()
    member = db.update_member_suspension(
        member_id,
        suspended=bool(payload.suspended),
        reason=payload.suspension_reason or None,
    )
    if not member:
        raise _not_found()
    return MemberResponse.from_record(member)


# Attendance


@router.get("/attendance", response_model=list[AttendanceResponse])
def list_attendance(
    date: Optional[str] = Query(None),
    member_id: Optional[str] = Query(None, alias="memberId"),
    db: DbClient = Depends(get_db_client),
):
    records = db.list_attendance(date=date or None, member_id=member_id or None)
    return [AttendanceResponse.from_record(r) for r in records]


@router.post("/attendance", response_model=list[AttendanceResponse], status_code=201)
def save_attendance_day(
    payload: AttendanceDaySave, db: DbClient = Depends(get_db_client)
):
    """
    Replace the whole day: every stored record for ``date`` is dropped and
    one record per submitted member is written with a shared timestamp.
    """
    timestamp = utc_now_iso()
    by_member: dict[str, AttendanceRecord] = {}
    for entry in payload.records:
        by_member[entry.member_id] = AttendanceRecord(
            member_id=entry.member_id,
            date=payload.date,
            status=parse_attendance_status(entry.status),
            marked_by=payload.marked_by or "",
            timestamp=timestamp,
        )
    try:
        created = db.replace_attendance_day(payload.date, list(by_member.values()))
    except DuplicateRecordError:
        raise _conflict()
    logger.info("Saved %d attendance records for %s", len(created), payload.date)
    return [AttendanceResponse.from_record(r) for r in created]


# Announcements


@router.get("/announcements", response_model=list[AnnouncementResponse])
def list_announcements(db: DbClient = Depends(get_db_client)):
    return [AnnouncementResponse.from_record(a) for a in db.list_announcements()]


@router.post("/announcements", response_model=AnnouncementResponse, status_code=201)
def create_announcement(
    payload: AnnouncementCreate, db: DbClient = Depends(get_db_client)
):
    announcement = db.create_announcement(
        AnnouncementRecord(
            committee_id=payload.committee_id,
            committee_name=payload.committee_name or "",
            title=payload.title,
            content=payload.content,
            category=payload.category,
        )
    )
    return AnnouncementResponse.from_record(announcement)


@router.get(
    "/announcements/{announcement_id}/comments",
    response_model=list[CommentResponse],
)
def list_announcement_comments(
    announcement_id: str, db: DbClient = Depends(get_db_client)
):
    announcement = db.get_announcement(announcement_id)
    if not announcement:
        raise _not_found()
    return [CommentResponse.from_record(c) for c in announcement.comments]


@router.post(
    "/announcements/{announcement_id}/comments",
    response_model=CommentResponse,
    status_code=201,
)
def add_announcement_comment(
    announcement_id: str,
    payload: CommentCreate,
    db: DbClient = Depends(get_db_client),
):
    comment = db.add_announcement_comment(announcement_id, _comment(payload))
    if not comment:
        raise _not_found()
    return CommentResponse.from_record(comment)


def _comment(payload: CommentCreate) -> CommentRecord:
    return CommentRecord(
        user_id=payload.user_id or "",
        user_name=payload.user_name or "",
        content=payload.content or "",
    )


# Permission requests


@router.get("/permissions", response_model=list[PermissionResponse])
def list_permissions(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: DbClient = Depends(get_db_client),
):
    permissions = db.list_permissions(user_id or None)
    return [PermissionResponse.from_record(p) for p in permissions]


@router.post("/permissions", response_model=PermissionResponse, status_code=201)
def create_permission(
    payload: PermissionCreate, db: DbClient = Depends(get_db_client)
):
    permission = db.create_permission(
        PermissionRecord(
            user_id=payload.user_id,
            user_name=payload.user_name or "",
            reason=payload.reason,
            date=payload.date,
        )
    )
    return PermissionResponse.from_record(permission)


@router.patch("/permissions/{permission_id}", response_model=PermissionResponse)
def update_permission_status(
    permission_id: str,
    payload: Optional[PermissionStatusUpdate] = None,
    db: DbClient = Depends(get_db_client),
):
    """Approve, reject, or (for any other value) reset to pending."""
    payload = payload or PermissionStatusUpdate()
    permission = db.set_permission_status(
        permission_id, parse_permission_status(payload.status)
    )
    if not permission:
        raise _not_found()
    return PermissionResponse.from_record(permission)


# Cases


@router.get("/cases", response_model=list[CaseResponse])
def list_cases(
    company_id: Optional[str] = Query(None, alias="companyId"),
    member_id: Optional[str] = Query(None, alias="memberId"),
    db: DbClient = Depends(get_db_client),
):
    cases = db.list_cases(
        company_id=company_id or None, member_id=member_id or None
    )
    return [CaseResponse.from_record(c) for c in cases]


@router.post("/cases", response_model=CaseResponse, status_code=201)
def create_case(payload: CaseCreate, db: DbClient = Depends(get_db_client)):
    case = CaseRecord(
        company_id=payload.company_id,
        reported_by=payload.reported_by,
        reporter_name=payload.reporter_name or "",
        member_id=payload.member_id,
        member_name=payload.member_name or "",
        title=payload.title,
        description=payload.description,
        date=payload.date,
    )
    if payload.reporter_role:
        case.reporter_role = payload.reporter_role
    return CaseResponse.from_record(db.create_case(case))


@router.patch("/cases/{case_id}/decision", response_model=CaseResponse)
def decide_case(
    case_id: str,
    payload: Optional[CaseDecision] = None,
    db: DbClient = Depends(get_db_client),
):
    """
    Move a pending case to suspended or forgiven. Unrecognized decisions
    leave the case untouched; decided cases cannot be decided again.
    """
    payload = payload or CaseDecision()
    case = db.get_case(case_id)
    if not case:
        raise _not_found()

    status = parse_case_decision(payload.decision)
    if status is CaseStatus.PENDING:
        return CaseResponse.from_record(case)

    try:
        decided = db.decide_case(
            case_id,
            status=status,
            decision=payload.decision_text or "",
            decided_by=payload.decided_by or "",
            decided_at=utc_now_iso(),
        )
    except CaseAlreadyDecidedError:
        raise _conflict()
    if not decided:
        raise _not_found()
    logger.info("Case %s decided: %s", case_id, status.value)
    return CaseResponse.from_record(decided)


@router.get("/cases/{case_id}/comments", response_model=list[CommentResponse])
def list_case_comments(case_id: str, db: DbClient = Depends(get_db_client)):
    case = db.get_case(case_id)
    if not case:
        raise _not_found()
    return [CommentResponse.from_record(c) for c in case.comments]


@router.post(
    "/cases/{case_id}/comments", response_model=CommentResponse, status_code=201
)
def add_case_comment(
    case_id: str, payload: CommentCreate, db: DbClient = Depends(get_db_client)
):
    comment = db.add_case_comment(case_id, _comment(payload))
    if not comment:
        raise _not_found()
    return CommentResponse.from_record(comment)


# Ideas


@router.get("/ideas", response_model=list[IdeaResponse])
def list_ideas(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: DbClient = Depends(get_db_client),
):
    return [IdeaResponse.from_record(i) for i in db.list_ideas(user_id or None)]


@router.post("/ideas", response_model=IdeaResponse, status_code=201)
def create_idea(payload: IdeaCreate, db: DbClient = Depends(get_db_client)):
    idea = db.create_idea(
        IdeaRecord(
            user_id=payload.user_id,
            user_name=payload.user_name or "",
            category=payload.category,
            title=payload.title,
            description=payload.description,
        )
    )
    return IdeaResponse.from_record(idea)


@router.patch("/ideas/{idea_id}", response_model=IdeaResponse)
def update_idea_status(
    idea_id: str, payload: IdeaStatusUpdate, db: DbClient = Depends(get_db_client)
):
    idea = db.set_idea_status(idea_id, payload.status)
    if not idea:
        raise _not_found()
    return IdeaResponse.from_record(idea)

from __future__ import annotations
from fastapi import APIRouter, Depends, Response
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nickvote.auth_deps import get_current_student, get_current_admin
from nickvote.config import Settings
from nickvote.db import get_session
from nickvote.errors import AuthenticationRequired
from nickvote.models.admin import Admin
from nickvote.models.student import Student
from nickvote.schemas.auth import (
    LoginRequest, StudentPrincipal, AdminPrincipal, StudentPublic, AdminPublic,
    StudentLoginResponse, AdminLoginResponse,
)
from nickvote.security import app_settings, verify_password, issue_token, session_ttl, STUDENT_COOKIE, ADMIN_COOKIE

router = APIRouter(tags=["auth"])
log = structlog.get_logger()

def set_session_cookie(response: Response, name: str, token: str, settings: Settings) -> None:
    response.set_cookie(
        name, token,
        max_age=int(session_ttl(settings).total_seconds()),
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure,
    )

def student_public(p: StudentPrincipal) -> StudentPublic:
    return StudentPublic(id=p.id, username=p.username, name=p.name, hasVoted=p.has_voted)

@router.post("/login", response_model=StudentLoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(app_settings),
):
    student = await session.scalar(select(Student).where(Student.username == payload.username.strip()))
    if not student or not verify_password(payload.password, student.password_hash):
        log.info("login_failed", role="student")
        raise AuthenticationRequired("Invalid credentials")
    principal = StudentPrincipal(id=student.id, username=student.username, name=student.name, has_voted=student.has_voted)
    set_session_cookie(response, STUDENT_COOKIE, issue_token(principal, settings=settings), settings)
    return StudentLoginResponse(user=student_public(principal))

@router.post("/admin-login", response_model=AdminLoginResponse)
async def admin_login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(app_settings),
):
    admin = await session.scalar(select(Admin).where(Admin.username == payload.username.strip()))
    if not admin or not verify_password(payload.password, admin.password_hash):
        log.info("login_failed", role="admin")
        raise AuthenticationRequired("Invalid admin credentials")
    principal = AdminPrincipal(id=admin.id, username=admin.username)
    set_session_cookie(response, ADMIN_COOKIE, issue_token(principal, settings=settings), settings)
    return AdminLoginResponse(admin=AdminPublic(id=admin.id, username=admin.username))

@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(STUDENT_COOKIE, path="/")
    return {"success": True}

@router.post("/admin-logout")
async def admin_logout(response: Response):
    response.delete_cookie(ADMIN_COOKIE, path="/")
    return {"success": True}

@router.get("/me")
async def me(student: StudentPrincipal = Depends(get_current_student)):
    return {"user": student_public(student)}

@router.get("/admin-me")
async def admin_me(admin: AdminPrincipal = Depends(get_current_admin)):
    return {"admin": AdminPublic(id=admin.id, username=admin.username)}

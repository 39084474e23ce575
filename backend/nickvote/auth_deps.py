from __future__ import annotations
from fastapi import Cookie, Depends
from nickvote.config import Settings
from nickvote.errors import AuthenticationRequired, AuthorizationDenied
from nickvote.schemas.auth import StudentPrincipal, AdminPrincipal
from nickvote.security import app_settings, verify_token, STUDENT_COOKIE, ADMIN_COOKIE

async def get_current_student(
    token: str | None = Cookie(None, alias=STUDENT_COOKIE),
    settings: Settings = Depends(app_settings),
) -> StudentPrincipal:
    if not token:
        raise AuthenticationRequired("Authentication required")
    principal = verify_token(token, settings)
    if principal is None:
        raise AuthenticationRequired("Invalid token")
    if not isinstance(principal, StudentPrincipal):
        raise AuthorizationDenied("Student session required")
    return principal

async def get_current_admin(
    token: str | None = Cookie(None, alias=ADMIN_COOKIE),
    settings: Settings = Depends(app_settings),
) -> AdminPrincipal:
    if not token:
        raise AuthenticationRequired("Admin authentication required")
    principal = verify_token(token, settings)
    if principal is None:
        raise AuthenticationRequired("Invalid admin token")
    if not isinstance(principal, AdminPrincipal):
        raise AuthorizationDenied("Invalid admin token")
    return principal

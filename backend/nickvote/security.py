from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import jwt
from fastapi import Request
from passlib.context import CryptContext
from pydantic import TypeAdapter, ValidationError
from nickvote.config import Settings, settings as default_settings
from nickvote.schemas.auth import Principal, StudentPrincipal, AdminPrincipal

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

JWT_ALG = "HS256"
STUDENT_COOKIE = "token"
ADMIN_COOKIE = "adminToken"

_principal_adapter: TypeAdapter[StudentPrincipal | AdminPrincipal] = TypeAdapter(Principal)

def app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return getattr(request.app.state, "settings", default_settings)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def session_ttl(settings: Settings | None = None) -> timedelta:
    return timedelta(hours=(settings or default_settings).session_ttl_hours)

def issue_token(
    principal: StudentPrincipal | AdminPrincipal,
    ttl: Optional[timedelta] = None,
    settings: Settings | None = None,
) -> str:
    settings = settings or default_settings
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = principal.model_dump(mode="json")
    payload["sub"] = payload.pop("id")
    payload["iat"] = now.timestamp()  # float keeps re-issued tokens distinct
    payload["exp"] = int((now + (ttl or session_ttl(settings))).timestamp())
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALG)

def decode_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    return jwt.decode(token, (settings or default_settings).jwt_secret, algorithms=[JWT_ALG])

def verify_token(token: str, settings: Settings | None = None) -> StudentPrincipal | AdminPrincipal | None:
    """Return the principal encoded in ``token``, or None if it is unusable."""
    try:
        data = decode_token(token, settings)
    except jwt.PyJWTError:
        return None
    data["id"] = data.pop("sub", None)
    try:
        return _principal_adapter.validate_python(data)
    except ValidationError:
        return None

from __future__ import annotations
from fastapi import APIRouter, Depends, Request
from datetime import datetime, timezone
from nickvote.config import Settings
from nickvote.security import app_settings

router = APIRouter()

@router.get("/health")
async def health(request: Request, settings: Settings = Depends(app_settings)):
    return {
        "status": "ok",
        "env": settings.environment,
        "time": datetime.now(timezone.utc).isoformat(),
        "request_id": request.headers.get("x-request-id") or request.state.request_id,
    }

@router.get("/version")
async def version(settings: Settings = Depends(app_settings)):
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "git_sha": settings.git_sha,
    }

from __future__ import annotations
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from nickvote.auth_deps import get_current_student
from nickvote.config import Settings
from nickvote.db import get_session
from nickvote.routes.auth import set_session_cookie
from nickvote.schemas.auth import StudentPrincipal
from nickvote.schemas.vote import VoteSubmission, VoteAccepted
from nickvote.security import app_settings, issue_token, STUDENT_COOKIE
from nickvote.services.voting import submit_votes

router = APIRouter(tags=["votes"])

@router.post("/vote", response_model=VoteAccepted)
async def cast_votes(
    payload: VoteSubmission,
    response: Response,
    session: AsyncSession = Depends(get_session),
    student: StudentPrincipal = Depends(get_current_student),
    settings: Settings = Depends(app_settings),
):
    count = await submit_votes(session, student.id, payload.votes)
    # Refresh the cookie so /me reports the new state
    voted = student.model_copy(update={"has_voted": True})
    set_session_cookie(response, STUDENT_COOKIE, issue_token(voted, settings=settings), settings)
    return VoteAccepted(votesCount=count)

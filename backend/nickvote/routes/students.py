from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nickvote.auth_deps import get_current_student
from nickvote.db import get_session
from nickvote.models.student import Student
from nickvote.schemas.auth import StudentPrincipal
from nickvote.schemas.vote import ClassmateList, ClassmatePublic

router = APIRouter(tags=["students"])

@router.get("/students", response_model=ClassmateList)
async def list_classmates(
    session: AsyncSession = Depends(get_session),
    student: StudentPrincipal = Depends(get_current_student),
):
    rows = (await session.execute(
        select(Student).where(Student.id != student.id).order_by(Student.name.asc())
    )).scalars().all()
    return ClassmateList(students=[ClassmatePublic(id=s.id, name=s.name, username=s.username) for s in rows])

from __future__ import annotations
from fastapi import APIRouter, Depends, Response
import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from nickvote.auth_deps import get_current_admin
from nickvote.db import get_session
from nickvote.schemas.auth import AdminPrincipal
from nickvote.schemas.vote import ResultsResponse
from nickvote.services.spreadsheet import results_workbook, XLSX_MIME, EXPORT_FILENAME
from nickvote.services.tally import voting_results, voting_statistics

router = APIRouter(prefix="/admin", tags=["admin"])
log = structlog.get_logger()

@router.get("/results", response_model=ResultsResponse)
async def results(
    session: AsyncSession = Depends(get_session),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return ResultsResponse(
        results=await voting_results(session),
        statistics=await voting_statistics(session),
    )

@router.get("/export")
async def export(
    session: AsyncSession = Depends(get_session),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    rows = await voting_results(session)
    body = results_workbook(rows)
    log.info("results_exported", admin_id=str(admin.id), rows=len(rows))
    return Response(
        content=body,
        media_type=XLSX_MIME,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.reports.service import ReportService
from app.core.deps import get_db, get_current_active_user, get_now

router = APIRouter()


@router.get(
    "/payments",
    status_code=status.HTTP_200_OK,
    summary="Export payment report to Excel",
    description="Download a class's payment status for one month as an Excel (.xlsx) file.",
    tags=["reports"],
    dependencies=[Depends(get_current_active_user)],
)
async def export_payment_report(
    class_id: UUID = Query(..., description="Class ID"),
    month: str = Query(..., description="Month code (JAN..DEC)"),
    year: int = Query(..., description="Year"),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    filename, content = await ReportService(db).build_payment_report(class_id, month, year, current_year=now.year)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

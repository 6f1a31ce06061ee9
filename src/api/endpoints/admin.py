from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import admin_key_protection, get_report_service
from src.api.schemas import BestClient, BestProfession
from src.services.reports import ReportService

api = APIRouter(prefix="/admin", dependencies=[Depends(admin_key_protection)])
admin_api = api


@api.get("/best-profession", response_model=List[BestProfession], tags=["Admin"])
async def best_profession(
    start: Optional[str] = None,
    end: Optional[str] = None,
    reports: ReportService = Depends(get_report_service),
):
    """The profession that earned the most for jobs paid between start and end."""
    return reports.best_profession(start, end)


@api.get("/best-clients", response_model=List[BestClient], tags=["Admin"])
async def best_clients(
    start: Optional[str] = None,
    end: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    reports: ReportService = Depends(get_report_service),
):
    """Clients who paid the most for jobs between start and end."""
    return reports.best_clients(start, end, limit)

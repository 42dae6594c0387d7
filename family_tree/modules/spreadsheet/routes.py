from datetime import date
from io import BytesIO
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from family_tree.core.dependencies import require_permission, require_role
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from family_tree.modules.spreadsheet.schemas import SpreadsheetTable, ImportResult
from family_tree.modules.spreadsheet.service import SPREADSHEET_MEDIA_TYPE, SpreadsheetService
from typing import List, Optional

router = APIRouter(prefix="/spreadsheet", tags=["spreadsheet"])


def get_spreadsheet_service(backend: Backend = Depends(get_backend)) -> SpreadsheetService:
    return SpreadsheetService(backend)


def xlsx_response(content: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        BytesIO(content),
        media_type=SPREADSHEET_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.get("/tables", response_model=List[SpreadsheetTable])
async def list_tables(
    profile: UserProfile = Depends(require_permission("edit")),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Tables available for export and import, with their row counts"""
    return service.list_tables()


@router.get("/export")
async def export_tables(
    tables: Optional[List[str]] = Query(None),
    profile: UserProfile = Depends(require_permission("edit")),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Download the selected tables (all when none selected) as one xlsx workbook"""
    content = service.export_tables(tables)
    return xlsx_response(content, f"family-tree-export-{date.today().isoformat()}.xlsx")


@router.get("/template/{table}")
async def download_template(
    table: str,
    profile: UserProfile = Depends(require_permission("edit")),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    content = service.template(table)
    return xlsx_response(content, f"template-{table}-{date.today().isoformat()}.xlsx")


@router.post("/import/{table}", response_model=ImportResult)
async def import_table(
    table: str,
    file: UploadFile = File(...),
    profile: UserProfile = Depends(require_role("admin")),
    service: SpreadsheetService = Depends(get_spreadsheet_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    """Upload an xlsx file and upsert its first sheet into the table. Only xlsx files are accepted."""
    if not file.filename or not file.filename.lower().endswith(".xlsx"):
        raise HTTPException(status_code=400, detail="Only xlsx files are accepted")
    result = service.import_rows(table, await file.read())
    notifications.push(profile.id, f"Imported {result.imported} rows into {result.table}")
    return result

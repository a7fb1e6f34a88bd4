"""REST API endpoints for sheetdiff.

Business logic is delegated to:
- parse_workbook: .xlsx parsing
- WorkbookStore: uploaded workbook storage
- compare_workbooks: the diff engine

Endpoints:
- GET  /api/health           - Health check
- GET  /api/health/ready     - Readiness check
- POST /api/upload           - Parse and store an uploaded workbook
- GET  /api/files/{file_id}  - Fetch a stored workbook
- POST /api/compare          - Compare two workbooks (inline or stored)
"""

from pathlib import PurePath
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from sheetdiff.diff import compare_workbooks
from sheetdiff.exceptions import (
    InvalidWorkbookError,
    MissingWorkbookError,
    UnsupportedFileTypeError,
    WorkbookNotFoundError,
    WorkbookParseError,
)
from sheetdiff.models import Workbook
from sheetdiff.parser import parse_workbook
from sheetdiff.server.config import Settings, get_settings
from sheetdiff.storage import WorkbookStore
from sheetdiff.validation import validate_workbooks

router = APIRouter()


def get_store(request: Request) -> WorkbookStore:
    """FastAPI dependency to get the workbook store.

    The store is created with the app and kept in app.state.
    """
    return request.app.state.store


def _reject_oversized(request: Request, settings: Settings) -> None:
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > settings.max_payload_bytes:
        logger.warning(f"Payload too large: {content_length} bytes")
        limit_mb = settings.max_payload_bytes // (1024 * 1024)
        raise HTTPException(
            status_code=413,
            detail=f"File size too large. Please upload files smaller than {limit_mb}MB.",
        )


def _check_extension(file_name: str, settings: Settings) -> None:
    allowed = settings.allowed_extensions_list
    if PurePath(file_name).suffix.lower() not in allowed:
        raise UnsupportedFileTypeError(file_name, allowed)


# =============================================================================
# Health Endpoints
# =============================================================================


@router.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "sheetdiff"}


@router.get("/health/ready")
async def readiness_check(settings: Settings = Depends(get_settings)) -> dict:
    """Readiness check for container orchestrators."""
    return {
        "status": "ready",
        "service": "sheetdiff",
        "environment": settings.environment,
    }


# =============================================================================
# Upload Endpoints
# =============================================================================


@router.post("/upload")
async def upload_workbook(
    request: Request,
    file: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    store: WorkbookStore = Depends(get_store),
) -> dict:
    """Parse an uploaded spreadsheet and keep it for later comparison.

    Returns the file id to pass as ``file1Id``/``file2Id`` to /api/compare.
    """
    _reject_oversized(request, settings)

    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    try:
        _check_extension(file.filename, settings)
    except UnsupportedFileTypeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    content = await file.read()
    if len(content) > settings.max_payload_bytes:
        raise HTTPException(status_code=413, detail="File size too large.")

    try:
        workbook = await run_in_threadpool(parse_workbook, content, file.filename)
    except WorkbookParseError as e:
        logger.warning(f"Error processing Excel file {file.filename}: {e.reason}")
        raise HTTPException(
            status_code=422,
            detail="Failed to process Excel file. Please ensure the file is valid.",
        ) from e

    file_id = store.put(workbook)
    logger.bind(file_id=file_id).info(
        f"Stored {workbook.file_name} as {file_id} ({len(workbook.sheets)} sheets)"
    )
    return {
        "fileId": file_id,
        "fileName": workbook.file_name,
        "sheetCount": len(workbook.sheets),
        "message": f"Uploaded {workbook.file_name} with {len(workbook.sheets)} sheet(s)",
    }


@router.get("/files/{file_id}")
async def get_workbook(
    file_id: str,
    store: WorkbookStore = Depends(get_store),
) -> dict:
    """Return a stored workbook in wire format."""
    try:
        workbook = store.get(file_id)
    except WorkbookNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return workbook.to_dict()


# =============================================================================
# Compare Endpoint
# =============================================================================


def _resolve_input(body: dict[str, Any], key: str, store: WorkbookStore) -> Any:
    """Inline workbook under ``key``, or a stored one under ``{key}Id``."""
    inline = body.get(key)
    file_id = body.get(f"{key}Id")
    if inline is None and file_id:
        try:
            return store.get(str(file_id))
        except WorkbookNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
    return inline


def _log_workbook(label: str, workbook: Workbook) -> None:
    logger.info(f"{label}: {workbook.file_name}, Sheets: {len(workbook.sheets)}")
    for index, sheet in enumerate(workbook.sheets):
        logger.debug(
            f"{label} Sheet {index}: {sheet.name}, Rows: {sheet.max_row}, Cols: {sheet.max_col}"
        )


@router.post("/compare")
async def compare(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: WorkbookStore = Depends(get_store),
) -> dict:
    """Compare two workbooks and return the ComparisonResult.

    The body carries ``file1`` and ``file2`` as inline workbook objects, or
    ``file1Id`` and ``file2Id`` referring to uploads.
    """
    _reject_oversized(request, settings)

    try:
        body = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON data received") from e
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON data received")

    file1 = _resolve_input(body, "file1", store)
    file2 = _resolve_input(body, "file2", store)

    # Payload conversion is CPU-bound
    try:
        old, new = await run_in_threadpool(validate_workbooks, file1, file2)
    except MissingWorkbookError as e:
        logger.warning(
            "Missing file data",
            extra={"has_file1": e.has_file1, "has_file2": e.has_file2},
        )
        raise HTTPException(status_code=400, detail=str(e)) from e
    except InvalidWorkbookError as e:
        logger.warning(f"Invalid {e.side} structure: {e.reason}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("Comparison error")
        raise HTTPException(status_code=500, detail=f"Comparison failed: {e}") from e

    _log_workbook("File 1", old)
    _log_workbook("File 2", new)

    try:
        result = await run_in_threadpool(compare_workbooks, old, new)
    except Exception as e:
        logger.exception("Comparison error")
        raise HTTPException(status_code=500, detail=f"Comparison failed: {e}") from e

    logger.info(f"Comparison completed. Total changes: {result.total_changes}")
    return result.to_dict()

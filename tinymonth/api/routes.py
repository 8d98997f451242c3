from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from starlette.requests import Request

from .models import HealthResponse, StatsResponse, WriteResponse
from ..config import AppConfig
from ..core.document import Document, DocumentPatch, ExportDocument, Holiday
from ..core.holidays import generate_holidays, holidays_for_year
from ..core.state import annual_stats
from ..core.store import DocumentStore, StoreError
from ..core.transfer import export_filename

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> DocumentStore:
    store: DocumentStore = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Store not initialized")
    return store


def get_config(request: Request) -> AppConfig:
    return getattr(request.app.state, "config", None) or AppConfig()


async def _read_document(store: DocumentStore) -> Document:
    try:
        return await store.read()
    except StoreError as e:
        logger.error("Error reading data: %s", e)
        raise HTTPException(status_code=500, detail="Failed to read data")


@router.get("/", response_model=HealthResponse)
async def health_check(store: DocumentStore = Depends(get_store)):
    return HealthResponse(store_backend=type(store).__name__)


@router.get("/api/data")
async def read_data(store: DocumentStore = Depends(get_store)):
    document = await _read_document(store)
    logger.info("GET /api/data: %d calendars", len(document.calendars))
    return document.to_json_dict()


@router.put("/api/data", response_model=WriteResponse)
async def write_data(patch: DocumentPatch, store: DocumentStore = Depends(get_store)):
    current = await _read_document(store)
    try:
        await store.write(patch.apply_to(current))
    except StoreError as e:
        logger.error("Error writing data: %s", e)
        raise HTTPException(status_code=500, detail="Failed to write data")
    return WriteResponse()


@router.get("/api/holidays", response_model=List[Holiday])
async def list_holidays(year: Optional[int] = Query(default=None, ge=1583, le=9999),
                        config: AppConfig = Depends(get_config)):
    if year is not None:
        return holidays_for_year(year)
    return generate_holidays(config.holiday_start_year, config.holiday_end_year)


@router.get("/api/stats/{year}", response_model=StatsResponse)
async def year_stats(year: int, store: DocumentStore = Depends(get_store)):
    document = await _read_document(store)
    return StatsResponse(year=year, counts=annual_stats(document, year))


@router.get("/api/export")
async def export_data(store: DocumentStore = Depends(get_store)):
    document = await _read_document(store)
    export = ExportDocument.from_document(document)
    return JSONResponse(
        content=export.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )

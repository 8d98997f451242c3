from typing import Dict
from pydantic import BaseModel

from .. import __version__


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = __version__
    store_backend: str


class WriteResponse(BaseModel):
    ok: bool = True


class StatsResponse(BaseModel):
    year: int
    counts: Dict[str, int]

from __future__ import annotations
import logging
from pathlib import Path

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.dependencies import SettingsDep
from .services import MissingMetaSectionError, load_metadata

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["metadata"])

# Sync handler: FastAPI runs it in the threadpool, so the file read doesn't block the loop.
@router.get("/metadata")
def get_metadata(settings: SettingsDep):
    try:
        meta = load_metadata(settings.metadata_path)
    except MissingMetaSectionError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_SERVER_ERROR", "message": str(e)},
        )
    except Exception:
        log.exception("Error reading metadata from %s", settings.metadata_path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_SERVER_ERROR",
                "message": f"Failed to read metadata from {Path(settings.metadata_path).name}",
            },
        )
    # TOML dates/times become ISO strings
    return JSONResponse(content=jsonable_encoder(meta))

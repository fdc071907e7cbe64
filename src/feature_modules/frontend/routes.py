from __future__ import annotations
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.dependencies import FrontendProxyDep, SettingsDep
from .static import serve_static

router = APIRouter(tags=["frontend"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

def not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not Found", "message": "Endpoint not found"})

# Must be included after every API router: it matches everything.
@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def frontend_fallback(
    request: Request,
    full_path: str,
    settings: SettingsDep,
    proxy: FrontendProxyDep,
):
    mode = settings.effective_serve_mode
    if mode == "proxy":
        return await proxy.forward(request)
    if mode == "static":
        return serve_static(settings.static_dir, request.url.path)
    return not_found()

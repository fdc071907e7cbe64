from __future__ import annotations
from pathlib import Path

from starlette.responses import FileResponse, PlainTextResponse, Response

from .utils import CONTENT_TYPES, ENTRY_FILE, content_type_for, resolve_under


def serve_static(static_dir: str | Path, url_path: str) -> Response:
    """
    Serve a built asset from static_dir. Unknown paths get the entry file so
    client-side routing works; 404 only when the entry file is missing too.
    """
    root = Path(static_dir).resolve()
    target = resolve_under(root, url_path)
    if target is not None and target.is_file():
        return FileResponse(target, media_type=content_type_for(target))

    entry = root / ENTRY_FILE
    if entry.is_file():
        return FileResponse(entry, media_type=CONTENT_TYPES[".html"])
    return PlainTextResponse("Not Found", status_code=404)

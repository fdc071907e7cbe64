# src/feature_modules/frontend/utils.py
from __future__ import annotations
from pathlib import Path

ENTRY_FILE = "index.html"
FALLBACK_MIME = "application/octet-stream"

# Built frontend assets only; anything else is served as binary.
CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".map": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".txt": "text/plain; charset=utf-8",
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
}

def content_type_for(p: Path) -> str:
    return CONTENT_TYPES.get(p.suffix.lower(), FALLBACK_MIME)

def resolve_under(root: Path, url_path: str) -> Path | None:
    """Map a request path to a file under root; None if it escapes root."""
    rel = url_path.lstrip("/") or ENTRY_FILE
    candidate = (root / rel).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    return candidate

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from src.feature_modules.transcription.adapters.deepgram import Transcriber
from src.feature_modules.transcription.config import DEFAULT_MODEL, FALLBACK_MIMETYPE
from src.feature_modules.transcription.errors import TranscriptionError, TranscriptionInputError
from src.feature_modules.transcription.schemas import (
    ErrorBody,
    ErrorDetails,
    ErrorResponse,
    TranscriptionMetadata,
    TranscriptionResponse,
)

logger = logging.getLogger("uvicorn.error")


@dataclass
class TranscriptionInput:
    url: Optional[str] = None
    buffer: Optional[bytes] = None
    mimetype: Optional[str] = None


def validate_transcription_input(file: Any, url: Any) -> Optional[TranscriptionInput]:
    """
    URL wins when both are present. The file buffer is filled in later by the
    caller; only the mimetype is captured here.
    """
    if isinstance(url, str) and url:
        return TranscriptionInput(url=url)
    if isinstance(file, UploadFile):
        return TranscriptionInput(mimetype=file.content_type or FALLBACK_MIMETYPE)
    return None


async def transcribe_audio(transcriber: Transcriber, dg_request: TranscriptionInput, model: str = DEFAULT_MODEL) -> Any:
    if dg_request.url:
        return await transcriber.transcribe_url(dg_request.url, model=model)
    if dg_request.buffer is not None:
        return await transcriber.transcribe_file(
            dg_request.buffer,
            mimetype=dg_request.mimetype or FALLBACK_MIMETYPE,
            model=model,
        )
    raise TranscriptionError("Invalid transcription request")


def _first(seq: Any) -> Any:
    if isinstance(seq, list) and seq:
        return seq[0]
    return None


def format_transcription_response(raw: Any, model_name: str) -> TranscriptionResponse:
    raw = raw if isinstance(raw, dict) else {}
    results = raw.get("results") or {}
    channel = _first(results.get("channels")) if isinstance(results, dict) else None
    alternative = _first(channel.get("alternatives")) if isinstance(channel, dict) else None
    if not isinstance(alternative, dict):
        raise TranscriptionError("No transcription results returned from Deepgram")

    provider_meta = raw.get("metadata")
    provider_meta = provider_meta if isinstance(provider_meta, dict) else {}

    # Only set what the provider actually sent; unset keys are left out of the JSON.
    meta_fields = {
        key: provider_meta[key]
        for key in ("model_uuid", "request_id")
        if provider_meta.get(key) is not None
    }
    fields: dict[str, Any] = {
        "transcript": alternative.get("transcript") or "",
        "words": alternative.get("words") or [],
        "metadata": TranscriptionMetadata(model_name=model_name, **meta_fields),
    }
    if provider_meta.get("duration") is not None:
        fields["duration"] = provider_meta["duration"]
    return TranscriptionResponse(**fields)


def format_error_response(error: Exception, status_code: int = 500, code: Optional[str] = None) -> JSONResponse:
    is_validation = status_code == 400
    body = ErrorResponse(
        error=ErrorBody(
            type="ValidationError" if is_validation else "TranscriptionError",
            code=code or ("MISSING_INPUT" if is_validation else "TRANSCRIPTION_FAILED"),
            message=str(error) or "An error occurred during transcription",
            details=ErrorDetails(
                originalError=f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
            ),
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def transcribe_request(*, request: Request, transcriber: Transcriber) -> JSONResponse:
    try:
        form = await request.form()
        file = form.get("file")
        url = form.get("url")
        model = form.get("model")
        if not isinstance(model, str) or not model:
            model = DEFAULT_MODEL

        has_file = isinstance(file, UploadFile)
        logger.info(
            "[STT] request: has_file=%s%s has_url=%s%s model=%s",
            has_file,
            f" (name={file.filename}, size={file.size}, type={file.content_type})" if has_file else "",
            bool(url),
            f" ({url})" if url else "",
            model,
        )

        dg_request = validate_transcription_input(file, url)
        if dg_request is None:
            return format_error_response(
                TranscriptionInputError("Either file or url must be provided"),
                400,
                "MISSING_INPUT",
            )

        # File mode: read the whole upload before calling the provider
        if dg_request.url is None:
            dg_request.buffer = await file.read()
            logger.info(
                "[STT] file read: name=%s bytes=%d mimetype=%s",
                file.filename, len(dg_request.buffer), dg_request.mimetype,
            )

        raw = await transcribe_audio(transcriber, dg_request, model)
        response = format_transcription_response(raw, model)
        return JSONResponse(content=response.model_dump(exclude_unset=True))
    except Exception as e:
        logger.exception("[STT] transcription error")
        return format_error_response(e)

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class TranscriptionMetadata(BaseModel):
    model_uuid: Optional[str] = None
    request_id: Optional[str] = None
    model_name: str


class TranscriptionResponse(BaseModel):
    transcript: str = ""
    words: list[Any] = Field(default_factory=list)
    metadata: TranscriptionMetadata
    duration: Optional[float] = None


class ErrorDetails(BaseModel):
    originalError: str


class ErrorBody(BaseModel):
    type: Literal["ValidationError", "TranscriptionError"]
    code: str
    message: str
    details: ErrorDetails


class ErrorResponse(BaseModel):
    error: ErrorBody

from fastapi import APIRouter, Request

from src.dependencies import TranscriberDep
from src.feature_modules.transcription.schemas import ErrorResponse, TranscriptionResponse
from src.feature_modules.transcription.services import transcribe_request

router = APIRouter(prefix="/stt", tags=["stt"])

@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def post_transcribe(request: Request, transcriber: TranscriberDep):
    """
    Multipart form: `file` (audio upload) or `url`, optional `model`.
    URL takes precedence when both are sent.
    """
    return await transcribe_request(request=request, transcriber=transcriber)

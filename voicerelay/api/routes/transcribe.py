"""
Transcription relay endpoint.

``POST /transcribe`` streams the multipart body into a temporary artifact,
forwards it to the upstream provider and returns the text. The artifact is
removed before the response leaves, on every exit path.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from voicerelay.api.dependencies import SettingsDep, TranscriberDep
from voicerelay.core.models import ErrorResponse, TranscriptionResponse
from voicerelay.services.ingestion import receive_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcription"])


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def transcribe(
    request: Request,
    settings: SettingsDep,
    transcriber: TranscriberDep,
) -> TranscriptionResponse:
    """Transcribe one uploaded audio file (multipart/form-data, field ``audio``)."""
    content_type = request.headers.get("content-type", "")
    async with receive_upload(content_type, request.stream(), settings) as artifact:
        text = await transcriber.transcribe(artifact)
    return TranscriptionResponse(text=text, timestamp=datetime.now(UTC))

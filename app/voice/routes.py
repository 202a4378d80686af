# app/voice/routes.py
import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, Field

from app.shared.exceptions import GenerationFailed, ValidationError
from app.users.auth_dependencies import get_current_user
from app.voice.voice_client import speech_client
from config.llmconfig import llm_settings

router = APIRouter(dependencies=[Depends(get_current_user)])
logger = logging.getLogger(__name__)


class TranscriptionResponse(BaseModel):
    text: str


class SynthesisRequest(BaseModel):
    text: str = Field(..., min_length=1)


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(audio: UploadFile = File(...)):
    """Dictation -> text (Portuguese by default)."""
    content = await audio.read()
    if not content:
        raise ValidationError("Audio file is empty", field="audio")
    if len(content) > llm_settings.MAX_AUDIO_BYTES:
        raise ValidationError("Audio file too large. Max 25MB.", field="audio")

    try:
        text = await speech_client.transcribe(content, audio.filename or "recording.webm")
    except Exception as e:
        logger.error(f"❌ Transcription failed: {e}")
        raise GenerationFailed("Failed to transcribe audio") from e
    return TranscriptionResponse(text=text)


@router.post("/synthesize")
async def synthesize_speech(request: SynthesisRequest):
    """Text -> mp3 audio."""
    try:
        audio = await speech_client.synthesize(request.text)
    except Exception as e:
        logger.error(f"❌ Speech synthesis failed: {e}")
        raise GenerationFailed("Failed to synthesize speech") from e
    return Response(content=audio, media_type="audio/mpeg")

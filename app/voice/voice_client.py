# app/voice/voice_client.py
"""
Speech client (OpenAI audio endpoints)
- transcribe: dictated rounds -> text, in the ward's language
- synthesize: note text -> mp3
"""
import io
import logging
import os

from openai import AsyncOpenAI

from config.llmconfig import llm_settings

logger = logging.getLogger(__name__)


class SpeechClient:
    _instance = None
    _client = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = llm_settings.OPENAI_API_KEY or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY not found in environment")
            self._client = AsyncOpenAI(api_key=api_key)
        return self._client

    async def transcribe(self, audio: bytes, filename: str = "recording.webm") -> str:
        buffer = io.BytesIO(audio)
        buffer.name = filename  # the API infers the container from the name
        logger.info(f"🎙️  Transcribing {len(audio)} bytes with {llm_settings.STT_MODEL}")
        result = await self._get_client().audio.transcriptions.create(
            model=llm_settings.STT_MODEL,
            file=buffer,
            language=llm_settings.TRANSCRIPTION_LANGUAGE,
        )
        text = result.text.strip()
        logger.info(f"✓ Transcription: {len(text)} characters")
        return text

    async def synthesize(self, text: str) -> bytes:
        logger.info(f"🔊 Synthesizing {len(text)} characters with {llm_settings.TTS_MODEL}/{llm_settings.TTS_VOICE}")
        response = await self._get_client().audio.speech.create(
            model=llm_settings.TTS_MODEL,
            voice=llm_settings.TTS_VOICE,
            input=text,
        )
        return response.content


# Global instance
speech_client = SpeechClient()

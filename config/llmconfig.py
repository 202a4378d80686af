# config/llmconfig.py
"""
LLM Configuration
Text generation for note drafting, literature suggestions and the patient chat,
plus the speech endpoints used for dictation.
Supports: Ollama, OpenAI, Claude, Groq, Gemini
"""
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMSettings(BaseSettings):
    """Configuration for the note-generation language models"""

    # ============================================================================
    # LLM SELECTION
    # ============================================================================
    LLM_PROVIDER: Literal["ollama", "openai", "claude", "groq", "gemini"] = "openai"

    # ── Ollama (Local, Free) ──
    OLLAMA_LLM_MODEL: str = "llama3.1:8b"
    OLLAMA_BASE_URL: str = "http://localhost:11434"

    # ── OpenAI (Cloud, Paid) ──
    OPENAI_API_KEY: str = Field(default="", env="OPENAI_API_KEY")
    OPENAI_LLM_MODEL: str = "gpt-4o"

    # ── Claude (Cloud, Paid) ──
    CLAUDE_API_KEY: str = Field(default="", env="CLAUDE_API_KEY")
    CLAUDE_LLM_MODEL: str = "claude-3-5-sonnet-20241022"

    # ── Groq (Cloud, fast inference) ──
    GROQ_API_KEY: str = Field(default="", env="GROQ_API_KEY")
    GROQ_LLM_MODEL: str = "llama-3.3-70b-versatile"

    # ── Gemini (Google Cloud, long context) ──
    GEMINI_API_KEY: str = Field(default="", env="GEMINI_API_KEY")
    GEMINI_LLM_MODEL: str = "gemini-2.0-flash-exp"

    # ============================================================================
    # GENERATION SETTINGS
    # ============================================================================
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4096          # full evolution note
    SUGGESTIONS_MAX_TOKENS: int = 1024  # literature suggestions (JSON)
    CHAT_HISTORY_LIMIT: int = 10        # messages replayed into the chat prompt

    # ============================================================================
    # SPEECH (OpenAI audio endpoints)
    # ============================================================================
    STT_MODEL: str = "whisper-1"
    TTS_MODEL: str = "tts-1"
    TTS_VOICE: Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"] = "nova"
    TRANSCRIPTION_LANGUAGE: str = "pt"
    MAX_AUDIO_BYTES: int = 25 * 1024 * 1024

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def current_llm_model(self) -> str:
        """Get active LLM model based on provider."""
        provider_map = {
            "ollama": self.OLLAMA_LLM_MODEL,
            "openai": self.OPENAI_LLM_MODEL,
            "claude": self.CLAUDE_LLM_MODEL,
            "groq": self.GROQ_LLM_MODEL,
            "gemini": self.GEMINI_LLM_MODEL,
        }
        return provider_map.get(self.LLM_PROVIDER, self.OPENAI_LLM_MODEL)


llm_settings = LLMSettings()

# config/config_schemas.py
"""
Configuration Schemas for the note-generation models
Used by: /api/system/llm-config

Design: In-memory configuration (no database persistence)
- GET /llm-config → returns current settings
- POST /llm-config → updates settings in-memory (partial updates supported)
- Settings reset to file defaults on application restart
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field


# ============================================================================
# LLM CONFIGURATION
# ============================================================================
class LLMConfigRequest(BaseModel):
    """
    Request to update LLM configuration.
    All fields are optional, send only what you want to change.
    """

    # ── Provider and Models ──
    llm_provider: Optional[Literal["ollama", "openai", "claude", "groq", "gemini"]] = Field(
        None, description="LLM provider used for evolutions, suggestions and chat"
    )
    ollama_llm_model: Optional[str] = Field(
        None, description="Ollama model name", examples=["llama3.1:8b", "mixtral:8x7b"]
    )
    openai_llm_model: Optional[str] = Field(
        None, description="OpenAI model name", examples=["gpt-4o", "gpt-4o-mini"]
    )
    claude_llm_model: Optional[str] = Field(
        None, description="Claude model name", examples=["claude-3-5-sonnet-20241022"]
    )
    groq_llm_model: Optional[str] = Field(None, description="Groq model name")
    gemini_llm_model: Optional[str] = Field(None, description="Gemini model name")

    # ── Generation Settings ──
    llm_temperature: Optional[float] = Field(
        None,
        ge=0.0,
        le=2.0,
        description="Temperature: 0.0=deterministic, low values recommended for clinical notes",
    )
    llm_max_tokens: Optional[int] = Field(
        None, ge=256, le=16000, description="Maximum tokens for a generated evolution"
    )
    suggestions_max_tokens: Optional[int] = Field(
        None, ge=128, le=4000, description="Maximum tokens for reading suggestions"
    )
    chat_history_limit: Optional[int] = Field(
        None, ge=0, le=50, description="Previous chat messages replayed into the prompt"
    )


class LLMConfigResponse(BaseModel):
    """Current LLM configuration (complete state)."""

    llm_provider: str
    current_llm_model: str  # Computed: the active model based on provider
    ollama_llm_model: str
    openai_llm_model: str
    claude_llm_model: str
    groq_llm_model: str
    gemini_llm_model: str

    llm_temperature: float
    llm_max_tokens: int
    suggestions_max_tokens: int
    chat_history_limit: int

    class Config:
        json_schema_extra = {
            "example": {
                "llm_provider": "openai",
                "current_llm_model": "gpt-4o",
                "llm_temperature": 0.2,
                "llm_max_tokens": 4096,
            }
        }

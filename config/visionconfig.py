# config/visionconfig.py
"""
Vision Model Configuration
Reads photographed lab sheets and exam printouts.
Supports: GPT-4o, Claude, LLaVA / Llama 3.2 Vision (Ollama)
"""
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class VisionSettings(BaseSettings):
    """Configuration for the lab-sheet reader"""

    # ========================================================================
    # PRIMARY VISION MODEL SELECTION
    # ========================================================================
    # "gpt4v"  → best transcription of dense tables (API cost per image)
    # "claude" → equally good, better at keeping the original layout
    # "llava"  → local, free; misreads small print on phone photos
    VISION_MODEL_PROVIDER: Literal["gpt4v", "claude", "llava"] = "gpt4v"

    # ========================================================================
    # MODELS
    # ========================================================================
    GPT4V_MODEL: str = "gpt-4o"
    CLAUDE_VISION_MODEL: str = "claude-3-5-sonnet-20241022"
    LLAVA_MODEL: str = "llama3.2-vision"

    # ========================================================================
    # PROPRIETARY API KEYS
    # ========================================================================
    OPENAI_API_KEY: str = Field(default="", env="OPENAI_API_KEY")
    ANTHROPIC_API_KEY: str = Field(default="", env="ANTHROPIC_API_KEY")

    # ========================================================================
    # IMAGE PROCESSING
    # ========================================================================
    MAX_IMAGE_SIZE: int = 2048  # Max dimension; lab tables need the resolution
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    SUPPORTED_FORMATS: list = ["image/jpeg", "image/png", "image/webp"]

    # Phone photos of printouts (only for LLaVA)
    ENHANCE_CONTRAST: bool = False
    CONTRAST_FACTOR: float = 1.5
    BRIGHTNESS_FACTOR: float = 1.2

    # ========================================================================
    # ANALYSIS SETTINGS
    # ========================================================================
    VISION_TEMPERATURE: float = 0.0  # Transcription must be deterministic
    VISION_MAX_TOKENS: int = 2000

    @property
    def current_vision_model(self) -> str:
        """Get the active model name for display"""
        if self.VISION_MODEL_PROVIDER == "llava":
            return self.LLAVA_MODEL
        elif self.VISION_MODEL_PROVIDER == "claude":
            return self.CLAUDE_VISION_MODEL
        return self.GPT4V_MODEL

    class Config:
        env_file = ".env"
        extra = "ignore"


vision_settings = VisionSettings()

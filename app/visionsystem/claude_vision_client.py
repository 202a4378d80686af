# app/visionsystem/claude_vision_client.py
"""
Claude Vision Client - lab sheet transcription
"""
from PIL import Image
import base64
from io import BytesIO
import os
import logging
from anthropic import Anthropic

from app.visionsystem.prompts import LAB_SHEET_PROMPT
from config.visionconfig import vision_settings

logger = logging.getLogger(__name__)


class ClaudeVisionClient:
    """Claude Vision client for photographed lab results."""

    _instance = None
    _client = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _get_client(self):
        if self._client is None:
            api_key = vision_settings.ANTHROPIC_API_KEY or os.getenv("CLAUDE_API_KEY")
            if not api_key:
                raise ValueError("ANTHROPIC_API_KEY / CLAUDE_API_KEY not found in environment")
            self._client = Anthropic(api_key=api_key)
        return self._client

    def _get_model_name(self):
        return vision_settings.CLAUDE_VISION_MODEL

    def _encode_image(self, image: Image.Image) -> str:
        """Convert PIL Image to base64."""
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return base64.b64encode(buffer.getvalue()).decode()

    def analyze_image(self, image: Image.Image, prompt: str = None) -> str:
        client = self._get_client()
        b64_image = self._encode_image(image)

        logger.info("Reading lab sheet with Claude Vision...")

        try:
            response = client.messages.create(
                model=self._get_model_name(),
                max_tokens=vision_settings.VISION_MAX_TOKENS,
                temperature=vision_settings.VISION_TEMPERATURE,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": "image/png",
                                    "data": b64_image
                                }
                            },
                            {
                                "type": "text",
                                "text": prompt or LAB_SHEET_PROMPT
                            }
                        ]
                    }
                ]
            )

            result = "".join(block.text for block in response.content if block.type == "text")
            logger.info(f"Claude transcription complete: {len(result)} characters")
            return result

        except Exception as e:
            logger.error(f"Claude Vision analysis failed: {e}")
            raise


# Global instance
claude_vision_client = ClaudeVisionClient()

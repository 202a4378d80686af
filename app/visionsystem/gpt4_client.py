# app/visionsystem/gpt4_client.py
"""
GPT-4o Vision Client - lab sheet transcription
"""
import os
import base64
import logging
from io import BytesIO

from PIL import Image
from openai import OpenAI

from app.visionsystem.prompts import LAB_SHEET_PROMPT
from config.visionconfig import vision_settings

logger = logging.getLogger(__name__)


class GPT4VisionClient:
    """GPT-4o client for photographed lab results."""

    _instance = None
    _client = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _get_client(self):
        if self._client is None:
            api_key = vision_settings.OPENAI_API_KEY or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY not found in environment")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def _get_model_name(self):
        return vision_settings.GPT4V_MODEL

    def _encode_image(self, image: Image.Image) -> str:
        """Convert PIL Image to base64."""
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return base64.b64encode(buffer.getvalue()).decode()

    def analyze_image(self, image: Image.Image, prompt: str = None) -> str:
        client = self._get_client()
        b64_image = self._encode_image(image)
        model_name = self._get_model_name()

        logger.info(f"Reading lab sheet with {model_name}...")

        try:
            response = client.chat.completions.create(
                model=model_name,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt or LAB_SHEET_PROMPT},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": f"data:image/png;base64,{b64_image}",
                                    "detail": "high",  # small print on lab tables
                                },
                            },
                        ],
                    }
                ],
                max_tokens=vision_settings.VISION_MAX_TOKENS,
                temperature=vision_settings.VISION_TEMPERATURE,
            )

            result = response.choices[0].message.content or ""
            logger.info(f"GPT-4o transcription complete: {len(result)} characters")
            return result

        except Exception as e:
            logger.error(f"GPT-4o analysis failed: {e}")
            raise


# Global instance
gpt4v_client = GPT4VisionClient()

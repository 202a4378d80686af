# app/visionsystem/llava_client.py
"""
LLaVA / Llama 3.2 Vision client (Ollama) - lab sheet transcription
"""
import base64
from io import BytesIO
from PIL import Image, ImageEnhance
import ollama
import logging

from app.visionsystem.prompts import LAB_SHEET_PROMPT
from config.visionconfig import vision_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a meticulous transcriptionist of hospital laboratory reports written in Brazilian Portuguese.
You copy values exactly as printed, keep units and reference ranges, and never invent results that are not visible."""


class LlavaClient:
    """Local vision model served by Ollama."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _get_model_name(self):
        return vision_settings.LLAVA_MODEL

    def _encode_image(self, image: Image.Image) -> str:
        """Convert PIL Image to base64 with optional contrast boost for phone photos."""
        if vision_settings.ENHANCE_CONTRAST:
            image = ImageEnhance.Contrast(image).enhance(vision_settings.CONTRAST_FACTOR)
            image = ImageEnhance.Brightness(image).enhance(vision_settings.BRIGHTNESS_FACTOR)

        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return base64.b64encode(buffer.getvalue()).decode()

    def analyze_image(self, image: Image.Image, prompt: str = None) -> str:
        model_name = self._get_model_name()
        b64_image = self._encode_image(image)

        logger.info(f"Reading lab sheet with {model_name}...")

        try:
            response = ollama.chat(
                model=model_name,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": prompt or LAB_SHEET_PROMPT,
                        "images": [b64_image]
                    }
                ],
                options={
                    "temperature": vision_settings.VISION_TEMPERATURE,
                    "num_predict": vision_settings.VISION_MAX_TOKENS,
                }
            )

            result = response["message"]["content"]
            logger.info(f"LLaVA transcription complete: {len(result)} characters")
            logger.info(
                f"   Token usage: {response.get('prompt_eval_count')} prompt, "
                f"{response.get('eval_count')} completion"
            )
            return result

        except Exception as e:
            logger.error(f"LLaVA analysis failed: {e}")
            raise


# Global instance
llava_client = LlavaClient()

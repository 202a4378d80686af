# app/visionsystem/vision_client.py
"""
Unified Vision Client
Routes lab-sheet images to the configured model and splits the answer into
the transcription and the lab values the model returned as JSON.
"""
import logging
import re
from typing import Dict, Optional

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import JsonOutputParser
from PIL import Image

from config.visionconfig import vision_settings

logger = logging.getLogger(__name__)

FENCED_BLOCK = re.compile(r"```(?:json)?[\s\S]*?```")

lab_parser = JsonOutputParser()


def extract_labs(text: str) -> Optional[Dict[str, str]]:
    """
    Lab key/value pairs from the model's JSON block, or None.
    A fenced ```json block wins over a trailing bare object.
    """
    text = text or ""
    match = FENCED_BLOCK.search(text)
    if match:
        candidate = match.group(0)
    elif "{" in text:
        candidate = text[text.rfind("{"):]
    else:
        return None

    try:
        parsed = lab_parser.parse(candidate)
    except OutputParserException:
        logger.warning("⚠️  Lab JSON block is not valid JSON")
        return None
    if isinstance(parsed, dict) and parsed:
        return {str(key): str(value) for key, value in parsed.items()}
    return None


def strip_labs_block(text: str) -> str:
    return FENCED_BLOCK.sub("", text or "").strip()


class VisionClient:
    """
    Unified interface to all vision models.
    Automatically routes to the correct model based on vision_settings.VISION_MODEL_PROVIDER
    """

    _instance = None
    _clients = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _get_client(self):
        """Get the appropriate vision client based on configuration."""
        provider = vision_settings.VISION_MODEL_PROVIDER

        # Lazy load clients only when needed
        if provider not in self._clients:
            if provider == "llava":
                from app.visionsystem.llava_client import llava_client
                self._clients["llava"] = llava_client
            elif provider == "gpt4v":
                from app.visionsystem.gpt4_client import gpt4v_client
                self._clients["gpt4v"] = gpt4v_client
            elif provider == "claude":
                from app.visionsystem.claude_vision_client import claude_vision_client
                self._clients["claude"] = claude_vision_client
            else:
                raise ValueError(f"Unknown vision provider: {provider}")

        return self._clients[provider]

    def read_lab_sheet(self, image: Image.Image) -> Dict:
        """
        Transcribe a lab sheet.

        Returns:
            dict with:
                - text: transcription without the JSON block
                - labs: parsed lab values, or None
                - structured: whether labs were parsed
                - model: which model was used
        """
        client = self._get_client()
        logger.info(f"🔬 Reading lab sheet with {vision_settings.VISION_MODEL_PROVIDER}...")

        raw = client.analyze_image(image)
        labs = extract_labs(raw)
        if labs:
            logger.info(f"✅ {len(labs)} lab value(s) parsed")
        else:
            logger.info("⚠️  No structured lab values in the answer")

        return {
            "text": strip_labs_block(raw) if labs else raw.strip(),
            "labs": labs,
            "structured": labs is not None,
            "model": vision_settings.current_vision_model,
        }


# Global instance
vision_client = VisionClient()

# app/visionsystem/image_processor.py
from PIL import Image, UnidentifiedImageError
import io
from config.visionconfig import vision_settings
from app.shared.exceptions import ValidationError
import logging

logger = logging.getLogger(__name__)


class ImageProcessor:
    """Handle image preprocessing before it is sent to a vision model."""

    @staticmethod
    def preprocess_image(image_bytes: bytes, max_size: int = None) -> Image.Image:
        """Decode, convert to RGB and shrink to ``max_size`` on the longest side."""
        max_size = max_size or vision_settings.MAX_IMAGE_SIZE

        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Image preprocessing failed: {e}")
            raise ValidationError(f"Invalid image file: {e}", field="image")

        logger.info(f"Loaded image: {image.format}, mode={image.mode}, size={image.size}")

        if image.mode != 'RGB':
            logger.info(f"Converting image from {image.mode} to RGB")
            image = image.convert('RGB')

        # Resize if too large (maintain aspect ratio)
        if max(image.size) > max_size:
            ratio = max_size / max(image.size)
            new_size = (int(image.size[0] * ratio), int(image.size[1] * ratio))
            image = image.resize(new_size, Image.Resampling.LANCZOS)
            logger.info(f"Resized image to {new_size}")

        return image

    @staticmethod
    def validate_image(content_type: str, size_bytes: int) -> bool:
        """Validate uploaded image meets requirements."""
        if content_type not in vision_settings.SUPPORTED_FORMATS:
            raise ValidationError(
                f"Unsupported format: {content_type}. Use: {vision_settings.SUPPORTED_FORMATS}",
                field="image",
            )
        if size_bytes > vision_settings.MAX_IMAGE_BYTES:
            raise ValidationError("Image too large. Max 10MB.", field="image")
        return True

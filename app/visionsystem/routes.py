# app/visionsystem/routes.py
"""
Lab-sheet OCR
Photo of a lab printout -> transcription + lab values, ready to paste into the day's input.
"""
import logging
import time

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.shared.exceptions import GenerationFailed
from app.users.auth_dependencies import get_current_user
from app.visionsystem.image_processor import ImageProcessor
from app.visionsystem.vision_client import vision_client
from app.visionsystem.vision_schemas import LabSheetResponse
from config.visionconfig import vision_settings

router = APIRouter(dependencies=[Depends(get_current_user)])
logger = logging.getLogger(__name__)


@router.post("/analyze", response_model=LabSheetResponse)
async def analyze_lab_sheet(image: UploadFile = File(...)):
    """Read a photographed lab sheet with the configured vision model."""
    logger.info(f"\n{'='*70}")
    logger.info("LAB SHEET OCR")
    logger.info(f"{'='*70}")
    logger.info(f"🔍 Vision Model: {vision_settings.VISION_MODEL_PROVIDER} - {vision_settings.current_vision_model}")

    content = await image.read()
    ImageProcessor.validate_image(image.content_type, len(content))
    pil_image = ImageProcessor.preprocess_image(content)

    start_time = time.time()
    try:
        result = await run_in_threadpool(vision_client.read_lab_sheet, pil_image)
    except Exception as e:
        logger.error(f"❌ Lab sheet OCR failed: {e}")
        raise GenerationFailed("Failed to analyze image") from e
    elapsed = time.time() - start_time
    logger.info(f"✅ Analysis complete in {elapsed:.2f}s")

    return LabSheetResponse(
        text=result["text"],
        labs=result["labs"],
        structured=result["structured"],
        model_used=result["model"],
        processing_time_ms=elapsed * 1000,
    )

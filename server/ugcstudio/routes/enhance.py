from fastapi import APIRouter, Depends
import asyncio
import random
import time
import logging

from ..dependencies import get_rng
from ..errors import ValidationError, ProcessingError
from ..models.schemas import EnhanceRequest, EnhanceResponse, EnhanceMetadata, Size, ErrorResponse
from ..services.enhancer_service import enhance_image_bytes
from ..services.detection_service import detect_fashion_items
from ..utils import data_uri

router = APIRouter(tags=["enhance"])
logger = logging.getLogger("uvicorn.error")


@router.post(
    "/enhance",
    response_model=EnhanceResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def enhance(body: EnhanceRequest, rng: random.Random = Depends(get_rng)):
    """Upscale/denoise/colour-boost the uploaded image and list "detected" items.

    Example body:
      {"image": "data:image/jpeg;base64,...", "upscaleFactor": 2,
       "denoise": true, "enhanceColors": true}
    """
    if not body.image:
        raise ValidationError("No image provided")

    logger.info(
        f"[enhance] start upscale={body.upscale_factor} denoise={body.denoise} "
        f"colors={body.enhance_colors} payload={len(body.image)} chars"
    )
    t0 = time.perf_counter()
    try:
        raw = data_uri.decode(body.image)
        result = await asyncio.to_thread(
            enhance_image_bytes, raw, body.upscale_factor, body.denoise, body.enhance_colors
        )
    except Exception as e:
        logger.exception("[enhance] processing failed")
        raise ProcessingError("Failed to enhance image") from e

    detected = detect_fashion_items(rng)
    logger.info(
        f"[enhance] done {result.original_size} -> {result.enhanced_size} "
        f"items={detected} in {time.perf_counter()-t0:.2f}s"
    )

    return EnhanceResponse(
        enhanced_image=data_uri.encode(result.png, "image/png"),
        detected_items=detected,
        metadata=EnhanceMetadata(
            original_size=Size(width=result.original_size[0], height=result.original_size[1]),
            enhanced_size=Size(width=result.enhanced_size[0], height=result.enhanced_size[1]),
        ),
    )

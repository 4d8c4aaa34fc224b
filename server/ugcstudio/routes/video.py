from fastapi import APIRouter, Depends
import asyncio
import random
import time
import logging

from ..dependencies import get_rng
from ..errors import ValidationError, ProcessingError
from ..models.schemas import VideoRequest, VideoResponse, VideoMetadata, VideoEffects, ErrorResponse
from ..services.narration_service import generate_narration
from ..services.video_service import get_video_effects, build_html_video_url, build_mp4_video_url

router = APIRouter(tags=["video"])
logger = logging.getLogger("uvicorn.error")


@router.post(
    "/generate-video",
    response_model=VideoResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_video(body: VideoRequest, rng: random.Random = Depends(get_rng)):
    """Wrap the image in an animated UGC-style clip with an optional caption.

    The default ``html`` format returns a ``data:text/html`` page animated with
    CSS, not a video container. ``mp4`` renders real frames instead.
    """
    if not body.image:
        raise ValidationError("No image provided")

    logger.info(
        f"[video] start style={body.style} duration={body.duration}s format={body.format} "
        f"narration={body.add_narration} items={body.detected_items}"
    )
    t0 = time.perf_counter()
    try:
        narration = generate_narration(body.detected_items, body.style, rng) if body.add_narration else ""
        effects = get_video_effects(body.style)
        if body.format == "mp4":
            video_url = await asyncio.to_thread(build_mp4_video_url, body.image, body.duration, effects["transition"])
        else:
            video_url = build_html_video_url(body.image, body.duration, effects["transition"], narration)
    except Exception as e:
        logger.exception("[video] generation failed")
        raise ProcessingError("Failed to generate video") from e

    logger.info(f"[video] done transition={effects['transition']} size={len(video_url)} chars in {time.perf_counter()-t0:.2f}s")

    return VideoResponse(
        video_url=video_url,
        narration=narration,
        metadata=VideoMetadata(
            duration=body.duration,
            style=body.style,
            detected_items=body.detected_items,
            effects=VideoEffects(**effects),
            format=body.format,
        ),
    )

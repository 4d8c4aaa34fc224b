from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from typing import Tuple
import logging
import math
from PIL import Image, ImageEnhance, ImageFilter

logger = logging.getLogger("uvicorn.error")

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600

MEDIAN_WINDOW = 3
BRIGHTNESS = 1.1
SATURATION = 1.2
# Mild unsharp mask, roughly a sigma=1 sharpen with flat areas left alone
SHARPEN_RADIUS = 1
SHARPEN_PERCENT = 100
SHARPEN_THRESHOLD = 3


@dataclass
class EnhancedImage:
    png: bytes
    original_size: Tuple[int, int]
    enhanced_size: Tuple[int, int]


def scaled_size(width: int, height: int, factor: float) -> Tuple[int, int]:
    """Target size for an upscale, rounding halves up."""
    return (int(math.floor(width * factor + 0.5)), int(math.floor(height * factor + 0.5)))


def _normalize_mode(im: Image.Image) -> Image.Image:
    # Filters need RGB(A); palette transparency is carried over as alpha
    if im.mode in ("RGB", "RGBA"):
        return im
    if im.mode in ("LA", "PA") or (im.mode == "P" and "transparency" in im.info):
        return im.convert("RGBA")
    return im.convert("RGB")


def _enhance_colors(im: Image.Image) -> Image.Image:
    alpha = im.getchannel("A") if im.mode == "RGBA" else None
    rgb = im.convert("RGB") if alpha is not None else im
    rgb = ImageEnhance.Brightness(rgb).enhance(BRIGHTNESS)
    rgb = ImageEnhance.Color(rgb).enhance(SATURATION)
    rgb = rgb.filter(ImageFilter.UnsharpMask(radius=SHARPEN_RADIUS, percent=SHARPEN_PERCENT, threshold=SHARPEN_THRESHOLD))
    if alpha is not None:
        rgb.putalpha(alpha)
    return rgb


def enhance_image_bytes(
    image_bytes: bytes,
    upscale_factor: float = 1,
    denoise: bool = False,
    enhance_colors: bool = False,
) -> EnhancedImage:
    """Upscale, denoise and colour-boost an image in memory, returning PNG bytes.

    Steps run in a fixed order (resize, median filter, colours) and each one is
    skipped unless requested. The output is always PNG regardless of input format.
    """
    im = Image.open(BytesIO(image_bytes))
    im.load()
    width, height = im.size
    if not width or not height:
        logger.warning(f"[enhance] unreadable dimensions, assuming {DEFAULT_WIDTH}x{DEFAULT_HEIGHT}")
        width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT

    im = _normalize_mode(im)

    if upscale_factor > 1:
        im = im.resize(scaled_size(width, height, upscale_factor), Image.Resampling.LANCZOS)

    if denoise:
        im = im.filter(ImageFilter.MedianFilter(MEDIAN_WINDOW))

    if enhance_colors:
        im = _enhance_colors(im)

    out = BytesIO()
    im.save(out, "PNG", compress_level=6)
    return EnhancedImage(png=out.getvalue(), original_size=(width, height), enhanced_size=im.size)

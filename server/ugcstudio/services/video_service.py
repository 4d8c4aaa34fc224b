from __future__ import annotations
from typing import Dict, Any, Callable
from io import BytesIO
from string import Template
from tempfile import NamedTemporaryFile
import html
import logging
import math
import os
from PIL import Image
import numpy as np
from moviepy import VideoClip

from ..config import VIDEO_FPS, VIDEO_MAX_SIDE
from ..utils import data_uri

logger = logging.getLogger("uvicorn.error")

BITRATE = "4000k"
PAN_OFFSET_PX = 20

STYLE_EFFECTS: Dict[str, Dict[str, Any]] = {
    "tiktok": {"transition": "zoom-in", "speed": "fast", "filters": ["vibrant", "sharp"]},
    "instagram": {"transition": "pan-smooth", "speed": "medium", "filters": ["elegant", "soft"]},
    "authentic": {"transition": "minimal", "speed": "natural", "filters": ["natural", "warm"]},
}
FALLBACK_STYLE = "authentic"

VIDEO_HTML = Template("""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Fashion UGC</title>
  <style>
    body {
      margin: 0;
      padding: 0;
      overflow: hidden;
      background: #000;
      display: flex;
      align-items: center;
      justify-content: center;
      height: 100vh;
    }
    #videoContainer {
      position: relative;
      width: 100%;
      height: 100%;
      display: flex;
      align-items: center;
      justify-content: center;
    }
    #mainImage {
      max-width: 100%;
      max-height: 100%;
      object-fit: contain;
      animation: $transition ${duration}s ease-in-out infinite;
    }
    #narration {
      position: absolute;
      bottom: 80px;
      left: 50%;
      transform: translateX(-50%);
      background: rgba(0,0,0,0.7);
      color: white;
      padding: 20px 30px;
      border-radius: 12px;
      font-family: Arial, sans-serif;
      font-size: 18px;
      text-align: center;
      white-space: pre-line;
      max-width: 80%;
      animation: fadeIn 1s ease-in;
    }
    #narration:empty { display: none; }
    @keyframes zoom-in {
      0% { transform: scale(1); }
      50% { transform: scale(1.1); }
      100% { transform: scale(1); }
    }
    @keyframes pan-smooth {
      0% { transform: translateX(0) scale(1.05); }
      50% { transform: translateX(-20px) scale(1.1); }
      100% { transform: translateX(0) scale(1.05); }
    }
    @keyframes minimal {
      0%, 100% { opacity: 1; }
    }
    @keyframes fadeIn {
      from { opacity: 0; transform: translateX(-50%) translateY(20px); }
      to { opacity: 1; transform: translateX(-50%) translateY(0); }
    }
  </style>
</head>
<body>
  <div id="videoContainer">
    <img id="mainImage" src="$image" alt="Fashion UGC">
    <div id="narration">$narration</div>
  </div>
</body>
</html>
""")


def get_video_effects(style: str) -> Dict[str, Any]:
    """Effect profile for a style; unknown styles get the authentic profile."""
    effects = STYLE_EFFECTS.get(style)
    if effects is None:
        logger.warning(f"[video] unknown style {style!r}, using {FALLBACK_STYLE!r}")
        effects = STYLE_EFFECTS[FALLBACK_STYLE]
    # Callers get their own copy so the shared table stays untouched
    return {**effects, "filters": list(effects["filters"])}


def build_video_html(image: str, duration: int, transition: str, narration: str) -> str:
    """Self-contained page animating the still image with CSS keyframes.

    ``image`` is embedded as given, so the page carries the exact data URI the
    client sent.
    """
    return VIDEO_HTML.substitute(
        image=html.escape(image, quote=True),
        duration=duration,
        transition=transition,
        narration=html.escape(narration),
    )


def build_html_video_url(image: str, duration: int, transition: str, narration: str) -> str:
    page = build_video_html(image, duration, transition, narration)
    return data_uri.encode(page.encode("utf-8"), "text/html")


def _load_frame(image_bytes: bytes) -> Image.Image:
    im = Image.open(BytesIO(image_bytes)).convert("RGB")
    im.thumbnail((VIDEO_MAX_SIDE, VIDEO_MAX_SIDE), Image.Resampling.LANCZOS)
    # libx264 with yuv420p needs even dimensions
    w, h = im.size
    w, h = max(2, w - w % 2), max(2, h - h % 2)
    if (w, h) != im.size:
        im = im.resize((w, h), Image.Resampling.LANCZOS)
    return im


def _crop_box(w: int, h: int, scale: float, shift_x: float):
    cw, ch = w / scale, h / scale
    left = (w - cw) / 2 + shift_x
    left = min(max(left, 0.0), w - cw)
    top = (h - ch) / 2
    return (left, top, left + cw, top + ch)


def _frame_function(base: Image.Image, transition: str, duration: float) -> Callable[[float], np.ndarray]:
    w, h = base.size
    still = np.array(base)

    def frame(t: float) -> np.ndarray:
        # 0 -> 1 -> 0 over one cycle, mirroring the CSS keyframes at 0/50/100%
        phase = math.sin(math.pi * min(max(t / duration, 0.0), 1.0))
        if transition == "zoom-in":
            box = _crop_box(w, h, 1.0 + 0.1 * phase, 0.0)
        elif transition == "pan-smooth":
            box = _crop_box(w, h, 1.05 + 0.05 * phase, PAN_OFFSET_PX * phase)
        else:
            return still
        return np.array(base.resize((w, h), Image.Resampling.BILINEAR, box=box))

    return frame


def build_mp4_video(image_bytes: bytes, duration: int, transition: str) -> bytes:
    """Render a transition into a real H.264 MP4. Uses temp file, returns bytes."""
    seconds = float(max(duration, 1))
    base = _load_frame(image_bytes)
    clip = VideoClip(_frame_function(base, transition, seconds), duration=seconds)

    tmp = NamedTemporaryFile(delete=False, suffix=".mp4")
    tmp.close()
    try:
        clip.write_videofile(
            tmp.name,
            fps=VIDEO_FPS,
            codec="libx264",
            audio=False,
            preset="medium",
            threads=4,
            bitrate=BITRATE,
            logger=None,
        )
        with open(tmp.name, "rb") as f:
            return f.read()
    finally:
        clip.close()
        try:
            os.unlink(tmp.name)
        except OSError:
            logger.warning(f"[video] could not remove temp file {tmp.name}")


def build_mp4_video_url(image: str, duration: int, transition: str) -> str:
    mp4 = build_mp4_video(data_uri.decode(image), duration, transition)
    return data_uri.encode(mp4, "video/mp4")

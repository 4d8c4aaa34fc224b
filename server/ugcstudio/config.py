import os
from dotenv import load_dotenv

load_dotenv()

ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]

# MP4 rendering only; the HTML wrapper does not use these
VIDEO_FPS = int(os.getenv("VIDEO_FPS", "24"))
VIDEO_MAX_SIDE = int(os.getenv("VIDEO_MAX_SIDE", "720"))

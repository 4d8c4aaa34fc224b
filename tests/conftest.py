import base64
import random
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from ugcstudio.dependencies import get_rng
from ugcstudio.main import app


def image_bytes(size=(37, 23), mode="RGB", color=(120, 80, 200), fmt="PNG") -> bytes:
    im = Image.new(mode, size, color)
    buf = BytesIO()
    im.save(buf, fmt)
    return buf.getvalue()


def to_data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> bytes:
    _, payload = uri.split(",", 1)
    return base64.b64decode(payload)


@pytest.fixture
def seed():
    return 1234


@pytest.fixture
def client(seed):
    app.dependency_overrides[get_rng] = lambda: random.Random(seed)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def png_uri():
    return to_data_uri(image_bytes())

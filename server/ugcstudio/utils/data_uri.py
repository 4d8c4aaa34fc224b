from __future__ import annotations
import base64
import re

_DATA_URI_PREFIX = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,")


def strip_prefix(data: str) -> str:
    """Drop a leading ``data:<mime>;base64,`` header if present."""
    return _DATA_URI_PREFIX.sub("", data, count=1)


def decode(data: str) -> bytes:
    """Decode a Base64 payload, with or without its data-URI header."""
    payload = strip_prefix(data)
    # Browsers and some clients drop the trailing "=" padding
    payload += "=" * (-len(payload) % 4)
    return base64.b64decode(payload)


def encode(payload: bytes, mime: str) -> str:
    data = base64.b64encode(payload).decode("utf-8")
    return f"data:{mime};base64,{data}"

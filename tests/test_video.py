import logging
import random
from html.parser import HTMLParser

import pytest

from ugcstudio.services import video_service
from ugcstudio.services.narration_service import NARRATION_TEMPLATES, format_items, generate_narration
from ugcstudio.services.video_service import STYLE_EFFECTS, get_video_effects

from conftest import decode_data_uri, image_bytes


class _PageParser(HTMLParser):
    """Collects <img> sources and checks that every opened tag is closed."""

    VOID = {"meta", "img", "br", "link"}

    def __init__(self):
        super().__init__()
        self.stack = []
        self.img_src = []
        self.doctype = None
        self.narration = []
        self._in_narration = False

    def handle_decl(self, decl):
        self.doctype = decl

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if tag == "img":
            self.img_src.append(attrs.get("src"))
        if tag not in self.VOID:
            self.stack.append(tag)
        self._in_narration = attrs.get("id") == "narration"

    def handle_endtag(self, tag):
        assert self.stack and self.stack[-1] == tag, f"unbalanced </{tag}>"
        self.stack.pop()
        self._in_narration = False

    def handle_data(self, data):
        if self._in_narration:
            self.narration.append(data)


def _page(video_url: str) -> str:
    assert video_url.startswith("data:text/html;base64,")
    return decode_data_uri(video_url).decode("utf-8")


def _request(image, **overrides):
    body = {"image": image, "detectedItems": ["robe", "sac"], "duration": 15, "style": "tiktok", "addNarration": True}
    body.update(overrides)
    return body


def test_no_narration_is_empty(client, png_uri):
    r = client.post("/generate-video", json=_request(png_uri, addNarration=False))
    assert r.status_code == 200
    assert r.json()["narration"] == ""


def test_tiktok_narration_uses_template_and_items(client, png_uri):
    narration = client.post("/generate-video", json=_request(png_uri)).json()["narration"]
    template, items = narration.split("\n\n")
    assert template in NARRATION_TEMPLATES["tiktok"]
    assert items == "Robe, sac"


def test_unknown_style_falls_back_to_authentic(client, png_uri):
    r = client.post("/generate-video", json=_request(png_uri, style="vaporwave"))
    assert r.status_code == 200
    body = r.json()
    assert body["metadata"]["effects"] == STYLE_EFFECTS["authentic"]
    assert body["metadata"]["style"] == "vaporwave"
    assert body["narration"].split("\n\n")[0] in NARRATION_TEMPLATES["authentic"]
    assert "animation: minimal 15s" in _page(body["videoUrl"])


@pytest.mark.parametrize("style", ["tiktok", "instagram", "authentic"])
def test_page_embeds_image_verbatim(client, png_uri, style):
    body = client.post("/generate-video", json=_request(png_uri, style=style, duration=9)).json()
    page = _page(body["videoUrl"])
    parser = _PageParser()
    parser.feed(page)
    parser.close()
    assert parser.doctype.lower() == "doctype html"
    assert parser.stack == []
    assert parser.img_src == [png_uri]
    transition = STYLE_EFFECTS[style]["transition"]
    assert f"animation: {transition} 9s" in page
    assert f"@keyframes {transition}" in page
    assert "".join(parser.narration) == body["narration"]


def test_narration_is_escaped(client, png_uri):
    body = client.post("/generate-video", json=_request(png_uri, detectedItems=["<b>jean</b>"])).json()
    page = _page(body["videoUrl"])
    assert "&lt;b&gt;jean&lt;/b&gt;" in page
    assert "<b>jean" not in page


def test_metadata_echoes_inputs(client, png_uri):
    body = client.post("/generate-video", json=_request(png_uri, style="instagram", duration=30)).json()
    assert body["metadata"] == {
        "duration": 30,
        "style": "instagram",
        "detectedItems": ["robe", "sac"],
        "effects": {"transition": "pan-smooth", "speed": "medium", "filters": ["elegant", "soft"]},
        "format": "html",
    }


def test_defaults_apply(client, png_uri):
    body = client.post("/generate-video", json={"image": png_uri}).json()
    assert body["metadata"]["duration"] == 15
    assert body["metadata"]["style"] == "tiktok"
    assert body["narration"] in NARRATION_TEMPLATES["tiktok"]


def test_missing_image_is_400(client):
    r = client.post("/generate-video", json={"style": "tiktok"})
    assert r.status_code == 400
    assert r.json()["error"]


def test_unknown_format_is_400(client, png_uri):
    r = client.post("/generate-video", json=_request(png_uri, format="gif"))
    assert r.status_code == 400


def test_failure_is_generic_500(client, png_uri, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("ugcstudio.routes.video.build_html_video_url", boom)
    r = client.post("/generate-video", json=_request(png_uri))
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to generate video"}


def test_mp4_format_routes_to_renderer(client, png_uri, monkeypatch):
    calls = []

    def fake(image, duration, transition):
        calls.append((image, duration, transition))
        return "data:video/mp4;base64,AAAA"

    monkeypatch.setattr("ugcstudio.routes.video.build_mp4_video_url", fake)
    body = client.post("/generate-video", json=_request(png_uri, format="mp4", duration=3)).json()
    assert body["videoUrl"] == "data:video/mp4;base64,AAAA"
    assert body["metadata"]["format"] == "mp4"
    assert calls == [(png_uri, 3, "zoom-in")]


def test_mp4_render_produces_container():
    mp4 = video_service.build_mp4_video(image_bytes((33, 21)), 1, "pan-smooth")
    assert mp4[4:8] == b"ftyp"


def test_pan_frames_stay_in_bounds():
    from PIL import Image

    base = Image.new("RGB", (32, 20), (10, 20, 30))
    frame = video_service._frame_function(base, "pan-smooth", 2.0)
    for t in (0.0, 0.5, 1.0, 1.5, 2.0):
        assert frame(t).shape == (20, 32, 3)


def test_effects_lookup_returns_copy():
    effects = get_video_effects("tiktok")
    effects["filters"].append("grain")
    assert STYLE_EFFECTS["tiktok"]["filters"] == ["vibrant", "sharp"]


def test_format_items_capitalizes_first_character_only():
    assert format_items(["t-shirt", "jean"]) == "T-shirt, jean"
    assert format_items(["écharpe"]) == "Écharpe"
    assert format_items([]) == ""


def test_narration_without_items_is_template_only():
    narration = generate_narration([], "instagram", random.Random(0))
    assert narration in NARRATION_TEMPLATES["instagram"]


def test_narration_is_seeded():
    a = generate_narration(["robe"], "tiktok", random.Random(42))
    b = generate_narration(["robe"], "tiktok", random.Random(42))
    assert a == b


def test_unknown_style_warns_once(client, png_uri, caplog):
    with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
        r = client.post("/generate-video", json=_request(png_uri, style="vaporwave"))
    assert r.status_code == 200
    warnings = [rec for rec in caplog.records if "unknown style" in rec.getMessage()]
    assert len(warnings) == 1

"""Offline versions of the two endpoints, working on local files."""
from __future__ import annotations
import argparse
import logging
import random
import sys
from pathlib import Path

from .services.enhancer_service import enhance_image_bytes
from .services.detection_service import detect_fashion_items
from .services.narration_service import generate_narration
from .services.video_service import build_video_html, build_mp4_video, get_video_effects, STYLE_EFFECTS
from .utils import data_uri

_MIME_BY_SUFFIX = {".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".webp": "image/webp"}


def _rng(seed: int | None) -> random.Random:
    return random.Random(seed)


def cmd_enhance(args: argparse.Namespace) -> int:
    inp = Path(args.input)
    if not inp.is_file():
        raise FileNotFoundError(f"File not found: {inp}")
    result = enhance_image_bytes(inp.read_bytes(), args.scale, args.denoise, args.colors)
    out = Path(args.output)
    out.write_bytes(result.png)
    items = detect_fashion_items(_rng(args.seed))
    w, h = result.original_size
    ew, eh = result.enhanced_size
    print(f"✅ {out} ({w}x{h} -> {ew}x{eh})")
    print("Detected: " + ", ".join(items))
    return 0


def cmd_video(args: argparse.Namespace) -> int:
    inp = Path(args.input)
    if not inp.is_file():
        raise FileNotFoundError(f"File not found: {inp}")
    raw = inp.read_bytes()
    narration = "" if args.no_narration else generate_narration(args.items, args.style, _rng(args.seed))
    transition = get_video_effects(args.style)["transition"]
    out = Path(args.output)
    if args.format == "mp4":
        out.write_bytes(build_mp4_video(raw, args.duration, transition))
    else:
        mime = _MIME_BY_SUFFIX.get(inp.suffix.lower(), "image/png")
        page = build_video_html(
            data_uri.encode(raw, mime), args.duration, transition, narration
        )
        out.write_text(page, encoding="utf-8")
    print(f"✅ {out}")
    if narration:
        print(narration)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ugcstudio", description="Enhance fashion photos and wrap them in UGC clips.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("enhance", help="Upscale/denoise/colour-boost an image into a PNG.")
    p.add_argument("input", help="Source image (png/jpg/webp...).")
    p.add_argument("-o", "--output", required=True, help="Output PNG path.")
    p.add_argument("-s", "--scale", type=float, default=1.0, help="Upscale factor (1-4 in the UI).")
    p.add_argument("--denoise", action="store_true", help="Apply a 3x3 median filter.")
    p.add_argument("--colors", action="store_true", help="Boost brightness/saturation and sharpen.")
    p.add_argument("--seed", type=int, default=None, help="Seed for the item draw.")
    p.set_defaults(func=cmd_enhance)

    p = sub.add_parser("video", help="Wrap an image in an animated UGC clip.")
    p.add_argument("input", help="Source image.")
    p.add_argument("-o", "--output", required=True, help="Output .html or .mp4 path.")
    p.add_argument("--style", default="tiktok", help=f"One of {', '.join(STYLE_EFFECTS)}; others fall back to authentic.")
    p.add_argument("--duration", type=int, default=15, help="Animation length in seconds.")
    p.add_argument("--items", nargs="*", default=[], help="Item labels for the caption.")
    p.add_argument("--no-narration", action="store_true", help="Leave the caption empty.")
    p.add_argument("--format", choices=["html", "mp4"], default="html")
    p.add_argument("--seed", type=int, default=None, help="Seed for the template draw.")
    p.set_defaults(func=cmd_video)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

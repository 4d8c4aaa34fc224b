from __future__ import annotations
from typing import Dict, List, Sequence
import random

DEFAULT_STYLE = "authentic"

NARRATION_TEMPLATES: Dict[str, List[str]] = {
    "tiktok": [
        "Découvrez cette pièce incroyable ! 😍",
        "Le look parfait pour cet automne ✨",
        "J'adore ce style, vous en pensez quoi ? 💕",
        "Coup de cœur du jour ! 🔥",
    ],
    "instagram": [
        "L'élégance à l'état pur ✨",
        "Confort et style réunis",
        "La tendance de la saison",
        "Un incontournable de ma garde-robe",
    ],
    "authentic": [
        "Honnêtement, je porte ça tout le temps",
        "Super qualité, je recommande vraiment",
        "Exactement ce que je cherchais",
        "Parfait pour un look décontracté",
    ],
}


def format_items(items: Sequence[str]) -> str:
    """Comma-join the labels and upper-case only the very first character."""
    joined = ", ".join(items)
    return joined[:1].upper() + joined[1:]


def generate_narration(items: Sequence[str], style: str, rng: random.Random) -> str:
    templates = NARRATION_TEMPLATES.get(style) or NARRATION_TEMPLATES[DEFAULT_STYLE]
    template = rng.choice(templates)
    item_line = format_items(items)
    if not item_line:
        return template
    return f"{template}\n\n{item_line}"

"""Simulated fashion-item detection.

Labels are drawn at random from a fixed vocabulary. Nothing here looks at the
image; the result only stands in for a real classifier in the demo flow.
"""
from __future__ import annotations
from typing import Dict, List
import random

FASHION_KEYWORDS: Dict[str, List[str]] = {
    "tops": ["t-shirt", "chemise", "blouse", "pull", "sweat", "hoodie", "débardeur", "top"],
    "bottoms": ["jean", "pantalon", "short", "jupe", "legging", "jogging"],
    "dresses": ["robe", "combinaison", "ensemble"],
    "outerwear": ["veste", "manteau", "blouson", "cardigan", "parka"],
    "accessories": ["sac", "chaussures", "baskets", "boots", "lunettes", "chapeau", "écharpe", "ceinture"],
    "jewelry": ["collier", "bracelet", "boucles d'oreilles", "montre", "bague"],
}

MIN_ITEMS = 2
MAX_ITEMS = 4


def detect_fashion_items(rng: random.Random) -> List[str]:
    """Return 2-4 distinct labels, each picked category-first then item."""
    count = rng.randint(MIN_ITEMS, MAX_ITEMS)
    categories = list(FASHION_KEYWORDS)
    detected: List[str] = []
    while len(detected) < count:
        items = FASHION_KEYWORDS[rng.choice(categories)]
        item = rng.choice(items)
        if item not in detected:
            detected.append(item)
    return detected

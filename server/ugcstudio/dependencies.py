import random


def get_rng() -> random.Random:
    """Per-request random source; tests override this with a seeded one."""
    return random.Random()

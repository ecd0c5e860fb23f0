"""Italian 40-card deck used for Briscola."""

SEEDS = ["coppe", "denari", "bastoni", "spade"]  # Cups, Coins, Clubs, Swords
NUMBERS = list(range(1, 11))  # 8, 9, 10 are Fante, Cavallo, Re

# Briscola card points; ranks not listed are worth nothing
CARD_POINTS = {1: 11, 3: 10, 10: 4, 9: 3, 8: 2}


def generate_deck():
    """Return the 40 cards as ``{"number": n, "seed": s}`` dicts, suit by suit."""
    return [{"number": n, "seed": s} for s in SEEDS for n in NUMBERS]


def card_points(number: int) -> int:
    return CARD_POINTS.get(number, 0)


def is_valid_card(number: int, seed: str) -> bool:
    return number in NUMBERS and seed in SEEDS

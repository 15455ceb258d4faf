"""Deterministic random streams for Radix Tribes.

All randomness in the engine (map generation, AI tribe naming, AI action
choice) is derived from the world's map seed plus a context string, so that
the same world state always produces the same results:

- Reproducibility: the same seed and settings rebuild the same map
- Testability: no hidden wall-clock randomness inside the engine
- Independence: each context gets its own stream, so adding draws in one
  place does not shift the results of another

Examples:
    >>> seed = generate_seed(1234, 7, "ai_actions:tribe-1")
    >>> rng = make_rng(seed)
    >>> weighted_choice(rng, ["Plains", "Water"], [1.0, 0.0])
    'Plains'
"""

import hashlib
import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def generate_seed(map_seed: int, turn: int, context: str) -> str:
    """Generate a deterministic seed string from world state.

    Format: "map_seed:turn:context"

    Args:
        map_seed: The world's map generation seed
        turn: Current game turn (use 0 for turn-independent draws)
        context: What the draw is for (e.g., 'terrain', 'ai_actions:tribe-3')

    Returns:
        Seed string for :func:`make_rng`

    Raises:
        ValueError: If turn is negative
    """
    if turn < 0:
        raise ValueError(f"turn must be non-negative, got {turn}")
    return f"{map_seed}:{turn}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def make_rng(seed: str) -> random.Random:
    """Return a ``random.Random`` seeded from a seed string."""
    return random.Random(_seed_to_int(seed))


def weighted_choice(rng: random.Random, options: Sequence[T], weights: Sequence[float]) -> T:
    """Pick one option with probability proportional to its weight.

    Args:
        rng: Random stream to draw from
        options: Candidate values
        weights: Non-negative weight per option

    Returns:
        The chosen option

    Raises:
        ValueError: If the sequences differ in length, are empty, contain a
            negative weight, or all weights are zero
    """
    if not options:
        raise ValueError("options list cannot be empty")
    if len(options) != len(weights):
        raise ValueError(
            f"options and weights differ in length ({len(options)} != {len(weights)})"
        )
    if any(weight < 0 for weight in weights):
        raise ValueError("weights must be non-negative")
    if sum(weights) <= 0:
        raise ValueError("at least one weight must be positive")
    return rng.choices(options, weights=weights, k=1)[0]

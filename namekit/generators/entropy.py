#!/usr/bin/env python3
"""
Entropy Module for Name Generation
==================================
Random sources and the weighted selection primitive used by every generator.

Features:
- Seedable sources for reproducible runs and tests
- Cryptographically secure default source (secrets.SystemRandom)
- Integer-weighted selection over ordered phoneme tables

A seeded source wraps ``random.Random`` and is not meant to be shared
between threads; give each worker its own. The unseeded default draws from
the operating system entropy pool and is safe to share.
"""

import random
import secrets
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union


# =============================================================================
# Random Sources
# =============================================================================

class RandomSource:
    """
    Random number source injected into the name generators.

    Usage:
        rng = RandomSource(seed=42)
        rng.randint(1, 100)
        rng.weighted_choice([('a', 3), ('b', 1)])
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        if seed is None:
            self._rng = secrets.SystemRandom()
        else:
            self._rng = random.Random(seed)

    @property
    def seeded(self) -> bool:
        return self.seed is not None

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[Any]) -> Any:
        """Return a random element from non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return self._rng.choice(seq)

    def chance(self, percent: int) -> bool:
        """True with the given percent probability (1..100 draw <= percent)."""
        return self.randint(1, 100) <= percent

    def weighted_choice(self, items: Union['WeightedItems', Any]) -> Any:
        """Choose from (item, weight) pairs. See :func:`weighted_choice`."""
        return weighted_choice(items, self)


WeightedItems = Iterable[Tuple[Any, int]]


# Global instance
_default_rng = RandomSource()


def get_rng() -> RandomSource:
    """Get the shared process-wide (unseeded) random source."""
    return _default_rng


# =============================================================================
# Weighted Selection
# =============================================================================

def weighted_choice(items: Union[WeightedItems, Any], rng: RandomSource = None) -> Any:
    """
    Choose one item with probability proportional to its integer weight.

    Candidates are walked in their declared order. A uniform integer is
    drawn in [1, total] and the first item whose running weight reaches it
    wins. When the total weight is zero (or there are no candidates) the
    first candidate is returned, or None for an empty table.

    Args:
        items: Ordered (item, weight) pairs, or anything with ``items()``
               yielding such pairs (WeightedTable, dict).
        rng: Random source (defaults to the shared source)

    Returns:
        The selected item, or None when there is nothing to choose from
    """
    if rng is None:
        rng = get_rng()

    if hasattr(items, 'items'):
        candidates: List[Tuple[Any, int]] = list(items.items())
    else:
        candidates = list(items)

    total = sum(weight for _, weight in candidates)
    if total <= 0:
        return candidates[0][0] if candidates else None

    draw = rng.randint(1, total)
    cumulative = 0
    for item, weight in candidates:
        cumulative += weight
        if draw <= cumulative:
            return item

    return candidates[0][0]

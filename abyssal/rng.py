"""
Deterministic RNG utilities.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(session seed, stream name). All randomness uses
numpy.random.Generator(PCG64) so a given seed replays identically.
"""

import hashlib
import numpy as np
from typing import Any, Dict, List, Optional

from .constants import FACT_FALLBACK_TOPIC


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (session seed, stream name, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        fact_seed = make_seed(session_seed, "facts")
    """
    hash_input = ":".join(str(c) for c in components)
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    return int.from_bytes(hash_bytes[:8], byteorder='big')


def make_generator(*components: Any) -> np.random.Generator:
    """PCG64 generator seeded from ``make_seed(*components)``"""
    return np.random.Generator(np.random.PCG64(make_seed(*components)))


class FactPicker:
    """
    Chance-gated random fact selection for a biome.

    Attributes:
        facts: topic (lower-case biome name) -> lines
        chance: Probability per roll of producing a fact
    """

    def __init__(self, facts: Dict[str, List[str]], chance: float, rng: np.random.Generator):
        self.facts = facts
        self.chance = chance
        self._rng = rng

    def lines_for(self, topic: str) -> List[str]:
        """Facts for a topic, falling back to the general list"""
        lines = self.facts.get(topic.lower())
        if not lines:
            lines = self.facts.get(FACT_FALLBACK_TOPIC, [])
        return lines

    def roll(self, biome: Optional[str]) -> Optional[str]:
        """
        Maybe pick a fact for ``biome``.

        Returns:
            A fact line, or None when the roll fails or nothing applies
        """
        if not biome:
            return None
        if self._rng.random() >= self.chance:
            return None

        lines = self.lines_for(biome)
        if not lines:
            return None
        return lines[int(self._rng.integers(0, len(lines)))]

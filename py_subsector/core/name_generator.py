"""
Name generation for star systems.

Names are strung together from a digraph table: a random list of
consonant/vowel fragment pairs drawn once per subsector. Because every system
in a subsector draws from the same small table, names within one map share a
recognisable "language" while different maps sound different.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from py_subsector.core.alea_prng import AleaPRNG

logger = structlog.get_logger()

# Marker for a missing fragment; stripped from finished names.
BLANK = "."

CONSONANTS: Tuple[str, ...] = (
    "b", "c", "d", "f", "g", "h", "j", "k", "l", "m", "n",
    "p", "q", "r", "s", "t", "v", "w", "x", "y", "z",
    "b", "c", "d", "f", "g", "h", "j", "k", "l", "m", "n",
    "p", "q", "r", "s", "t", "v", "w", "x", "y", "z", BLANK,
    "sc", "ng", "ch", "gh", "ph", "rh", "sh", "th", "wh", "zh", "wr", "qu",
    "st", "sp", "tr", "tw", "fl", "dr", "pr", "dr",
)

# Vowels appear three times each so that a pair without a vowel stays rare.
VOWELS: Tuple[str, ...] = (
    "a", "e", "i", "o", "u",
    "a", "e", "i", "o", "u",
    "a", "e", "i", "o", "u", BLANK,
)

MIN_PAIRS = 10
EXTRA_PAIRS = 20
MIN_NAME_LENGTH = 3
EXTRA_NAME_LENGTH = 3


@dataclass(frozen=True)
class DigraphTable:
    """Flat, immutable list of fragments: consonant, vowel, consonant, ..."""

    fragments: Tuple[str, ...]

    def __post_init__(self):
        if not self.fragments or len(self.fragments) % 2:
            raise ValueError(
                f"Digraph table needs a non-empty even number of fragments, "
                f"got {len(self.fragments)}"
            )

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def pair_count(self) -> int:
        return len(self.fragments) // 2

    def pair(self, n: int) -> Tuple[str, str]:
        """The n-th consonant/vowel pair."""
        return self.fragments[2 * n], self.fragments[2 * n + 1]


class NameGenerator:
    """Builds digraph tables and draws names from them."""

    def __init__(self, prng: Optional[AleaPRNG] = None):
        """Initialize name generator with optional PRNG for deterministic generation."""
        self.prng = prng or AleaPRNG(seed="default")

    def build_digraph_table(self) -> DigraphTable:
        """Draw a new table of 10 to 29 consonant/vowel pairs."""
        count = int(MIN_PAIRS + self.prng.random() * EXTRA_PAIRS)
        fragments = []
        for _ in range(count):
            fragments.append(self.prng.choice(CONSONANTS))
            fragments.append(self.prng.choice(VOWELS))

        logger.debug("Digraph table built", pairs=count)
        return DigraphTable(fragments=tuple(fragments))

    def generate_name(self, table: DigraphTable) -> str:
        """Generate a name from ``table``.

        Pairs are appended until the raw name, blanks included, reaches a
        random length between 3 and 6. Every pair adds two characters, so the
        loop always ends.

        Args:
            table: Digraph table of the current subsector

        Returns:
            Name with blanks removed and the first letter capitalized
        """
        length = MIN_NAME_LENGTH + self.prng.random() * EXTRA_NAME_LENGTH
        name = ""
        while len(name) < length:
            consonant, vowel = table.pair(self.prng.below(table.pair_count))
            name += consonant + vowel

        name = name.replace(BLANK, "")
        return name[:1].upper() + name[1:]

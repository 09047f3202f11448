"""
Random number generation utilities.

Every generation run owns its own AleaPRNG; nothing here keeps a module level
generator. Use ``derive_seed`` to give independent work (for example one
system per worker) its own reproducible substream.
"""

import uuid
from typing import Optional, Union

from ..core.alea_prng import AleaPRNG

Seed = Union[str, int]


def new_seed() -> str:
    """Create a fresh seed for runs where the caller supplied none."""
    return uuid.uuid4().hex[:12]


def derive_seed(seed: Seed, *parts: Seed) -> str:
    """
    Derive a child seed from a parent seed and a path of labels.

    Args:
        seed: Parent seed
        *parts: Labels identifying the substream, e.g. ``("system", 17)``

    Returns:
        Seed string that is stable for the same inputs
    """
    return ":".join(str(part) for part in (seed, *parts))


def create_prng(seed: Optional[Seed] = None, *parts: Seed) -> AleaPRNG:
    """
    Create an AleaPRNG for a run, or for a substream of a run.

    Args:
        seed: Run seed; a new random one is used when None
        *parts: Optional substream labels passed to ``derive_seed``

    Returns:
        AleaPRNG instance
    """
    if seed is None:
        seed = new_seed()
    if parts:
        seed = derive_seed(seed, *parts)
    return AleaPRNG(seed)

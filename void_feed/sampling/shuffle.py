"""Uniform shuffling."""

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def fisher_yates_shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly permuted copy of ``items``.

    Every permutation is equally likely given a uniform ``rng``. Do not replace
    this with ``sorted(..., key=random)`` or a random comparator; those bias
    the result.

    Args:
        items: Sequence to permute; left untouched
        rng: Random source, defaults to the module-level generator

    Returns:
        New list holding the same elements in random order
    """
    randrange = rng.randrange if rng is not None else random.randrange
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled

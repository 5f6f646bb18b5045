"""
Mutation operators for GA extension.

Implements independent bit-flip mutation of order-selection vectors.
"""

from typing import List, Tuple

import numpy as np

from .data_models import Individual


def bit_flip_mutation(
    individual: Individual,
    mutation_rate: float,
    rng: np.random.Generator
) -> Tuple[Individual, List[str]]:
    """
    Flip each gene independently with probability mutation_rate.

    Args:
        individual: Individual to mutate (left unchanged)
        mutation_rate: Per-gene flip probability
        rng: Random number generator

    Returns:
        Tuple of (mutated_individual, operation_log)
    """
    flips = rng.random(len(individual)) < mutation_rate

    mutated = individual.copy()
    mutated.genes = np.logical_xor(mutated.genes, flips)
    mutated.invalidate()

    flipped = np.flatnonzero(flips)
    if flipped.size == 0:
        return mutated, ["bit_flip: no genes flipped"]

    preview = ", ".join(str(i) for i in flipped[:10])
    suffix = "..." if flipped.size > 10 else ""
    return mutated, [f"bit_flip: flipped {flipped.size} genes ({preview}{suffix})"]

"""
Crossover operators for GA extension.

Implements uniform crossover over order-selection bit-vectors.
"""

from typing import Tuple

import numpy as np

from .data_models import Individual


def uniform_crossover(
    parent_a: Individual,
    parent_b: Individual,
    rng: np.random.Generator
) -> Tuple[Individual, np.ndarray]:
    """
    Combine two parents gene by gene.

    For each order, the child inherits the bit of parent A or parent B with
    equal probability.

    Args:
        parent_a: First parent
        parent_b: Second parent
        rng: Random number generator

    Returns:
        Tuple of (child_individual, crossover_mask)
        where crossover_mask[i] is True when gene i came from parent A

    Raises:
        ValueError: If parents have different lengths
    """
    if len(parent_a) != len(parent_b):
        raise ValueError(
            f"Parents must have the same length, got {len(parent_a)} and {len(parent_b)}"
        )

    mask = rng.random(len(parent_a)) < 0.5
    genes = np.where(mask, parent_a.genes, parent_b.genes)

    child = Individual(
        genes=genes,
        metadata={
            'crossover_strategy': 'uniform',
            'provisional': True  # Needs repair
        }
    )
    return child, mask


def crossover_or_clone(
    parent_a: Individual,
    parent_b: Individual,
    crossover_rate: float,
    rng: np.random.Generator
) -> Individual:
    """
    Apply uniform crossover with probability crossover_rate, else clone parent A.

    Returns:
        New child individual (never aliases a parent)
    """
    if rng.random() < crossover_rate:
        child, _ = uniform_crossover(parent_a, parent_b, rng)
        return child

    child = parent_a.copy()
    child.invalidate()
    child.metadata = {'crossover_strategy': 'clone', 'provisional': True}
    return child

"""
Parent selection for GA extension.
"""

from typing import List, Tuple

import numpy as np

from .data_models import Individual


def tournament_select(
    population: List[Individual],
    rng: np.random.Generator,
    tournament_size: int = 3
) -> Individual:
    """
    Pick one parent by tournament.

    Samples tournament_size individuals uniformly (with replacement) and
    returns the fittest. Infeasible individuals can win when every
    contestant is infeasible.

    Args:
        population: Evaluated population
        rng: Random number generator
        tournament_size: Number of contestants

    Returns:
        Winning individual (not copied)

    Raises:
        ValueError: If population is empty
    """
    if not population:
        raise ValueError("Cannot select from an empty population")

    contestants = rng.integers(0, len(population), size=max(1, tournament_size))
    best_idx = max(contestants, key=lambda idx: population[idx].fitness)
    return population[best_idx]


def select_two_parents(
    population: List[Individual],
    rng: np.random.Generator,
    tournament_size: int = 3
) -> Tuple[Individual, Individual]:
    """
    Select two parents with independent tournaments.

    The two parents may be the same individual.
    """
    parent_a = tournament_select(population, rng, tournament_size)
    parent_b = tournament_select(population, rng, tournament_size)
    return parent_a, parent_b

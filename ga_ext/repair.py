"""
Repair system for GA extension.

Pushes under-filled individuals up to the lower wave bound. Upper bound and
stock feasibility are left to the fitness penalty.
"""

from typing import List, Tuple

import numpy as np

from .data_models import Individual
from .fitness import FitnessEvaluator


def repair_lower_bound(
    individual: Individual,
    order_units: np.ndarray,
    wave_size_lb: int,
    rng: np.random.Generator
) -> Tuple[Individual, List[str]]:
    """
    Add random unselected orders until the lower wave bound is met.

    Algorithm:
    1. Sum units of the selected orders
    2. While below wave_size_lb, select a uniformly random unselected order
    3. Stop when the bound is met or every order is selected

    Args:
        individual: Individual with potentially too few units
        order_units: Units per order
        wave_size_lb: Lower wave bound
        rng: Random number generator

    Returns:
        Tuple of (repaired_individual, repair_notes)
    """
    notes = []
    total = int(order_units[individual.genes].sum())

    if total >= wave_size_lb:
        notes.append("repair_lower_bound: lower bound already met")
        return individual, notes

    repaired = individual.copy()
    repaired.invalidate()

    unselected = np.flatnonzero(~repaired.genes)
    rng.shuffle(unselected)

    added = 0
    for order_id in unselected:
        if total >= wave_size_lb:
            break
        repaired.genes[order_id] = True
        total += int(order_units[order_id])
        added += 1

    if total >= wave_size_lb:
        notes.append(f"repair_lower_bound: added {added} orders, {total} units")
    else:
        notes.append(
            f"repair_lower_bound: all orders selected, {total} units still below {wave_size_lb}"
        )

    return repaired, notes


def force_repair(
    individual: Individual,
    evaluator: FitnessEvaluator,
    rng: np.random.Generator
) -> Individual:
    """
    Best-effort repair of the final individual when nothing feasible was found.

    Applies the lower-bound repair and re-evaluates. The result may still be
    infeasible; callers must check fitness before trusting it.

    Args:
        individual: Best individual of the run
        evaluator: Fitness evaluator for the instance
        rng: Random number generator

    Returns:
        Repaired and evaluated individual
    """
    repaired, notes = repair_lower_bound(
        individual,
        evaluator.order_units,
        evaluator.instance.wave_size_lb,
        rng
    )
    if repaired is individual:
        repaired = individual.copy()

    evaluator.evaluate(repaired)

    if repaired.fitness < 0:
        notes.append("force_repair: individual is still infeasible")
    repaired.metadata['repair_notes'] = "; ".join(notes)
    return repaired

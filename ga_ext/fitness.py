"""
Fitness interface for GA extension.

Decodes order-selection bit-vectors into candidate waves and scores them
with the core evaluator, so the GA never re-implements feasibility rules.
"""

from typing import Dict, List, Optional, Tuple

import numpy as np

from waveopt.wave_selection import WaveInstance, Candidate
from waveopt.wave_metrics import is_feasible, objective

from .data_models import Individual


DEFAULT_INFEASIBLE_FITNESS = -1e6


class FitnessEvaluator:
    """
    Decoder and scorer for GA individuals.

    Decoding is a first-fit heuristic: each (order, item) demand is served
    by the first aisle, in ascending aisle order, holding at least that
    quantity on its own. Split supply across several aisles is not
    considered. The decoded wave is then checked with the exact evaluator.
    """

    def __init__(self, instance: WaveInstance, infeasible_fitness: float = DEFAULT_INFEASIBLE_FITNESS):
        """
        Initialize evaluator for one instance.

        Args:
            instance: Problem instance
            infeasible_fitness: Fitness assigned to infeasible individuals
        """
        self.instance = instance
        self.infeasible_fitness = infeasible_fitness
        self.order_units = np.asarray(instance.order_units, dtype=np.int64)

        # item -> [(aisle, stock)] in ascending aisle order
        self._stock_by_item: Dict[int, List[Tuple[int, int]]] = {}
        for aisle_idx, stock in enumerate(instance.aisles):
            for item, quantity in stock.items():
                if quantity > 0:
                    self._stock_by_item.setdefault(item, []).append((aisle_idx, quantity))

        self._first_fit_cache: Dict[Tuple[int, int], Optional[int]] = {}
        self.evaluations = 0

    def first_fit_aisle(self, item: int, quantity: int) -> Optional[int]:
        """
        First aisle whose stock of item covers quantity on its own.

        Returns:
            Aisle index, or None if no single aisle suffices
        """
        key = (item, quantity)
        if key not in self._first_fit_cache:
            chosen = None
            for aisle_idx, stock in self._stock_by_item.get(item, ()):
                if stock >= quantity:
                    chosen = aisle_idx
                    break
            self._first_fit_cache[key] = chosen
        return self._first_fit_cache[key]

    def decode_aisles(self, genes: np.ndarray) -> Optional[frozenset]:
        """
        Derive the visited aisle set of a selection.

        Args:
            genes: Boolean order-selection vector

        Returns:
            Frozenset of aisle indices, or None if some demand has no
            single covering aisle
        """
        aisles = set()
        for order_id in np.flatnonzero(genes):
            for item, quantity in self.instance.orders[order_id].items():
                aisle_idx = self.first_fit_aisle(item, quantity)
                if aisle_idx is None:
                    return None
                aisles.add(aisle_idx)
        return frozenset(aisles)

    def selected_units(self, genes: np.ndarray) -> int:
        """Total units of the selected orders."""
        return int(self.order_units[genes].sum())

    def to_candidate(self, individual: Individual) -> Candidate:
        """
        Convert an evaluated individual into a candidate wave.

        Returns:
            Candidate with decoded aisles (empty aisle set if not decodable)
        """
        aisles = individual.aisles
        if aisles is None:
            aisles = self.decode_aisles(individual.genes) or frozenset()
        return Candidate(orders=individual.selected_orders(), aisles=set(aisles))

    def evaluate(self, individual: Individual) -> float:
        """
        Score one individual and store fitness and decoded aisles on it.

        Returns:
            Objective if the decoded wave is feasible, else infeasible_fitness
        """
        self.evaluations += 1
        individual.aisles = None

        if not individual.genes.any():
            individual.fitness = self.infeasible_fitness
            return individual.fitness

        aisles = self.decode_aisles(individual.genes)
        if aisles is None:
            individual.fitness = self.infeasible_fitness
            return individual.fitness

        individual.aisles = aisles
        candidate = Candidate(orders=individual.selected_orders(), aisles=set(aisles))
        if is_feasible(self.instance, candidate):
            individual.fitness = objective(self.instance, candidate)
        else:
            individual.fitness = self.infeasible_fitness
        return individual.fitness

    def evaluate_population(self, population: List[Individual]) -> np.ndarray:
        """
        Evaluate every individual of a generation sequentially.

        Returns:
            Array of fitness values in population order
        """
        return np.array([self.evaluate(ind) for ind in population], dtype=float)

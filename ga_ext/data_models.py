"""
Data models for GA extension.

Core data structures representing individuals and per-generation records.
"""

from dataclasses import dataclass, field
from typing import Optional, Any

import numpy as np


@dataclass
class Individual:
    """
    Represents a single candidate wave (individual in GA population).

    Attributes:
        genes: Boolean vector of length n_orders (True = order selected)
        fitness: Ratio objective, or the infeasibility penalty
        aisles: Aisle set derived by decoding (None until evaluated or when
            the selection cannot be decoded)
        metadata: Additional information (origin, repair notes, etc.)
    """
    genes: np.ndarray
    fitness: float = float('-inf')
    aisles: Optional[frozenset] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Ensure genes are a boolean numpy array."""
        self.genes = np.asarray(self.genes, dtype=bool)

    @classmethod
    def from_orders(cls, n_orders: int, order_ids, **metadata) -> "Individual":
        """
        Build an individual selecting the given orders.

        Args:
            n_orders: Length of the bit-vector
            order_ids: Indices of selected orders

        Returns:
            New Individual (not evaluated)
        """
        genes = np.zeros(n_orders, dtype=bool)
        genes[list(order_ids)] = True
        return cls(genes=genes, metadata=dict(metadata))

    def copy(self) -> "Individual":
        """
        Create a deep copy of this individual.

        Returns:
            New Individual with copied genes and metadata
        """
        return Individual(
            genes=self.genes.copy(),
            fitness=self.fitness,
            aisles=self.aisles,
            metadata=self.metadata.copy()
        )

    def invalidate(self) -> None:
        """Drop evaluation results after the genes changed."""
        self.fitness = float('-inf')
        self.aisles = None

    def selected_orders(self) -> set[int]:
        """Indices of the selected orders."""
        return set(int(i) for i in np.flatnonzero(self.genes))

    def num_selected(self) -> int:
        return int(self.genes.sum())

    def __len__(self) -> int:
        return len(self.genes)


@dataclass
class GenerationRecord:
    """
    Statistics of one evaluated generation.

    Attributes:
        generation: Generation number (0 = initial population)
        best_fitness: Highest fitness in the generation
        mean_fitness: Mean fitness over the generation
        feasible_count: Individuals with non-negative fitness
        population_size: Number of individuals evaluated
        elapsed_seconds: Time since the refinement started
    """
    generation: int
    best_fitness: float
    mean_fitness: float
    feasible_count: int
    population_size: int
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """
        Convert record to dictionary for CSV export.

        Returns:
            Dictionary with string-serializable values
        """
        return {
            "generation": self.generation,
            "best_fitness": f"{self.best_fitness:.6f}",
            "mean_fitness": f"{self.mean_fitness:.6f}",
            "feasible_count": self.feasible_count,
            "population_size": self.population_size,
            "elapsed_seconds": f"{self.elapsed_seconds:.3f}",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationRecord":
        """
        Create record from dictionary (e.g., from CSV).

        Args:
            data: Dictionary with record fields

        Returns:
            GenerationRecord instance
        """
        return cls(
            generation=int(data["generation"]),
            best_fitness=float(data["best_fitness"]),
            mean_fitness=float(data["mean_fitness"]),
            feasible_count=int(data["feasible_count"]),
            population_size=int(data["population_size"]),
            elapsed_seconds=float(data.get("elapsed_seconds") or 0.0),
        )

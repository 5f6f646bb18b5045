"""
GA Extension for Wave Order Picking

This package refines order waves with a generational genetic algorithm over
order-selection bit-vectors.

Key Features:
- Fitness delegated to the core feasibility and objective evaluator
- Greedy waves and saved populations can seed the initial population
- One seeded random generator threaded through every operator

Modules:
- data_models: Core data structures (Individual, GenerationRecord)
- fitness: First-fit aisle decoding and scoring
- selection: Tournament parent selection
- crossover: Uniform crossover
- mutation: Bit-flip mutation
- repair: Lower-bound repair and best-effort final repair
- orchestration: Generational loop and run-config driven refinement
- io_utils: History and population CSV, GA config and metadata files
- cli: Run configuration loading and validation
"""

__version__ = "0.1.0"

from .data_models import Individual, GenerationRecord
from .fitness import FitnessEvaluator
from .orchestration import run_genetic_refinement, GeneticResult

__all__ = [
    "Individual",
    "GenerationRecord",
    "FitnessEvaluator",
    "run_genetic_refinement",
    "GeneticResult",
]

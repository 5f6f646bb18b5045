"""
Wave Order Picking

Selects a wave of orders and the aisles that supply them, maximizing picked
units per visited aisle within the wave size window.
"""

__version__ = "0.1.0"

from .wave_selection import (
    WaveInstance, Candidate, OrderScore, GreedyWaveConstructor,
    build_item_aisle_index, score_orders,
)
from .wave_metrics import is_feasible, objective, verify_candidate, WaveMetrics
from .timing import TimeBudget
from .solver import WaveSolver, SolveResult, solve

__all__ = [
    "WaveInstance",
    "Candidate",
    "OrderScore",
    "GreedyWaveConstructor",
    "build_item_aisle_index",
    "score_orders",
    "is_feasible",
    "objective",
    "verify_candidate",
    "WaveMetrics",
    "TimeBudget",
    "WaveSolver",
    "SolveResult",
    "solve",
]

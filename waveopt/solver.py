"""
Wave Solver

Top-level entry point combining the greedy constructor and the genetic
refinement under one time budget.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

import numpy as np

from .wave_selection import WaveInstance, Candidate, GreedyWaveConstructor
from .wave_metrics import is_feasible, objective
from .timing import TimeBudget, DEFAULT_TIME_LIMIT
from .config_loader import get_solver_config, resolve_random_seed, STRATEGIES, ConfigurationError


@dataclass
class SolveResult:
    """Outcome of one solve"""
    candidate: Candidate
    objective: float
    feasible: bool
    strategy: str
    notes: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    history: List[Any] = field(default_factory=list)


class WaveSolver:
    """
    Runs the configured strategy on one instance

    Strategies:
        greedy  - single stock-aware greedy pass
        genetic - genetic refinement from a random population
        hybrid  - greedy pass, then genetic refinement seeded with it;
                  the better feasible wave wins
    """

    def __init__(self, instance: WaveInstance, config: Optional[Dict[str, Any]] = None):
        self.instance = instance
        self.config = config or {}
        self.solver_config = get_solver_config(self.config)
        self.genetic_config = dict(self.config.get("genetic") or {})

        self.strategy = self.solver_config["strategy"]
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(f"Unknown strategy: {self.strategy}")

        self.random_seed = resolve_random_seed(self.solver_config.get("random_seed"))

    def make_budget(self) -> TimeBudget:
        """
        Budget from the solver section

        The safety margin is capped at a tenth of the limit so short limits
        still leave time to construct a wave.
        """
        limit = self.solver_config.get("time_limit_seconds", DEFAULT_TIME_LIMIT)
        margin = self.solver_config.get("safety_margin_seconds", 0)
        return TimeBudget(limit, safety_margin=min(margin, limit / 10))

    def run(self, budget: Optional[TimeBudget] = None, verbose: bool = False) -> SolveResult:
        """
        Solve the instance

        Args:
            budget: Time budget (built from the config when omitted)
            verbose: Print genetic progress

        Returns:
            SolveResult; the candidate is empty when no feasible wave was found
                unless a best-effort genetic wave is reported with feasible=False
        """
        if budget is None:
            budget = self.make_budget()

        strategy = self.strategy
        notes = []
        if strategy != "greedy" and not self.genetic_config.get("enabled", True):
            notes.append(f"Genetic refinement disabled - running '{strategy}' as greedy")
            strategy = "greedy"

        history = []
        contenders = []

        if strategy in ("greedy", "hybrid"):
            constructor = GreedyWaveConstructor(self.instance)
            greedy = constructor.construct(budget)
            notes.extend(constructor.notes)
            contenders.append(("greedy", greedy))

        if strategy in ("genetic", "hybrid"):
            if budget.expired():
                notes.append("Time budget exhausted before genetic refinement")
            else:
                from ga_ext.orchestration import run_genetic_refinement

                seeds = [c for _, c in contenders if not c.is_empty]
                rng = np.random.default_rng(self.random_seed)
                ga_result = run_genetic_refinement(
                    self.instance, self.genetic_config, rng, seeds, budget, verbose=verbose
                )
                history = ga_result.history
                notes.extend(ga_result.notes)
                notes.append(
                    f"Genetic refinement ran {ga_result.generations_run} generations"
                )
                contenders.append(("genetic", ga_result.candidate))

        best_name, best = self._pick_best(contenders)
        feasible = is_feasible(self.instance, best)

        if not feasible and not best.is_empty:
            notes.append(f"Best-effort wave from {best_name} is infeasible")
        elif best.is_empty:
            notes.append("No feasible wave found")
        else:
            notes.append(f"Selected wave from {best_name}")

        return SolveResult(
            candidate=best,
            objective=objective(self.instance, best) if feasible else 0.0,
            feasible=feasible,
            strategy=self.strategy,
            notes=notes,
            elapsed_seconds=budget.elapsed(),
            history=history
        )

    def _pick_best(self, contenders):
        """Highest-objective feasible contender, else the first non-empty one, else empty"""
        best_name, best, best_value = None, None, -1.0
        for name, candidate in contenders:
            if not is_feasible(self.instance, candidate):
                continue
            value = objective(self.instance, candidate)
            if value > best_value:
                best_name, best, best_value = name, candidate, value

        if best is not None:
            return best_name, best

        for name, candidate in contenders:
            if not candidate.is_empty:
                return name, candidate
        return None, Candidate.empty()


def solve(instance: WaveInstance,
          time_budget: float = DEFAULT_TIME_LIMIT,
          strategy: str = "greedy",
          ga_config: Optional[Dict[str, Any]] = None,
          seed: Optional[int] = 0) -> Candidate:
    """
    Solve an instance and return the selected wave

    Mirrors WaveSolver.run: when only the genetic refinement produced a wave
    and it is infeasible, that best-effort wave is returned as is. Callers
    audit the result with is_feasible before accepting it.

    Args:
        instance: Problem instance
        time_budget: Wall-clock budget in seconds
        strategy: "greedy", "genetic" or "hybrid"
        ga_config: Optional genetic parameters
        seed: Random seed for the genetic refinement

    Returns:
        Candidate (empty if no wave could be assembled)
    """
    config = {
        "solver": {
            "strategy": strategy,
            "time_limit_seconds": time_budget,
            "safety_margin_seconds": 0,
            "random_seed": seed,
        },
        "genetic": dict(ga_config or {}),
    }
    result = WaveSolver(instance, config).run(TimeBudget(time_budget))
    return result.candidate

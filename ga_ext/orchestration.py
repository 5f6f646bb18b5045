"""
Orchestration module for GA extension.

Implements the generational refinement loop and the run-config driven
refinement mode used by ga_cli.py.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import time

import numpy as np

from waveopt.wave_selection import WaveInstance, Candidate, GreedyWaveConstructor
from waveopt.wave_metrics import verify_candidate
from waveopt.timing import TimeBudget
from waveopt.instance_io import read_instance, write_solution

from .data_models import Individual, GenerationRecord
from .fitness import FitnessEvaluator, DEFAULT_INFEASIBLE_FITNESS
from .selection import select_two_parents
from .crossover import crossover_or_clone
from .mutation import bit_flip_mutation
from .repair import repair_lower_bound, force_repair
from .io_utils import save_generation_history, save_population, load_population, load_config, save_metadata


DEFAULT_GA_CONFIG = {
    'population_size': 100,
    'generations': 100,
    'tournament_size': 3,
    'crossover_rate': 0.8,
    'mutation_rate': 0.05,
    'infeasible_fitness': DEFAULT_INFEASIBLE_FITNESS,
    'init_density': None,
}


@dataclass
class GeneticResult:
    """
    Outcome of one refinement run.

    Attributes:
        candidate: Best wave found (may be infeasible when feasible is False)
        best: Individual the candidate was taken from
        feasible: Whether the best individual has non-negative fitness
        history: Per-generation statistics
        generations_run: Number of generations bred after the initial one
        notes: Advisory messages
        population: Final evaluated population
    """
    candidate: Candidate
    best: Optional[Individual]
    feasible: bool
    history: List[GenerationRecord] = field(default_factory=list)
    generations_run: int = 0
    notes: List[str] = field(default_factory=list)
    population: List[Individual] = field(default_factory=list)


def merge_ga_config(ga_config: Optional[Dict]) -> Dict:
    """Overlay a (possibly partial) GA config on the defaults."""
    merged = dict(DEFAULT_GA_CONFIG)
    if ga_config:
        merged.update({k: v for k, v in ga_config.items() if v is not None})
    return merged


def initial_density(instance: WaveInstance) -> float:
    """Per-gene selection probability aiming at the middle of the wave window."""
    total_units = sum(instance.order_units)
    if total_units <= 0:
        return 0.0
    target = (instance.wave_size_lb + instance.wave_size_ub) / 2
    return float(min(max(target / total_units, 0.0), 1.0))


def create_initial_population(
    instance: WaveInstance,
    ga_config: Dict,
    rng: np.random.Generator,
    seeds: Optional[List[Candidate]] = None
) -> List[Individual]:
    """
    Build generation 0.

    Seed candidates (e.g. the greedy wave) are inserted first; the remaining
    slots are random selections, repaired up to the lower bound.

    Args:
        instance: Problem instance
        ga_config: GA configuration
        rng: Random number generator
        seeds: Optional candidate waves to include verbatim

    Returns:
        List of unevaluated individuals
    """
    population_size = max(1, int(ga_config['population_size']))
    density = ga_config.get('init_density')
    if density is None:
        density = initial_density(instance)

    order_units = np.asarray(instance.order_units, dtype=np.int64)
    population = []

    for seed in seeds or []:
        if len(population) >= population_size or not seed.orders:
            continue
        population.append(
            Individual.from_orders(instance.n_orders, seed.orders, origin='seed')
        )

    while len(population) < population_size:
        genes = rng.random(instance.n_orders) < density
        individual = Individual(genes=genes, metadata={'origin': 'random'})
        individual, _ = repair_lower_bound(individual, order_units, instance.wave_size_lb, rng)
        population.append(individual)

    return population


def _record_generation(generation: int, fitness: np.ndarray, start: float) -> GenerationRecord:
    return GenerationRecord(
        generation=generation,
        best_fitness=float(fitness.max()) if fitness.size else float('-inf'),
        mean_fitness=float(fitness.mean()) if fitness.size else float('-inf'),
        feasible_count=int(np.count_nonzero(fitness >= 0)),
        population_size=int(fitness.size),
        elapsed_seconds=time.time() - start
    )


def run_genetic_refinement(
    instance: WaveInstance,
    ga_config: Optional[Dict] = None,
    rng: Optional[np.random.Generator] = None,
    seeds: Optional[List[Candidate]] = None,
    budget: Optional[TimeBudget] = None,
    verbose: bool = False
) -> GeneticResult:
    """
    Evolve order-selection vectors and return the best wave found.

    Each generation is fully evaluated before the next one is bred. The
    time budget is polled once per generation.

    Args:
        instance: Problem instance
        ga_config: GA configuration (missing keys use DEFAULT_GA_CONFIG)
        rng: Random number generator threaded through every operator
        seeds: Candidate waves inserted into the initial population
        budget: Optional wall-clock budget
        verbose: Print per-generation progress

    Returns:
        GeneticResult
    """
    config = merge_ga_config(ga_config)
    if rng is None:
        rng = np.random.default_rng()

    notes = []
    if instance.n_orders == 0:
        notes.append("No orders in instance - nothing to evolve")
        return GeneticResult(candidate=Candidate.empty(), best=None, feasible=False, notes=notes)

    start = time.time()
    evaluator = FitnessEvaluator(instance, config['infeasible_fitness'])
    order_units = evaluator.order_units
    population_size = max(1, int(config['population_size']))

    population = create_initial_population(instance, config, rng, seeds)
    fitness = evaluator.evaluate_population(population)
    history = [_record_generation(0, fitness, start)]
    best_ever = population[int(np.argmax(fitness))].copy()

    generations_run = 0
    for generation in range(1, int(config['generations']) + 1):
        if budget is not None and budget.expired():
            notes.append(f"Time budget exhausted before generation {generation}")
            break

        # Elitism: the best individual survives unchanged
        elite = population[int(np.argmax(fitness))].copy()
        next_generation = [elite]

        while len(next_generation) < population_size:
            parent_a, parent_b = select_two_parents(population, rng, config['tournament_size'])
            child = crossover_or_clone(parent_a, parent_b, config['crossover_rate'], rng)
            child, _ = bit_flip_mutation(child, config['mutation_rate'], rng)
            child, _ = repair_lower_bound(child, order_units, instance.wave_size_lb, rng)
            next_generation.append(child)

        population = next_generation
        fitness = evaluator.evaluate_population(population)
        history.append(_record_generation(generation, fitness, start))
        generations_run = generation

        generation_best = population[int(np.argmax(fitness))]
        if generation_best.fitness > best_ever.fitness:
            best_ever = generation_best.copy()

        if verbose and (generation % 10 == 0 or generation == config['generations']):
            record = history[-1]
            print(f"  Generation {generation}: best={record.best_fitness:.4f} "
                  f"mean={record.mean_fitness:.1f} feasible={record.feasible_count}/{record.population_size}")

    result = extract_result(best_ever, evaluator, rng)
    result.history = history
    result.generations_run = generations_run
    result.population = population
    result.notes = notes + result.notes
    return result


def extract_result(
    best: Individual,
    evaluator: FitnessEvaluator,
    rng: np.random.Generator
) -> GeneticResult:
    """
    Turn the best individual of a run into a candidate wave.

    A feasible best individual is returned as is. Otherwise it is
    force-repaired and returned as a best-effort candidate flagged
    infeasible.
    """
    if best.fitness >= 0:
        return GeneticResult(
            candidate=evaluator.to_candidate(best),
            best=best,
            feasible=True
        )

    repaired = force_repair(best, evaluator, rng)
    feasible = repaired.fitness >= 0
    notes = []
    if not feasible:
        notes.append("No feasible individual found - returning best-effort repaired wave")
    return GeneticResult(
        candidate=evaluator.to_candidate(repaired),
        best=repaired,
        feasible=feasible,
        notes=notes
    )


def run_refinement_mode(run_config: Dict) -> GeneticResult:
    """
    Run genetic refinement on one instance from a run configuration.

    Args:
        run_config: Run configuration dict from YAML

    Algorithm:
        1. Load GA config (run_config['ga_config'] file, then run_config['genetic']
           overrides, then defaults)
        2. Setup RNG (run_config['random_seed'] or ga_config seed)
        3. Load the instance from run_config['instance']
        4. Seed the population with the greedy wave and/or a saved
           population snapshot
        5. Evolve, then save solution, history, final population and metadata
        6. Print summary report

    Returns:
        GeneticResult (also written to disk)
    """
    print("=" * 70)
    print("GENETIC REFINEMENT")
    print("=" * 70)

    # Load GA configuration
    ga_config_path = run_config.get('ga_config')
    ga_config = {}
    if ga_config_path:
        print(f"Loading GA config from: {ga_config_path}")
        ga_config = load_config(ga_config_path)
    # Inline overrides from the run config win over the file
    ga_config = merge_ga_config({**ga_config, **(run_config.get('genetic') or {})})

    # Setup RNG
    seed = run_config.get('random_seed', ga_config.get('random_seed'))
    if seed is None:
        seed = int(np.random.randint(0, 2**31))
    print(f"Random seed: {seed}")
    rng = np.random.default_rng(seed)

    budget = TimeBudget(
        run_config.get('time_limit_seconds', 600),
        safety_margin=run_config.get('safety_margin_seconds', 0)
    )

    # Load instance
    instance_path = run_config['instance']
    print(f"Loading instance from: {instance_path}")
    instance = read_instance(instance_path)
    print(f"Orders: {instance.n_orders}, items: {instance.n_items}, aisles: {instance.n_aisles}")
    print(f"Wave window: [{instance.wave_size_lb}, {instance.wave_size_ub}]")

    # Create output directory
    output_root = Path(run_config['output']['root'])
    overwrite = run_config['output'].get('overwrite', False)

    if output_root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {output_root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    output_root.mkdir(parents=True, exist_ok=overwrite)
    print(f"Output directory: {output_root}\n")

    seeds = []
    if run_config.get('seed_with_greedy', True):
        constructor = GreedyWaveConstructor(instance)
        greedy = constructor.construct(budget)
        for note in constructor.notes:
            print(f"  {note}")
        if not greedy.is_empty:
            seeds.append(greedy)

    population_path = run_config.get('initial_population')
    if population_path:
        snapshot = load_population(population_path, instance.n_orders)
        print(f"Loaded {len(snapshot)} individuals from: {population_path}")
        seeds.extend(Candidate(orders=ind.selected_orders()) for ind in snapshot)

    print(f"Evolving {ga_config['population_size']} individuals "
          f"for up to {ga_config['generations']} generations...")
    result = run_genetic_refinement(instance, ga_config, rng, seeds, budget, verbose=True)

    valid, message, stats = verify_candidate(instance, result.candidate)
    if not valid:
        result.feasible = False

    # Save outputs
    solution_path = write_solution(result.candidate, output_root / 'solution.txt', overwrite=overwrite)
    history_path = save_generation_history(result.history, output_root / 'generation_history.csv')
    population_out = save_population(result.population, output_root / 'final_population.csv')
    save_metadata(
        {
            'instance': str(instance_path),
            'random_seed': seed,
            'ga_config': ga_config,
            'generations_run': result.generations_run,
            'feasible': result.feasible,
            'verification': message,
            'objective': float(stats.get('objective', 0.0)),
            'notes': result.notes,
        },
        output_root / 'run_metadata.yaml',
        overwrite=True
    )

    # Print summary
    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Generations run: {result.generations_run}")
    print(f"Best fitness: {result.best.fitness if result.best else float('-inf'):.4f}")
    print(f"Orders: {len(result.candidate.orders)}, aisles: {len(result.candidate.aisles)}")
    print(f"Verification: {message}")
    for note in result.notes:
        print(f"Note: {note}")
    print(f"Solution: {solution_path}")
    print(f"History: {history_path}")
    print(f"Final population: {population_out}")
    print(f"Elapsed: {budget.elapsed():.2f}s")

    return result

"""
Configuration Loading System

Loads YAML configuration files and turns them into configured solvers
for the wave order picking system.
"""

import yaml
from typing import Dict, List, Any

from .wave_selection import WaveInstance


STRATEGIES = ("greedy", "genetic", "hybrid")

DEFAULT_SOLVER_CONFIG = {
    "strategy": "hybrid",
    "time_limit_seconds": 600,
    "safety_margin_seconds": 5,
    "random_seed": 0,
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")
    return config


def resolve_random_seed(random_seed: Any) -> int:
    """
    Turn the configured seed into an integer

    None or "random" draw a fresh seed from the clock.
    """
    if random_seed is None or random_seed == "random":
        import time
        random_seed = int(time.time() * 1000000) % 2147483647
        print(f"Using random seed: {random_seed}")
    elif isinstance(random_seed, str) and random_seed.isdigit():
        random_seed = int(random_seed)
    elif not isinstance(random_seed, int):
        raise ConfigurationError(f"Invalid random_seed: {random_seed!r}")
    return random_seed


def get_solver_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Solver section merged over defaults"""
    solver_config = dict(DEFAULT_SOLVER_CONFIG)
    solver_config.update(config.get("solver") or {})
    return solver_config


def create_solver_from_config(instance: WaveInstance, config_path: str = "config.yaml"):
    """
    Create a configured WaveSolver from YAML configuration

    Args:
        instance: Problem instance to solve
        config_path: Path to the configuration file

    Returns:
        Configured WaveSolver instance

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    from .solver import WaveSolver

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("; ".join(issues))

    return WaveSolver(instance, config)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    for section in ("solver", "genetic", "output", "visualization"):
        if section in config and config[section] is not None and not isinstance(config[section], dict):
            issues.append(f"Section '{section}' must be a mapping")

    solver_config = config.get("solver") or {}
    if isinstance(solver_config, dict):
        strategy = solver_config.get("strategy", DEFAULT_SOLVER_CONFIG["strategy"])
        if strategy not in STRATEGIES:
            issues.append(f"Unknown strategy: {strategy} (expected one of {', '.join(STRATEGIES)})")

        limit = solver_config.get("time_limit_seconds", 600)
        if not isinstance(limit, (int, float)) or limit <= 0:
            issues.append("time_limit_seconds must be positive")

        margin = solver_config.get("safety_margin_seconds", DEFAULT_SOLVER_CONFIG["safety_margin_seconds"])
        if not isinstance(margin, (int, float)) or margin < 0:
            issues.append("safety_margin_seconds must be non-negative")
        elif isinstance(limit, (int, float)) and 0 < limit <= margin:
            issues.append(
                f"safety_margin_seconds ({margin}) must be below time_limit_seconds ({limit})"
            )

        seed = solver_config.get("random_seed", 0)
        if not (seed is None or seed == "random" or isinstance(seed, int)
                or (isinstance(seed, str) and seed.isdigit())):
            issues.append(f"random_seed must be an integer, null or 'random', got {seed!r}")

    genetic_config = config.get("genetic") or {}
    if isinstance(genetic_config, dict):
        for key in ("population_size", "generations", "tournament_size"):
            value = genetic_config.get(key, 1)
            if not isinstance(value, int) or value <= 0:
                issues.append(f"genetic.{key} must be a positive integer")

        for key in ("crossover_rate", "mutation_rate"):
            value = genetic_config.get(key, 0.5)
            if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                issues.append(f"genetic.{key} must be in [0, 1]")

        density = genetic_config.get("init_density")
        if density is not None and (not isinstance(density, (int, float)) or not 0.0 <= density <= 1.0):
            issues.append("genetic.init_density must be null or in [0, 1]")

        penalty = genetic_config.get("infeasible_fitness", -1.0)
        if not isinstance(penalty, (int, float)) or penalty >= 0:
            issues.append("genetic.infeasible_fitness must be negative")

    return issues


def print_config_summary(config_path: str = "config.yaml"):
    """Print a summary of the configuration"""
    try:
        config = load_config(config_path)

        print("=" * 50)
        print("CONFIGURATION SUMMARY")
        print("=" * 50)

        solver_config = get_solver_config(config)
        print(f"Strategy: {solver_config['strategy']}")
        print(f"Time limit: {solver_config['time_limit_seconds']}s "
              f"(safety margin {solver_config['safety_margin_seconds']}s)")
        print(f"Random seed: {solver_config['random_seed']}")

        genetic_config = config.get("genetic") or {}
        if genetic_config.get("enabled", True):
            print(f"\nGenetic refinement:")
            print(f"  population: {genetic_config.get('population_size', 100)}, "
                  f"generations: {genetic_config.get('generations', 100)}")
            print(f"  crossover: {genetic_config.get('crossover_rate', 0.8)}, "
                  f"mutation: {genetic_config.get('mutation_rate', 0.05)}")
        else:
            print("\nGenetic refinement: disabled")

        output_config = config.get("output") or {}
        print(f"\nOutput directory: {output_config.get('directory', 'output')}")

        issues = validate_config(config)
        if issues:
            print(f"\nValidation Issues ({len(issues)}):")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print("\nConfiguration is valid")

        print("=" * 50)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")

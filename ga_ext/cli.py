"""
CLI module for GA extension.

Handles run configuration loading, validation, and dispatching.
"""

from typing import Dict, Any
from pathlib import Path
import yaml


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    return config


def _check_probability(value: Any, name: str) -> None:
    if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
        raise ConfigValidationError(f"'{name}' must be a number in [0, 1], got: {value}")


def _check_positive_int(value: Any, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigValidationError(f"'{name}' must be a positive integer, got: {value}")


def validate_ga_config(ga_config: Dict[str, Any]) -> None:
    """
    Validate GA parameters (all optional).

    Raises:
        ConfigValidationError: If a parameter is invalid
    """
    for key in ('population_size', 'generations', 'tournament_size'):
        if key in ga_config:
            _check_positive_int(ga_config[key], key)

    for key in ('crossover_rate', 'mutation_rate'):
        if key in ga_config:
            _check_probability(ga_config[key], key)

    if ga_config.get('init_density') is not None:
        _check_probability(ga_config['init_density'], 'init_density')

    if 'infeasible_fitness' in ga_config:
        value = ga_config['infeasible_fitness']
        if not isinstance(value, (int, float)) or value >= 0:
            raise ConfigValidationError(
                f"'infeasible_fitness' must be a negative number, got: {value}"
            )


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    # Check required fields
    for field in ['instance', 'output']:
        if field not in config:
            raise ConfigValidationError(f"Missing required field: '{field}'")

    instance_path = Path(config['instance'])
    if not instance_path.exists():
        raise ConfigValidationError(f"Instance file not found: {instance_path}")

    # Validate output section
    if not isinstance(config['output'], dict):
        raise ConfigValidationError("'output' must be a dictionary")

    if 'root' not in config['output']:
        raise ConfigValidationError("Missing required field: 'output.root'")

    # Optional fields
    if 'ga_config' in config:
        ga_config_path = Path(config['ga_config'])
        if not ga_config_path.exists():
            raise ConfigValidationError(f"GA config not found: {ga_config_path}")

    if 'initial_population' in config:
        population_path = Path(config['initial_population'])
        if not population_path.exists():
            raise ConfigValidationError(f"Initial population not found: {population_path}")

    if 'random_seed' in config and config['random_seed'] is not None:
        if not isinstance(config['random_seed'], int) or config['random_seed'] < 0:
            raise ConfigValidationError(
                f"'random_seed' must be a non-negative integer, got: {config['random_seed']}"
            )

    if 'time_limit_seconds' in config:
        limit = config['time_limit_seconds']
        if not isinstance(limit, (int, float)) or limit <= 0:
            raise ConfigValidationError(
                f"'time_limit_seconds' must be a positive number, got: {limit}"
            )

    if 'genetic' in config:
        if not isinstance(config['genetic'], dict):
            raise ConfigValidationError("'genetic' must be a dictionary")
        validate_ga_config(config['genetic'])


def run_from_config(config_path: str, validate_only: bool = False, plot: bool = False):
    """
    Entry point used by ga_cli.py: validate, refine, optionally plot.

    Args:
        config_path: Path to run configuration YAML file
        validate_only: Stop after validation
        plot: Save generation_history.png in the output directory

    Returns:
        GeneticResult, or None when validate_only is set

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    print(f"Reading run configuration: {config_path}")
    config = load_run_config(config_path)
    validate_run_config(config)

    if 'ga_config' in config:
        from .io_utils import load_config
        validate_ga_config(load_config(config['ga_config']))

    if validate_only:
        print("Run configuration is valid")
        return None

    from .orchestration import run_refinement_mode
    result = run_refinement_mode(config)

    if plot:
        import matplotlib
        matplotlib.use('Agg')
        from .visualization_utils import plot_generation_history
        plot_path = plot_generation_history(
            result.history, Path(config['output']['root']) / 'generation_history.png'
        )
        print(f"Plot: {plot_path}")

    print("\nRun finished with a feasible wave." if result.feasible
          else "\nRun finished without a feasible wave.")
    return result

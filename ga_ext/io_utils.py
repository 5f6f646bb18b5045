"""
I/O utilities for GA extension.

Handles generation history CSV logging, population snapshots, GA config
loading and run metadata sidecars.
"""

import csv
from pathlib import Path
from typing import Union
from datetime import datetime

import numpy as np
import yaml

from .data_models import Individual, GenerationRecord


HISTORY_FIELDS = ['generation', 'best_fitness', 'mean_fitness',
                  'feasible_count', 'population_size', 'elapsed_seconds']


def save_generation_history(
    records: list[GenerationRecord],
    output_path: Union[str, Path],
    overwrite: bool = True
) -> Path:
    """
    Save generation records to CSV file.

    Args:
        records: List of GenerationRecord objects
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved history

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"History file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_FIELDS)
        writer.writeheader()
        for record in records:
            writer.writerow(record.to_dict())

    return output_path


def load_generation_history(history_path: Union[str, Path]) -> list[GenerationRecord]:
    """
    Load generation records from CSV file.

    Raises:
        FileNotFoundError: If history file doesn't exist
        ValueError: If required columns are missing
    """
    history_path = Path(history_path)

    if not history_path.exists():
        raise FileNotFoundError(f"History file not found: {history_path}")

    with open(history_path, 'r') as f:
        reader = csv.DictReader(f)
        missing = set(HISTORY_FIELDS[:-1]) - set(reader.fieldnames or [])
        if missing:
            raise ValueError(f"Invalid history format. Missing columns: {sorted(missing)}")
        return [GenerationRecord.from_dict(row) for row in reader]


def save_population(
    population: list[Individual],
    output_path: Union[str, Path],
    overwrite: bool = True
) -> Path:
    """
    Save a population snapshot to CSV.

    CSV format:
        index,fitness,orders
        0,12.5,3 7 12
        1,-1000000.0,0 4

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Population file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['index', 'fitness', 'orders'])
        for idx, individual in enumerate(population):
            orders = " ".join(str(o) for o in sorted(individual.selected_orders()))
            writer.writerow([idx, individual.fitness, orders])

    return output_path


def load_population(population_path: Union[str, Path], n_orders: int) -> list[Individual]:
    """
    Load a population snapshot written by save_population.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If an order id is outside [0, n_orders)
    """
    population_path = Path(population_path)

    if not population_path.exists():
        raise FileNotFoundError(f"Population file not found: {population_path}")

    population = []
    with open(population_path, 'r') as f:
        reader = csv.DictReader(f)
        for row in reader:
            order_ids = [int(o) for o in row['orders'].split()]
            if any(not 0 <= o < n_orders for o in order_ids):
                raise ValueError(f"Order id out of range in row {row['index']}")
            genes = np.zeros(n_orders, dtype=bool)
            genes[order_ids] = True
            population.append(Individual(
                genes=genes,
                fitness=float(row['fitness']),
                metadata={'origin': 'snapshot', 'source_file': str(population_path)}
            ))

    return population


def load_config(config_path: Union[str, Path]) -> dict:
    """
    Load GA extension configuration from YAML file.

    Args:
        config_path: Path to config YAML file

    Returns:
        Configuration dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def save_metadata(
    metadata: dict,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save run metadata to YAML sidecar file.

    Args:
        metadata: Metadata dictionary
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved metadata file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Metadata file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    metadata = dict(metadata)
    metadata.setdefault('saved_at', datetime.now().isoformat())

    with open(output_path, 'w') as f:
        yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)

    return output_path

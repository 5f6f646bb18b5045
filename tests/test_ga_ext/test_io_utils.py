"""
Tests for I/O utilities and data models.

Tests individuals, generation records, history and population CSV files,
config loading and metadata sidecars.
"""

import unittest
import tempfile
import shutil
from pathlib import Path

import numpy as np
import yaml

from ga_ext.data_models import Individual, GenerationRecord
from ga_ext.io_utils import (
    save_generation_history,
    load_generation_history,
    save_population,
    load_population,
    load_config,
    save_metadata,
)


class TestDataModels(unittest.TestCase):
    """Test core data model classes."""

    def test_individual_creation(self):
        """Test Individual creation and basic operations."""
        individual = Individual(genes=[1, 0, 1])

        self.assertEqual(individual.genes.dtype, bool)
        self.assertEqual(len(individual), 3)
        self.assertEqual(individual.num_selected(), 2)
        self.assertEqual(individual.selected_orders(), {0, 2})
        self.assertEqual(individual.fitness, float('-inf'))

    def test_from_orders(self):
        """Test building an individual from order ids."""
        individual = Individual.from_orders(5, {1, 4}, origin='seed')

        self.assertEqual(individual.selected_orders(), {1, 4})
        self.assertEqual(individual.metadata['origin'], 'seed')

    def test_individual_copy(self):
        """Test Individual deep copy."""
        original = Individual(genes=[1, 0], fitness=2.0, aisles=frozenset({3}), metadata={'k': 1})
        copied = original.copy()

        copied.genes[1] = True
        copied.metadata['k'] = 2

        self.assertFalse(original.genes[1])
        self.assertEqual(original.metadata['k'], 1)
        self.assertEqual(copied.fitness, 2.0)
        self.assertEqual(copied.aisles, frozenset({3}))

    def test_invalidate(self):
        """Test evaluation results are dropped."""
        individual = Individual(genes=[1], fitness=3.0, aisles=frozenset({0}))
        individual.invalidate()

        self.assertEqual(individual.fitness, float('-inf'))
        self.assertIsNone(individual.aisles)

    def test_generation_record_dict(self):
        """Test record conversion to and from dict."""
        record = GenerationRecord(
            generation=3,
            best_fitness=4.5,
            mean_fitness=-250000.25,
            feasible_count=7,
            population_size=10,
            elapsed_seconds=1.25
        )
        data = record.to_dict()

        self.assertEqual(data['best_fitness'], "4.500000")
        restored = GenerationRecord.from_dict(data)
        self.assertEqual(restored.generation, 3)
        self.assertAlmostEqual(restored.mean_fitness, -250000.25)
        self.assertEqual(restored.feasible_count, 7)

    def test_generation_record_without_elapsed(self):
        """Test elapsed time defaults when missing."""
        record = GenerationRecord.from_dict({
            'generation': '0', 'best_fitness': '1.0', 'mean_fitness': '0.5',
            'feasible_count': '2', 'population_size': '4'
        })
        self.assertEqual(record.elapsed_seconds, 0.0)


class TestHistoryIO(unittest.TestCase):
    """Test generation history CSV files."""

    def setUp(self):
        """Create temporary directory."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.records = [
            GenerationRecord(0, 2.0, -5.0, 3, 10, 0.1),
            GenerationRecord(1, 2.5, 1.0, 8, 10, 0.2),
        ]

    def tearDown(self):
        """Clean up temporary directory."""
        shutil.rmtree(self.temp_dir)

    def test_save_and_load(self):
        """Test history written to CSV is read back."""
        path = save_generation_history(self.records, self.temp_dir / "logs" / "history.csv")

        self.assertTrue(path.exists())
        loaded = load_generation_history(path)
        self.assertEqual(len(loaded), 2)
        self.assertAlmostEqual(loaded[1].best_fitness, 2.5)
        self.assertEqual(loaded[1].feasible_count, 8)

    def test_no_overwrite(self):
        """Test overwrite protection."""
        path = save_generation_history(self.records, self.temp_dir / "history.csv")
        with self.assertRaises(FileExistsError):
            save_generation_history(self.records, path, overwrite=False)

    def test_missing_columns(self):
        """Test CSV without required columns is rejected."""
        path = self.temp_dir / "bad.csv"
        path.write_text("generation,best_fitness\n0,1.0\n")
        with self.assertRaises(ValueError):
            load_generation_history(path)

    def test_missing_file(self):
        """Test missing history raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            load_generation_history(self.temp_dir / "missing.csv")


class TestPopulationIO(unittest.TestCase):
    """Test population snapshot files."""

    def setUp(self):
        """Create temporary directory."""
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """Clean up temporary directory."""
        shutil.rmtree(self.temp_dir)

    def test_save_and_load(self):
        """Test selections and fitness are preserved."""
        population = [
            Individual.from_orders(6, [0, 3, 5]),
            Individual(genes=np.zeros(6, dtype=bool), fitness=-1e6),
        ]
        population[0].fitness = 2.5

        path = save_population(population, self.temp_dir / "population.csv")
        loaded = load_population(path, n_orders=6)

        self.assertEqual(len(loaded), 2)
        self.assertEqual(loaded[0].selected_orders(), {0, 3, 5})
        self.assertAlmostEqual(loaded[0].fitness, 2.5)
        self.assertEqual(loaded[1].num_selected(), 0)
        self.assertEqual(loaded[0].metadata['origin'], 'snapshot')

    def test_out_of_range_order(self):
        """Test order ids beyond the instance are rejected."""
        path = save_population([Individual.from_orders(10, [9])], self.temp_dir / "population.csv")
        with self.assertRaises(ValueError):
            load_population(path, n_orders=5)

    def test_missing_file(self):
        """Test missing snapshot raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            load_population(self.temp_dir / "missing.csv", n_orders=3)


class TestConfigAndMetadata(unittest.TestCase):
    """Test GA config and metadata files."""

    def setUp(self):
        """Create temporary directory."""
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """Clean up temporary directory."""
        shutil.rmtree(self.temp_dir)

    def test_load_config(self):
        """Test YAML GA config loading."""
        path = self.temp_dir / "ga.yaml"
        path.write_text("population_size: 12\nmutation_rate: 0.1\n")

        config = load_config(path)
        self.assertEqual(config['population_size'], 12)
        self.assertAlmostEqual(config['mutation_rate'], 0.1)

    def test_load_empty_config(self):
        """Test empty file gives empty dict."""
        path = self.temp_dir / "empty.yaml"
        path.write_text("")
        self.assertEqual(load_config(path), {})

    def test_bundled_config(self):
        """Test the packaged GA config loads."""
        path = Path(__file__).parent.parent.parent / "ga_ext" / "ga_ext_config.yaml"
        config = load_config(path)
        self.assertIn('population_size', config)

    def test_save_metadata(self):
        """Test metadata sidecar gets a timestamp."""
        path = save_metadata({'random_seed': 42}, self.temp_dir / "meta.yaml")

        with open(path) as f:
            data = yaml.safe_load(f)
        self.assertEqual(data['random_seed'], 42)
        self.assertIn('saved_at', data)

        with self.assertRaises(FileExistsError):
            save_metadata({'random_seed': 1}, path)


if __name__ == '__main__':
    unittest.main()

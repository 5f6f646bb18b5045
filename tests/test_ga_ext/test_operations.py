"""
Tests for GA operations: selection, crossover, and mutation.
"""

import unittest
import numpy as np

from ga_ext.data_models import Individual
from ga_ext.selection import tournament_select, select_two_parents
from ga_ext.crossover import uniform_crossover, crossover_or_clone
from ga_ext.mutation import bit_flip_mutation


def make_population(fitness_values, n_orders=6):
    """Individuals with given fitness and distinct genes"""
    population = []
    for idx, fitness in enumerate(fitness_values):
        genes = np.zeros(n_orders, dtype=bool)
        genes[idx % n_orders] = True
        population.append(Individual(genes=genes, fitness=fitness, metadata={'rank': idx}))
    return population


class TestSelection(unittest.TestCase):
    """Test tournament selection."""

    def setUp(self):
        """Set up test population."""
        self.population = make_population([1.0, 5.0, -1e6, 3.0])
        self.rng = np.random.default_rng(42)

    def test_full_tournament_picks_best(self):
        """Test a large tournament almost surely returns the best individual."""
        winner = tournament_select(self.population, self.rng, tournament_size=50)
        self.assertEqual(winner.fitness, 5.0)

    def test_winner_from_population(self):
        """Test winners are population members, not copies."""
        for _ in range(20):
            winner = tournament_select(self.population, self.rng)
            self.assertTrue(any(winner is ind for ind in self.population))

    def test_size_one_is_uniform(self):
        """Test tournament of one samples every individual."""
        seen = set()
        for _ in range(200):
            seen.add(tournament_select(self.population, self.rng, tournament_size=1).metadata['rank'])
        self.assertEqual(seen, {0, 1, 2, 3})

    def test_selection_pressure(self):
        """Test better individuals win more often."""
        wins = {0: 0, 1: 0, 2: 0, 3: 0}
        for _ in range(500):
            wins[tournament_select(self.population, self.rng, 3).metadata['rank']] += 1

        self.assertGreater(wins[1], wins[0])
        self.assertGreater(wins[3], wins[2])

    def test_empty_population(self):
        """Test selecting from nothing raises."""
        with self.assertRaises(ValueError):
            tournament_select([], self.rng)

    def test_two_parents(self):
        """Test two independent tournaments."""
        parent_a, parent_b = select_two_parents(self.population, self.rng)
        self.assertIsInstance(parent_a, Individual)
        self.assertIsInstance(parent_b, Individual)

    def test_seeded_selection_reproducible(self):
        """Test same seed gives the same sequence of winners."""
        first = [tournament_select(self.population, np.random.default_rng(7)).metadata['rank']
                 for _ in range(5)]
        second = [tournament_select(self.population, np.random.default_rng(7)).metadata['rank']
                  for _ in range(5)]
        self.assertEqual(first, second)


class TestCrossover(unittest.TestCase):
    """Test crossover operators."""

    def setUp(self):
        """Set up test parents."""
        self.parent_a = Individual(genes=np.array([1, 1, 1, 1, 0, 0, 0, 0], dtype=bool), fitness=2.0)
        self.parent_b = Individual(genes=np.array([0, 0, 1, 1, 1, 1, 0, 0], dtype=bool), fitness=3.0)
        self.rng = np.random.default_rng(42)

    def test_uniform_crossover_follows_mask(self):
        """Test every gene comes from the parent named by the mask."""
        child, mask = uniform_crossover(self.parent_a, self.parent_b, self.rng)

        self.assertEqual(len(child), 8)
        for i in range(8):
            expected = self.parent_a.genes[i] if mask[i] else self.parent_b.genes[i]
            self.assertEqual(child.genes[i], expected)

    def test_shared_genes_preserved(self):
        """Test genes equal in both parents are inherited unchanged."""
        for _ in range(10):
            child, _ = uniform_crossover(self.parent_a, self.parent_b, self.rng)
            self.assertTrue(child.genes[2] and child.genes[3])
            self.assertFalse(child.genes[6] or child.genes[7])

    def test_child_not_evaluated(self):
        """Test child carries no fitness."""
        child, _ = uniform_crossover(self.parent_a, self.parent_b, self.rng)
        self.assertEqual(child.fitness, float('-inf'))
        self.assertIsNone(child.aisles)
        self.assertEqual(child.metadata['crossover_strategy'], 'uniform')

    def test_length_mismatch(self):
        """Test parents of different lengths raise."""
        short = Individual(genes=np.array([1, 0], dtype=bool))
        with self.assertRaises(ValueError):
            uniform_crossover(self.parent_a, short, self.rng)

    def test_rate_zero_clones(self):
        """Test crossover rate 0 clones parent A without aliasing."""
        child = crossover_or_clone(self.parent_a, self.parent_b, 0.0, self.rng)

        np.testing.assert_array_equal(child.genes, self.parent_a.genes)
        self.assertIsNot(child.genes, self.parent_a.genes)
        self.assertEqual(child.metadata['crossover_strategy'], 'clone')
        self.assertEqual(child.fitness, float('-inf'))

    def test_rate_one_crosses(self):
        """Test crossover rate 1 always recombines."""
        child = crossover_or_clone(self.parent_a, self.parent_b, 1.0, self.rng)
        self.assertEqual(child.metadata['crossover_strategy'], 'uniform')

    def test_parents_unchanged(self):
        """Test crossover leaves parents intact."""
        genes_a = self.parent_a.genes.copy()
        genes_b = self.parent_b.genes.copy()
        uniform_crossover(self.parent_a, self.parent_b, self.rng)

        np.testing.assert_array_equal(self.parent_a.genes, genes_a)
        np.testing.assert_array_equal(self.parent_b.genes, genes_b)


class TestMutation(unittest.TestCase):
    """Test mutation operators."""

    def setUp(self):
        """Set up test individual."""
        self.individual = Individual(
            genes=np.zeros(20, dtype=bool),
            fitness=4.0,
            aisles=frozenset({1})
        )
        self.rng = np.random.default_rng(42)

    def test_rate_zero_no_change(self):
        """Test zero mutation rate keeps genes."""
        mutated, log = bit_flip_mutation(self.individual, 0.0, self.rng)

        np.testing.assert_array_equal(mutated.genes, self.individual.genes)
        self.assertIn("no genes flipped", log[0])

    def test_rate_one_flips_all(self):
        """Test mutation rate 1 flips every gene."""
        mutated, log = bit_flip_mutation(self.individual, 1.0, self.rng)

        self.assertTrue(mutated.genes.all())
        self.assertIn("flipped 20 genes", log[0])

    def test_original_untouched_and_invalidated(self):
        """Test mutation returns a fresh, unevaluated individual."""
        mutated, _ = bit_flip_mutation(self.individual, 0.5, self.rng)

        self.assertFalse(self.individual.genes.any())
        self.assertEqual(self.individual.fitness, 4.0)
        self.assertEqual(mutated.fitness, float('-inf'))
        self.assertIsNone(mutated.aisles)

    def test_flip_frequency(self):
        """Test flips happen at roughly the requested rate."""
        individual = Individual(genes=np.zeros(2000, dtype=bool))
        mutated, _ = bit_flip_mutation(individual, 0.1, self.rng)

        self.assertGreater(mutated.num_selected(), 120)
        self.assertLess(mutated.num_selected(), 280)


if __name__ == '__main__':
    unittest.main()

"""
Tests for GA repair and fitness evaluation.

Tests first-fit aisle decoding, fitness scoring, lower-bound repair and
the best-effort final repair.
"""

import unittest
import numpy as np

from waveopt.wave_selection import WaveInstance
from waveopt.wave_metrics import is_feasible

from ga_ext.data_models import Individual
from ga_ext.fitness import FitnessEvaluator, DEFAULT_INFEASIBLE_FITNESS
from ga_ext.repair import repair_lower_bound, force_repair


class TestFitnessEvaluator(unittest.TestCase):
    """Test decoding and scoring."""

    def setUp(self):
        """Set up test instance."""
        # Item 0 is split over aisles 0 and 1; item 1 only in aisle 2
        self.instance = WaveInstance(
            orders=[{0: 3}, {0: 6}, {1: 2}, {0: 1, 1: 1}],
            aisles=[{0: 4}, {0: 7}, {1: 5}],
            n_items=2,
            wave_size_lb=3,
            wave_size_ub=8
        )
        self.evaluator = FitnessEvaluator(self.instance)

    def test_first_fit_aisle(self):
        """Test the first aisle holding the quantity on its own is chosen."""
        self.assertEqual(self.evaluator.first_fit_aisle(0, 3), 0)
        self.assertEqual(self.evaluator.first_fit_aisle(0, 6), 1)
        self.assertIsNone(self.evaluator.first_fit_aisle(0, 8))
        self.assertIsNone(self.evaluator.first_fit_aisle(5, 1))

    def test_decode_aisles(self):
        """Test aisle set derived from selected orders."""
        genes = np.array([1, 0, 1, 0], dtype=bool)
        self.assertEqual(self.evaluator.decode_aisles(genes), frozenset({0, 2}))

    def test_decode_undecodable(self):
        """Test a demand without a single covering aisle cannot be decoded."""
        instance = WaveInstance(orders=[{0: 9}], aisles=[{0: 5}, {0: 5}],
                                wave_size_lb=1, wave_size_ub=10)
        evaluator = FitnessEvaluator(instance)
        self.assertIsNone(evaluator.decode_aisles(np.array([True])))

    def test_feasible_fitness_is_objective(self):
        """Test feasible individuals score units per aisle."""
        individual = Individual(genes=np.array([1, 0, 1, 0], dtype=bool))
        fitness = self.evaluator.evaluate(individual)

        self.assertAlmostEqual(fitness, 2.5)
        self.assertEqual(individual.fitness, fitness)
        self.assertEqual(individual.aisles, frozenset({0, 2}))

    def test_infeasible_penalty(self):
        """Test bound violations and empty selections get the penalty."""
        too_many = Individual(genes=np.array([1, 1, 1, 0], dtype=bool))
        too_few = Individual(genes=np.array([0, 0, 0, 1], dtype=bool))
        empty = Individual(genes=np.zeros(4, dtype=bool))

        for individual in (too_many, too_few, empty):
            self.assertEqual(self.evaluator.evaluate(individual), DEFAULT_INFEASIBLE_FITNESS)

    def test_decoded_stock_exceeded(self):
        """Test first-fit aisles whose combined stock is short are infeasible."""
        # Orders 0 and 3 both decode item 0 to aisle 0: 4 units of stock for 4 units demand
        ok = Individual(genes=np.array([1, 0, 0, 1], dtype=bool))
        self.assertGreaterEqual(self.evaluator.evaluate(ok), 0)

        instance = WaveInstance(orders=[{0: 3}, {0: 3}], aisles=[{0: 4}, {0: 4}],
                                wave_size_lb=1, wave_size_ub=10)
        evaluator = FitnessEvaluator(instance)
        both = Individual(genes=np.array([1, 1], dtype=bool))
        self.assertEqual(evaluator.evaluate(both), DEFAULT_INFEASIBLE_FITNESS)

    def test_custom_penalty(self):
        """Test configurable infeasible fitness."""
        evaluator = FitnessEvaluator(self.instance, infeasible_fitness=-5.0)
        self.assertEqual(evaluator.evaluate(Individual(genes=np.zeros(4, dtype=bool))), -5.0)

    def test_to_candidate(self):
        """Test conversion to a candidate passes the exact evaluator."""
        individual = Individual(genes=np.array([1, 0, 1, 0], dtype=bool))
        self.evaluator.evaluate(individual)
        candidate = self.evaluator.to_candidate(individual)

        self.assertEqual(candidate.orders, {0, 2})
        self.assertEqual(candidate.aisles, {0, 2})
        self.assertTrue(is_feasible(self.instance, candidate))

    def test_evaluate_population(self):
        """Test population fitness array in order."""
        population = [
            Individual(genes=np.array([1, 0, 1, 0], dtype=bool)),
            Individual(genes=np.zeros(4, dtype=bool)),
        ]
        fitness = self.evaluator.evaluate_population(population)

        self.assertEqual(fitness.shape, (2,))
        self.assertAlmostEqual(fitness[0], 2.5)
        self.assertEqual(fitness[1], DEFAULT_INFEASIBLE_FITNESS)
        self.assertEqual(self.evaluator.evaluations, 2)


class TestRepairLowerBound(unittest.TestCase):
    """Test lower-bound repair."""

    def setUp(self):
        """Set up order units."""
        self.order_units = np.array([3, 6, 2, 2])
        self.rng = np.random.default_rng(42)

    def test_already_met(self):
        """Test no change when the bound is met."""
        individual = Individual(genes=np.array([1, 0, 0, 0], dtype=bool), fitness=1.0)
        repaired, notes = repair_lower_bound(individual, self.order_units, 3, self.rng)

        self.assertIs(repaired, individual)
        self.assertIn("already met", notes[0])

    def test_adds_orders_until_bound(self):
        """Test orders are added until the bound is reached."""
        individual = Individual(genes=np.zeros(4, dtype=bool))
        repaired, notes = repair_lower_bound(individual, self.order_units, 7, self.rng)

        self.assertGreaterEqual(int(self.order_units[repaired.genes].sum()), 7)
        self.assertFalse(individual.genes.any())
        self.assertEqual(repaired.fitness, float('-inf'))
        self.assertIn("added", notes[0])

    def test_selected_orders_kept(self):
        """Test repair only adds orders."""
        individual = Individual(genes=np.array([0, 0, 1, 0], dtype=bool))
        repaired, _ = repair_lower_bound(individual, self.order_units, 10, self.rng)
        self.assertTrue(repaired.genes[2])

    def test_unreachable_bound(self):
        """Test all orders selected when the bound cannot be met."""
        individual = Individual(genes=np.zeros(4, dtype=bool))
        repaired, notes = repair_lower_bound(individual, self.order_units, 100, self.rng)

        self.assertTrue(repaired.genes.all())
        self.assertIn("still below", notes[0])


class TestForceRepair(unittest.TestCase):
    """Test the best-effort final repair."""

    def setUp(self):
        """Set up test instance."""
        self.instance = WaveInstance(
            orders=[{0: 2}, {0: 3}, {0: 1}],
            aisles=[{0: 10}],
            wave_size_lb=4,
            wave_size_ub=6
        )
        self.evaluator = FitnessEvaluator(self.instance)
        self.rng = np.random.default_rng(42)

    def test_under_filled_becomes_feasible(self):
        """Test repair lifts an under-filled individual to feasibility."""
        individual = Individual(genes=np.array([1, 0, 0], dtype=bool))
        self.evaluator.evaluate(individual)
        self.assertLess(individual.fitness, 0)

        repaired = force_repair(individual, self.evaluator, self.rng)

        self.assertIsNot(repaired, individual)
        self.assertGreaterEqual(repaired.fitness, 0)
        self.assertIn('repair_notes', repaired.metadata)

    def test_over_filled_stays_infeasible(self):
        """Test repair never removes orders, so an over-filled wave stays infeasible."""
        instance = WaveInstance(
            orders=[{0: 2}, {0: 3}, {0: 1}],
            aisles=[{0: 10}],
            wave_size_lb=4,
            wave_size_ub=5
        )
        evaluator = FitnessEvaluator(instance)
        individual = Individual(genes=np.array([1, 1, 1], dtype=bool))
        evaluator.evaluate(individual)

        repaired = force_repair(individual, evaluator, self.rng)

        self.assertLess(repaired.fitness, 0)
        self.assertIn("still infeasible", repaired.metadata['repair_notes'])


if __name__ == '__main__':
    unittest.main()

import random
import re
import unittest

from circuit_challenge.core.arithmetic import Operation, evaluate_expression
from circuit_challenge.core.difficulty import DifficultyConfig, OperationWeights, get_difficulty_by_level
from circuit_challenge.generators.expressions import (
    ExpressionSynthesizer, factor_pairs, multiplication_boost
)
from circuit_challenge.generators.cell_assigner import CellGrid
from circuit_challenge.core.puzzle import Coordinate


class OperatorGenerationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.synth = ExpressionSynthesizer(random.Random(42))

    def test_addition(self) -> None:
        for target in range(2, 21):
            with self.subTest(target=target):
                expression = self.synth.generate_addition(target, 10)
                self.assertEqual(expression.operation, Operation.ADDITION)
                self.assertTrue(1 <= expression.operand_a <= 10)
                self.assertTrue(1 <= expression.operand_b <= 10)
                self.assertEqual(evaluate_expression(expression.text), target)

    def test_addition_limits(self) -> None:
        self.assertIsNone(self.synth.generate_addition(1, 10))
        self.assertIsNone(self.synth.generate_addition(21, 10))

    def test_subtraction(self) -> None:
        for _ in range(20):
            expression = self.synth.generate_subtraction(5, 10)
            self.assertTrue(1 <= expression.operand_b <= 5)
            self.assertEqual(expression.operand_a - expression.operand_b, 5)
            self.assertEqual(evaluate_expression(expression.text), 5)
        self.assertIsNone(self.synth.generate_subtraction(10, 10))

    def test_multiplication(self) -> None:
        for _ in range(20):
            expression = self.synth.generate_multiplication(12, 6)
            self.assertIn(sorted((expression.operand_a, expression.operand_b)), [[2, 6], [3, 4]])
            self.assertEqual(evaluate_expression(expression.text), 12)
        self.assertIsNone(self.synth.generate_multiplication(7, 10))
        self.assertIsNone(self.synth.generate_multiplication(3, 10))
        self.assertIsNone(self.synth.generate_multiplication(49, 6))

    def test_division(self) -> None:
        for _ in range(20):
            expression = self.synth.generate_division(5, 10)
            self.assertTrue(2 <= expression.operand_b <= 10)
            self.assertEqual(expression.operand_a, 5 * expression.operand_b)
            self.assertEqual(evaluate_expression(expression.text), 5)
        self.assertIsNone(self.synth.generate_division(5, 1))
        self.assertIsNone(self.synth.generate_division(600, 12))

    def test_divisor_capped_at_twelve(self) -> None:
        divisors = {self.synth.generate_division(3, 20).operand_b for _ in range(200)}
        self.assertLessEqual(max(divisors), 12)

    def test_fallback(self) -> None:
        self.assertEqual(ExpressionSynthesizer.fallback(1).text, "2 − 1")
        self.assertEqual(ExpressionSynthesizer.fallback(9).text, "4 + 5")
        self.assertEqual(evaluate_expression(ExpressionSynthesizer.fallback(250).text), 250)


class HelperTests(unittest.TestCase):
    def test_factor_pairs(self) -> None:
        self.assertEqual(factor_pairs(12, 12), [(2, 6), (3, 4)])
        self.assertEqual(factor_pairs(36, 6), [(6, 6)])
        self.assertEqual(factor_pairs(13, 12), [])
        self.assertEqual(factor_pairs(12, 0), [])

    def test_multiplication_boost(self) -> None:
        self.assertAlmostEqual(multiplication_boost(10), 0.40)
        self.assertAlmostEqual(multiplication_boost(25), 0.40)
        self.assertAlmostEqual(multiplication_boost(30), 0.44)
        self.assertAlmostEqual(multiplication_boost(50), 0.60)
        self.assertAlmostEqual(multiplication_boost(120), 0.60)


class SynthesizeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.synth = ExpressionSynthesizer(random.Random(7))

    def test_addition_only_config(self) -> None:
        config = get_difficulty_by_level(1)
        pattern = re.compile(r"^(\d+) \+ (\d+)$")
        for target in range(5, 11):
            expression = self.synth.synthesize(target, config)
            match = pattern.match(expression.text)
            self.assertIsNotNone(match, expression.text)
            self.assertEqual(int(match.group(1)) + int(match.group(2)), target)

    def test_every_preset_produces_correct_expressions(self) -> None:
        for level in range(1, 11):
            config = get_difficulty_by_level(level)
            for target in range(config.connector_min, config.connector_max + 1):
                for prioritize in (False, True):
                    expression = self.synth.synthesize(target, config, prioritize)
                    self.assertEqual(evaluate_expression(expression.text), target,
                                     f"level {level}: {expression.text}")
                    self.assertIn(expression.operation, config.enabled_operations)

    def test_prioritized_division(self) -> None:
        config = get_difficulty_by_level(8)
        operations = [self.synth.synthesize(6, config, prioritize_division=True).operation
                      for _ in range(50)]
        self.assertGreaterEqual(operations.count(Operation.DIVISION), 30)

    def test_division_quotients_stay_in_times_tables(self) -> None:
        config = get_difficulty_by_level(9)
        divisions = []
        for target in range(config.connector_min, config.connector_max + 1):
            for prioritize in (False, True):
                for _ in range(20):
                    expression = self.synth.synthesize(target, config, prioritize)
                    self.assertEqual(evaluate_expression(expression.text), target)
                    if expression.operation == Operation.DIVISION:
                        divisions.append(expression)
        self.assertTrue(divisions)
        for expression in divisions:
            self.assertLessEqual(expression.result, config.mult_div_range, expression.text)
            self.assertLessEqual(expression.operand_b, config.mult_div_range, expression.text)

    def test_division_not_prioritized_above_range(self) -> None:
        config = DifficultyConfig(
            addition_enabled=True,
            division_enabled=True,
            mult_div_range=6,
            weights=OperationWeights(addition=100, division=0)
        )
        for _ in range(20):
            self.assertEqual(self.synth.select_operation(30, config, prioritize_division=True),
                             Operation.ADDITION)

    def test_no_weights_falls_back_to_addition(self) -> None:
        config = DifficultyConfig(weights=OperationWeights())
        self.assertEqual(self.synth.select_operation(8, config), Operation.ADDITION)

    def test_weighted_selection_follows_weights(self) -> None:
        config = DifficultyConfig(
            addition_enabled=True,
            subtraction_enabled=True,
            add_sub_range=30,
            weights=OperationWeights(addition=0, subtraction=100)
        )
        operations = {self.synth.select_operation(8, config) for _ in range(30)}
        self.assertEqual(operations, {Operation.SUBTRACTION})


class ApplyExpressionsTests(unittest.TestCase):
    def test_fills_every_answered_cell(self) -> None:
        grid = CellGrid(3, 4)
        for i, cell in enumerate(grid):
            if not cell.is_finish:
                cell.answer = 5 + i % 6
        grid.division_cells.add(Coordinate(0, 1))

        ExpressionSynthesizer(random.Random(1)).apply_expressions(grid, get_difficulty_by_level(8))

        for cell in grid:
            if cell.is_finish:
                self.assertEqual(cell.expression, "")
            else:
                self.assertEqual(evaluate_expression(cell.expression), cell.answer)


if __name__ == "__main__":
    unittest.main()

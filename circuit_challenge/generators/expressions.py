"""
Arithmetic expression synthesis for cell answers.
"""

import math
import random
from typing import List, Optional, Tuple

from ..core.arithmetic import Operation, Expression
from ..core.difficulty import DifficultyConfig
from .cell_assigner import CellGrid

MAX_SYNTHESIS_ATTEMPTS = 10
DIVISION_PRIORITY = 0.8
MAX_DIVISOR = 12
MAX_DIVIDEND = 1000


def factor_pairs(target: int, max_factor: int) -> List[Tuple[int, int]]:
    """Pairs (a, b), a <= b, with a * b == target and 2 <= a, b <= max_factor"""
    pairs = []
    for a in range(2, math.isqrt(target) + 1):
        if target % a == 0:
            b = target // a
            if a <= max_factor and b <= max_factor:
                pairs.append((a, b))
    return pairs


def multiplication_boost(target: int) -> float:
    """Chance of forcing multiplication, 0.40 up to 25 rising to 0.60 from 50"""
    if target <= 25:
        return 0.40
    if target >= 50:
        return 0.60
    return 0.40 + (target - 25) * 0.008


class ExpressionSynthesizer:
    """Turns target answers into arithmetic expressions"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def synthesize(self, target: int, config: DifficultyConfig,
                   prioritize_division: bool = False) -> Expression:
        """
        Build an expression evaluating to target.

        Args:
            target: The cell answer
            config: Enabled operations, ranges and weights
            prioritize_division: The cell sits on a division-reserved connector

        Returns:
            An Expression whose result is target
        """
        for _ in range(MAX_SYNTHESIS_ATTEMPTS):
            operation = self.select_operation(target, config, prioritize_division)
            expression = self._generate(operation, target, config)
            if expression is not None:
                return expression

        return self.fallback(target)

    def select_operation(self, target: int, config: DifficultyConfig,
                         prioritize_division: bool = False) -> Operation:
        if (prioritize_division and config.division_enabled
                and target <= config.mult_div_range
                and self.rng.random() < DIVISION_PRIORITY):
            return Operation.DIVISION

        if (not prioritize_division and config.multiplication_enabled
                and factor_pairs(target, config.mult_div_range)
                and self.rng.random() < multiplication_boost(target)):
            return Operation.MULTIPLICATION

        return self._weighted_choice(config)

    def _weighted_choice(self, config: DifficultyConfig) -> Operation:
        """Weighted pick among enabled operations, addition when none qualify"""
        candidates = [(op, config.weights.weight_for(op)) for op in config.enabled_operations
                      if config.weights.weight_for(op) > 0]
        total = sum(weight for _, weight in candidates)
        if total <= 0:
            return Operation.ADDITION

        pick = self.rng.uniform(0, total)
        for operation, weight in candidates:
            pick -= weight
            if pick <= 0:
                return operation
        return candidates[-1][0]

    def _generate(self, operation: Operation, target: int, config: DifficultyConfig) -> Optional[Expression]:
        if operation == Operation.ADDITION:
            return self.generate_addition(target, config.add_sub_range)
        if operation == Operation.SUBTRACTION:
            return self.generate_subtraction(target, config.add_sub_range)
        if operation == Operation.MULTIPLICATION:
            return self.generate_multiplication(target, config.mult_div_range)
        # Quotients stay within the times tables
        if target > config.mult_div_range:
            return None
        return self.generate_division(target, config.mult_div_range)

    def generate_addition(self, target: int, max_range: int) -> Optional[Expression]:
        if target < 2:
            return None
        low = max(1, target - max_range)
        high = min(max_range, target - 1)
        if low > high:
            return None
        a = self.rng.randint(low, high)
        return Expression.build(Operation.ADDITION, a, target - a, target)

    def generate_subtraction(self, target: int, max_range: int) -> Optional[Expression]:
        if max_range - target < 1:
            return None
        b = self.rng.randint(1, max_range - target)
        return Expression.build(Operation.SUBTRACTION, target + b, b, target)

    def generate_multiplication(self, target: int, max_range: int) -> Optional[Expression]:
        if target < 4:
            return None
        pairs = factor_pairs(target, max_range)
        if not pairs:
            return None
        a, b = self.rng.choice(pairs)
        if self.rng.random() < 0.5:
            a, b = b, a
        return Expression.build(Operation.MULTIPLICATION, a, b, target)

    def generate_division(self, target: int, max_range: int) -> Optional[Expression]:
        divisors = [b for b in range(2, min(max_range, MAX_DIVISOR) + 1) if target * b <= MAX_DIVIDEND]
        if not divisors:
            return None
        b = self.rng.choice(divisors)
        return Expression.build(Operation.DIVISION, target * b, b, target)

    @staticmethod
    def fallback(target: int) -> Expression:
        """Always-valid expression when every attempt failed"""
        if target == 1:
            return Expression.build(Operation.SUBTRACTION, 2, 1, 1)
        a = target // 2
        return Expression.build(Operation.ADDITION, a, target - a, target)

    def apply_expressions(self, grid: CellGrid, config: DifficultyConfig):
        """Write an expression into every answered, non-finish cell"""
        for cell in grid:
            if cell.is_finish or cell.answer is None:
                continue
            expression = self.synthesize(cell.answer, config, cell.coordinate in grid.division_cells)
            cell.expression = expression.text

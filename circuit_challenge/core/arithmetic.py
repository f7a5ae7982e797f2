"""
Arithmetic operations and expression evaluation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re


class Operation(Enum):
    """Arithmetic operations used in cell expressions"""
    ADDITION = "+"
    SUBTRACTION = "−"  # Unicode minus
    MULTIPLICATION = "×"
    DIVISION = "÷"

    @property
    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class Expression:
    """A generated arithmetic expression"""
    text: str
    operation: Operation
    operand_a: int
    operand_b: int
    result: int

    @classmethod
    def build(cls, operation: Operation, a: int, b: int, result: int) -> 'Expression':
        return cls(f"{a} {operation.symbol} {b}", operation, a, b, result)


# Display symbols are normalised to ASCII before parsing
_NORMALISE = str.maketrans({'−': '-', '×': '*', '÷': '/'})
_EXPRESSION_PATTERN = re.compile(r'^(\d+)\s*([+\-*/])\s*(\d+)$')


def evaluate_expression(expression: str) -> Optional[int]:
    """
    Evaluate a "number operator number" expression.

    Accepts both the display symbols (−, ×, ÷) and their ASCII forms.
    Division must be exact.

    Returns:
        The integer value, or None for empty, START/FINISH or malformed text
    """
    if not expression or expression in ('START', 'FINISH'):
        return None

    match = _EXPRESSION_PATTERN.match(expression.translate(_NORMALISE).strip())
    if not match:
        return None

    a, op, b = int(match.group(1)), match.group(2), int(match.group(3))

    if op == '+':
        return a + b
    if op == '-':
        return a - b
    if op == '*':
        return a * b
    if b == 0 or a % b != 0:
        return None
    return a // b


def parse_operation(expression: str) -> Optional[Operation]:
    """Return the operation used in an expression, None if it cannot be parsed"""
    for operation in Operation:
        if f" {operation.symbol} " in expression:
            return operation
    return None

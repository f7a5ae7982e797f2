"""
Puzzle generators for Circuit Challenge.
"""

from .puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig, generate_puzzles_parallel
from .path_finder import PathFinder, PathResult
from .connectors import (
    DiagonalGridResolver, ConnectorGraphBuilder,
    ConnectorValueAssigner, ValueAssignment
)
from .cell_assigner import CellAnswerAssigner, CellGrid
from .expressions import ExpressionSynthesizer, factor_pairs, multiplication_boost

__all__ = [
    # Main generator
    'PuzzleGenerator', 'PuzzleGeneratorConfig', 'generate_puzzles_parallel',

    # Pipeline stages
    'PathFinder', 'PathResult',
    'DiagonalGridResolver', 'ConnectorGraphBuilder',
    'ConnectorValueAssigner', 'ValueAssignment',
    'CellAnswerAssigner', 'CellGrid',
    'ExpressionSynthesizer', 'factor_pairs', 'multiplication_boost'
]

"""
Circuit Challenge: generation and validation of grid arithmetic path puzzles.
"""

from .core import (
    Puzzle, Cell, Connector, Coordinate, Solution, ConnectorKind, DiagonalDirection,
    DifficultyConfig, DIFFICULTY_PRESETS, get_difficulty_by_level, create_custom_difficulty,
    PuzzleValidator, ValidationResult, GenerationResult, PuzzleGenerationError, check_move
)
from .generators import PuzzleGenerator, PuzzleGeneratorConfig, generate_puzzles_parallel

__version__ = "1.0.0"

__all__ = [
    'Puzzle', 'Cell', 'Connector', 'Coordinate', 'Solution', 'ConnectorKind', 'DiagonalDirection',
    'DifficultyConfig', 'DIFFICULTY_PRESETS', 'get_difficulty_by_level', 'create_custom_difficulty',
    'PuzzleValidator', 'ValidationResult', 'GenerationResult', 'PuzzleGenerationError', 'check_move',
    'PuzzleGenerator', 'PuzzleGeneratorConfig', 'generate_puzzles_parallel'
]

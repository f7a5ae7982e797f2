# circuit_challenge/core/__init__.py
"""
Core data structures and utilities for Circuit Challenge puzzles.
"""

from .puzzle import (
    Puzzle, Cell, Connector, Coordinate, Solution,
    ConnectorKind, DiagonalDirection
)
from .arithmetic import Operation, Expression, evaluate_expression, parse_operation
from .validator import PuzzleValidator, ValidationResult
from .difficulty import (
    DifficultyConfig, OperationWeights, DIFFICULTY_PRESETS,
    calculate_min_path_length, calculate_max_path_length,
    get_difficulty_by_level, get_difficulty_by_name,
    create_custom_difficulty, validate_difficulty_config,
    load_difficulty_config
)
from .story import StoryLevel, story_difficulty, calculate_stars
from .moves import MoveCheckResult, check_move, adjacent_cells, is_adjacent, is_finish_cell
from .results import (
    PathGenerationExhausted, ValueAssignmentExhausted, ValidationFailed,
    GenerationExhausted, GenerationResult, PuzzleGenerationError
)
from .utils import (
    setup_logger, timer, memory_usage,
    PuzzleConverter, save_puzzle_batch, load_puzzle_batch
)

__all__ = [
    # Data structures
    'Puzzle', 'Cell', 'Connector', 'Coordinate', 'Solution',
    'ConnectorKind', 'DiagonalDirection',

    # Arithmetic
    'Operation', 'Expression', 'evaluate_expression', 'parse_operation',

    # Validation
    'PuzzleValidator', 'ValidationResult',

    # Difficulty
    'DifficultyConfig', 'OperationWeights', 'DIFFICULTY_PRESETS',
    'calculate_min_path_length', 'calculate_max_path_length',
    'get_difficulty_by_level', 'get_difficulty_by_name',
    'create_custom_difficulty', 'validate_difficulty_config',
    'load_difficulty_config',
    'StoryLevel', 'story_difficulty', 'calculate_stars',

    # Gameplay
    'MoveCheckResult', 'check_move', 'adjacent_cells', 'is_adjacent', 'is_finish_cell',

    # Stage results
    'PathGenerationExhausted', 'ValueAssignmentExhausted', 'ValidationFailed',
    'GenerationExhausted', 'GenerationResult', 'PuzzleGenerationError',

    # Utilities
    'setup_logger', 'timer', 'memory_usage',
    'PuzzleConverter', 'save_puzzle_batch', 'load_puzzle_batch'
]

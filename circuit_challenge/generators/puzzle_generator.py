"""
Puzzle generator for Circuit Challenge.

Each attempt runs the full pipeline: path, diagonals, connectors, values,
answers, expressions and validation. Any stage failure discards the attempt
and generation starts again from the path.
"""

import multiprocessing as mp
import random
import time
from pathlib import Path
from typing import List, Optional

from ..core.puzzle import Puzzle
from ..core.difficulty import DifficultyConfig, validate_difficulty_config
from ..core.validator import PuzzleValidator
from ..core.results import (
    PathGenerationExhausted, ValueAssignmentExhausted, ValidationFailed,
    GenerationExhausted, GenerationResult
)
from ..core.utils import setup_logger, timer
from .path_finder import PathFinder
from .connectors import DiagonalGridResolver, ConnectorGraphBuilder, ConnectorValueAssigner
from .cell_assigner import CellAnswerAssigner
from .expressions import ExpressionSynthesizer


class PuzzleGeneratorConfig:
    """Configuration for puzzle generator"""

    def __init__(self, **kwargs):
        self.max_attempts: int = kwargs.get('max_attempts', 20)
        self.path_max_attempts: int = kwargs.get('path_max_attempts', 100)
        self.time_limit: Optional[float] = kwargs.get('time_limit', None)
        self.validate_result: bool = kwargs.get('validate_result', True)
        self.random_seed: Optional[int] = kwargs.get('random_seed', None)
        self.log_level: str = kwargs.get('log_level', 'INFO')


class PuzzleGenerator:
    """Generate Circuit Challenge puzzles from a difficulty configuration"""

    def __init__(self, config: Optional[PuzzleGeneratorConfig] = None):
        self.config = config or PuzzleGeneratorConfig()
        self.logger = setup_logger(self.__class__.__name__, level=self.config.log_level)

        # One random stream shared by every stage
        self.rng = random.Random(self.config.random_seed)

        self.path_finder = PathFinder(self.rng)
        self.diagonal_resolver = DiagonalGridResolver(self.rng)
        self.value_assigner = ConnectorValueAssigner(self.rng)
        self.cell_assigner = CellAnswerAssigner(self.rng)
        self.synthesizer = ExpressionSynthesizer(self.rng)

    def generate(self, difficulty: DifficultyConfig) -> GenerationResult:
        """
        Generate a puzzle for the given difficulty.

        Args:
            difficulty: Difficulty configuration, path bounds derived when 0

        Returns:
            GenerationResult holding the puzzle or a GenerationExhausted error

        Raises:
            ValueError: If the difficulty configuration is invalid
        """
        difficulty = difficulty.with_path_lengths()
        check = validate_difficulty_config(difficulty)
        if not check:
            raise ValueError(f"Invalid difficulty configuration: {'; '.join(check.errors)}")

        self.logger.debug(f"Generating {difficulty.grid_rows}x{difficulty.grid_cols} "
                          f"'{difficulty.name}' puzzle")

        start_time = time.perf_counter()
        deadline = start_time + self.config.time_limit if self.config.time_limit else None
        failures = {'path': 0, 'values': 0, 'validation': 0}
        deadline_reached = False
        attempts = 0

        while attempts < self.config.max_attempts:
            if deadline is not None and time.perf_counter() >= deadline:
                deadline_reached = True
                break

            attempts += 1
            outcome = self._attempt(difficulty)

            if isinstance(outcome, tuple):
                puzzle, warnings = outcome
                elapsed = time.perf_counter() - start_time
                self.logger.debug(f"Generated puzzle on attempt {attempts} in {elapsed:.3f}s")
                return GenerationResult(
                    success=True,
                    puzzle=puzzle,
                    attempts=attempts,
                    generation_time=elapsed,
                    stats=dict(failures),
                    warnings=warnings
                )

            if isinstance(outcome, PathGenerationExhausted):
                failures['path'] += 1
            elif isinstance(outcome, ValueAssignmentExhausted):
                failures['values'] += 1
            else:
                failures['validation'] += 1
            self.logger.debug(f"Attempt {attempts} failed: {outcome.message}")

        error = GenerationExhausted(
            attempts=attempts,
            path_failures=failures['path'],
            value_failures=failures['values'],
            validation_failures=failures['validation'],
            deadline_reached=deadline_reached
        )
        self.logger.error(f"{error.message} (path: {failures['path']}, values: {failures['values']}, "
                          f"validation: {failures['validation']}"
                          f"{', deadline reached' if deadline_reached else ''})")
        return GenerationResult(
            success=False,
            error=error,
            attempts=attempts,
            generation_time=time.perf_counter() - start_time,
            stats=dict(failures)
        )

    def _attempt(self, difficulty: DifficultyConfig):
        """One pass through the pipeline, returning (puzzle, warnings) or a stage failure"""
        rows, cols = difficulty.grid_rows, difficulty.grid_cols

        path_result = self.path_finder.generate_path(
            rows, cols,
            difficulty.min_path_length,
            difficulty.max_path_length,
            self.config.path_max_attempts
        )
        if isinstance(path_result, PathGenerationExhausted):
            return path_result

        diagonal_grid = self.diagonal_resolver.resolve(
            rows, cols, path_result.commitments,
            max_degree=difficulty.connector_max - difficulty.connector_min + 1
        )
        edges = ConnectorGraphBuilder.build(rows, cols, diagonal_grid)

        assignment = self.value_assigner.assign(
            edges,
            difficulty.connector_min,
            difficulty.connector_max,
            difficulty.division_enabled,
            path_result.path,
            difficulty.mult_div_range
        )
        if isinstance(assignment, ValueAssignmentExhausted):
            return assignment

        grid = self.cell_assigner.assign(rows, cols, path_result.path,
                                         assignment.connectors, assignment.division_indices)
        self.synthesizer.apply_expressions(grid, difficulty)
        puzzle = grid.to_puzzle(assignment.connectors, path_result.path, difficulty.level_number)

        if self.config.validate_result:
            validation = PuzzleValidator.validate_puzzle(puzzle, difficulty)
            if not validation:
                return ValidationFailed(tuple(validation.errors))
        else:
            validation = PuzzleValidator.validate_answer_route(puzzle)

        return puzzle, validation.warnings

    @timer
    def generate_batch(self, count: int, difficulty: DifficultyConfig,
                       save_dir: Optional[Path] = None) -> List[Puzzle]:
        """Generate multiple puzzles, optionally saving each as JSON"""
        puzzles = []

        for i in range(count):
            self.logger.info(f"Generating puzzle {i + 1}/{count}")
            result = self.generate(difficulty)

            if result.success:
                puzzles.append(result.puzzle)

                if save_dir:
                    save_dir.mkdir(parents=True, exist_ok=True)
                    slug = difficulty.name.lower().replace(' ', '_')
                    filename = save_dir / (f"{slug}_{difficulty.grid_rows}x{difficulty.grid_cols}"
                                           f"_{i:04d}.json")
                    result.puzzle.save(filename)

        self.logger.info(f"Generated {len(puzzles)}/{count} valid puzzles")
        return puzzles


def _generate_with_seed(args) -> GenerationResult:
    """Worker entry point: a fresh generator per task"""
    difficulty, seed, max_attempts = args
    generator = PuzzleGenerator(PuzzleGeneratorConfig(
        random_seed=seed,
        max_attempts=max_attempts,
        log_level='WARNING'
    ))
    return generator.generate(difficulty)


def generate_puzzles_parallel(difficulty: DifficultyConfig, count: int,
                              workers: Optional[int] = None,
                              base_seed: Optional[int] = None,
                              max_attempts: int = 20) -> List[GenerationResult]:
    """
    Generate independent puzzles across a process pool.

    Task i is seeded with base_seed + i, so a fixed base_seed gives the
    same results regardless of worker count.
    """
    if base_seed is None:
        base_seed = random.randrange(2 ** 31)
    tasks = [(difficulty, base_seed + i, max_attempts) for i in range(count)]
    workers = workers or mp.cpu_count()

    with mp.Pool(processes=workers) as pool:
        return pool.map(_generate_with_seed, tasks)

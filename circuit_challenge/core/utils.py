"""
Utility functions for Circuit Challenge generation.
"""

import logging
from pathlib import Path
from typing import List, Optional
import json
import os
import time
from functools import wraps

import numpy as np
import psutil

from .puzzle import Puzzle, Coordinate, ConnectorKind, DiagonalDirection


def setup_logger(name: str, log_file: Optional[Path] = None, level: str = "INFO") -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def timer(func):
    """Log the wall time of a pipeline call at DEBUG, on the owner's logger when it has one"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        owner = args[0] if args else None
        logger = getattr(owner, 'logger', None) or logging.getLogger(func.__module__)
        logger.debug(f"{func.__qualname__} finished in {elapsed:.3f}s")

        return result
    return wrapper


def memory_usage() -> float:
    """Resident memory of this process in MB; benchmarks record the change across one generation"""
    return psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)


class PuzzleConverter:
    """Convert puzzles to array and text representations"""

    @staticmethod
    def to_answer_grid(puzzle: Puzzle) -> np.ndarray:
        """
        Answers as a 2D array.
        -1 marks the FINISH cell (and any cell without an answer).
        """
        grid = np.full((puzzle.rows, puzzle.cols), -1, dtype=int)
        for cell in puzzle.cells():
            if cell.answer is not None:
                grid[cell.row, cell.col] = cell.answer
        return grid

    @staticmethod
    def to_diagonal_grid(puzzle: Puzzle) -> np.ndarray:
        """
        Diagonal direction per 2x2 block.
        1: down-right, -1: down-left, 0: missing.
        """
        grid = np.zeros((max(puzzle.rows - 1, 0), max(puzzle.cols - 1, 0)), dtype=int)
        for connector in puzzle.connectors:
            if connector.kind != ConnectorKind.DIAGONAL:
                continue
            row = min(connector.cell_a.row, connector.cell_b.row)
            col = min(connector.cell_a.col, connector.cell_b.col)
            grid[row, col] = 1 if connector.direction == DiagonalDirection.DOWN_RIGHT else -1
        return grid

    @staticmethod
    def to_string(puzzle: Puzzle, show_solution: bool = False) -> str:
        """
        Render the grid as text: cell expressions with connector values between them.

        Args:
            puzzle: The puzzle to convert
            show_solution: Mark solution path cells with '*'

        Returns:
            String representation of the puzzle
        """
        on_path = set(puzzle.solution.path) if show_solution else set()
        width = max([len(c.expression) for c in puzzle.cells()] + [6]) + 1

        def cell_text(coord: Coordinate) -> str:
            cell = puzzle.cell(coord)
            if cell.is_finish:
                text = 'FINISH'
            elif cell.is_start:
                text = 'START'
            else:
                text = cell.expression
            marker = '*' if coord in on_path else ' '
            return f"{marker}{text}".center(width)

        def value_text(connector) -> str:
            return str(connector.value) if connector and connector.value is not None else ''

        lines = []
        for row in range(puzzle.rows):
            parts = []
            for col in range(puzzle.cols):
                coord = Coordinate(row, col)
                parts.append(f"[{cell_text(coord)}]")
                if col < puzzle.cols - 1:
                    right = puzzle.connector_between(coord, Coordinate(row, col + 1))
                    parts.append(f"-{value_text(right):^4}-")
            lines.append(''.join(parts))

            if row == puzzle.rows - 1:
                break

            # Vertical connectors, then the diagonal of each block in between
            parts = []
            for col in range(puzzle.cols):
                down = puzzle.connector_between(Coordinate(row, col), Coordinate(row + 1, col))
                parts.append(f" {value_text(down):^{width}} ")
                if col < puzzle.cols - 1:
                    dr = puzzle.connector_between(Coordinate(row, col), Coordinate(row + 1, col + 1))
                    dl = puzzle.connector_between(Coordinate(row, col + 1), Coordinate(row + 1, col))
                    if dr is not None:
                        parts.append(f"\\{value_text(dr):^4}\\")
                    elif dl is not None:
                        parts.append(f"/{value_text(dl):^4}/")
                    else:
                        parts.append(' ' * 6)
            lines.append(''.join(parts))

        return '\n'.join(lines)


def save_puzzle_batch(puzzles: List[Puzzle], directory: Path, prefix: str = "puzzle") -> List[Path]:
    """Save multiple puzzles to a directory"""
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for i, puzzle in enumerate(puzzles):
        filename = directory / f"{prefix}_{i:04d}.json"
        puzzle.save(filename)
        paths.append(filename)
    return paths


def load_puzzle_batch(directory: Path, pattern: str = "*.json") -> List[Puzzle]:
    """Load multiple puzzles from a directory, skipping unreadable files"""
    logger = logging.getLogger(__name__)
    puzzles = []

    for filepath in sorted(directory.glob(pattern)):
        try:
            puzzles.append(Puzzle.load(filepath))
        except (OSError, ValueError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading {filepath}: {e}")

    return puzzles

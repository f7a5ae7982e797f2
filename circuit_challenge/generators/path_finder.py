"""
Solution path generation for Circuit Challenge.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..core.puzzle import Coordinate, DiagonalDirection
from ..core.results import PathGenerationExhausted

# Top-left corner (row, col) of a 2x2 block
BlockKey = Tuple[int, int]
DiagonalCommitments = Dict[BlockKey, DiagonalDirection]

# All 8 movement directions
DIRECTIONS = [
    (-1, 0),   # up
    (1, 0),    # down
    (0, -1),   # left
    (0, 1),    # right
    (-1, -1),  # up-left
    (-1, 1),   # up-right
    (1, -1),   # down-left
    (1, 1),    # down-right
]

# Grids up to this many cells use the random walk with light finish bias
SMALL_GRID_CELLS = 20


@dataclass
class PathResult:
    """A successful walk and the diagonal commitments it made"""
    path: List[Coordinate]
    commitments: DiagonalCommitments = field(default_factory=dict)
    attempts: int = 1

    @property
    def success(self) -> bool:
        return True


class PathFinder:
    """Generates START to FINISH routes under diagonal exclusivity"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate_path(self, rows: int, cols: int, min_length: int, max_length: int,
                      max_attempts: int = 100) -> Union[PathResult, PathGenerationExhausted]:
        """
        Repeated randomized walks from (0,0) to (rows-1, cols-1).

        Args:
            rows: Grid rows
            cols: Grid columns
            min_length: Minimum path length in cells
            max_length: Maximum path length in cells
            max_attempts: Walks to try before giving up

        Returns:
            PathResult, or PathGenerationExhausted when no walk qualified
        """
        start = Coordinate(0, 0)
        finish = Coordinate(rows - 1, cols - 1)

        for attempt in range(1, max_attempts + 1):
            path, commitments = self._walk(rows, cols, start, finish, min_length, max_length)
            if (path[-1] == finish and min_length <= len(path) <= max_length
                    and self.is_interesting_path(path)):
                return PathResult(path, commitments, attempt)

        return PathGenerationExhausted(max_attempts)

    def _walk(self, rows: int, cols: int, start: Coordinate, finish: Coordinate,
              min_length: int, max_length: int) -> Tuple[List[Coordinate], DiagonalCommitments]:
        """One randomized walk, stopping at FINISH, a dead end or max_length"""
        path = [start]
        visited = {start}
        commitments: DiagonalCommitments = {}
        current = start
        small_grid = rows * cols <= SMALL_GRID_CELLS

        while current != finish and len(path) < max_length:
            valid_moves = [
                move for move in self.get_adjacent(current, rows, cols)
                if move not in visited and self.is_diagonal_move_valid(current, move, commitments)
            ]

            # Stepping onto FINISH before min_length ends the walk as a failure
            if len(path) + 1 < min_length and finish in valid_moves and len(valid_moves) > 1:
                valid_moves.remove(finish)

            if not valid_moves:
                break

            progress_ratio = len(path) / max_length
            if small_grid:
                nxt = self._choose_small_grid(valid_moves, finish, progress_ratio)
            else:
                nxt = self._choose_large_grid(valid_moves, current, finish, visited,
                                              progress_ratio, rows, cols)

            if self.is_diagonal_move(current, nxt):
                commitments[self.diagonal_key(current, nxt)] = self.diagonal_direction(current, nxt)

            path.append(nxt)
            visited.add(nxt)
            current = nxt

        return path, commitments

    def _choose_small_grid(self, moves: List[Coordinate], finish: Coordinate,
                           progress_ratio: float) -> Coordinate:
        """Mostly uniform, leaning towards FINISH late in the walk"""
        if progress_ratio > 0.6 and self.rng.random() < 0.4:
            return min(moves, key=lambda m: self.manhattan_distance(m, finish))
        return self.rng.choice(moves)

    def _choose_large_grid(self, moves: List[Coordinate], current: Coordinate,
                           finish: Coordinate, visited: set, progress_ratio: float,
                           rows: int, cols: int) -> Coordinate:
        """Score moves: finish bias growing with progress, dead-end avoidance, jitter"""
        best_move, best_score = moves[0], float('-inf')
        for move in moves:
            score = 0.0
            if progress_ratio > 0.7:
                score -= self.manhattan_distance(move, finish) * (progress_ratio - 0.5) * 2

            future_options = sum(1 for n in self.get_adjacent(move, rows, cols)
                                 if n not in visited and n != current)
            score += future_options * 0.5
            score += self.rng.uniform(0, 0.5)

            if score > best_score:
                best_move, best_score = move, score
        return best_move

    # ------------------------------------------------------------------

    @staticmethod
    def get_adjacent(pos: Coordinate, rows: int, cols: int) -> List[Coordinate]:
        """All cells adjacent in 8 directions within bounds"""
        return [
            Coordinate(pos.row + dr, pos.col + dc)
            for dr, dc in DIRECTIONS
            if 0 <= pos.row + dr < rows and 0 <= pos.col + dc < cols
        ]

    @staticmethod
    def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
        return abs(a.row - b.row) + abs(a.col - b.col)

    @staticmethod
    def is_diagonal_move(a: Coordinate, b: Coordinate) -> bool:
        return a.row != b.row and a.col != b.col

    @staticmethod
    def diagonal_key(a: Coordinate, b: Coordinate) -> BlockKey:
        """The 2x2 block a diagonal move crosses"""
        return min(a.row, b.row), min(a.col, b.col)

    @staticmethod
    def diagonal_direction(a: Coordinate, b: Coordinate) -> DiagonalDirection:
        """Down-right covers moves down-right and up-left; down-left the other two"""
        row_diff = b.row - a.row
        col_diff = b.col - a.col
        if (row_diff > 0) == (col_diff > 0):
            return DiagonalDirection.DOWN_RIGHT
        return DiagonalDirection.DOWN_LEFT

    @staticmethod
    def is_diagonal_move_valid(a: Coordinate, b: Coordinate,
                               commitments: DiagonalCommitments) -> bool:
        """A diagonal move must agree with any direction its block is committed to"""
        if not PathFinder.is_diagonal_move(a, b):
            return True
        existing = commitments.get(PathFinder.diagonal_key(a, b))
        return existing is None or existing == PathFinder.diagonal_direction(a, b)

    @staticmethod
    def count_direction_changes(path: List[Coordinate]) -> int:
        steps = [(b.row - a.row, b.col - a.col) for a, b in zip(path, path[1:])]
        return sum(1 for prev, cur in zip(steps, steps[1:]) if prev != cur)

    @staticmethod
    def is_interesting_path(path: List[Coordinate]) -> bool:
        """Enough turns for the length: 1 under 6 cells, 2 under 8, else 3"""
        if len(path) < 6:
            min_changes = 1
        elif len(path) < 8:
            min_changes = 2
        else:
            min_changes = 3
        return PathFinder.count_direction_changes(path) >= min_changes


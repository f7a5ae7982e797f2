"""
Move checking for gameplay collaborators.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from .puzzle import Puzzle, Cell, Coordinate, Connector


@dataclass(frozen=True)
class MoveCheckResult:
    """Result of checking a move"""
    correct: bool
    connector: Optional[Connector] = None


def is_adjacent(a: Coordinate, b: Coordinate) -> bool:
    return a.is_adjacent_to(b)


def adjacent_cells(position: Coordinate, rows: int, cols: int) -> List[Coordinate]:
    """All in-bounds neighbours in the 8 directions"""
    return [
        Coordinate(position.row + dr, position.col + dc)
        for dr in (-1, 0, 1)
        for dc in (-1, 0, 1)
        if (dr or dc) and 0 <= position.row + dr < rows and 0 <= position.col + dc < cols
    ]


def is_finish_cell(coord: Coordinate, puzzle: Puzzle) -> bool:
    return coord == puzzle.finish


def check_move(puzzle: Puzzle, from_cell: Union[Cell, Coordinate], to_cell: Coordinate) -> MoveCheckResult:
    """
    A move is correct when a connector joins the two cells and its value
    equals the from-cell's answer.
    """
    if isinstance(from_cell, Coordinate):
        from_cell = puzzle.cell(from_cell)
        if from_cell is None:
            return MoveCheckResult(False)

    connector = puzzle.connector_between(from_cell.coordinate, to_cell)
    if connector is None:
        return MoveCheckResult(False)

    if from_cell.answer is None:
        return MoveCheckResult(False, connector)

    return MoveCheckResult(from_cell.answer == connector.value, connector)

"""
Propagates connector values into cell answers.
"""

import random
from typing import List, Optional, Set

from ..core.puzzle import Puzzle, Cell, Connector, Coordinate, Solution


class CellGrid:
    """Mutable cell grid used while a puzzle is being built"""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.cells = [[Cell(row, col) for col in range(cols)] for row in range(rows)]
        self.cells[0][0].is_start = True
        self.cells[rows - 1][cols - 1].is_finish = True

        # Cells whose expression should be a division when possible
        self.division_cells: Set[Coordinate] = set()

    def __getitem__(self, coord: Coordinate) -> Cell:
        return self.cells[coord.row][coord.col]

    def __iter__(self):
        for row in self.cells:
            yield from row

    def to_puzzle(self, connectors: List[Connector], path: List[Coordinate],
                  difficulty: int = 0) -> Puzzle:
        return Puzzle(self.cells, connectors, Solution(list(path)), difficulty=difficulty)


class CellAnswerAssigner:
    """Sets each cell's answer from one of its touching connectors"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def assign(self, rows: int, cols: int, path: List[Coordinate], connectors: List[Connector],
               division_indices: Set[int]) -> CellGrid:
        """
        Path cells take the value of the connector to the next path cell.
        Off-path cells take the value of a random touching connector.
        """
        grid = CellGrid(rows, cols)
        touching = {}
        for index, connector in enumerate(connectors):
            touching.setdefault(connector.cell_a, []).append(index)
            touching.setdefault(connector.cell_b, []).append(index)

        for current, nxt in zip(path, path[1:]):
            for index in touching.get(current, []):
                if connectors[index].connects(current, nxt):
                    grid[current].answer = connectors[index].value
                    if index in division_indices:
                        grid.division_cells.add(current)
                    break

        on_path = set(path)
        for cell in grid:
            if cell.is_finish or cell.coordinate in on_path:
                continue
            options = touching.get(cell.coordinate)
            if options:
                cell.answer = connectors[self.rng.choice(options)].value

        return grid

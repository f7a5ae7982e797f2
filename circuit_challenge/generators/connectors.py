"""
Connector graph construction and value assignment.
"""

import math
import random
from dataclasses import dataclass, replace
from collections import Counter
from typing import Dict, List, Optional, Set, Tuple, Union

from ..core.puzzle import Connector, ConnectorKind, Coordinate, DiagonalDirection
from ..core.results import ValueAssignmentExhausted
from .path_finder import DiagonalCommitments

# (rows-1) x (cols-1) table indexed [row][col] by block top-left
DiagonalGrid = List[List[DiagonalDirection]]

# Share of solution path connectors held back for small values
DIVISION_RESERVE_RATIO = 0.25

# 4 orthogonal plus up to 4 diagonal neighbours
MAX_CELL_CONNECTORS = 8


class DiagonalGridResolver:
    """Fills every 2x2 block with a diagonal direction"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def resolve(self, rows: int, cols: int, commitments: DiagonalCommitments,
                max_degree: Optional[int] = None) -> DiagonalGrid:
        """
        Committed blocks keep their direction, the rest are a coin flip.

        With max_degree set, a free block skips a direction that would give
        one of its corner cells more connectors than max_degree, as long as
        the other direction does not, and cells still over the limit afterwards
        get free diagonals flipped away from them. A cell can never hold more
        connectors than there are distinct connector values.
        """
        degree = {
            Coordinate(row, col): self.orthogonal_degree(row, col, rows, cols)
            for row in range(rows) for col in range(cols)
        }
        for (row, col), direction in commitments.items():
            for cell in self.diagonal_endpoints(row, col, direction):
                degree[cell] += 1

        grid = []
        for row in range(rows - 1):
            grid_row = []
            for col in range(cols - 1):
                direction = commitments.get((row, col))
                if direction is None:
                    options = [DiagonalDirection.DOWN_RIGHT, DiagonalDirection.DOWN_LEFT]
                    if max_degree is not None:
                        fitting = [d for d in options
                                   if all(degree[cell] < max_degree
                                          for cell in self.diagonal_endpoints(row, col, d))]
                        options = fitting or options
                    direction = self.rng.choice(options)
                    for cell in self.diagonal_endpoints(row, col, direction):
                        degree[cell] += 1
                grid_row.append(direction)
            grid.append(grid_row)

        if max_degree is not None:
            self._relieve_overloaded(grid, degree, commitments, max_degree)
        return grid

    def _relieve_overloaded(self, grid: DiagonalGrid, degree: Dict[Coordinate, int],
                            commitments: DiagonalCommitments, max_degree: int):
        """Flip free diagonals off cells left over max_degree when the other corners have room"""
        for cell in [c for c, d in degree.items() if d > max_degree]:
            blocks = [
                (row, col)
                for row in (cell.row - 1, cell.row) for col in (cell.col - 1, cell.col)
                if 0 <= row < len(grid) and 0 <= col < len(grid[0]) and (row, col) not in commitments
                and cell in self.diagonal_endpoints(row, col, grid[row][col])
            ]
            self.rng.shuffle(blocks)

            for row, col in blocks:
                if degree[cell] <= max_degree:
                    break
                current = grid[row][col]
                flipped = (DiagonalDirection.DOWN_LEFT if current == DiagonalDirection.DOWN_RIGHT
                           else DiagonalDirection.DOWN_RIGHT)
                targets = self.diagonal_endpoints(row, col, flipped)
                if all(degree[c] < max_degree for c in targets):
                    for c in self.diagonal_endpoints(row, col, current):
                        degree[c] -= 1
                    for c in targets:
                        degree[c] += 1
                    grid[row][col] = flipped

    @staticmethod
    def orthogonal_degree(row: int, col: int, rows: int, cols: int) -> int:
        return (int(row > 0) + int(row < rows - 1) +
                int(col > 0) + int(col < cols - 1))

    @staticmethod
    def diagonal_endpoints(row: int, col: int, direction: DiagonalDirection) -> Tuple[Coordinate, Coordinate]:
        """Cells joined by the diagonal of the block with top-left (row, col)"""
        if direction == DiagonalDirection.DOWN_RIGHT:
            return Coordinate(row, col), Coordinate(row + 1, col + 1)
        return Coordinate(row, col + 1), Coordinate(row + 1, col)


class ConnectorGraphBuilder:
    """Enumerates the unvalued connectors of a grid"""

    @staticmethod
    def expected_count(rows: int, cols: int) -> int:
        return rows * (cols - 1) + (rows - 1) * cols + (rows - 1) * (cols - 1)

    @staticmethod
    def build(rows: int, cols: int, diagonal_grid: DiagonalGrid) -> List[Connector]:
        """Horizontal pairs, then vertical pairs, then one diagonal per block"""
        connectors = []

        for row in range(rows):
            for col in range(cols - 1):
                connectors.append(Connector(ConnectorKind.HORIZONTAL,
                                            Coordinate(row, col), Coordinate(row, col + 1)))

        for row in range(rows - 1):
            for col in range(cols):
                connectors.append(Connector(ConnectorKind.VERTICAL,
                                            Coordinate(row, col), Coordinate(row + 1, col)))

        for row in range(rows - 1):
            for col in range(cols - 1):
                direction = diagonal_grid[row][col]
                a, b = DiagonalGridResolver.diagonal_endpoints(row, col, direction)
                connectors.append(Connector(ConnectorKind.DIAGONAL, a, b, direction=direction))

        return connectors


@dataclass
class ValueAssignment:
    """Valued connectors plus the indices reserved for division"""
    connectors: List[Connector]
    division_indices: Set[int]


class ConnectorValueAssigner:
    """
    Greedy value assignment keeping values unique around every cell.

    Division-reserved connectors go first. The rest are taken most constrained
    first. On ranges narrower than MAX_CELL_CONNECTORS, values are picked to
    leave neighbouring connectors as many options as possible.

    There is no backtracking: the first connector left without a legal value
    fails the whole assignment and the caller starts over.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def assign(self, edges: List[Connector], min_value: int, max_value: int,
               division_enabled: bool, solution_path: List[Coordinate],
               mult_div_range: int) -> Union[ValueAssignment, ValueAssignmentExhausted]:
        """
        Args:
            edges: Unvalued connectors
            min_value: Smallest connector value
            max_value: Largest connector value
            division_enabled: Reserve small values on the solution path
            solution_path: Path the reservation is taken from
            mult_div_range: Upper bound preferred for reserved values

        Returns:
            ValueAssignment, or ValueAssignmentExhausted naming the stuck connector
        """
        cell_connectors: Dict[Coordinate, List[int]] = {}
        for index, edge in enumerate(edges):
            cell_connectors.setdefault(edge.cell_a, []).append(index)
            cell_connectors.setdefault(edge.cell_b, []).append(index)

        values: Dict[int, int] = {}
        division_indices: Set[int] = set()

        if division_enabled:
            path_indices = self.solution_connector_indices(edges, solution_path)
            self.rng.shuffle(path_indices)
            reserve = max(1, math.floor(len(path_indices) * DIVISION_RESERVE_RATIO))
            division_indices = set(path_indices[:reserve])

            low = max(1, min_value)
            high = min(mult_div_range, max_value)
            for index in path_indices[:reserve]:
                available = self._available(index, edges, cell_connectors, values, low, high)
                if not available:
                    available = self._available(index, edges, cell_connectors, values, min_value, max_value)
                if not available:
                    edge = edges[index]
                    return ValueAssignmentExhausted(edge.cell_a, edge.cell_b, division_reserved=True)
                values[index] = self.rng.choice(available)

        used: Dict[Coordinate, Set[int]] = {cell: set() for cell in cell_connectors}
        for index, value in values.items():
            used[edges[index].cell_a].add(value)
            used[edges[index].cell_b].add(value)

        tight = max_value - min_value + 1 < MAX_CELL_CONNECTORS
        remaining = [i for i in range(len(edges)) if i not in values]
        self.rng.shuffle(remaining)

        while remaining:
            # Fewest values left goes first, shuffled order breaks ties
            index = max(remaining, key=lambda i: len(used[edges[i].cell_a] | used[edges[i].cell_b]))
            edge = edges[index]
            blocked = used[edge.cell_a] | used[edge.cell_b]
            available = [v for v in range(min_value, max_value + 1) if v not in blocked]
            if not available:
                return ValueAssignmentExhausted(edge.cell_a, edge.cell_b)

            remaining.remove(index)
            if tight:
                available = self._least_constraining(index, edges, cell_connectors, values, used, available)
            value = self.rng.choice(available)
            values[index] = value
            used[edge.cell_a].add(value)
            used[edge.cell_b].add(value)

        connectors = [replace(edge, value=values[i]) for i, edge in enumerate(edges)]
        return ValueAssignment(connectors, division_indices)

    @staticmethod
    def _least_constraining(index: int, edges: List[Connector], cell_connectors: Dict[Coordinate, List[int]],
                            values: Dict[int, int], used: Dict[Coordinate, Set[int]],
                            available: List[int]) -> List[int]:
        """Values that take an option away from the fewest unvalued neighbouring connectors"""
        edge = edges[index]
        # A value already used at a neighbour's far end costs that neighbour nothing
        already_blocked = Counter()
        for cell in edge.endpoints:
            for sibling in cell_connectors[cell]:
                if sibling != index and sibling not in values:
                    already_blocked.update(used[edges[sibling].other_cell(cell)])

        best = max(already_blocked[v] for v in available)
        return [v for v in available if already_blocked[v] == best]

    @staticmethod
    def _available(index: int, edges: List[Connector], cell_connectors: Dict[Coordinate, List[int]],
                   values: Dict[int, int], low: int, high: int) -> List[int]:
        """Values in [low, high] unused by any connector sharing an endpoint"""
        edge = edges[index]
        used = {
            values[sibling]
            for cell in (edge.cell_a, edge.cell_b)
            for sibling in cell_connectors.get(cell, [])
            if sibling in values
        }
        return [v for v in range(low, high + 1) if v not in used]

    @staticmethod
    def solution_connector_indices(edges: List[Connector], solution_path: List[Coordinate]) -> List[int]:
        """Indices of connectors joining consecutive path cells, in path order"""
        indices = []
        for a, b in zip(solution_path, solution_path[1:]):
            for index, edge in enumerate(edges):
                if edge.connects(a, b):
                    indices.append(index)
                    break
        return indices

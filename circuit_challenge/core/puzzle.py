"""
Core data structures for Circuit Challenge puzzles.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Union, Iterator
from enum import Enum
import json
from pathlib import Path
import uuid


class DiagonalDirection(Enum):
    """Which diagonal occupies a 2x2 block"""
    DOWN_RIGHT = "DR"  # (row, col) to (row+1, col+1)
    DOWN_LEFT = "DL"   # (row, col+1) to (row+1, col)


class ConnectorKind(Enum):
    """Types of connectors between cells"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


@dataclass(frozen=True, order=True)
class Coordinate:
    """Grid address (row, col)"""
    row: int
    col: int

    @property
    def key(self) -> str:
        return f"{self.row},{self.col}"

    @classmethod
    def from_key(cls, key: str) -> 'Coordinate':
        """Create from a "row,col" key"""
        parts = key.split(',')
        if len(parts) != 2:
            raise ValueError(f"Invalid coordinate key: {key!r}")
        return cls(int(parts[0]), int(parts[1]))

    def is_adjacent_to(self, other: 'Coordinate') -> bool:
        """8-directional adjacency, a cell is not adjacent to itself"""
        row_diff = abs(self.row - other.row)
        col_diff = abs(self.col - other.col)
        return row_diff <= 1 and col_diff <= 1 and (row_diff + col_diff) > 0

    def __repr__(self):
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class Connector:
    """Undirected edge between two adjacent cells"""
    kind: ConnectorKind
    cell_a: Coordinate
    cell_b: Coordinate
    value: Optional[int] = None
    direction: Optional[DiagonalDirection] = None

    def touches(self, cell: Coordinate) -> bool:
        return self.cell_a == cell or self.cell_b == cell

    def other_cell(self, cell: Coordinate) -> Coordinate:
        return self.cell_b if cell == self.cell_a else self.cell_a

    def connects(self, a: Coordinate, b: Coordinate) -> bool:
        """Order of the two cells does not matter"""
        return ((self.cell_a == a and self.cell_b == b) or
                (self.cell_a == b and self.cell_b == a))

    @property
    def endpoints(self) -> Tuple[Coordinate, Coordinate]:
        return self.cell_a, self.cell_b

    def __repr__(self):
        return f"Connector({self.cell_a}<->{self.cell_b}, {self.kind.value}, value={self.value})"


@dataclass
class Cell:
    """A cell in the puzzle grid"""
    row: int
    col: int
    expression: str = ""
    answer: Optional[int] = None
    is_start: bool = False
    is_finish: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.row, self.col)


@dataclass
class Solution:
    """The route the puzzle was generated around"""
    path: List[Coordinate] = field(default_factory=list)

    @property
    def steps(self) -> int:
        return len(self.path) - 1


def _pair_key(a: Coordinate, b: Coordinate) -> Tuple[Coordinate, Coordinate]:
    return (a, b) if a <= b else (b, a)


class Puzzle:
    """A finished Circuit Challenge puzzle: grid, connectors and solution"""

    def __init__(self, grid: List[List[Cell]], connectors: List[Connector],
                 solution: Solution, puzzle_id: Optional[str] = None,
                 difficulty: int = 0):
        """
        Initialize a puzzle.

        Args:
            grid: Rows of cells
            connectors: All valued connectors
            solution: The generated solution path
            puzzle_id: Identifier, a fresh uuid4 when omitted
            difficulty: Preset level number (1-10), 0 for custom settings
        """
        self.id = puzzle_id or str(uuid.uuid4())
        self.difficulty = difficulty
        self.grid = grid
        self.connectors = connectors
        self.solution = solution

        # Lookup maps
        self._connector_map: Dict[Tuple[Coordinate, Coordinate], Connector] = {}
        self._cell_connectors: Dict[Coordinate, List[Connector]] = {}
        self._index_connectors()

    def _index_connectors(self):
        """Build pair and per-cell lookup maps"""
        for connector in self.connectors:
            self._connector_map.setdefault(_pair_key(connector.cell_a, connector.cell_b), connector)
            self._cell_connectors.setdefault(connector.cell_a, []).append(connector)
            self._cell_connectors.setdefault(connector.cell_b, []).append(connector)

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def start(self) -> Coordinate:
        return Coordinate(0, 0)

    @property
    def finish(self) -> Coordinate:
        return Coordinate(self.rows - 1, self.cols - 1)

    def cells(self) -> Iterator[Cell]:
        """Iterate cells row by row"""
        for row in self.grid:
            yield from row

    def cell(self, coord: Coordinate) -> Optional[Cell]:
        """Get cell at coordinate, None when out of bounds"""
        if 0 <= coord.row < self.rows and 0 <= coord.col < self.cols:
            return self.grid[coord.row][coord.col]
        return None

    def connectors_for(self, coord: Coordinate) -> List[Connector]:
        """Get all connectors touching a cell"""
        return list(self._cell_connectors.get(coord, []))

    def connector_between(self, a: Coordinate, b: Coordinate) -> Optional[Connector]:
        """Find the connector joining two cells"""
        return self._connector_map.get(_pair_key(a, b))

    def to_dict(self) -> dict:
        """Convert puzzle to dictionary for serialization"""
        return {
            'id': self.id,
            'difficulty': self.difficulty,
            'rows': self.rows,
            'cols': self.cols,
            'grid': [
                [
                    {
                        'row': c.row,
                        'col': c.col,
                        'expression': c.expression,
                        'answer': c.answer,
                        'is_start': c.is_start,
                        'is_finish': c.is_finish
                    }
                    for c in row
                ]
                for row in self.grid
            ],
            'connectors': [
                {
                    'kind': c.kind.value,
                    'cell_a': [c.cell_a.row, c.cell_a.col],
                    'cell_b': [c.cell_b.row, c.cell_b.col],
                    'value': c.value,
                    'direction': c.direction.value if c.direction else None
                }
                for c in self.connectors
            ],
            'solution': [[p.row, p.col] for p in self.solution.path]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Puzzle':
        """Create puzzle from dictionary"""
        try:
            grid = [
                [
                    Cell(
                        row=c['row'],
                        col=c['col'],
                        expression=c.get('expression', ''),
                        answer=c.get('answer'),
                        is_start=c.get('is_start', False),
                        is_finish=c.get('is_finish', False)
                    )
                    for c in row
                ]
                for row in data['grid']
            ]
            connectors = [
                Connector(
                    kind=ConnectorKind(c['kind']),
                    cell_a=Coordinate(*c['cell_a']),
                    cell_b=Coordinate(*c['cell_b']),
                    value=c.get('value'),
                    direction=DiagonalDirection(c['direction']) if c.get('direction') else None
                )
                for c in data['connectors']
            ]
            solution = Solution([Coordinate(*p) for p in data['solution']])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed puzzle data: {e}") from e

        return cls(grid, connectors, solution,
                   puzzle_id=data.get('id'),
                   difficulty=data.get('difficulty', 0))

    def save(self, filepath: Union[str, Path]):
        """Save puzzle to JSON file"""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'Puzzle':
        """Load puzzle from JSON file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __eq__(self, other):
        if isinstance(other, Puzzle):
            return self.to_dict() == other.to_dict()
        return False

    def __str__(self):
        """Answer grid with the solution path marked (useful for debugging)"""
        on_path = set(self.solution.path)
        lines = []
        for row in self.grid:
            parts = []
            for cell in row:
                if cell.is_finish:
                    text = 'FIN'
                else:
                    text = str(cell.answer) if cell.answer is not None else '?'
                marker = '*' if cell.coordinate in on_path else ' '
                parts.append(f"{marker}{text:>4}")
            lines.append(' '.join(parts))
        return '\n'.join(lines)

    def __repr__(self):
        return (f"Puzzle({self.rows}x{self.cols}, {len(self.connectors)} connectors, "
                f"path length {len(self.solution.path)})")

"""
Validator for Circuit Challenge puzzle invariants.

Every check re-derives what it needs from the finished puzzle alone, so the
validator can act as a safety net behind the probabilistic generation stages.
"""

from collections import Counter
from typing import List, Optional, TYPE_CHECKING

import networkx as nx

from .puzzle import Puzzle, Coordinate, ConnectorKind, DiagonalDirection
from .arithmetic import evaluate_expression, parse_operation

if TYPE_CHECKING:
    from .difficulty import DifficultyConfig


class ValidationResult:
    """Result of puzzle validation"""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Fold another result's messages into this one"""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)
        return self

    def __bool__(self):
        return self.is_valid

    def __eq__(self, other):
        if isinstance(other, ValidationResult):
            return (self.is_valid, self.errors, self.warnings) == (other.is_valid, other.errors, other.warnings)
        return False

    def __repr__(self):
        status = "Valid" if self.is_valid else "Invalid"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


class PuzzleValidator:
    """Validates Circuit Challenge puzzle invariants"""

    @staticmethod
    def validate_path(puzzle: Puzzle) -> ValidationResult:
        """Path starts at START, ends at FINISH, no repeats, all steps adjacent"""
        result = ValidationResult()
        path = puzzle.solution.path

        if len(path) < 2:
            result.add_error("Path must have at least 2 elements")
            return result

        if path[0] != puzzle.start:
            result.add_error(f"Path must start at (0,0), but starts at {path[0].key}")

        if path[-1] != puzzle.finish:
            result.add_error(f"Path must end at {puzzle.finish.key}, but ends at {path[-1].key}")

        visited = set()
        for i, coord in enumerate(path):
            if puzzle.cell(coord) is None:
                result.add_error(f"Path coordinate {coord.key} is out of bounds")

            if coord in visited:
                result.add_error(f"Duplicate coordinate in path: {coord.key}")
            visited.add(coord)

            if i > 0 and not path[i - 1].is_adjacent_to(coord):
                result.add_error(f"Non-adjacent cells in path: {path[i - 1].key} to {coord.key}")

        return result

    @staticmethod
    def validate_path_bounds(puzzle: Puzzle, config: 'DifficultyConfig') -> ValidationResult:
        """Path length within the configured bounds"""
        result = ValidationResult()
        length = len(puzzle.solution.path)
        if config.min_path_length and length < config.min_path_length:
            result.add_error(f"Path length {length} is below minimum {config.min_path_length}")
        if config.max_path_length and length > config.max_path_length:
            result.add_error(f"Path length {length} exceeds maximum {config.max_path_length}")
        return result

    @staticmethod
    def validate_diagonals(puzzle: Puzzle) -> ValidationResult:
        """Exactly one correctly oriented diagonal per 2x2 block, sane connector geometry"""
        result = ValidationResult()
        diagonals_per_block = Counter()

        for connector in puzzle.connectors:
            a, b = connector.cell_a, connector.cell_b
            if puzzle.cell(a) is None or puzzle.cell(b) is None:
                result.add_error(f"Connector {a.key}-{b.key} is out of bounds")
                continue
            if not a.is_adjacent_to(b):
                result.add_error(f"Connector joins non-adjacent cells {a.key} and {b.key}")
                continue

            if connector.kind == ConnectorKind.HORIZONTAL:
                if a.row != b.row:
                    result.add_error(f"Horizontal connector {a.key}-{b.key} is not horizontal")
            elif connector.kind == ConnectorKind.VERTICAL:
                if a.col != b.col:
                    result.add_error(f"Vertical connector {a.key}-{b.key} is not vertical")
            else:
                if a.row == b.row or a.col == b.col:
                    result.add_error(f"Diagonal connector {a.key}-{b.key} is not diagonal")
                    continue
                block = (min(a.row, b.row), min(a.col, b.col))
                diagonals_per_block[block] += 1
                # DR joins the top-left and bottom-right corners
                top = a if a.row < b.row else b
                actual = DiagonalDirection.DOWN_RIGHT if top.col == block[1] else DiagonalDirection.DOWN_LEFT
                if connector.direction != actual:
                    result.add_error(f"Diagonal connector {a.key}-{b.key} has direction "
                                     f"{connector.direction}, expected {actual}")

        for row in range(puzzle.rows - 1):
            for col in range(puzzle.cols - 1):
                count = diagonals_per_block[(row, col)]
                if count != 1:
                    result.add_error(f"Block {row},{col} has {count} diagonal connectors")

        return result

    @staticmethod
    def validate_connector_uniqueness(puzzle: Puzzle) -> ValidationResult:
        """No two connectors sharing a cell carry the same value"""
        result = ValidationResult()

        for cell in puzzle.cells():
            connectors = puzzle.connectors_for(cell.coordinate)
            values = [c.value for c in connectors]
            if any(v is None for v in values):
                result.add_error(f"Unvalued connector at cell {cell.coordinate.key}")
                continue
            if len(values) != len(set(values)):
                result.add_error(f"Duplicate connector value at cell {cell.coordinate.key}")

        return result

    @staticmethod
    def validate_cell_answers(puzzle: Puzzle) -> ValidationResult:
        """Every non-finish answer matches exactly one touching connector"""
        result = ValidationResult()

        for cell in puzzle.cells():
            key = cell.coordinate.key
            if cell.is_finish:
                if cell.answer is not None:
                    result.add_error("FINISH cell should have no answer")
                continue

            if cell.answer is None:
                result.add_error(f"Cell {key} has no answer but is not FINISH")
                continue

            matching = sum(1 for c in puzzle.connectors_for(cell.coordinate) if c.value == cell.answer)
            if matching == 0:
                result.add_error(f"Cell {key} has answer {cell.answer} but no matching connector")
            elif matching > 1:
                result.add_error(f"Cell {key} has answer {cell.answer} matching {matching} connectors")

        return result

    @staticmethod
    def validate_solution_path(puzzle: Puzzle) -> ValidationResult:
        """Walking the path connector by connector is arithmetically continuous"""
        result = ValidationResult()
        path = puzzle.solution.path

        for current, nxt in zip(path, path[1:]):
            cell = puzzle.cell(current)
            if cell is None:
                continue
            connector = puzzle.connector_between(current, nxt)
            if connector is None:
                result.add_error(f"No connector between path cells {current.key} and {nxt.key}")
                continue
            if cell.answer != connector.value:
                result.add_error(f"Cell {current.key} answer {cell.answer} doesn't match "
                                 f"connector value {connector.value}")

        return result

    @staticmethod
    def validate_expressions(puzzle: Puzzle) -> ValidationResult:
        """Every non-start/finish expression evaluates to the cell's answer"""
        result = ValidationResult()

        for cell in puzzle.cells():
            if cell.is_start or cell.is_finish:
                continue
            key = cell.coordinate.key

            if not cell.expression:
                result.add_error(f"Cell {key} has empty expression")
                continue

            value = evaluate_expression(cell.expression)
            if value is None:
                result.add_error(f"Cannot evaluate expression '{cell.expression}' at {key}")
            elif value != cell.answer:
                result.add_error(f"Expression '{cell.expression}' = {value}, "
                                 f"but cell answer is {cell.answer} at {key}")

        return result

    @staticmethod
    def build_answer_graph(puzzle: Puzzle) -> nx.DiGraph:
        """
        Directed graph of the moves a perfect player would make.

        Each non-finish cell points at the neighbour reached through the
        connector whose value equals its answer.
        """
        graph = nx.DiGraph()
        for cell in puzzle.cells():
            graph.add_node(cell.coordinate)
            if cell.is_finish or cell.answer is None:
                continue
            for connector in puzzle.connectors_for(cell.coordinate):
                if connector.value == cell.answer:
                    graph.add_edge(cell.coordinate, connector.other_cell(cell.coordinate))
        return graph

    @staticmethod
    def validate_answer_route(puzzle: Puzzle) -> ValidationResult:
        """
        Following answers from START reproduces the solution path.

        Off-path cells are decoys; where their answers lead onto the solution
        or round in a loop is reported as a warning only.
        """
        result = ValidationResult()
        graph = PuzzleValidator.build_answer_graph(puzzle)
        path = puzzle.solution.path
        if not path or puzzle.start not in graph:
            return result

        route = [puzzle.start]
        seen = {puzzle.start}
        current = puzzle.start
        while current != puzzle.finish:
            successors = list(graph.successors(current))
            if len(successors) != 1:
                break
            current = successors[0]
            if current in seen:
                break
            route.append(current)
            seen.add(current)

        if route != list(path):
            result.add_error("Following answers from START does not reproduce the solution path")

        on_path = set(path)
        joining = [c for c in graph.nodes
                   if c not in on_path and any(s in on_path for s in graph.successors(c))]
        if joining:
            result.add_warning(f"{len(joining)} decoy cell(s) lead onto the solution path")

        cycles = list(nx.simple_cycles(graph))
        if cycles:
            result.add_warning(f"{len(cycles)} decoy loop(s) among off-path cells")

        return result

    @staticmethod
    def validate_puzzle(puzzle: Puzzle, config: Optional['DifficultyConfig'] = None) -> ValidationResult:
        """Run every check and collect all errors without short-circuiting"""
        result = ValidationResult()
        result.merge(PuzzleValidator.validate_path(puzzle))
        if config is not None:
            result.merge(PuzzleValidator.validate_path_bounds(puzzle, config))
        result.merge(PuzzleValidator.validate_diagonals(puzzle))
        result.merge(PuzzleValidator.validate_connector_uniqueness(puzzle))
        result.merge(PuzzleValidator.validate_cell_answers(puzzle))
        result.merge(PuzzleValidator.validate_solution_path(puzzle))
        result.merge(PuzzleValidator.validate_expressions(puzzle))
        result.merge(PuzzleValidator.validate_answer_route(puzzle))
        return result

    @staticmethod
    def get_puzzle_statistics(puzzle: Puzzle) -> dict:
        """Get various statistics about the puzzle"""
        kinds = Counter(c.kind.value for c in puzzle.connectors)
        operations = Counter()
        for cell in puzzle.cells():
            operation = parse_operation(cell.expression) if cell.expression else None
            if operation is not None:
                operations[operation.name.lower()] += 1

        values = [c.value for c in puzzle.connectors if c.value is not None]
        graph = PuzzleValidator.build_answer_graph(puzzle)
        on_path = set(puzzle.solution.path)

        stats = {
            'id': puzzle.id,
            'difficulty': puzzle.difficulty,
            'rows': puzzle.rows,
            'cols': puzzle.cols,
            'num_cells': puzzle.rows * puzzle.cols,
            'num_connectors': len(puzzle.connectors),
            'connectors_by_kind': dict(kinds),
            'path_length': len(puzzle.solution.path),
            'path_steps': puzzle.solution.steps,
            'path_coverage': len(puzzle.solution.path) / (puzzle.rows * puzzle.cols) if puzzle.rows else 0,
            'diagonal_steps': sum(1 for a, b in zip(puzzle.solution.path, puzzle.solution.path[1:])
                                  if a.row != b.row and a.col != b.col),
            'operations': dict(operations),
            'min_connector_value': min(values) if values else None,
            'max_connector_value': max(values) if values else None,
            'decoys_joining_path': sum(1 for c in graph.nodes
                                       if c not in on_path and any(s in on_path for s in graph.successors(c))),
        }
        return stats

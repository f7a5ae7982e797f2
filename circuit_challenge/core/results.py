"""
Typed results returned at every generation stage boundary.

Stage failures are values, not exceptions: the orchestrator inspects them and
restarts the whole pipeline.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple

from .puzzle import Puzzle, Coordinate


@dataclass(frozen=True)
class PathGenerationExhausted:
    """No valid walk was found within the attempt budget"""
    attempts: int

    @property
    def message(self) -> str:
        return f"Failed to generate valid path after {self.attempts} attempts"


@dataclass(frozen=True)
class ValueAssignmentExhausted:
    """No legal value remained for some connector"""
    cell_a: Coordinate
    cell_b: Coordinate
    division_reserved: bool = False

    @property
    def message(self) -> str:
        kind = "division connector" if self.division_reserved else "connector"
        return f"No available values for {kind} between {self.cell_a.key} and {self.cell_b.key}"


@dataclass(frozen=True)
class ValidationFailed:
    """The finished puzzle broke at least one invariant"""
    errors: Tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Validation failed: {'; '.join(self.errors)}"


@dataclass(frozen=True)
class GenerationExhausted:
    """Terminal failure after the attempt cap (or deadline) was reached"""
    attempts: int
    path_failures: int = 0
    value_failures: int = 0
    validation_failures: int = 0
    deadline_reached: bool = False

    @property
    def message(self) -> str:
        return (f"Failed to generate puzzle after {self.attempts} attempts. "
                f"Try adjusting difficulty settings.")


class PuzzleGenerationError(Exception):
    """Raised by GenerationResult.unwrap() when generation was exhausted"""

    def __init__(self, failure: GenerationExhausted):
        super().__init__(failure.message)
        self.failure = failure


@dataclass
class GenerationResult:
    """Result from the generation orchestrator"""
    success: bool
    puzzle: Optional[Puzzle] = None
    error: Optional[GenerationExhausted] = None
    attempts: int = 0
    generation_time: float = 0.0

    # Failure breakdown and validation warnings of the returned puzzle
    stats: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def unwrap(self) -> Puzzle:
        """Return the puzzle or raise PuzzleGenerationError"""
        if not self.success or self.puzzle is None:
            raise PuzzleGenerationError(self.error or GenerationExhausted(self.attempts))
        return self.puzzle

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"GenerationResult({status}, attempts={self.attempts}, time={self.generation_time:.3f}s)"

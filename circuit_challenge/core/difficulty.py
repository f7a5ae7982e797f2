"""
Difficulty configuration and the built-in preset table.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Optional, Tuple, Union, List
from pathlib import Path
import math

import yaml

from .arithmetic import Operation
from .validator import ValidationResult


@dataclass(frozen=True)
class OperationWeights:
    """Relative weights for operation selection"""
    addition: int = 0
    subtraction: int = 0
    multiplication: int = 0
    division: int = 0

    @property
    def total(self) -> int:
        return self.addition + self.subtraction + self.multiplication + self.division

    def weight_for(self, operation: Operation) -> int:
        return {
            Operation.ADDITION: self.addition,
            Operation.SUBTRACTION: self.subtraction,
            Operation.MULTIPLICATION: self.multiplication,
            Operation.DIVISION: self.division,
        }[operation]


@dataclass(frozen=True)
class DifficultyConfig:
    """Configuration for puzzle generation"""
    name: str = "Custom"

    # Operations enabled
    addition_enabled: bool = True
    subtraction_enabled: bool = False
    multiplication_enabled: bool = False
    division_enabled: bool = False

    # Max operand for +/- and for ×/÷
    add_sub_range: int = 10
    mult_div_range: int = 0

    # Connector values
    connector_min: int = 5
    connector_max: int = 10

    # Grid size
    grid_rows: int = 3
    grid_cols: int = 4

    # Path constraints (0 means "derive from grid size")
    min_path_length: int = 0
    max_path_length: int = 0

    weights: OperationWeights = field(default_factory=lambda: OperationWeights(addition=100))

    # Gameplay only, not used by generation
    hidden_mode: bool = False
    seconds_per_step: int = 10

    def is_enabled(self, operation: Operation) -> bool:
        return {
            Operation.ADDITION: self.addition_enabled,
            Operation.SUBTRACTION: self.subtraction_enabled,
            Operation.MULTIPLICATION: self.multiplication_enabled,
            Operation.DIVISION: self.division_enabled,
        }[operation]

    @property
    def enabled_operations(self) -> List[Operation]:
        return [op for op in Operation if self.is_enabled(op)]

    @property
    def level_number(self) -> int:
        """Preset level (1-10), 0 for custom settings"""
        for level, preset in enumerate(DIFFICULTY_PRESETS, start=1):
            if preset.name == self.name:
                return level
        return 0

    @property
    def total_cells(self) -> int:
        return self.grid_rows * self.grid_cols

    def with_path_lengths(self) -> 'DifficultyConfig':
        """Fill in path bounds that were left at 0"""
        min_length = self.min_path_length or calculate_min_path_length(self.grid_rows, self.grid_cols)
        max_length = self.max_path_length or calculate_max_path_length(self.grid_rows, self.grid_cols)
        return replace(self, min_path_length=min_length, max_path_length=max_length)

    def capped(self, max_rows: int, max_cols: int) -> 'DifficultyConfig':
        """Clamp the grid for a smaller screen, recalculating path bounds"""
        rows = min(self.grid_rows, max_rows)
        cols = min(self.grid_cols, max_cols)
        return replace(
            self,
            grid_rows=rows,
            grid_cols=cols,
            min_path_length=calculate_min_path_length(rows, cols),
            max_path_length=calculate_max_path_length(rows, cols)
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'DifficultyConfig':
        data = dict(data)
        weights = data.pop('weights', None)
        unknown = set(data) - {f for f in cls.__dataclass_fields__ if f != 'weights'}
        if unknown:
            raise ValueError(f"Unknown difficulty settings: {sorted(unknown)}")
        if weights is not None:
            data['weights'] = weights if isinstance(weights, OperationWeights) else OperationWeights(**weights)
        return cls(**data)


# Device grid caps
PHONE_MAX_ROWS = 5
PHONE_MAX_COLS = 6
PHONE_STORY_MAX_ROWS = 4
PHONE_STORY_MAX_COLS = 6


def calculate_min_path_length(rows: int, cols: int) -> int:
    """
    Minimum path length (in cells) for a grid.

    Larger grids use lower percentages for reliable generation.
    """
    total_cells = rows * cols
    if total_cells <= 16:
        percentage = 0.50
    elif total_cells <= 25:
        percentage = 0.55
    elif total_cells <= 42:
        percentage = 0.50
    else:
        percentage = 0.45
    return max(4, math.floor(total_cells * percentage))


def calculate_max_path_length(rows: int, cols: int) -> int:
    """Maximum path length, about 85% of the cells"""
    return math.floor(rows * cols * 0.85)


DIFFICULTY_PRESETS: Tuple[DifficultyConfig, ...] = (
    DifficultyConfig(
        name="Tiny Tot",
        addition_enabled=True, subtraction_enabled=False,
        multiplication_enabled=False, division_enabled=False,
        add_sub_range=10, mult_div_range=0,
        connector_min=5, connector_max=10,
        grid_rows=3, grid_cols=4,
        weights=OperationWeights(addition=100),
        seconds_per_step=10
    ),
    DifficultyConfig(
        name="Beginner",
        addition_enabled=True, subtraction_enabled=False,
        multiplication_enabled=False, division_enabled=False,
        add_sub_range=15, mult_div_range=0,
        connector_min=5, connector_max=15,
        grid_rows=4, grid_cols=4,
        weights=OperationWeights(addition=100),
        seconds_per_step=9
    ),
    DifficultyConfig(
        name="Easy",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=False, division_enabled=False,
        add_sub_range=15, mult_div_range=0,
        connector_min=5, connector_max=15,
        grid_rows=4, grid_cols=5,
        weights=OperationWeights(addition=60, subtraction=40),
        seconds_per_step=8
    ),
    DifficultyConfig(
        name="Getting There",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=False, division_enabled=False,
        add_sub_range=20, mult_div_range=0,
        connector_min=5, connector_max=20,
        grid_rows=4, grid_cols=5,
        weights=OperationWeights(addition=55, subtraction=45),
        seconds_per_step=7
    ),
    DifficultyConfig(
        name="Times Tables",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=True, division_enabled=False,
        add_sub_range=20, mult_div_range=5,
        connector_min=5, connector_max=25,
        grid_rows=4, grid_cols=5,
        weights=OperationWeights(addition=40, subtraction=35, multiplication=25),
        seconds_per_step=7
    ),
    DifficultyConfig(
        name="Confident",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=True, division_enabled=False,
        add_sub_range=25, mult_div_range=6,
        connector_min=5, connector_max=36,
        grid_rows=5, grid_cols=5,
        weights=OperationWeights(addition=35, subtraction=30, multiplication=35),
        seconds_per_step=6
    ),
    DifficultyConfig(
        name="Adventurous",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=True, division_enabled=False,
        add_sub_range=30, mult_div_range=8,
        connector_min=5, connector_max=64,
        grid_rows=5, grid_cols=6,
        weights=OperationWeights(addition=30, subtraction=30, multiplication=40),
        seconds_per_step=6
    ),
    DifficultyConfig(
        name="Division Intro",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=True, division_enabled=True,
        add_sub_range=30, mult_div_range=6,
        connector_min=5, connector_max=36,
        grid_rows=5, grid_cols=6,
        weights=OperationWeights(addition=30, subtraction=25, multiplication=30, division=15),
        seconds_per_step=6
    ),
    DifficultyConfig(
        name="Challenge",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=True, division_enabled=True,
        add_sub_range=50, mult_div_range=10,
        connector_min=5, connector_max=100,
        grid_rows=6, grid_cols=7,
        weights=OperationWeights(addition=25, subtraction=25, multiplication=30, division=20),
        seconds_per_step=5
    ),
    DifficultyConfig(
        name="Expert",
        addition_enabled=True, subtraction_enabled=True,
        multiplication_enabled=True, division_enabled=True,
        add_sub_range=100, mult_div_range=12,
        connector_min=5, connector_max=144,
        grid_rows=6, grid_cols=8,
        weights=OperationWeights(addition=25, subtraction=25, multiplication=30, division=20),
        seconds_per_step=5
    ),
)


def get_difficulty_by_level(level: int) -> DifficultyConfig:
    """Get preset by level number (clamped to 1-10) with path lengths filled in"""
    index = max(0, min(len(DIFFICULTY_PRESETS) - 1, level - 1))
    return DIFFICULTY_PRESETS[index].with_path_lengths()


def get_difficulty_by_name(name: str) -> Optional[DifficultyConfig]:
    """Get preset by name, None when there is no such preset"""
    for preset in DIFFICULTY_PRESETS:
        if preset.name == name:
            return preset.with_path_lengths()
    return None


def equal_weights(config: DifficultyConfig) -> OperationWeights:
    """Distribute weight equally among the enabled operations"""
    enabled = config.enabled_operations
    per_op = 100 // len(enabled) if enabled else 0
    return OperationWeights(
        addition=per_op if config.addition_enabled else 0,
        subtraction=per_op if config.subtraction_enabled else 0,
        multiplication=per_op if config.multiplication_enabled else 0,
        division=per_op if config.division_enabled else 0
    )


def create_custom_difficulty(**overrides) -> DifficultyConfig:
    """
    Build custom settings on top of the "Times Tables" preset.

    Weights are spread equally across enabled operations unless given, and
    path bounds are recalculated for the grid unless given.
    """
    base = DIFFICULTY_PRESETS[4]
    weights = overrides.pop('weights', None)
    if isinstance(weights, dict):
        weights = OperationWeights(**weights)

    fields = {'name': 'Custom', 'min_path_length': 0, 'max_path_length': 0}
    fields.update(overrides)
    settings = replace(base, **fields)
    settings = replace(settings, weights=weights or equal_weights(settings))
    return settings.with_path_lengths()


def validate_difficulty_config(config: DifficultyConfig) -> ValidationResult:
    """Check that settings can drive the generator"""
    result = ValidationResult()

    if not config.enabled_operations:
        result.add_error("At least one operation must be enabled")

    if config.add_sub_range < 1:
        result.add_error("Addition/subtraction range must be at least 1")

    if (config.multiplication_enabled or config.division_enabled) and config.mult_div_range < 2:
        result.add_error("Multiplication/division range must be at least 2")

    if config.connector_min < 1:
        result.add_error("Minimum connector value must be at least 1")

    if config.connector_max <= config.connector_min:
        result.add_error("Maximum connector value must be greater than minimum")

    if config.grid_rows < 3:
        result.add_error("Grid must have at least 3 rows")

    if config.grid_cols < 4:
        result.add_error("Grid must have at least 4 columns")

    if config.min_path_length < 4:
        result.add_error("Minimum path length must be at least 4")

    if config.max_path_length < config.min_path_length:
        result.add_error("Maximum path length must be at least equal to minimum")

    for operation in Operation:
        if config.is_enabled(operation) and config.weights.weight_for(operation) <= 0:
            result.add_error(f"{operation.name.capitalize()} weight must be positive when enabled")

    # A cell can touch up to 8 connectors, each needing a distinct value
    if config.connector_max - config.connector_min + 1 < 8:
        result.add_warning("Connector range has fewer than 8 values; generation may need several attempts")

    return result


def load_difficulty_config(path: Union[str, Path]) -> DifficultyConfig:
    """
    Load custom settings from a YAML file.

    A ``level`` key selects a preset to start from; every other key
    overrides a DifficultyConfig field.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Difficulty configuration must be a mapping: {path}")

    level = data.pop('level', None)
    if level is not None:
        # Path bounds are re-derived unless the file sets them
        base = replace(get_difficulty_by_level(int(level)), min_path_length=0, max_path_length=0).to_dict()
        base.update(data)
        data = base

    return DifficultyConfig.from_dict(data).with_path_lengths()

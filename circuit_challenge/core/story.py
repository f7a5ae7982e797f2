"""
Story mode: derive difficulty settings for chapter/level pairs.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple
import math

from .arithmetic import Operation
from .difficulty import (
    DifficultyConfig, OperationWeights,
    calculate_min_path_length, calculate_max_path_length
)

LEVEL_LETTERS = ('A', 'B', 'C', 'D', 'E')

STORY_CONNECTOR_MIN = 5

# Narrower connector ranges cannot keep values unique on the larger grids
MIN_STORY_CONNECTOR_VALUES = 11


@dataclass(frozen=True)
class StoryLevel:
    """A level in story mode, e.g. chapter 3 level C"""
    chapter: int  # 1-10
    level: int    # 1-5

    @property
    def letter(self) -> str:
        return LEVEL_LETTERS[self.level - 1]

    @property
    def display_name(self) -> str:
        return f"{self.chapter}-{self.letter}"

    @classmethod
    def from_letter(cls, chapter: int, letter: str) -> Optional['StoryLevel']:
        letter = letter.upper()
        if letter not in LEVEL_LETTERS:
            return None
        return cls(chapter, LEVEL_LETTERS.index(letter) + 1)


@dataclass(frozen=True)
class ChapterConfig:
    operations: FrozenSet[Operation]
    add_sub_max: int
    mult_div_max: int
    start_grid: Tuple[int, int]
    end_grid: Tuple[int, int]
    all_hidden: bool = False


_ADD = frozenset({Operation.ADDITION})
_ADD_SUB = frozenset({Operation.ADDITION, Operation.SUBTRACTION})
_ADD_SUB_MUL = _ADD_SUB | {Operation.MULTIPLICATION}
_ALL = frozenset(Operation)

CHAPTERS: Dict[int, ChapterConfig] = {
    1: ChapterConfig(_ADD, 10, 0, (3, 4), (6, 7)),
    2: ChapterConfig(_ADD_SUB, 15, 0, (4, 5), (6, 7)),
    3: ChapterConfig(_ADD_SUB, 20, 0, (4, 5), (6, 7)),
    4: ChapterConfig(_ADD_SUB, 35, 0, (4, 5), (6, 7)),
    5: ChapterConfig(_ADD_SUB_MUL, 20, 20, (4, 5), (6, 7)),
    6: ChapterConfig(_ADD_SUB_MUL, 30, 50, (4, 5), (6, 7)),
    7: ChapterConfig(_ADD_SUB_MUL, 40, 100, (4, 5), (6, 7)),
    8: ChapterConfig(_ALL, 50, 100, (4, 5), (6, 7)),
    9: ChapterConfig(_ALL, 100, 144, (6, 7), (6, 7)),
    10: ChapterConfig(_ALL, 100, 144, (8, 9), (8, 9), all_hidden=True),
}


def story_grid(level: int, start: Tuple[int, int], end: Tuple[int, int]) -> Tuple[int, int]:
    """Grow the grid from start towards end over levels A-D; E gets the end grid"""
    if level == 5 or start == end:
        return end

    total_growth = (end[0] - start[0]) + (end[1] - start[1])
    growth = (level - 1) * (total_growth // 4)

    rows, cols = start
    for i in range(growth):
        # Alternate between adding rows and cols
        if i % 2 == 0 and rows < end[0]:
            rows += 1
        elif cols < end[1]:
            cols += 1
        elif rows < end[0]:
            rows += 1
    return rows, cols


def story_difficulty(story_level: StoryLevel) -> DifficultyConfig:
    """Difficulty settings for a story level, chapter 1 level A when unknown"""
    chapter = CHAPTERS.get(story_level.chapter)
    if chapter is None or not 1 <= story_level.level <= 5:
        return story_difficulty(StoryLevel(1, 1))

    rows, cols = story_grid(story_level.level, chapter.start_grid, chapter.end_grid)
    per_op = 100 // len(chapter.operations)

    def weight(op: Operation) -> int:
        return per_op if op in chapter.operations else 0

    return DifficultyConfig(
        name=f"Story {story_level.display_name}",
        addition_enabled=Operation.ADDITION in chapter.operations,
        subtraction_enabled=Operation.SUBTRACTION in chapter.operations,
        multiplication_enabled=Operation.MULTIPLICATION in chapter.operations,
        division_enabled=Operation.DIVISION in chapter.operations,
        add_sub_range=chapter.add_sub_max,
        # Operand range from the max answer, e.g. 50 -> 7 (7x7=49)
        mult_div_range=math.isqrt(chapter.mult_div_max) if chapter.mult_div_max > 0 else 0,
        connector_min=STORY_CONNECTOR_MIN,
        connector_max=max(chapter.add_sub_max, chapter.mult_div_max,
                          STORY_CONNECTOR_MIN + MIN_STORY_CONNECTOR_VALUES - 1),
        grid_rows=rows,
        grid_cols=cols,
        min_path_length=calculate_min_path_length(rows, cols),
        max_path_length=calculate_max_path_length(rows, cols),
        weights=OperationWeights(
            addition=weight(Operation.ADDITION),
            subtraction=weight(Operation.SUBTRACTION),
            multiplication=weight(Operation.MULTIPLICATION),
            division=weight(Operation.DIVISION)
        ),
        hidden_mode=chapter.all_hidden or story_level.level == 5,
        seconds_per_step=5
    )


def calculate_stars(lives_lost: int, time_seconds: float, tile_count: int) -> int:
    """1 star for finishing, 2 with no lives lost, 3 if also under 5s per tile"""
    if lives_lost > 0:
        return 1
    if time_seconds < tile_count * 5.0:
        return 3
    return 2

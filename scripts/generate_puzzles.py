#!/usr/bin/env python3
"""
Script to generate Circuit Challenge puzzles.

Usage:
    python scripts/generate_puzzles.py --level 3 --count 10
    python scripts/generate_puzzles.py --config data/difficulties/custom.yaml --count 5
    python scripts/generate_puzzles.py --level 9 --rows 5 --cols 6 --seed 42 --show
"""

import click
import sys
from dataclasses import replace
from pathlib import Path
from datetime import datetime
import json

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from config import PUZZLES_DIR, MAX_GENERATION_ATTEMPTS, GENERATION_TIME_LIMIT, LOG_LEVEL
from circuit_challenge.core.difficulty import (
    DIFFICULTY_PRESETS, get_difficulty_by_level, load_difficulty_config,
    calculate_min_path_length, calculate_max_path_length
)
from circuit_challenge.core.utils import PuzzleConverter
from circuit_challenge.core.validator import PuzzleValidator
from circuit_challenge.generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig


@click.command()
@click.option('--level', '-l', type=click.IntRange(1, len(DIFFICULTY_PRESETS)), default=1,
              help='Difficulty preset level (1-10)')
@click.option('--count', '-n', type=int, default=10,
              help='Number of puzzles to generate')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False),
              default=None, help='YAML difficulty configuration (overrides --level)')
@click.option('--rows', type=int, default=None, help='Override grid rows')
@click.option('--cols', type=int, default=None, help='Override grid columns')
@click.option('--seed', type=int, default=None,
              help='Random seed for reproducibility')
@click.option('--max-attempts', type=int, default=MAX_GENERATION_ATTEMPTS,
              help='Generation attempts per puzzle')
@click.option('--output-dir', '-o', type=click.Path(), default=str(PUZZLES_DIR),
              help='Output directory for puzzles')
@click.option('--show', is_flag=True,
              help='Print each generated puzzle to the terminal')
def main(level, count, config_file, rows, cols, seed, max_attempts, output_dir, show):
    """Generate Circuit Challenge puzzles for a preset or custom difficulty."""

    click.echo("=" * 60)
    click.echo("Circuit Challenge Puzzle Generator")
    click.echo("=" * 60)

    try:
        difficulty = load_difficulty_config(config_file) if config_file else get_difficulty_by_level(level)
    except (ValueError, TypeError) as e:
        click.echo(f"Error loading difficulty configuration: {e}")
        sys.exit(1)

    if rows or cols:
        rows = rows or difficulty.grid_rows
        cols = cols or difficulty.grid_cols
        difficulty = replace(
            difficulty,
            grid_rows=rows,
            grid_cols=cols,
            min_path_length=calculate_min_path_length(rows, cols),
            max_path_length=calculate_max_path_length(rows, cols)
        )

    click.echo(f"\nDifficulty: {difficulty.name} ({difficulty.grid_rows}x{difficulty.grid_cols}, "
               f"path {difficulty.min_path_length}-{difficulty.max_path_length} cells)")
    click.echo(f"Operations: {', '.join(op.name.lower() for op in difficulty.enabled_operations)}")

    output_path = Path(output_dir)
    generator = PuzzleGenerator(PuzzleGeneratorConfig(
        max_attempts=max_attempts,
        time_limit=GENERATION_TIME_LIMIT,
        random_seed=seed,
        log_level=LOG_LEVEL
    ))

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    slug = difficulty.name.lower().replace(' ', '_')
    config_dir = output_path / f"{slug}_{difficulty.grid_rows}x{difficulty.grid_cols}"
    config_dir.mkdir(parents=True, exist_ok=True)

    generated = []
    failures = 0
    total_attempts = 0

    with click.progressbar(length=count, label='Generating puzzles') as bar:
        for i in range(count):
            try:
                result = generator.generate(difficulty)
            except ValueError as e:
                click.echo(f"\nError: {e}")
                sys.exit(1)

            total_attempts += result.attempts
            if result.success:
                puzzle_path = config_dir / f"{slug}_{timestamp}_{i:04d}.json"
                result.puzzle.save(puzzle_path)
                generated.append(result.puzzle)
            else:
                failures += 1
            bar.update(1)

    click.echo(f"\n\nGeneration complete!")
    click.echo(f"Successfully generated {len(generated)}/{count} puzzles "
               f"({total_attempts} attempts, {failures} failures)")
    click.echo(f"Puzzles saved to: {config_dir}")

    summary = {
        'timestamp': timestamp,
        'difficulty': difficulty.to_dict(),
        'requested': count,
        'generated': len(generated),
        'total_attempts': total_attempts,
        'seed': seed,
        'puzzle_ids': [p.id for p in generated]
    }
    summary_path = config_dir / f"generation_summary_{timestamp}.json"
    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2)

    click.echo(f"Generation summary saved to: {summary_path}")

    if show:
        for puzzle in generated:
            stats = PuzzleValidator.get_puzzle_statistics(puzzle)
            click.echo(f"\nPuzzle {puzzle.id}:")
            click.echo(PuzzleConverter.to_string(puzzle, show_solution=True))
            click.echo(f"  Path length: {stats['path_length']} "
                       f"({stats['path_coverage']:.0%} of cells)")
            click.echo(f"  Operations: {stats['operations']}")
            click.echo(f"  Decoys joining path: {stats['decoys_joining_path']}")


if __name__ == '__main__':
    main()

#!/usr/bin/env python3
"""
Script to benchmark Circuit Challenge puzzle generation.

Usage:
    python scripts/run_benchmark.py --levels 1 2 3 --runs 100
    python scripts/run_benchmark.py --suite quick
    python scripts/run_benchmark.py --suite full --workers 8
"""

import click
import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from config import RESULTS_BENCHMARKS_DIR, BENCHMARK_RUNS_PER_LEVEL, BENCHMARK_SLOW_THRESHOLD
from circuit_challenge.analysis.benchmark import (
    GenerationBenchmark, GenerationBenchmarkConfig, GenerationBenchmarkAnalyzer
)


# Predefined benchmark suites
BENCHMARK_SUITES = {
    'quick': {
        'levels': [1, 2, 3],
        'runs_per_level': 20
    },
    'standard': {
        'levels': list(range(1, 11)),
        'runs_per_level': 100
    },
    'full': {
        'levels': list(range(1, 11)),
        'runs_per_level': 1000
    }
}


@click.command()
@click.option('--suite', type=click.Choice(list(BENCHMARK_SUITES)),
              help='Use predefined benchmark suite')
@click.option('--levels', '-l', multiple=True, type=click.IntRange(1, 10),
              help='Difficulty preset levels to benchmark')
@click.option('--runs', '-n', type=int, default=BENCHMARK_RUNS_PER_LEVEL,
              help='Generations per level')
@click.option('--max-attempts', type=int, default=20,
              help='Generation attempts per puzzle')
@click.option('--seed', type=int, default=0,
              help='Base random seed')
@click.option('--parallel/--sequential', default=True,
              help='Run generations in parallel')
@click.option('--workers', '-w', type=int, default=None,
              help='Number of parallel workers')
@click.option('--output-dir', '-o', type=click.Path(), default=str(RESULTS_BENCHMARKS_DIR),
              help='Output directory for results')
def main(suite, levels, runs, max_attempts, seed, parallel, workers, output_dir):
    """Measure generation success rate and speed per difficulty preset."""

    click.echo("=" * 60)
    click.echo("Circuit Challenge Generation Benchmark")
    click.echo("=" * 60)

    if suite:
        config_dict = BENCHMARK_SUITES[suite].copy()
        click.echo(f"\nUsing {suite} benchmark suite")
    else:
        config_dict = {
            'levels': list(levels) or list(range(1, 11)),
            'runs_per_level': runs
        }

    config_dict.update({
        'max_attempts': max_attempts,
        'base_seed': seed,
        'parallel': parallel,
        'output_dir': output_dir
    })
    if workers:
        config_dict['num_workers'] = workers

    benchmark_config = GenerationBenchmarkConfig(**config_dict)
    click.echo(f"  Levels: {benchmark_config.levels}")
    click.echo(f"  Runs per level: {benchmark_config.runs_per_level}")
    click.echo(f"\nTotal generations to run: "
               f"{len(benchmark_config.levels) * benchmark_config.runs_per_level}\n")

    benchmark = GenerationBenchmark(benchmark_config)
    results_df = benchmark.run()

    if results_df.empty:
        click.echo("No generations were run.")
        return

    click.echo(f"\nBenchmark completed! Results summary:")
    click.echo(f"  Total generations: {len(results_df)}")
    click.echo(f"  Successful: {results_df['success'].sum()}")
    click.echo(f"  Failed: {(~results_df['success']).sum()}")
    click.echo(f"  Success rate: {results_df['success'].mean() * 100:.2f}%")

    analyzer = GenerationBenchmarkAnalyzer(results_df)
    click.echo("\nPer-level performance:")
    for (level, name), row in analyzer.get_summary_statistics().iterrows():
        click.echo(f"  {level:2d} {name}:")
        click.echo(f"    Success rate: {row['success_mean'] * 100:.1f}%")
        click.echo(f"    Avg time: {row['generation_time_mean'] * 1000:.1f}ms "
                   f"(max {row['generation_time_max'] * 1000:.1f}ms)")
        click.echo(f"    Avg attempts: {row['attempts_mean']:.2f}")

    slow = analyzer.get_slow_runs(BENCHMARK_SLOW_THRESHOLD)
    if len(slow):
        click.echo(f"\n{len(slow)} generations took longer than {BENCHMARK_SLOW_THRESHOLD * 1000:.0f}ms")

    summary_path = Path(output_dir) / "generation_summary.csv"
    analyzer.save_summary(summary_path)
    click.echo(f"\nSummary saved to: {summary_path}")


if __name__ == '__main__':
    main()

"""
Benchmark system for measuring puzzle generation reliability and speed.
"""

import time
import json
import pandas as pd
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple, Union
from dataclasses import dataclass, asdict, field
from datetime import datetime
import multiprocessing as mp
from functools import partial
from tqdm import tqdm

from ..core.difficulty import DifficultyConfig, get_difficulty_by_level
from ..core.validator import PuzzleValidator
from ..core.utils import setup_logger, memory_usage
from ..generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig


@dataclass
class GenerationBenchmarkResult:
    """Result from a single generation run"""
    run_id: str
    level: int
    difficulty: str
    seed: int
    success: bool
    generation_time: float
    attempts: int
    memory_mb: float

    # Grid characteristics
    rows: int
    cols: int

    # Failure breakdown
    path_failures: int = 0
    value_failures: int = 0
    validation_failures: int = 0

    # Puzzle quality
    path_length: int = 0
    is_valid: bool = False
    num_warnings: int = 0
    error_message: str = ""

    timestamp: str = ""
    extra_stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return asdict(self)


class GenerationBenchmarkConfig:
    """Configuration for generation benchmarks"""

    def __init__(self, **kwargs):
        self.levels: List[int] = kwargs.get('levels', list(range(1, 11)))
        self.runs_per_level: int = kwargs.get('runs_per_level', 100)
        self.max_attempts: int = kwargs.get('max_attempts', 20)
        self.base_seed: int = kwargs.get('base_seed', 0)

        # Execution parameters
        self.parallel: bool = kwargs.get('parallel', True)
        self.num_workers: int = kwargs.get('num_workers', max(1, mp.cpu_count() - 1))

        # Output parameters
        self.output_dir: Path = Path(kwargs.get('output_dir', 'results/benchmarks'))
        self.save_results: bool = kwargs.get('save_results', True)


class GenerationBenchmark:
    """Run repeated generations across difficulty presets"""

    def __init__(self, config: GenerationBenchmarkConfig):
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)

        if self.config.save_results:
            self.config.output_dir.mkdir(parents=True, exist_ok=True)

        self.results: List[GenerationBenchmarkResult] = []

    def run(self) -> pd.DataFrame:
        """
        Run the complete benchmark.

        Returns:
            DataFrame with one row per generation run
        """
        self.logger.info("Starting generation benchmark")
        start_time = time.time()

        runs = self._prepare_runs()
        self.logger.info(f"Prepared {len(runs)} generation runs")

        if self.config.parallel and self.config.num_workers > 1:
            self._run_parallel(runs)
        else:
            self._run_sequential(runs)

        results_df = pd.DataFrame([r.to_dict() for r in self.results])

        if self.config.save_results:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            results_file = self.config.output_dir / f"generation_benchmark_{timestamp}.csv"
            results_df.drop(columns=['extra_stats'], errors='ignore').to_csv(results_file, index=False)

            json_file = self.config.output_dir / f"generation_benchmark_{timestamp}.json"
            with open(json_file, 'w') as f:
                json.dump({
                    'config': {
                        'levels': self.config.levels,
                        'runs_per_level': self.config.runs_per_level,
                        'max_attempts': self.config.max_attempts,
                        'base_seed': self.config.base_seed
                    },
                    'results': [r.to_dict() for r in self.results],
                    'summary': self._compute_summary(results_df)
                }, f, indent=2)

            self.logger.info(f"Results saved to {results_file}")

        total_time = time.time() - start_time
        self.logger.info(f"Benchmark completed in {total_time:.2f} seconds")

        return results_df

    def _prepare_runs(self) -> List[Tuple[int, int]]:
        """(level, seed) pairs, seeds unique across the whole benchmark"""
        runs = []
        seed = self.config.base_seed
        for level in self.config.levels:
            for _ in range(self.config.runs_per_level):
                runs.append((level, seed))
                seed += 1
        return runs

    def _run_sequential(self, runs: List[Tuple[int, int]]):
        with tqdm(total=len(runs), desc="Generating puzzles") as pbar:
            for level, seed in runs:
                self.results.append(run_single_generation(self.config, (level, seed)))
                pbar.update(1)

    def _run_parallel(self, runs: List[Tuple[int, int]]):
        self.logger.info(f"Running {len(runs)} generations with {self.config.num_workers} workers")

        with mp.Pool(processes=self.config.num_workers) as pool:
            worker_func = partial(run_single_generation, self.config)

            with tqdm(total=len(runs), desc="Generating puzzles") as pbar:
                for result in pool.imap_unordered(worker_func, runs):
                    self.results.append(result)
                    pbar.update(1)

    def _compute_summary(self, results_df: pd.DataFrame) -> dict:
        """Compute summary statistics"""
        if results_df.empty:
            return {'total_runs': 0, 'successful_runs': 0, 'success_rate': 0.0, 'by_level': {}}

        summary = {
            'total_runs': int(len(results_df)),
            'successful_runs': int(results_df['success'].sum()),
            'success_rate': float(results_df['success'].mean()),
            'by_level': {}
        }

        for level, level_data in results_df.groupby('level'):
            summary['by_level'][int(level)] = {
                'difficulty': str(level_data['difficulty'].iloc[0]),
                'success_rate': float(level_data['success'].mean()),
                'avg_time': float(level_data['generation_time'].mean()),
                'max_time': float(level_data['generation_time'].max()),
                'avg_attempts': float(level_data['attempts'].mean()),
                'path_failures': int(level_data['path_failures'].sum()),
                'value_failures': int(level_data['value_failures'].sum()),
                'validation_failures': int(level_data['validation_failures'].sum())
            }

        return summary


def run_single_generation(config: GenerationBenchmarkConfig,
                          run: Tuple[int, int]) -> GenerationBenchmarkResult:
    """Generate and re-validate one puzzle; module level so worker processes can pickle it"""
    level, seed = run
    difficulty = get_difficulty_by_level(level)

    generator = PuzzleGenerator(PuzzleGeneratorConfig(
        max_attempts=config.max_attempts,
        random_seed=seed,
        log_level='CRITICAL'
    ))

    initial_memory = memory_usage()
    generation = generator.generate(difficulty)

    result = GenerationBenchmarkResult(
        run_id=f"level{level:02d}_{seed:06d}",
        level=level,
        difficulty=difficulty.name,
        seed=seed,
        success=generation.success,
        generation_time=generation.generation_time,
        attempts=generation.attempts,
        memory_mb=memory_usage() - initial_memory,
        rows=difficulty.grid_rows,
        cols=difficulty.grid_cols,
        path_failures=generation.stats.get('path', 0),
        value_failures=generation.stats.get('values', 0),
        validation_failures=generation.stats.get('validation', 0),
        timestamp=datetime.now().isoformat()
    )

    if generation.success:
        validation = PuzzleValidator.validate_puzzle(generation.puzzle, difficulty)
        result.is_valid = validation.is_valid
        result.num_warnings = len(validation.warnings)
        result.path_length = len(generation.puzzle.solution.path)
        if not validation.is_valid:
            result.error_message = "; ".join(validation.errors)
        result.extra_stats = PuzzleValidator.get_puzzle_statistics(generation.puzzle)['operations']
    else:
        result.error_message = generation.error.message

    return result


class GenerationBenchmarkAnalyzer:
    """Analyze generation benchmark results"""

    def __init__(self, results: Union[Path, str, pd.DataFrame]):
        """Load results from a CSV file or use a DataFrame directly"""
        if isinstance(results, pd.DataFrame):
            self.results_df = results
        else:
            self.results_df = pd.read_csv(results)
        self.logger = setup_logger(self.__class__.__name__)

    def get_summary_statistics(self) -> pd.DataFrame:
        """Get summary statistics by preset"""
        summary = self.results_df.groupby(['level', 'difficulty']).agg({
            'success': ['count', 'sum', 'mean'],
            'generation_time': ['mean', 'median', 'std', 'min', 'max'],
            'attempts': ['mean', 'max']
        }).round(4)

        # Flatten column names
        summary.columns = ['_'.join(col).strip() for col in summary.columns.values]

        return summary

    def get_failure_breakdown(self) -> pd.DataFrame:
        """Total failed attempts per stage, per preset"""
        return self.results_df.groupby('level')[
            ['path_failures', 'value_failures', 'validation_failures']
        ].sum()

    def get_slow_runs(self, threshold: float = 0.2) -> pd.DataFrame:
        """Runs slower than threshold seconds"""
        return self.results_df[self.results_df['generation_time'] > threshold]

    def failure_rate(self, level: Optional[int] = None) -> float:
        data = self.results_df
        if level is not None:
            data = data[data['level'] == level]
        if len(data) == 0:
            return 0.0
        return float(1.0 - data['success'].mean())

    def save_summary(self, output_file: Path):
        """Save summary statistics to CSV"""
        self.get_summary_statistics().to_csv(output_file)
        self.logger.info(f"Summary saved to {output_file}")


def benchmark_difficulty(difficulty: DifficultyConfig, runs: int = 100,
                         base_seed: int = 0) -> pd.DataFrame:
    """Quick sequential benchmark of one difficulty configuration"""
    rows = []
    for seed in range(base_seed, base_seed + runs):
        generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=seed, log_level='CRITICAL'))
        generation = generator.generate(difficulty)
        rows.append({
            'seed': seed,
            'success': generation.success,
            'attempts': generation.attempts,
            'generation_time': generation.generation_time
        })
    return pd.DataFrame(rows)

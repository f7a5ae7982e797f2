import json
import tempfile
import unittest
from pathlib import Path

from circuit_challenge.analysis.benchmark import (
    GenerationBenchmark, GenerationBenchmarkConfig, GenerationBenchmarkAnalyzer,
    run_single_generation, benchmark_difficulty
)
from circuit_challenge.core.difficulty import get_difficulty_by_level


class GenerationBenchmarkTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.tmp.name) / "benchmarks"
        self.config = GenerationBenchmarkConfig(
            levels=[2, 3],
            runs_per_level=3,
            parallel=False,
            output_dir=self.output_dir
        )

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_sequential_run(self) -> None:
        results_df = GenerationBenchmark(self.config).run()

        self.assertEqual(len(results_df), 6)
        self.assertTrue(results_df['success'].all())
        self.assertTrue(results_df['is_valid'].all())
        self.assertEqual(sorted(results_df['level'].unique().tolist()), [2, 3])
        self.assertEqual(len(set(results_df['seed'])), 6)

        csv_files = list(self.output_dir.glob("generation_benchmark_*.csv"))
        json_files = list(self.output_dir.glob("generation_benchmark_*.json"))
        self.assertEqual(len(csv_files), 1)
        self.assertEqual(len(json_files), 1)

        with open(json_files[0]) as f:
            saved = json.load(f)
        self.assertEqual(saved['summary']['total_runs'], 6)
        self.assertEqual(set(saved['summary']['by_level']), {'2', '3'})

    def test_single_generation_record(self) -> None:
        result = run_single_generation(self.config, (2, 7))
        self.assertTrue(result.success)
        self.assertEqual(result.difficulty, "Beginner")
        self.assertEqual((result.rows, result.cols), (4, 4))
        self.assertEqual(result.run_id, "level02_000007")
        self.assertGreaterEqual(result.path_length, 8)
        self.assertTrue(set(result.extra_stats) <= {'addition'})

    def test_analyzer(self) -> None:
        results_df = GenerationBenchmark(self.config).run()
        csv_file = next(self.output_dir.glob("generation_benchmark_*.csv"))

        for source in (results_df, csv_file):
            analyzer = GenerationBenchmarkAnalyzer(source)
            summary = analyzer.get_summary_statistics()
            self.assertEqual(len(summary), 2)
            self.assertIn('success_mean', summary.columns)
            self.assertEqual(analyzer.failure_rate(), 0.0)
            self.assertEqual(analyzer.failure_rate(level=2), 0.0)
            self.assertEqual(list(analyzer.get_failure_breakdown().columns),
                             ['path_failures', 'value_failures', 'validation_failures'])

        summary_file = self.output_dir / "summary.csv"
        GenerationBenchmarkAnalyzer(results_df).save_summary(summary_file)
        self.assertTrue(summary_file.exists())

    def test_benchmark_difficulty(self) -> None:
        df = benchmark_difficulty(get_difficulty_by_level(3), runs=5, base_seed=100)
        self.assertEqual(len(df), 5)
        self.assertEqual(df['seed'].tolist(), [100, 101, 102, 103, 104])


if __name__ == "__main__":
    unittest.main()

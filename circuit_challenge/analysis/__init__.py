"""
Analysis and benchmarking tools for Circuit Challenge generation.
"""

from .benchmark import (
    GenerationBenchmark, GenerationBenchmarkConfig, GenerationBenchmarkResult,
    GenerationBenchmarkAnalyzer, run_single_generation, benchmark_difficulty
)

__all__ = [
    'GenerationBenchmark', 'GenerationBenchmarkConfig', 'GenerationBenchmarkResult',
    'GenerationBenchmarkAnalyzer', 'run_single_generation', 'benchmark_difficulty'
]

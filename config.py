from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
PUZZLES_DIR = DATA_DIR / "puzzles"
DIFFICULTY_CONFIGS_DIR = DATA_DIR / "difficulties"

# Results directories
RESULTS_DIR = PROJECT_ROOT / "results"
RESULTS_BENCHMARKS_DIR = RESULTS_DIR / "benchmarks"
RESULTS_LOGS_DIR = RESULTS_DIR / "logs"

# Create directories if they don't exist
for dir_path in [PUZZLES_DIR, DIFFICULTY_CONFIGS_DIR,
                 RESULTS_BENCHMARKS_DIR, RESULTS_LOGS_DIR]:
    dir_path.mkdir(parents=True, exist_ok=True)

# Generation parameters
MAX_GENERATION_ATTEMPTS = 20
PATH_MAX_ATTEMPTS = 100
GENERATION_TIME_LIMIT = None  # seconds, None for attempt cap only

# Benchmark parameters
BENCHMARK_RUNS_PER_LEVEL = 100
BENCHMARK_SLOW_THRESHOLD = 0.2  # seconds

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

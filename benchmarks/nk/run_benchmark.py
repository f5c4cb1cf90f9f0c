"""Benchmark runner comparing selection strategies on NK landscapes.

This script evolves bit-string populations on NK landscapes of increasing
ruggedness with each evoselect selection strategy, using identical seeds and
parameters so the strategies can be compared directly.

Usage:
    python benchmarks/nk/run_benchmark.py
"""

import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np

from benchmarks.nk.problems import K_VALUES, N_BITS, NKLandscape, bit_flip_mutation, bit_segment, random_genome
from evoselect import RandomEngine, World, evolve

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# Experiment parameters
POP_SIZE = 200
N_GENERATIONS = 100
MUTATION_RATE = 1.0 / N_BITS
TOURNAMENT_SIZE = 7
N_SEGMENTS = 8
N_RUNS = 5
SEEDS = list(range(1, N_RUNS + 1))

SEGMENT_FUNS = [bit_segment(i * N_BITS // N_SEGMENTS, (i + 1) * N_BITS // N_SEGMENTS) for i in range(N_SEGMENTS)]

STRATEGIES: dict[str, dict] = {
    "elite": {"e_count": POP_SIZE // 10, "copy_count": 10},
    "tournament": {"t_size": TOURNAMENT_SIZE, "tourny_count": POP_SIZE},
    "roulette": {"count": POP_SIZE},
    "lexicase": {"fit_funs": SEGMENT_FUNS, "repro_count": POP_SIZE},
    "eco": {"extra_funs": SEGMENT_FUNS, "pool_sizes": 0.5, "t_size": TOURNAMENT_SIZE, "tourny_count": POP_SIZE},
}


def run_strategy(strategy: str, k: int, seed: int) -> tuple[float, float]:
    """Evolve one population with one strategy.

    Args:
        strategy: Registered selection strategy name.
        k: NK epistasis parameter.
        seed: Random seed for reproducibility.

    Returns:
        Tuple of (final best fitness, elapsed_time_seconds).
    """
    random = RandomEngine(seed)
    landscape = NKLandscape(N_BITS, k, random)
    world = World(random, fit_fun=landscape, synchronous=True, mutate=bit_flip_mutation(MUTATION_RATE))
    for _ in range(POP_SIZE):
        world.inject(random_genome(N_BITS, random))

    start_time = time.perf_counter()
    result = evolve(world, random, strategy, n_generations=N_GENERATIONS, **STRATEGIES[strategy])
    elapsed = time.perf_counter() - start_time

    return result.final_best / N_BITS, elapsed


def run_benchmark() -> dict:
    """Run the full benchmark suite.

    Returns:
        Dictionary containing metadata and results.
    """
    metadata = {
        "timestamp": datetime.now(UTC).isoformat(),
        "parameters": {
            "pop_size": POP_SIZE,
            "n_generations": N_GENERATIONS,
            "n_bits": N_BITS,
            "k_values": list(K_VALUES),
            "mutation_rate": MUTATION_RATE,
            "tournament_size": TOURNAMENT_SIZE,
            "n_runs": N_RUNS,
            "seeds": SEEDS,
        },
    }

    results = []
    total_runs = len(K_VALUES) * len(STRATEGIES) * N_RUNS
    current_run = 0

    for k in K_VALUES:
        for strategy in STRATEGIES:
            for seed in SEEDS:
                current_run += 1
                logger.info(f"Running [{current_run}/{total_runs}]: {strategy} on NK(k={k}) (seed={seed})")

                fitness, elapsed = run_strategy(strategy, k, seed)

                results.append(
                    {
                        "strategy": strategy,
                        "k": k,
                        "seed": seed,
                        "best_fitness": fitness,
                        "time_seconds": elapsed,
                    }
                )

                logger.info(f"  Fitness: {fitness:.4f}, Time: {elapsed:.2f}s")

    return {"metadata": metadata, "results": results}


def print_summary(results: dict) -> None:
    """Print a summary table of the benchmark results."""
    from collections import defaultdict

    data = defaultdict(lambda: defaultdict(list))
    for r in results["results"]:
        data[r["k"]][r["strategy"]].append(r["best_fitness"])

    print("\n" + "=" * 80)
    print("BENCHMARK SUMMARY (normalized best fitness)")
    print("=" * 80)
    print(f"\nParameters: pop_size={POP_SIZE}, generations={N_GENERATIONS}, runs={N_RUNS}\n")

    header = f"{'K':<6}" + "".join(f"{name:>15}" for name in STRATEGIES)
    print(header)
    print("-" * len(header))
    for k in sorted(data):
        row = f"{k:<6}"
        for name in STRATEGIES:
            values = data[k][name]
            row += f"{np.mean(values):>8.4f}+/-{np.std(values):.3f}" if values else f"{'N/A':>15}"
        print(row)
    print()


def main() -> None:
    """Main entry point for the benchmark."""
    logger.info("Starting NK selection benchmark")
    logger.info(f"Parameters: pop_size={POP_SIZE}, generations={N_GENERATIONS}, runs={N_RUNS}")

    results = run_benchmark()

    output_path = Path(__file__).parent / "results" / "benchmark_results.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)
    logger.info(f"Results saved to {output_path}")

    print_summary(results)


if __name__ == "__main__":
    main()

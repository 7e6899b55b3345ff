"""Benchmark datasets and runner."""

from .benchmark import MODES, BenchmarkRunner, run_benchmark
from .dataset import ORDERING_STRATEGIES, generate_requests, get_ordering

__all__ = [
    "BenchmarkRunner",
    "run_benchmark",
    "MODES",
    "generate_requests",
    "get_ordering",
    "ORDERING_STRATEGIES",
]

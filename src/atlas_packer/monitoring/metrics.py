"""Metrics tracking and export for packing benchmarks.

Provides dataclasses for tracking per-run and aggregate metrics and
utilities for exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


RUN_FIELDS = [
    "run_id", "dataset_id", "ordering", "heuristic", "mode",
    "requested", "placed", "occupancy", "free_rects", "runtime_seconds",
    "recorded_at",
]


@dataclass
class RunMetrics:
    """Metrics for packing one dataset with one heuristic in one mode.

    Attributes:
        run_id: Unique identifier for the run.
        dataset_id: Dataset identifier the requests came from.
        ordering: Request ordering applied before packing.
        heuristic: Heuristic value used (e.g. "best_area_fit").
        mode: "single" for one insert() per request, "batch" for insert_batch().
        requested: Number of requests in the dataset.
        placed: Number of requests that were placed.
        occupancy: Fraction of bin area used (0-1).
        free_rects: Size of the free-rectangle set at the end of the run.
        runtime_seconds: Wall time spent packing.
        recorded_at: Timestamp when the run finished.
    """

    run_id: str
    dataset_id: str
    ordering: str
    heuristic: str
    mode: str
    requested: int
    placed: int
    occupancy: float
    free_rects: int
    runtime_seconds: float
    recorded_at: datetime = field(default_factory=_utcnow)

    @property
    def placement_rate(self) -> float:
        return self.placed / self.requested if self.requested else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamp.

        Example:
            >>> rm = RunMetrics("r1", "d0", "as_given", "bottom_left", "batch", 10, 8, 0.7, 5, 0.01)
            >>> rm.to_dict()["placed"]
            8
        """
        d = asdict(self)
        d["recorded_at"] = self.recorded_at.isoformat()
        return d


@dataclass
class BenchmarkMetrics:
    """Aggregate metrics for an entire benchmark run.

    Attributes:
        benchmark_id: Unique identifier for the benchmark.
        bin_width: Bin width used for every run.
        bin_height: Bin height used for every run.
        total_runs: Number of runs recorded.
        total_requested: Requests over all runs.
        total_placed: Placements over all runs.
        avg_occupancy: Mean occupancy across runs.
        median_occupancy: Median occupancy across runs.
        min_occupancy: Lowest occupancy across runs.
        max_occupancy: Highest occupancy across runs.
        runtime_seconds: Total runtime in seconds.
        errors_count: Number of layout validation errors.
        started_at: Benchmark start timestamp.
        completed_at: Completion timestamp (None while running).
        runs: Per-run metrics.
    """

    benchmark_id: str
    bin_width: int
    bin_height: int
    total_runs: int = 0
    total_requested: int = 0
    total_placed: int = 0
    avg_occupancy: float = 0.0
    median_occupancy: float = 0.0
    min_occupancy: float = 0.0
    max_occupancy: float = 0.0
    runtime_seconds: float = 0.0
    errors_count: int = 0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    runs: list[RunMetrics] = field(default_factory=list)

    def add_run(self, run: RunMetrics) -> None:
        """Add a run's metrics and refresh the aggregates.

        Example:
            >>> bm = BenchmarkMetrics("bench_001", 256, 256)
            >>> bm.add_run(RunMetrics("r1", "d0", "as_given", "bottom_left", "batch", 10, 8, 0.7, 5, 0.01))
            >>> bm.total_placed
            8
        """
        self.runs.append(run)
        self.total_runs += 1
        self.total_requested += run.requested
        self.total_placed += run.placed
        self._recalculate_stats()

    def record_error(self) -> None:
        self.errors_count += 1

    def mark_complete(self) -> None:
        """Mark benchmark as complete and calculate final runtime."""
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def occupancy_by_heuristic(self) -> dict[str, float]:
        """Mean occupancy per ``"<heuristic>/<mode>"`` key."""
        grouped: dict[str, list[float]] = {}
        for run in self.runs:
            grouped.setdefault(f"{run.heuristic}/{run.mode}", []).append(run.occupancy)
        return {key: float(np.mean(values)) for key, values in grouped.items()}

    def best_heuristic(self) -> str | None:
        """Key of occupancy_by_heuristic() with the highest mean, or None."""
        by_heuristic = self.occupancy_by_heuristic()
        if not by_heuristic:
            return None
        return max(by_heuristic, key=by_heuristic.__getitem__)

    def _recalculate_stats(self) -> None:
        if not self.runs:
            return

        occupancies = np.array([r.occupancy for r in self.runs], dtype=float)
        self.avg_occupancy = float(occupancies.mean())
        self.median_occupancy = float(np.median(occupancies))
        self.min_occupancy = float(occupancies.min())
        self.max_occupancy = float(occupancies.max())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["runs"] = [r.to_dict() for r in self.runs]
        d["occupancy_by_heuristic"] = self.occupancy_by_heuristic()
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary without per-run details."""
        d = self.to_dict()
        del d["runs"]
        return d


def export_to_json(metrics: BenchmarkMetrics, output_path: Path | str, include_runs: bool = True) -> None:
    """Export benchmark metrics to a JSON file.

    Args:
        metrics: BenchmarkMetrics instance to export.
        output_path: Path to output JSON file.
        include_runs: If True, include per-run metrics. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_runs else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: BenchmarkMetrics, output_path: Path | str) -> None:
    """Export per-run metrics to a CSV file (header only when there are no runs)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RUN_FIELDS)
        writer.writeheader()
        for run in metrics.runs:
            writer.writerow(run.to_dict())


def print_summary(metrics: BenchmarkMetrics) -> str:
    """Generate human-readable summary of benchmark metrics.

    Returns:
        Formatted multi-line summary string.
    """
    lines = [
        "=" * 60,
        f"Benchmark: {metrics.benchmark_id}",
        f"Bin: {metrics.bin_width} x {metrics.bin_height}",
        "=" * 60,
        f"Runs: {metrics.total_runs}",
        f"Requested: {metrics.total_requested}",
        f"Placed: {metrics.total_placed}",
        "",
        "Occupancy Statistics:",
        f"  Average: {metrics.avg_occupancy * 100:.2f}%",
        f"  Median:  {metrics.median_occupancy * 100:.2f}%",
        f"  Min:     {metrics.min_occupancy * 100:.2f}%",
        f"  Max:     {metrics.max_occupancy * 100:.2f}%",
        "",
        "By heuristic:",
    ]
    for key, occupancy in sorted(metrics.occupancy_by_heuristic().items()):
        lines.append(f"  {key:<32} {occupancy * 100:6.2f}%")
    lines += [
        "",
        f"Runtime: {metrics.runtime_seconds:.1f} seconds",
        f"Errors: {metrics.errors_count}",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)

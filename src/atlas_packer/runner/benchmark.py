"""Benchmark runner comparing heuristics and insertion modes."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from atlas_packer.algorithms.maxrects import MaxRectsPacker
from atlas_packer.algorithms.validator import validate_packer
from atlas_packer.core.config import BenchmarkConfig, load_benchmark_config
from atlas_packer.core.errors import LayoutError
from atlas_packer.core.models import Heuristic
from atlas_packer.monitoring.metrics import (
    BenchmarkMetrics,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from atlas_packer.monitoring.telegram_notifier import (
    format_benchmark_start,
    format_dataset_milestone,
    format_error,
    format_final_summary,
    send_telegram,
)
from atlas_packer.runner.dataset import Request, generate_requests, get_ordering

logger = logging.getLogger(__name__)

MODES = ("single", "batch")


class BenchmarkRunner:
    """
    Packs generated datasets with every configured heuristic and mode.

    Each dataset is packed once per (ordering, heuristic, mode) into a fresh
    bin.  Every resulting layout goes through the validator; a violation is
    counted as an error and reported, the run is still recorded.
    """

    def __init__(self, config: BenchmarkConfig, save_results: bool = True) -> None:
        """
        Initialize benchmark runner.

        Args:
            config: Benchmark parameters.
            save_results: Write interim and final JSON/CSV under results_dir.
        """
        self.config = config
        self.save_results = save_results
        self.results_dir = Path(config.results_dir)
        if save_results:
            self.results_dir.mkdir(parents=True, exist_ok=True)

    @property
    def total_runs(self) -> int:
        cfg = self.config
        return cfg.num_datasets * len(cfg.orderings) * len(cfg.heuristics) * len(MODES)

    async def run(self) -> BenchmarkMetrics:
        """
        Run the full benchmark.

        Flow:
            1. Check orderings, create metrics, send start notification
            2. For each dataset:
                a. Generate requests
                b. For each ordering x heuristic x mode: pack, validate, record
                c. Save interim results, send progress update
            3. Mark complete, save final results, send summary
        """
        cfg = self.config
        orderings = {name: get_ordering(name) for name in cfg.orderings}

        benchmark_id = f"bench_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        metrics = BenchmarkMetrics(
            benchmark_id=benchmark_id,
            bin_width=cfg.bin.max_width,
            bin_height=cfg.bin.max_height,
        )

        await self._notify(format_benchmark_start(
            total_runs=self.total_runs,
            requests_per_dataset=cfg.requests_per_dataset,
            heuristics=[h.value for h in cfg.heuristics],
            bin_dims=(cfg.bin.max_width, cfg.bin.max_height),
        ))

        for dataset_idx in range(cfg.num_datasets):
            seed = None if cfg.seed is None else cfg.seed + dataset_idx
            requests = generate_requests(
                count=cfg.requests_per_dataset,
                min_side=cfg.min_side,
                max_side=cfg.max_side,
                seed=seed,
            )

            for ordering_name, ordering_fn in orderings.items():
                dataset_id = f"dataset_{dataset_idx:03d}_{ordering_name}"
                ordered = ordering_fn(requests)

                for heuristic in cfg.heuristics:
                    for mode in MODES:
                        run = await self._pack_run(
                            metrics, ordered, heuristic, mode, dataset_id, ordering_name,
                        )
                        metrics.add_run(run)

            if self.save_results:
                self._save_results(metrics, suffix=f"_interim_{dataset_idx + 1}")

            if dataset_idx % 2 == 0:
                await self._notify(format_dataset_milestone(
                    datasets_completed=dataset_idx + 1,
                    total_datasets=cfg.num_datasets,
                    avg_occupancy=metrics.avg_occupancy,
                ))

        metrics.mark_complete()

        if self.save_results:
            self._save_results(metrics, suffix="_final")

        await self._notify(format_final_summary(
            total_runs=metrics.total_runs,
            total_placed=metrics.total_placed,
            avg_occupancy=metrics.avg_occupancy,
            best_heuristic=metrics.best_heuristic(),
            runtime_seconds=metrics.runtime_seconds,
            errors=metrics.errors_count,
        ))

        logger.info("\n%s", print_summary(metrics))
        return metrics

    def pack(
        self,
        requests: list[Request],
        heuristic: Heuristic,
        mode: str,
    ) -> MaxRectsPacker:
        """Pack *requests* into a fresh bin and return the packer."""
        packer = MaxRectsPacker.from_config(self.config.bin)
        if mode == "batch":
            packer.insert_batch(requests, heuristic)
        elif mode == "single":
            for width, height in requests:
                packer.insert(width, height, heuristic)
        else:
            raise ValueError(f"Unknown mode: {mode}. Available: {list(MODES)}")
        return packer

    async def _pack_run(
        self,
        metrics: BenchmarkMetrics,
        requests: list[Request],
        heuristic: Heuristic,
        mode: str,
        dataset_id: str,
        ordering: str,
    ) -> RunMetrics:
        started = time.perf_counter()
        packer = self.pack(requests, heuristic, mode)
        elapsed = time.perf_counter() - started

        run_id = f"{dataset_id}_{heuristic.value}_{mode}"
        try:
            validate_packer(packer)
        except LayoutError as exc:
            metrics.record_error()
            logger.error("Layout check failed for %s: %s", run_id, exc)
            await self._notify(format_error(type(exc).__name__, str(exc), {"run": run_id}))

        return RunMetrics(
            run_id=run_id,
            dataset_id=dataset_id,
            ordering=ordering,
            heuristic=heuristic.value,
            mode=mode,
            requested=len(requests),
            placed=len(packer.used_rects),
            occupancy=packer.occupancy(),
            free_rects=len(packer.free_rects),
            runtime_seconds=elapsed,
        )

    async def _notify(self, message: str) -> None:
        if self.config.send_notifications:
            await send_telegram(message)

    def _save_results(self, metrics: BenchmarkMetrics, suffix: str = "") -> None:
        """
        Save metrics to JSON and CSV files.

        Args:
            metrics: BenchmarkMetrics to save
            suffix: Optional suffix for filename (e.g., "_interim_5")
        """
        base_filename = f"{metrics.benchmark_id}{suffix}"

        # Summary only for interim files, full for final
        json_path = self.results_dir / f"{base_filename}.json"
        export_to_json(metrics, json_path, include_runs=suffix.endswith("_final"))

        csv_path = self.results_dir / f"{base_filename}_runs.csv"
        export_to_csv(metrics, csv_path)

        logger.debug("Saved results to %s and %s", json_path, csv_path)


def run_benchmark(
    config: BenchmarkConfig | Path | str,
    save_results: bool = True,
) -> BenchmarkMetrics:
    """
    Run a benchmark to completion.

    Args:
        config: BenchmarkConfig or path to a YAML file holding one.
        save_results: Write result files under ``config.results_dir``.
    """
    if not isinstance(config, BenchmarkConfig):
        config = load_benchmark_config(config)
    runner = BenchmarkRunner(config, save_results=save_results)
    return asyncio.run(runner.run())

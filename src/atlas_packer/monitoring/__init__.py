"""Monitoring module for maxrects-atlas.

Provides benchmark metrics tracking and Telegram progress notifications.
"""

from .metrics import (
    BenchmarkMetrics,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .telegram_notifier import (
    format_benchmark_start,
    format_dataset_milestone,
    format_error,
    format_final_summary,
    send_telegram,
)

__all__ = [
    # Metrics
    "BenchmarkMetrics",
    "RunMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_benchmark_start",
    "format_dataset_milestone",
    "format_error",
    "format_final_summary",
]

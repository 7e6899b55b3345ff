"""Lightweight Telegram notification for benchmark progress.

Sends plain-text messages to a Telegram channel via the Bot API for:
- Benchmark start
- Dataset completion milestones
- Layout validation errors
- Final results summary

No retry logic: progress updates are non-critical and a failed send only
returns False.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID", "")
TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Send a plain-text message to a Telegram channel.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.
        client: Optional client to reuse; a short-lived one is created otherwise.

    Returns:
        True if message was sent successfully, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    if not token:
        return False

    chat_id = chat_id or DEFAULT_CHAT_ID
    if not chat_id:
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        if client is not None:
            resp = await client.post(url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=10.0) as own_client:
                resp = await own_client.post(url, json=payload)
        data = resp.json()
        if not isinstance(data, dict):
            logger.warning("Telegram returned an unexpected payload: %r", data)
            return False
        return bool(data.get("ok", False))
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Telegram notification failed: %s", exc)
        return False


def format_benchmark_start(
    total_runs: int,
    requests_per_dataset: int,
    heuristics: list[str],
    bin_dims: tuple[int, int],
) -> str:
    """Format benchmark start notification message.

    Example:
        >>> print(format_benchmark_start(20, 100, ["bottom_left"], (512, 512)))
        Benchmark Started
        Heuristics: bottom_left
        Runs: 20 (100 requests each)
        Bin: 512 x 512
    """
    return (
        f"Benchmark Started\n"
        f"Heuristics: {', '.join(heuristics)}\n"
        f"Runs: {total_runs} ({requests_per_dataset} requests each)\n"
        f"Bin: {bin_dims[0]} x {bin_dims[1]}"
    )


def format_dataset_milestone(
    datasets_completed: int,
    total_datasets: int,
    avg_occupancy: float,
) -> str:
    """Format dataset completion milestone notification.

    Example:
        >>> print(format_dataset_milestone(3, 10, 0.785))
        Progress Update
        Completed: 3/10 datasets (30%)
        Avg Occupancy: 78.5%
    """
    progress_pct = (datasets_completed / total_datasets) * 100
    return (
        f"Progress Update\n"
        f"Completed: {datasets_completed}/{total_datasets} datasets ({progress_pct:.0f}%)\n"
        f"Avg Occupancy: {avg_occupancy * 100:.1f}%"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("OverlapError", "Placements overlap", {"run": "d0"}))
        Error: OverlapError
        Placements overlap
        Context: run=d0
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    total_runs: int,
    total_placed: int,
    avg_occupancy: float,
    best_heuristic: str | None,
    runtime_seconds: float,
    errors: int,
) -> str:
    """Format final benchmark results summary."""
    return (
        f"Benchmark Complete\n"
        f"Runs: {total_runs}\n"
        f"Rectangles placed: {total_placed}\n"
        f"Avg Occupancy: {avg_occupancy * 100:.1f}%\n"
        f"Best heuristic: {best_heuristic or 'n/a'}\n"
        f"Runtime: {runtime_seconds:.1f} seconds\n"
        f"Errors: {errors}"
    )

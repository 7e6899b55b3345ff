"""Request generation and ordering for packing benchmarks."""

import random
from typing import Callable

from atlas_packer.core.errors import InvalidArgumentError

Request = tuple[int, int]


def generate_requests(
    count: int = 100,
    min_side: int = 4,
    max_side: int = 128,
    seed: int | None = None,
) -> list[Request]:
    """
    Generate random rectangle requests, sprite-sheet style.

    Args:
        count: Number of requests to generate
        min_side: Smallest width/height (inclusive)
        max_side: Largest width/height (inclusive)
        seed: Random seed for reproducibility (default: None)

    Returns:
        List of (width, height) integer pairs
    """
    if count < 0:
        raise InvalidArgumentError(f"count must be non-negative, got {count}")
    if min_side < 1 or min_side > max_side:
        raise InvalidArgumentError(
            f"Invalid side range [{min_side}, {max_side}]"
        )

    rng = random.Random(seed)
    return [
        (rng.randint(min_side, max_side), rng.randint(min_side, max_side))
        for _ in range(count)
    ]


def as_given_order(requests: list[Request]) -> list[Request]:
    return list(requests)


def random_order(requests: list[Request], seed: int | None = 0) -> list[Request]:
    """
    Return requests in random order.

    Args:
        requests: List of requests
        seed: Shuffle seed, fixed by default so runs are repeatable

    Returns:
        Shuffled copy of requests
    """
    shuffled = list(requests)
    random.Random(seed).shuffle(shuffled)
    return shuffled


def area_sorted_order(requests: list[Request]) -> list[Request]:
    """Largest area first."""
    return sorted(requests, key=lambda r: r[0] * r[1], reverse=True)


def max_side_sorted_order(requests: list[Request]) -> list[Request]:
    """Longest side first, ties broken by the shorter side."""
    return sorted(requests, key=lambda r: (max(r), min(r)), reverse=True)


def perimeter_sorted_order(requests: list[Request]) -> list[Request]:
    return sorted(requests, key=lambda r: r[0] + r[1], reverse=True)


# Map of ordering names to functions
ORDERING_STRATEGIES: dict[str, Callable[[list[Request]], list[Request]]] = {
    "as_given": as_given_order,
    "random": random_order,
    "area_desc": area_sorted_order,
    "max_side_desc": max_side_sorted_order,
    "perimeter_desc": perimeter_sorted_order,
}


def get_ordering(name: str) -> Callable[[list[Request]], list[Request]]:
    """
    Get an ordering function by name.

    Raises:
        InvalidArgumentError: If the ordering name is not recognized
    """
    if name not in ORDERING_STRATEGIES:
        raise InvalidArgumentError(
            f"Unknown ordering: {name}. "
            f"Available: {list(ORDERING_STRATEGIES.keys())}"
        )
    return ORDERING_STRATEGIES[name]

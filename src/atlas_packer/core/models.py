"""Core data models for rectangle bin packing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from atlas_packer.core.errors import InvalidArgumentError


@dataclass(frozen=True)
class Rect:
    """An axis-aligned integer rectangle in bin-local coordinates.

    The origin is the top-left corner of the bin; ``y`` grows downwards.
    Used both for free regions and for committed placements. Instances are
    immutable, so a returned placement is always a snapshot.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def intersects(self, other: Rect) -> bool:
        """Check whether the interiors of two rectangles overlap.

        Rectangles that only share an edge do not intersect.
        """
        return not (
            other.x >= self.right
            or other.right <= self.x
            or other.y >= self.bottom
            or other.bottom <= self.y
        )

    def contains(self, other: Rect) -> bool:
        """Check whether *other* lies fully inside this rectangle (edges inclusive)."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def rotated(self) -> Rect:
        """Same anchor, width and height swapped."""
        return Rect(self.x, self.y, self.height, self.width)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    def __repr__(self) -> str:
        return f"Rect({self.x}, {self.y}, {self.width}x{self.height})"


class Heuristic(str, Enum):
    """Placement rule used to rank candidate positions for one rectangle."""

    BEST_SHORT_SIDE_FIT = "best_short_side_fit"
    BEST_LONG_SIDE_FIT = "best_long_side_fit"
    BEST_AREA_FIT = "best_area_fit"
    BOTTOM_LEFT = "bottom_left"
    CONTACT_POINT = "contact_point"

    @classmethod
    def coerce(cls, value: Heuristic | str) -> Heuristic:
        """
        Resolve a heuristic from a member, its value, its name or a short code.

        Args:
            value: ``Heuristic`` member, ``"best_area_fit"``, ``"BEST_AREA_FIT"``
                   or one of the short codes (``"bssf"``, ``"blsf"``,
                   ``"baf"``, ``"bl"``, ``"cp"``).

        Returns:
            The matching Heuristic.

        Raises:
            InvalidArgumentError: If the value names no known heuristic.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _SHORT_CODES:
                return _SHORT_CODES[key]
            for member in cls:
                if key == member.value:
                    return member
        raise InvalidArgumentError(
            f"Unknown heuristic: {value!r}. "
            f"Available: {[m.value for m in cls]}"
        )


_SHORT_CODES: dict[str, Heuristic] = {
    "bssf": Heuristic.BEST_SHORT_SIDE_FIT,
    "blsf": Heuristic.BEST_LONG_SIDE_FIT,
    "baf": Heuristic.BEST_AREA_FIT,
    "bl": Heuristic.BOTTOM_LEFT,
    "cp": Heuristic.CONTACT_POINT,
}


INF_SCORE = float("inf")


@dataclass(frozen=True)
class PlacementResult:
    """
    A scored candidate placement, produced while evaluating a request.

    Attributes:
        rect:   Candidate position and oriented size. A height of 0 marks
                "no placement found".
        score1: Primary score, lower is better.
        score2: Tie-breaking score, lower is better.
    """

    rect: Rect
    score1: float = INF_SCORE
    score2: float = INF_SCORE

    @property
    def found(self) -> bool:
        return self.rect.height > 0

    @property
    def scores(self) -> tuple[float, float]:
        return (self.score1, self.score2)

    def beats(self, other: PlacementResult) -> bool:
        """Strict lexicographic improvement on (score1, score2)."""
        return self.scores < other.scores


NO_PLACEMENT = PlacementResult(rect=Rect(0, 0, 0, 0))

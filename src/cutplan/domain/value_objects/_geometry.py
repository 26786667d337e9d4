"""Core geometry value objects for sheet layouts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ._errors import InvalidInputError


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle, origin at the sheet's bottom-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.x + self.width

    @property
    def top(self) -> float:
        """Y coordinate of the top edge."""
        return self.y + self.height

    @property
    def area(self) -> float:
        """Area of the rectangle."""
        return self.width * self.height

    def contains(self, other: Rectangle) -> bool:
        """Check whether ``other`` lies entirely within this rectangle."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.top <= self.top
        )

    def intersects(self, other: Rectangle) -> bool:
        """Check whether the interiors of the two rectangles overlap."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.top
            and other.y < self.top
        )

    def inflate(self, amount: float) -> Rectangle:
        """Grow the rectangle by ``amount`` on its right and top edges."""
        return Rectangle(self.x, self.y, self.width + amount, self.height + amount)


class CutOrientation(str, Enum):
    """Direction of a straight cut across the sheet."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class CutLine:
    """A straight edge-to-edge cut line emitted for manual cutting.

    Attributes:
        id: Identifier of the line within its layout.
        orientation: Whether the line runs horizontally or vertically.
        position: Coordinate of the line centre on the perpendicular axis.
        start: Start coordinate along the line's own axis.
        end: End coordinate along the line's own axis.
        order: Suggested cutting order (lower first).
    """

    id: str
    orientation: CutOrientation
    position: float
    start: float
    end: float
    order: int

    @property
    def length(self) -> float:
        """Length of the cut line."""
        return self.end - self.start


@dataclass(frozen=True)
class Remnant:
    """A reusable leftover rectangle not covered by any piece or its kerf."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError("Remnant dimensions must be positive")

    @property
    def area(self) -> float:
        """Area of the remnant."""
        return self.width * self.height

    def describe(self, unit: str = "cm") -> str:
        """Human-readable size, e.g. ``"40.0 x 100.0 cm (4000 cm2)"``."""
        return (
            f"{self.width:.1f} x {self.height:.1f} {unit} "
            f"({self.area:.0f} {unit}2)"
        )

"""Free-rectangle list maintenance shared by the Guillotine and MaxRects packers."""

from __future__ import annotations

from cutplan.domain.value_objects import PackingInvariantError, Rectangle

# Tolerance for fit comparisons after kerf arithmetic on floats
EPSILON = 1e-9


def fits(width: float, height: float, rect: Rectangle) -> bool:
    """Check whether a ``width`` x ``height`` piece fits inside ``rect``."""
    return width <= rect.width + EPSILON and height <= rect.height + EPSILON


def prune_contained(free_rects: list[Rectangle]) -> None:
    """Remove, in place, every free rectangle contained in another one.

    When two rectangles are equal the earlier one is dropped.

    Raises:
        PackingInvariantError: If the list holds a degenerate rectangle.
    """
    i = 0
    while i < len(free_rects):
        rect = free_rects[i]
        if rect.width <= 0 or rect.height <= 0:
            raise PackingInvariantError(f"Degenerate free rectangle: {rect}")

        removed_i = False
        j = i + 1
        while j < len(free_rects):
            other = free_rects[j]
            if other.contains(rect):
                del free_rects[i]
                removed_i = True
                break
            if rect.contains(other):
                del free_rects[j]
            else:
                j += 1

        if not removed_i:
            i += 1

"""
Geometric planning for derived images.

Turns a requested size into concrete output dimensions or crop rectangles:
- Proportional (longest edge) thumbnail sizing
- Bounding-box constrained sizing that never upscales
- Centered square crops

All functions are pure; validation of the resulting dimensions happens when
the plan is applied by ImageHandle.resize.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class GeometryPlan:
    """Target output dimensions."""

    width: int
    height: int

    def __iter__(self) -> Iterator[int]:
        return iter((self.width, self.height))


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle with exclusive right/bottom edges."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def as_box(self) -> Tuple[int, int, int, int]:
        """Return (left, top, right, bottom)."""
        return (self.left, self.top, self.right, self.bottom)

    def fits_within(self, width: int, height: int) -> bool:
        """Check the rectangle is non-empty and inside a width x height image."""
        return (
            0 <= self.left < self.right <= width
            and 0 <= self.top < self.bottom <= height
        )


def _scaled(width: int, height: int, numerator: Number, denominator: Number) -> GeometryPlan:
    # Multiply before dividing so an edge scaled by n / edge comes out as exactly n
    return GeometryPlan(int(width * numerator / denominator), int(height * numerator / denominator))


def plan_proportional(source_width: int, source_height: int, target_size: Number) -> GeometryPlan:
    """
    Scale so the longest edge becomes target_size.

    Args:
        source_width: Source width in pixels
        source_height: Source height in pixels
        target_size: Length of the longest output edge (fractions allowed)

    Returns:
        GeometryPlan with both edges truncated toward zero
    """
    longest = max(source_width, source_height)
    return _scaled(source_width, source_height, target_size, longest)


def plan_bounding_box(
    source_width: int, source_height: int, max_width: Number, max_height: Number
) -> GeometryPlan:
    """
    Largest aspect-preserving size inside max_width x max_height.

    The scale is capped at 1.0 so images smaller than the box are never
    upscaled.

    Args:
        source_width: Source width in pixels
        source_height: Source height in pixels
        max_width: Maximum output width
        max_height: Maximum output height

    Returns:
        GeometryPlan no larger than either the box or the source
    """
    if max_width >= source_width and max_height >= source_height:
        return GeometryPlan(source_width, source_height)

    # Cross-multiplied comparison of max_width / source_width and max_height / source_height
    if max_width * source_height <= max_height * source_width:
        return _scaled(source_width, source_height, max_width, source_width)
    return _scaled(source_width, source_height, max_height, source_height)


def plan_centered_square_crop(source_width: int, source_height: int) -> CropRect:
    """
    Crop the longer edge down to the shorter one, keeping the center.

    Returns:
        Square CropRect of side min(source_width, source_height)
    """
    left, top, right, bottom = 0, 0, source_width, source_height
    half = abs(source_width - source_height) // 2

    if source_width > source_height:
        left, right = half, half + source_height
    elif source_height > source_width:
        top, bottom = half, half + source_width

    return CropRect(left, top, right, bottom)

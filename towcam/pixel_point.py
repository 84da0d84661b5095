"""Pixel coordinate representation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PixelPoint:
    """Pixel coordinates in an image.

    The origin is the top-left pixel; x grows to the right and y grows down.

    Attributes:
        x: Pixel x coordinate (column).
        y: Pixel y coordinate (row).
    """

    x: float
    y: float

    @classmethod
    def from_sequence(cls, values) -> "PixelPoint":
        """Build a point from an ``(x, y)`` pair.

        Raises:
            ValueError: If ``values`` does not hold exactly two numbers.
        """
        if len(values) != 2:
            raise ValueError(f"Expected an (x, y) pair, got {len(values)} values")
        return cls(x=float(values[0]), y=float(values[1]))

    @property
    def to_pixel(self) -> tuple[int, int]:
        """Convert to integer pixel coordinates.

        Returns:
            Tuple of (x, y) rounded to nearest integer.
        """
        return (round(self.x), round(self.y))

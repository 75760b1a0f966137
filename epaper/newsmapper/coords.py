"""
Conversion between pixel rectangles and percentage-of-page rectangles.

Percentages are what gets stored: a rectangle saved while the page was shown
at one zoom level must land on the same article at any other zoom level or
screen size.
"""
from dataclasses import dataclass

PAGE_EXTENT = 100.0
TOLERANCE = 1e-6


@dataclass(frozen=True)
class PixelRect:
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, x0, y0, x1, y1):
        """Build a rect from two opposite corners given in any order."""
        return cls(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))

    @property
    def right(self):
        return self.left + self.width

    @property
    def bottom(self):
        return self.top + self.height

    @property
    def is_empty(self):
        return self.width <= 0 or self.height <= 0

    def contains(self, x, y):
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def to_dict(self):
        return {'left': self.left, 'top': self.top, 'width': self.width, 'height': self.height}


@dataclass(frozen=True)
class PercentRect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data):
        return cls(float(data['x']), float(data['y']), float(data['width']), float(data['height']))

    @property
    def is_empty(self):
        return self.width <= 0 or self.height <= 0

    def fits_page(self):
        return (
            self.x >= -TOLERANCE and self.y >= -TOLERANCE
            and self.x + self.width <= PAGE_EXTENT + TOLERANCE
            and self.y + self.height <= PAGE_EXTENT + TOLERANCE
        )

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}


def _check_container(width, height):
    if width <= 0 or height <= 0:
        raise ValueError(f'Container must have a positive size, got {width}x{height}')


def to_percentage(rect, container_width, container_height):
    _check_container(container_width, container_height)
    return PercentRect(
        x=rect.left / container_width * PAGE_EXTENT,
        y=rect.top / container_height * PAGE_EXTENT,
        width=rect.width / container_width * PAGE_EXTENT,
        height=rect.height / container_height * PAGE_EXTENT,
    )


def to_pixels(rect, container_width, container_height):
    _check_container(container_width, container_height)
    return PixelRect(
        left=rect.x / PAGE_EXTENT * container_width,
        top=rect.y / PAGE_EXTENT * container_height,
        width=rect.width / PAGE_EXTENT * container_width,
        height=rect.height / PAGE_EXTENT * container_height,
    )


def rescale(rect, from_size, to_size):
    """Move a pixel rect from one container size to another, e.g. canvas to raster."""
    return to_pixels(to_percentage(rect, *from_size), *to_size)


def clamp_percent(rect):
    x = min(max(rect.x, 0.0), PAGE_EXTENT)
    y = min(max(rect.y, 0.0), PAGE_EXTENT)
    # a negative origin eats into the extent rather than shifting it
    width = min(rect.width + min(rect.x, 0.0), PAGE_EXTENT - x)
    height = min(rect.height + min(rect.y, 0.0), PAGE_EXTENT - y)
    return PercentRect(x, y, max(width, 0.0), max(height, 0.0))

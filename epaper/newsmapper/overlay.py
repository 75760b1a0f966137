"""
Projection of saved mapped areas onto the page a reader is looking at.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .coords import PercentRect, PixelRect, to_pixels

logger = logging.getLogger(__name__)

BASE_Z_INDEX = 100


@dataclass(frozen=True)
class HotspotBox:
    area: Any
    percent: PercentRect
    z_index: int
    rect: Optional[PixelRect] = None

    def style(self):
        return (
            f'left: {self.percent.x:.4f}%; top: {self.percent.y:.4f}%; '
            f'width: {self.percent.width:.4f}%; height: {self.percent.height:.4f}%; '
            f'z-index: {self.z_index};'
        )


def project(areas, current_page, container_width=None, container_height=None):
    page = int(current_page)
    sized = container_width is not None and container_height is not None
    boxes = []
    for area in areas:
        if int(area.page_number) != page:
            continue
        percent = area.percent_rect
        rect = to_pixels(percent, container_width, container_height) if sized else None
        # later areas stack above earlier ones
        boxes.append(HotspotBox(area=area, percent=percent, z_index=BASE_Z_INDEX + len(boxes), rect=rect))
    logger.debug('Page %s: showing %s areas out of %s', page, len(boxes), len(areas))
    return boxes


def hit_test(boxes, x, y):
    hits = [box for box in boxes if box.rect is not None and box.rect.contains(x, y)]
    if not hits:
        return None
    return max(hits, key=lambda box: box.z_index)


def dispatch_click(boxes, x, y, on_area_click):
    box = hit_test(boxes, x, y)
    if box is None:
        return None
    return on_area_click(box.area)

"""
Cropping an article snippet out of a rendered page.

The rectangle is drawn on the editor canvas, but the crop is taken from a
server-side raster of the same page, which is usually rendered at a higher
pixel density than the canvas. The rectangle is therefore mapped to canvas
pixels first and then scaled by raster/canvas on each axis.
"""
import logging

from django.conf import settings

from .coords import to_pixels
from .utils import decode_data_url, image_to_data_url

logger = logging.getLogger(__name__)

SUSPICIOUS_SNIPPET_BYTES = 100


def crop_box(rect, raster_size, canvas_size):
    """Pixel box (left, top, right, bottom) in raster space, or None if nothing is left to crop."""
    canvas_width, canvas_height = canvas_size
    raster_width, raster_height = raster_size
    if canvas_width <= 0 or canvas_height <= 0 or raster_width <= 0 or raster_height <= 0:
        return None

    on_canvas = to_pixels(rect, canvas_width, canvas_height)
    scale_x = raster_width / canvas_width
    scale_y = raster_height / canvas_height

    left = round(on_canvas.left * scale_x)
    top = round(on_canvas.top * scale_y)
    right = left + round(on_canvas.width * scale_x)
    bottom = top + round(on_canvas.height * scale_y)

    left, top = max(left, 0), max(top, 0)
    right, bottom = min(right, raster_width), min(bottom, raster_height)
    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom


def extract(rect, page_raster, canvas_size):
    if page_raster is None or not canvas_size:
        logger.error('Capture failed: missing page raster or canvas size')
        return None
    box = crop_box(rect, (page_raster.width, page_raster.height), canvas_size)
    if box is None:
        logger.warning('Capture failed: empty crop for %s', rect)
        return None

    snippet = page_raster.image.crop(box)
    quality = getattr(settings, 'SNIPPET_JPEG_QUALITY', 90)
    data_url = image_to_data_url(snippet, quality)
    logger.info('Captured snippet %sx%s (%s bytes)', snippet.width, snippet.height, len(data_url))
    return data_url


def is_suspicious(data_url):
    if not data_url:
        return True
    _, content = decode_data_url(data_url)
    return content is None or len(content) < SUSPICIOUS_SNIPPET_BYTES

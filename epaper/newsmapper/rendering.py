import hashlib
import io
import logging
from dataclasses import dataclass

import fitz  # PyMuPDF
from PIL import Image
from django.conf import settings
from django.core.cache import cache

from .utils import image_to_data_url

logger = logging.getLogger(__name__)

PAGE_CACHE_TIMEOUT = getattr(settings, 'PAGE_CACHE_TIMEOUT', 3600)


class PageOutOfRange(Exception):
    pass


@dataclass
class PageRaster:
    image: Image.Image
    width: int
    height: int


def open_document(newspaper):
    with newspaper.pdf.open('rb') as f:
        file_content = f.read()
    return fitz.open(stream=file_content, filetype='pdf')


def page_count(doc):
    return len(doc)


def _load_page(doc, page_number):
    if page_number < 1 or page_number > len(doc):
        raise PageOutOfRange(f'Page {page_number} is outside 1..{len(doc)}')
    return doc.load_page(page_number - 1)


def page_size(doc, page_number, scale=1.0):
    """Size in device pixels of a page rendered at `scale`, without rasterizing it."""
    rect = _load_page(doc, page_number).rect
    return rect.width * scale, rect.height * scale


def render_page(doc, page_number, scale=1.0):
    page = _load_page(doc, page_number)
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    img = Image.frombytes('RGB', [pix.width, pix.height], pix.samples)
    return PageRaster(image=img, width=pix.width, height=pix.height)


def render_page_png(newspaper, page_number, scale=1.0):
    # Sanitize the cache key
    sanitized_key = hashlib.md5(f'{newspaper.pdf.name}:{page_number}:{scale}'.encode('utf-8')).hexdigest()
    cache_key = f'page_png_{newspaper.pk}_{sanitized_key}'
    content = cache.get(cache_key)
    if content is not None:
        return content

    doc = open_document(newspaper)
    try:
        raster = render_page(doc, page_number, scale)
    finally:
        doc.close()

    img_buffer = io.BytesIO()
    raster.image.save(img_buffer, format='PNG')
    content = img_buffer.getvalue()
    cache.set(cache_key, content, timeout=PAGE_CACHE_TIMEOUT)
    logger.debug('Rendered page %s of %s at scale %s', page_number, newspaper.pdf.name, scale)
    return content


def render_thumbnail(doc, scale=0.5, quality=80):
    """Data URL of the first page, or an empty string when the page cannot be rendered."""
    if len(doc) == 0:
        return ''
    try:
        raster = render_page(doc, 1, scale)
    except RuntimeError as e:
        logger.warning('Thumbnail generation failed: %s', e)
        return ''
    return image_to_data_url(raster.image, quality)

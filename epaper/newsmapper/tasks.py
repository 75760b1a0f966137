
import logging

from celery import shared_task
from django.conf import settings

from .models import Newspaper
from .rendering import open_document, page_count, render_thumbnail

logger = logging.getLogger(__name__)

THUMBNAIL_SCALE = getattr(settings, 'THUMBNAIL_SCALE', 0.5)
THUMBNAIL_JPEG_QUALITY = getattr(settings, 'THUMBNAIL_JPEG_QUALITY', 80)


@shared_task
def prepare_newspaper(newspaper_id):
    """Count the pages and render the gallery cover of a freshly uploaded newspaper."""
    try:
        newspaper = Newspaper.objects.get(pk=newspaper_id)
    except Newspaper.DoesNotExist:
        logger.warning('Newspaper %s vanished before it could be prepared', newspaper_id)
        return False

    try:
        doc = open_document(newspaper)
    except (RuntimeError, OSError) as e:
        logger.error('Could not open PDF for newspaper %s: %s', newspaper_id, e)
        return False
    try:
        newspaper.page_count = page_count(doc)
        newspaper.cover_image_url = render_thumbnail(doc, THUMBNAIL_SCALE, THUMBNAIL_JPEG_QUALITY)
    finally:
        doc.close()

    if newspaper.cover_image_url:
        logger.info('Thumbnail generated for "%s", size: %s KB',
                    newspaper.title, round(len(newspaper.cover_image_url) / 1024))
    else:
        logger.warning('Thumbnail generation failed for "%s", proceeding without cover image', newspaper.title)

    newspaper.save(update_fields=['page_count', 'cover_image_url'])
    return True

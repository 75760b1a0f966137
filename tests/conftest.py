"""Test configuration and shared fixtures."""

import datetime
import logging

import fitz  # type: ignore[import]
import pytest
from django.core.cache import cache
from django.core.files.base import ContentFile

PAGE_WIDTH = 595
PAGE_HEIGHT = 842


def make_pdf_bytes(pages=2):
    """Build a small newspaper-like PDF: each page has a headline and a coloured article block."""
    doc = fitz.open()
    try:
        for number in range(1, pages + 1):
            page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            page.insert_text((50, 40), f'Front page news {number}', fontsize=18)
            page.draw_rect(fitz.Rect(50, 25, 150, 75), color=(0, 0, 0), fill=(0.8, 0.1, 0.1))
            page.draw_rect(fitz.Rect(300, 400, 500, 700), color=(0, 0, 1), fill=(0.2, 0.4, 0.9))
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture(autouse=True)
def configure_test_logging():
    logging.getLogger('newsmapper').setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    cache.clear()
    yield settings.MEDIA_ROOT
    cache.clear()


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes(pages=3)


@pytest.fixture
def newspaper(db, pdf_bytes):
    from newsmapper.models import Newspaper

    paper = Newspaper(title='Morning Edition', date=datetime.date(2024, 3, 1), is_published=True)
    paper.pdf.save('morning.pdf', ContentFile(pdf_bytes), save=False)
    paper.save()
    return paper


@pytest.fixture
def draft(db, pdf_bytes):
    from newsmapper.models import Newspaper

    paper = Newspaper(title='Draft Edition', date=datetime.date(2024, 3, 2))
    paper.pdf.save('draft.pdf', ContentFile(pdf_bytes), save=False)
    paper.save()
    return paper

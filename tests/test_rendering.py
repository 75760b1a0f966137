"""Tests for page rasterization."""

import io

import fitz  # type: ignore[import]
import pytest
from PIL import Image

from conftest import PAGE_HEIGHT, PAGE_WIDTH
from newsmapper.rendering import (
    PageOutOfRange, open_document, page_count, page_size, render_page, render_page_png, render_thumbnail
)
from newsmapper.utils import decode_data_url


@pytest.fixture
def doc(pdf_bytes):
    document = fitz.open(stream=pdf_bytes, filetype='pdf')
    yield document
    document.close()


class TestRenderPage:
    def test_page_count(self, doc):
        assert page_count(doc) == 3

    def test_page_size_follows_scale(self, doc):
        assert page_size(doc, 1, 1.0) == (PAGE_WIDTH, PAGE_HEIGHT)
        assert page_size(doc, 2, 2.0) == (PAGE_WIDTH * 2, PAGE_HEIGHT * 2)

    def test_raster_matches_page_size(self, doc):
        raster = render_page(doc, 1, 2.0)
        assert (raster.width, raster.height) == (PAGE_WIDTH * 2, PAGE_HEIGHT * 2)
        assert raster.image.size == (raster.width, raster.height)

    def test_article_block_is_rendered(self, doc):
        raster = render_page(doc, 1, 1.0)
        r, g, b = raster.image.getpixel((400, 550))
        assert b > r and b > g

    @pytest.mark.parametrize('page_number', [0, 4, -1])
    def test_out_of_range(self, doc, page_number):
        with pytest.raises(PageOutOfRange):
            render_page(doc, page_number)


class TestNewspaperRendering:
    def test_open_document_reads_storage(self, newspaper):
        doc = open_document(newspaper)
        try:
            assert page_count(doc) == 3
        finally:
            doc.close()

    def test_png_is_cached(self, newspaper, monkeypatch):
        first = render_page_png(newspaper, 1, 1.0)
        assert Image.open(io.BytesIO(first)).size == (PAGE_WIDTH, PAGE_HEIGHT)

        def fail(*args, **kwargs):
            raise AssertionError('page should come from the cache')

        monkeypatch.setattr('newsmapper.rendering.open_document', fail)
        assert render_page_png(newspaper, 1, 1.0) == first


class TestThumbnail:
    def test_first_page_at_half_scale(self, doc):
        mime_type, content = decode_data_url(render_thumbnail(doc, 0.5, 80))
        assert mime_type == 'image/jpeg'
        width, height = Image.open(io.BytesIO(content)).size
        assert abs(width - PAGE_WIDTH / 2) <= 1
        assert abs(height - PAGE_HEIGHT / 2) <= 1

    def test_empty_document_gives_empty_string(self):
        empty = fitz.open()
        try:
            assert render_thumbnail(empty) == ''
        finally:
            empty.close()

"""Tests for projecting mapped areas into hotspots."""

import pytest

from newsmapper.models import MappedArea
from newsmapper.overlay import BASE_Z_INDEX, dispatch_click, hit_test, project


def area(page, x, y, width, height, headline=''):
    return MappedArea(page_number=page, x=x, y=y, width=width, height=height, headline=headline)


@pytest.fixture
def areas():
    return [
        area(1, 10, 10, 30, 20, 'Lead story'),
        area(2, 0, 0, 50, 50, 'Sports roundup'),
        area(1, 30, 25, 20, 20, 'Sidebar'),
        area('2', 60, 60, 10, 10, 'Weather'),
    ]


class TestProject:
    def test_filters_by_page(self, areas):
        for page in (1, 2, 3):
            assert all(int(box.area.page_number) == page for box in project(areas, page))
        assert [box.area.headline for box in project(areas, 1)] == ['Lead story', 'Sidebar']

    def test_page_numbers_are_coerced(self, areas):
        assert [box.area.headline for box in project(areas, '2')] == ['Sports roundup', 'Weather']

    def test_z_order_increases_with_position(self, areas):
        boxes = project(areas, 1)
        assert [box.z_index for box in boxes] == [BASE_Z_INDEX, BASE_Z_INDEX + 1]

    def test_percent_only_without_container(self, areas):
        box = project(areas, 1)[0]
        assert box.rect is None
        assert box.style() == 'left: 10.0000%; top: 10.0000%; width: 30.0000%; height: 20.0000%; z-index: 100;'

    def test_pixel_boxes_with_container(self, areas):
        box = project(areas, 1, 1000, 1400)[0]
        assert box.rect.left == pytest.approx(100)
        assert box.rect.top == pytest.approx(140)
        assert box.rect.width == pytest.approx(300)
        assert box.rect.height == pytest.approx(280)


class TestHitTest:
    def test_miss(self, areas):
        assert hit_test(project(areas, 1, 1000, 1000), 900, 900) is None

    def test_overlap_picks_topmost(self, areas):
        boxes = project(areas, 1, 1000, 1000)
        assert hit_test(boxes, 350, 250).area.headline == 'Sidebar'
        assert hit_test(boxes, 150, 150).area.headline == 'Lead story'

    def test_needs_pixel_boxes(self, areas):
        assert hit_test(project(areas, 1), 15, 15) is None

    def test_dispatch_passes_exact_record(self, areas):
        clicked = []
        boxes = project(areas, 2, 800, 600)
        result = dispatch_click(boxes, 100, 100, lambda a: clicked.append(a) or 'opened')
        assert result == 'opened'
        assert clicked == [areas[1]]
        assert clicked[0] is areas[1]

    def test_dispatch_miss_does_not_call_handler(self, areas):
        clicked = []
        assert dispatch_click(project(areas, 2, 800, 600), 799, 5, clicked.append) is None
        assert clicked == []

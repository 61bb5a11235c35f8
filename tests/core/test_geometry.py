"""
Tests for size and crop planning
"""

import pytest

from core.image.geometry import (
    CropRect,
    GeometryPlan,
    plan_bounding_box,
    plan_centered_square_crop,
    plan_proportional,
)

SOURCE_SIZES = [
    (50, 50),
    (100, 50),
    (50, 100),
    (323, 24),
    (24, 323),
    (800, 600),
    (300, 399),
    (49, 7),
    (1, 1),
    (4096, 3),
]


class TestPlanProportional:
    """Test longest-edge thumbnail sizing"""

    def test_landscape(self):
        """100x50 at 30 keeps the 2:1 ratio"""
        assert plan_proportional(100, 50, 30) == GeometryPlan(30, 15)

    def test_portrait(self):
        assert plan_proportional(50, 100, 30) == GeometryPlan(15, 30)

    def test_square_edges_stay_equal(self):
        plan = plan_proportional(50, 50, 37)
        assert plan.width == plan.height == 37

    def test_upscales_when_size_exceeds_source(self):
        assert plan_proportional(100, 50, 200) == GeometryPlan(200, 100)

    def test_fractional_size_truncates_after_scaling(self):
        assert plan_proportional(50, 50, 25.7) == GeometryPlan(25, 25)
        assert plan_proportional(100, 50, 30.9) == GeometryPlan(30, 15)

    @pytest.mark.parametrize("width,height", SOURCE_SIZES)
    @pytest.mark.parametrize("size", [1, 7, 30, 77, 100, 1000])
    def test_longest_edge_is_exactly_size(self, width, height, size):
        plan = plan_proportional(width, height, size)
        assert max(plan.width, plan.height) == size

    @pytest.mark.parametrize("width,height", SOURCE_SIZES)
    def test_aspect_ratio_within_one_truncation(self, width, height):
        plan = plan_proportional(width, height, 77)
        # The short edge is the exact scaled value rounded down
        exact_short = min(width, height) * 77 / max(width, height)
        assert exact_short - 1 < min(plan.width, plan.height) <= exact_short

    def test_tiny_edge_can_plan_to_zero(self):
        """Planning never fails; resize is where zero is rejected"""
        assert plan_proportional(323, 24, 10) == GeometryPlan(10, 0)

    def test_plan_unpacks(self):
        width, height = plan_proportional(100, 50, 30)
        assert (width, height) == (30, 15)


class TestPlanBoundingBox:
    """Test fit-within sizing"""

    def test_width_constrained(self):
        """800x600 inside 100x100 is limited by width"""
        assert plan_bounding_box(800, 600, 100, 100) == GeometryPlan(100, 75)

    def test_height_constrained(self):
        assert plan_bounding_box(600, 800, 100, 100) == GeometryPlan(75, 100)

    def test_shrinking_x(self):
        plan = plan_bounding_box(50, 50, 44, 111)
        assert plan == GeometryPlan(44, 44)

    def test_shrinking_y(self):
        plan = plan_bounding_box(50, 50, 100, 40)
        assert plan == GeometryPlan(40, 40)

    def test_shrinking_both(self):
        plan = plan_bounding_box(50, 50, 33, 44)
        assert plan.width <= 33
        assert plan.height <= 44

    def test_never_upscales(self):
        assert plan_bounding_box(50, 50, 500, 300) == GeometryPlan(50, 50)

    def test_exact_fit_is_unchanged(self):
        assert plan_bounding_box(800, 600, 800, 600) == GeometryPlan(800, 600)

    @pytest.mark.parametrize("width,height", SOURCE_SIZES)
    @pytest.mark.parametrize("max_width,max_height", [(77, 77), (10, 300), (300, 10), (1, 1)])
    def test_postconditions(self, width, height, max_width, max_height):
        plan = plan_bounding_box(width, height, max_width, max_height)
        assert plan.width <= max_width
        assert plan.height <= max_height
        assert plan.width <= width
        assert plan.height <= height

    @pytest.mark.parametrize("width,height", SOURCE_SIZES)
    def test_binding_edge_hits_the_box(self, width, height):
        plan = plan_bounding_box(width, height, 77, 77)
        if max(width, height) > 77:
            assert max(plan.width, plan.height) == 77


class TestPlanCenteredSquareCrop:
    """Test square crop planning"""

    def test_wide_image(self):
        assert plan_centered_square_crop(100, 50) == CropRect(25, 0, 75, 50)

    def test_tall_image(self):
        assert plan_centered_square_crop(50, 100) == CropRect(0, 25, 50, 75)

    def test_square_is_full_image(self):
        assert plan_centered_square_crop(50, 50) == CropRect(0, 0, 50, 50)

    def test_odd_difference_rounds_margin_down(self):
        assert plan_centered_square_crop(101, 50) == CropRect(25, 0, 75, 50)

    @pytest.mark.parametrize("width,height", SOURCE_SIZES)
    def test_always_square_of_short_side(self, width, height):
        rect = plan_centered_square_crop(width, height)
        side = min(width, height)
        assert rect.width == rect.height == side
        assert rect.fits_within(width, height)


class TestCropRect:
    """Test crop rectangle helpers"""

    def test_dimensions(self):
        rect = CropRect(10, 20, 40, 30)
        assert rect.width == 30
        assert rect.height == 10
        assert rect.as_box() == (10, 20, 40, 30)

    def test_fits_within(self):
        assert CropRect(0, 0, 50, 50).fits_within(50, 50)
        assert not CropRect(0, 0, 51, 50).fits_within(50, 50)
        assert not CropRect(-1, 0, 10, 10).fits_within(50, 50)

    def test_empty_rect_does_not_fit(self):
        assert not CropRect(10, 10, 10, 20).fits_within(50, 50)

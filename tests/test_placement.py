import itertools

import pytest

import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.placement


AREA = lep.config.EngravingArea(x=100, y=100, w=200, h=200)
RULES = lep.config.PlacementRules(
	allow_rotate=True,
	keep_inside_engraving_area=True,
	min_scale=0.1,
	max_scale=6.0,
)


#============================================
def make_rect(x: float, y: float, w: float, h: float, rotation_deg: int = 0) -> lep.config.DesignPlacement:
	return lep.config.DesignPlacement(x=x, y=y, w=w, h=h, rotation_deg=rotation_deg)


#============================================
def test_clamp_position_upper_bound() -> None:
	"""
	A rect past the far corner is pulled back to touch it.
	"""
	result = lep.placement.clamp_position(make_rect(250, 260, 120, 120), AREA)
	assert result == make_rect(180, 180, 120, 120)


#============================================
def test_clamp_position_lower_bound() -> None:
	"""
	A rect before the near corner is pushed to the area origin.
	"""
	result = lep.placement.clamp_position(make_rect(50, 80, 120, 100), AREA)
	assert (result.x, result.y) == (100, 100)
	assert (result.w, result.h) == (120, 100)


#============================================
def test_clamp_position_keeps_fitting_rects_inside() -> None:
	"""
	Any rect no larger than the area ends up fully inside it.
	"""
	positions = [-500.0, 0.0, 99.5, 100.0, 180.0, 250.0, 299.0, 1000.0]
	sizes = [1.0, 37.5, 120.0, 199.9, 200.0]
	for x, y, w, h in itertools.product(positions, positions, sizes, sizes):
		result = lep.placement.clamp_position(make_rect(x, y, w, h), AREA)
		assert lep.placement.is_inside_area(result, AREA), (x, y, w, h, result)
		assert (result.w, result.h) == (w, h)


#============================================
def test_clamp_position_never_resizes_oversized_rects() -> None:
	"""
	A rect wider than the area keeps its size and sticks out on that axis.
	"""
	result = lep.placement.clamp_position(make_rect(150, 150, 260, 50), AREA)
	assert result.w == 260
	assert result.x == 40
	assert 100 <= result.y <= 250
	assert not lep.placement.is_inside_area(result, AREA)


#============================================
def test_clamp_position_keeps_rotation() -> None:
	result = lep.placement.clamp_position(make_rect(0, 0, 50, 50, rotation_deg=90), AREA)
	assert result.rotation_deg == 90


#============================================
def test_effective_base_size() -> None:
	base = lep.config.BaseLogoSize(w=600, h=300)
	assert lep.placement.effective_base_size(base, 90) == lep.config.BaseLogoSize(w=300, h=600)
	assert lep.placement.effective_base_size(base, 270) == lep.config.BaseLogoSize(w=300, h=600)
	assert lep.placement.effective_base_size(base, 0) == base
	assert lep.placement.effective_base_size(base, 180) == base


#============================================
def test_initial_placement_sample_template() -> None:
	"""
	A 600x300 logo on the certificate template fills 90% of the area width.
	"""
	area = lep.config.EngravingArea(x=820, y=1220, w=280, h=180)
	base = lep.config.BaseLogoSize(w=600, h=300)
	result = lep.placement.initial_placement(area, base)
	assert result.w == pytest.approx(252, abs=1)
	assert result.h == pytest.approx(126, abs=1)
	assert result.x == pytest.approx(834, abs=1)
	assert result.y == pytest.approx(1247, abs=1)
	assert result.rotation_deg == 0
	assert lep.placement.is_inside_area(result, area)


#============================================
def test_initial_placement_tall_logo_limited_by_height() -> None:
	area = lep.config.EngravingArea(x=0, y=0, w=400, h=100)
	result = lep.placement.initial_placement(area, lep.config.BaseLogoSize(w=100, h=200))
	assert result.h == pytest.approx(90)
	assert result.w == pytest.approx(45)
	assert result.x + result.w / 2.0 == pytest.approx(200)


#============================================
def test_clamp_scale_bounds_width_and_keeps_aspect() -> None:
	"""
	Width is bounded by the area and max scale; height follows the aspect.
	"""
	base = lep.config.BaseLogoSize(w=100, h=50)
	too_wide = lep.placement.clamp_scale(make_rect(120, 130, 900, 10), base, RULES, AREA)
	assert too_wide.w == 200
	assert too_wide.h == 100
	assert (too_wide.x, too_wide.y) == (120, 130)

	too_narrow = lep.placement.clamp_scale(make_rect(120, 130, 1, 1), base, RULES, AREA)
	assert too_narrow.w == 10
	assert too_narrow.h == 10


#============================================
def test_clamp_scale_respects_scale_rules() -> None:
	base = lep.config.BaseLogoSize(w=40, h=40)
	rules = lep.config.PlacementRules(
		allow_rotate=False,
		keep_inside_engraving_area=True,
		min_scale=0.5,
		max_scale=2.0,
	)
	assert lep.placement.clamp_scale(make_rect(0, 0, 500, 500), base, rules, AREA).w == 80
	assert lep.placement.clamp_scale(make_rect(0, 0, 5, 5), base, rules, AREA).w == 20
	assert lep.placement.clamp_scale(make_rect(0, 0, 30, 99), base, rules, AREA).h == 30


#============================================
def test_apply_clamp_scales_before_positioning() -> None:
	"""
	An oversized drag ends inside the area because scale runs first.
	"""
	base = lep.config.BaseLogoSize(w=100, h=50)
	result = lep.placement.apply_clamp(make_rect(250, 250, 400, 200), base, RULES, AREA)
	assert result.w == 200
	assert result.h == 100
	assert lep.placement.is_inside_area(result, AREA)


#============================================
def test_apply_clamp_without_keep_inside_only_scales() -> None:
	rules = lep.config.PlacementRules(
		allow_rotate=False,
		keep_inside_engraving_area=False,
		min_scale=0.1,
		max_scale=6.0,
	)
	base = lep.config.BaseLogoSize(w=100, h=50)
	result = lep.placement.apply_clamp(make_rect(0, 0, 50, 25), base, rules, AREA)
	assert (result.x, result.y) == (0, 0)


#============================================
def test_apply_clamp_uses_rotated_footprint() -> None:
	"""
	A quarter-turned wide logo is clamped as a tall one.
	"""
	base = lep.config.BaseLogoSize(w=100, h=50)
	result = lep.placement.apply_clamp(make_rect(100, 100, 60, 999, rotation_deg=90), base, RULES, AREA)
	assert result.w == 60
	assert result.h == 120


#============================================
def test_is_inside_area_edges() -> None:
	assert lep.placement.is_inside_area(make_rect(100, 100, 200, 200), AREA)
	assert not lep.placement.is_inside_area(make_rect(99.9, 100, 50, 50), AREA)
	assert not lep.placement.is_inside_area(make_rect(100, 100, 200.1, 50), AREA)
	assert not lep.placement.is_inside_area(make_rect(100, 251, 50, 50), AREA)


#============================================
def test_move_and_resize_placement() -> None:
	base = lep.config.BaseLogoSize(w=100, h=50)
	start = make_rect(150, 150, 100, 50)
	moved = lep.placement.move_placement(start, 500, -500, base, RULES, AREA)
	assert (moved.x, moved.y) == (200, 100)

	grown = lep.placement.resize_placement(start, 40, base, RULES, AREA)
	assert grown.w == 140
	assert grown.h == 70
	assert lep.placement.is_inside_area(grown, AREA)


#============================================
def test_rotate_placement_swaps_footprint_around_center() -> None:
	base = lep.config.BaseLogoSize(w=100, h=50)
	start = make_rect(150, 175, 100, 50)
	rotated = lep.placement.rotate_placement(start, 90, base, RULES, AREA)
	assert rotated.rotation_deg == 90
	assert (rotated.w, rotated.h) == (50, 100)
	assert (rotated.x, rotated.y) == (175, 150)


#============================================
def test_rotate_placement_ignored_when_not_allowed() -> None:
	rules = lep.config.PlacementRules(
		allow_rotate=False,
		keep_inside_engraving_area=True,
		min_scale=0.1,
		max_scale=6.0,
	)
	start = make_rect(150, 175, 100, 50)
	result = lep.placement.rotate_placement(start, 90, lep.config.BaseLogoSize(w=100, h=50), rules, AREA)
	assert result == start

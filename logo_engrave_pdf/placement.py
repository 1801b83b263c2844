"""
Logo placement math in template canvas pixels.
"""

# Standard Library
import dataclasses

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.errors


DesignPlacement = lep.config.DesignPlacement
EngravingArea = lep.config.EngravingArea
BaseLogoSize = lep.config.BaseLogoSize
PlacementRules = lep.config.PlacementRules

MIN_LOGO_SIZE = lep.config.MIN_LOGO_SIZE
INITIAL_FILL_RATIO = lep.config.INITIAL_FILL_RATIO


#============================================
def initial_placement(area: EngravingArea, base_size: BaseLogoSize) -> DesignPlacement:
	"""
	Fit the logo to 90% of the engraving area and center it.

	Args:
		area: Engraving area.
		base_size: Processed logo size.

	Returns:
		Centered DesignPlacement without rotation.
	"""
	scale = min(
		INITIAL_FILL_RATIO * area.w / base_size.w,
		INITIAL_FILL_RATIO * area.h / base_size.h,
	)
	width = base_size.w * scale
	height = base_size.h * scale
	return DesignPlacement(
		x=area.x + (area.w - width) / 2.0,
		y=area.y + (area.h - height) / 2.0,
		w=width,
		h=height,
	)


#============================================
def clamp_position(rect: DesignPlacement, area: EngravingArea) -> DesignPlacement:
	"""
	Move a rect so it starts inside the area, without resizing it.

	When the rect is wider or taller than the area, the upper bound on
	that axis falls below the lower bound and the rect stays partly
	outside. Run clamp_scale first to avoid that.

	Args:
		rect: Candidate placement.
		area: Engraving area.

	Returns:
		Repositioned placement with the same size and rotation.
	"""
	max_x = area.x + area.w - rect.w
	max_y = area.y + area.h - rect.h
	return dataclasses.replace(
		rect,
		x=min(max(rect.x, area.x), max_x),
		y=min(max(rect.y, area.y), max_y),
	)


#============================================
def clamp_scale(
	rect: DesignPlacement,
	base_size: BaseLogoSize,
	rules: PlacementRules,
	area: EngravingArea,
	min_size: float = MIN_LOGO_SIZE,
) -> DesignPlacement:
	"""
	Bound the width by the scale rules and derive the height from it.

	Args:
		rect: Candidate placement.
		base_size: Effective processed logo size.
		rules: Template placement rules.
		area: Engraving area.
		min_size: Smallest allowed width and height in pixels.

	Returns:
		Resized placement at the same origin.
	"""
	max_width = min(area.w, base_size.w * rules.max_scale)
	min_width = max(min_size, base_size.w * rules.min_scale)
	width = max(min_width, min(max_width, rect.w))
	ratio = base_size.h / base_size.w
	height = max(min_size, width * ratio)
	return dataclasses.replace(rect, w=width, h=height)


#============================================
def effective_base_size(base_size: BaseLogoSize, rotation_deg: int) -> BaseLogoSize:
	"""
	Swap the base size for quarter-turn rotations.
	"""
	if rotation_deg in (90, 270):
		return BaseLogoSize(w=base_size.h, h=base_size.w)
	return base_size


#============================================
def is_inside_area(rect: DesignPlacement, area: EngravingArea) -> bool:
	"""
	Check that a rect lies fully inside the engraving area.

	Args:
		rect: Placement to check.
		area: Engraving area.

	Returns:
		True when every edge is inside or on the area boundary.
	"""
	return (
		rect.x >= area.x
		and rect.y >= area.y
		and rect.x + rect.w <= area.x + area.w
		and rect.y + rect.h <= area.y + area.h
	)


#============================================
def apply_clamp(
	rect: DesignPlacement,
	base_size: BaseLogoSize | None,
	rules: PlacementRules,
	area: EngravingArea,
) -> DesignPlacement:
	"""
	Apply the scale clamp, then the position clamp.

	Args:
		rect: Candidate placement.
		base_size: Processed logo size before rotation, or None if unknown.
		rules: Template placement rules.
		area: Engraving area.

	Returns:
		Clamped placement.
	"""
	result = rect
	if base_size is not None:
		effective = effective_base_size(base_size, rect.rotation_deg)
		result = clamp_scale(result, effective, rules, area)
	if rules.keep_inside_engraving_area:
		result = clamp_position(result, area)
	return result


#============================================
def move_placement(
	rect: DesignPlacement,
	dx: float,
	dy: float,
	base_size: BaseLogoSize | None,
	rules: PlacementRules,
	area: EngravingArea,
) -> DesignPlacement:
	"""
	Drag a placement by a canvas pixel delta and re-clamp it.
	"""
	moved = dataclasses.replace(rect, x=rect.x + dx, y=rect.y + dy)
	return apply_clamp(moved, base_size, rules, area)


#============================================
def resize_placement(
	rect: DesignPlacement,
	dw: float,
	base_size: BaseLogoSize,
	rules: PlacementRules,
	area: EngravingArea,
) -> DesignPlacement:
	"""
	Widen or narrow a placement with a locked aspect ratio and re-clamp it.

	Args:
		rect: Current placement.
		dw: Width delta in canvas pixels.
		base_size: Processed logo size before rotation.
		rules: Template placement rules.
		area: Engraving area.

	Returns:
		Clamped placement.
	"""
	effective = effective_base_size(base_size, rect.rotation_deg)
	width = rect.w + dw
	height = width * effective.h / effective.w
	resized = dataclasses.replace(rect, w=width, h=height)
	return apply_clamp(resized, base_size, rules, area)


#============================================
def rotate_placement(
	rect: DesignPlacement,
	rotation_deg: int,
	base_size: BaseLogoSize,
	rules: PlacementRules,
	area: EngravingArea,
) -> DesignPlacement:
	"""
	Change the rotation of a placement, keeping its center where possible.

	The footprint swaps for quarter turns. Rotation requests are ignored
	when the template does not allow rotation.

	Args:
		rect: Current placement.
		rotation_deg: New rotation, one of 0, 90, 180, 270.
		base_size: Processed logo size before rotation.
		rules: Template placement rules.
		area: Engraving area.

	Returns:
		Clamped placement.
	"""
	if not rules.allow_rotate:
		return rect
	if rotation_deg not in lep.config.ALLOWED_ROTATIONS:
		raise lep.errors.ValidationError(f"rotation must be one of {lep.config.ALLOWED_ROTATIONS}")
	width = rect.w
	height = rect.h
	if (rotation_deg in (90, 270)) != (rect.rotation_deg in (90, 270)):
		width, height = height, width
	center_x = rect.x + rect.w / 2.0
	center_y = rect.y + rect.h / 2.0
	rotated = DesignPlacement(
		x=center_x - width / 2.0,
		y=center_y - height / 2.0,
		w=width,
		h=height,
		rotation_deg=rotation_deg,
	)
	return apply_clamp(rotated, base_size, rules, area)

"""
Template JSON parsing and validation.
"""

# Standard Library
import json
import math
import pathlib
import re

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.errors


Template = lep.config.Template
ValidationError = lep.errors.ValidationError

TEMPLATE_KEY_PATTERN = re.compile(lep.config.TEMPLATE_KEY_PATTERN)
TEMPLATE_STATUSES = lep.config.TEMPLATE_STATUSES
CANVAS_MIN_PX = lep.config.CANVAS_MIN_PX
CANVAS_MAX_PX = lep.config.CANVAS_MAX_PX


#============================================
def is_finite_number(value: object) -> bool:
	"""
	Check for a real, finite number; booleans do not count.
	"""
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		return False
	return math.isfinite(value)


#============================================
def is_integer(value: object) -> bool:
	if not is_finite_number(value):
		return False
	return float(value).is_integer()


#============================================
def validate_background(background: object, errors: list[str]) -> None:
	if not isinstance(background, dict):
		errors.append("background is missing.")
		return
	file_name = background.get("fileName")
	if not file_name or not isinstance(file_name, str):
		errors.append("background.fileName is required.")
	for field in ("canvasWidthPx", "canvasHeightPx"):
		value = background.get(field)
		if not is_integer(value) or value < CANVAS_MIN_PX or value > CANVAS_MAX_PX:
			errors.append(f"background.{field} must be an integer from {CANVAS_MIN_PX} to {CANVAS_MAX_PX}.")


#============================================
def validate_engraving_area(area: object, background: object, errors: list[str]) -> None:
	"""
	Validate the engraving area rect against the canvas.

	Args:
		area: Raw engravingArea value.
		background: Raw background value.
		errors: Error list to append to.
	"""
	if not isinstance(area, dict):
		errors.append("engravingArea is missing.")
		return
	values = [area.get(key) for key in ("x", "y", "w", "h")]
	if not all(is_integer(value) for value in values):
		errors.append("engravingArea x/y/w/h must be integers.")
	x, y, w, h = values
	if not (is_integer(w) and w >= 1 and is_integer(h) and h >= 1):
		errors.append("engravingArea w/h must be at least 1.")
	if not all(is_finite_number(value) for value in values) or not isinstance(background, dict):
		return
	max_x = background.get("canvasWidthPx")
	max_y = background.get("canvasHeightPx")
	if not is_finite_number(max_x) or not is_finite_number(max_y):
		return
	if x < 0 or y < 0 or x + w > max_x or y + h > max_y:
		errors.append("engravingArea lies outside the canvas.")


#============================================
def validate_placement_rules(rules: object, errors: list[str]) -> None:
	if not isinstance(rules, dict):
		errors.append("placementRules is missing.")
		return
	for field in ("allowRotate", "keepInsideEngravingArea"):
		if not isinstance(rules.get(field), bool):
			errors.append(f"placementRules.{field} must be a boolean.")
	for field in ("minScale", "maxScale"):
		if not is_finite_number(rules.get(field)):
			errors.append(f"placementRules.{field} must be a number.")


#============================================
def validate_pdf_settings(pdf_settings: object, errors: list[str]) -> None:
	if not isinstance(pdf_settings, dict):
		errors.append("pdf is missing.")
		return
	if pdf_settings.get("pageSize") != "A4":
		errors.append("pdf.pageSize only supports A4.")
	if pdf_settings.get("orientation") not in ("portrait", "landscape"):
		errors.append("pdf.orientation must be portrait or landscape.")
	dpi = pdf_settings.get("dpi")
	if not is_finite_number(dpi) or dpi <= 0:
		errors.append("pdf.dpi must be a positive number.")


#============================================
def validate_template(raw: object) -> list[str]:
	"""
	Validate a raw template dict in its JSON wire shape.

	Args:
		raw: Parsed JSON value.

	Returns:
		List of error messages; empty when the template is valid.
	"""
	if not isinstance(raw, dict):
		return ["template.json is not an object."]
	errors: list[str] = []
	template_key = raw.get("templateKey")
	if not isinstance(template_key, str) or not TEMPLATE_KEY_PATTERN.match(template_key):
		errors.append("templateKey must be 3-64 characters of letters, digits, _ or -.")
	if not raw.get("name") or not isinstance(raw.get("name"), str):
		errors.append("name is required.")
	if raw.get("status") not in TEMPLATE_STATUSES:
		errors.append("status must be one of " + "/".join(TEMPLATE_STATUSES) + ".")
	if not raw.get("updatedAt") or not isinstance(raw.get("updatedAt"), str):
		errors.append("updatedAt is required.")
	validate_background(raw.get("background"), errors)
	validate_engraving_area(raw.get("engravingArea"), raw.get("background"), errors)
	validate_placement_rules(raw.get("placementRules"), errors)
	validate_pdf_settings(raw.get("pdf"), errors)
	return errors


#============================================
def parse_template(raw: object) -> Template:
	"""
	Validate and convert a raw template dict into a Template record.

	Args:
		raw: Parsed JSON value.

	Returns:
		Template instance.
	"""
	errors = validate_template(raw)
	if errors:
		raise ValidationError("invalid template: " + " ".join(errors))
	background = raw["background"]
	area = raw["engravingArea"]
	rules = raw["placementRules"]
	pdf_settings = raw["pdf"]
	logo_settings = raw.get("logoSettings") or {}
	return Template(
		template_key=raw["templateKey"],
		name=raw["name"],
		status=raw["status"],
		updated_at=raw["updatedAt"],
		background=lep.config.TemplateBackground(
			file_name=background["fileName"],
			canvas_width_px=int(background["canvasWidthPx"]),
			canvas_height_px=int(background["canvasHeightPx"]),
		),
		engraving_area=lep.config.EngravingArea(
			x=area["x"],
			y=area["y"],
			w=area["w"],
			h=area["h"],
			label=area.get("label", ""),
		),
		placement_rules=lep.config.PlacementRules(
			allow_rotate=rules["allowRotate"],
			keep_inside_engraving_area=rules["keepInsideEngravingArea"],
			min_scale=float(rules["minScale"]),
			max_scale=float(rules["maxScale"]),
		),
		pdf=lep.config.TemplatePdfSettings(
			page_size=pdf_settings["pageSize"],
			orientation=pdf_settings["orientation"],
			dpi=float(pdf_settings["dpi"]),
		),
		default_monochrome=bool(logo_settings.get("monochrome", False)),
	)


#============================================
def load_template(path: pathlib.Path) -> Template:
	"""
	Load a template JSON file.

	Args:
		path: Path to template.json.

	Returns:
		Template instance.
	"""
	text = path.read_text(encoding="utf-8")
	try:
		raw = json.loads(text)
	except json.JSONDecodeError as error:
		raise ValidationError(f"{path}: not valid JSON: {error}") from error
	return parse_template(raw)

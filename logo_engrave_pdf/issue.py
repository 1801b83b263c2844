"""
Design issuance: processed logo, design ID, both PDFs, and the Design record.
"""

# Standard Library
import dataclasses
import datetime
import json
import math
import pathlib
import random
import typing

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.design_id
import logo_engrave_pdf.errors
import logo_engrave_pdf.frame
import logo_engrave_pdf.logo
import logo_engrave_pdf.placement
import logo_engrave_pdf.raster
import logo_engrave_pdf.render
import logo_engrave_pdf.template_lib


Template = lep.config.Template
Design = lep.config.Design
DesignLogo = lep.config.DesignLogo
DesignPlacement = lep.config.DesignPlacement
LogoSettings = lep.config.LogoSettings
CropRect = lep.config.CropRect
BaseLogoSize = lep.config.BaseLogoSize
ValidationError = lep.errors.ValidationError


@dataclasses.dataclass(frozen=True)
class IssuedDesign:
	design: Design
	processed_logo: bytes
	confirm_pdf: bytes
	engrave_pdf: bytes


class DesignStore(typing.Protocol):
	"""
	Storage collaborator boundary.
	"""

	def get_template(self, template_key: str) -> Template:
		...

	def list_existing_design_ids(self) -> set[str]:
		...

	def get_asset_bytes(self, asset_id: str) -> bytes | None:
		...


class DirectoryDesignStore:
	"""
	Filesystem store: templates/<key>.json, assets/<name>, designs/<id>.json.
	"""

	def __init__(self, root: pathlib.Path) -> None:
		self.root = root

	#============================================
	def get_template(self, template_key: str) -> Template:
		path = self.root / "templates" / f"{template_key}.json"
		if not path.is_file():
			raise FileNotFoundError(f"template not found: {template_key} ({path})")
		return lep.template_lib.load_template(path)

	#============================================
	def list_existing_design_ids(self) -> set[str]:
		designs_dir = self.root / "designs"
		if not designs_dir.is_dir():
			return set()
		return {path.stem for path in designs_dir.glob("*.json")}

	#============================================
	def get_asset_bytes(self, asset_id: str) -> bytes | None:
		path = self.root / "assets" / asset_id
		if not path.is_file():
			return None
		return path.read_bytes()

	#============================================
	def save_issued(self, issued: IssuedDesign) -> pathlib.Path:
		"""
		Write the Design record and its PDFs.

		Args:
			issued: IssuedDesign to store.

		Returns:
			Path to the design JSON record.
		"""
		design_id = issued.design.design_id
		designs_dir = self.root / "designs"
		assets_dir = self.root / "assets"
		designs_dir.mkdir(parents=True, exist_ok=True)
		assets_dir.mkdir(parents=True, exist_ok=True)
		(assets_dir / f"{design_id}-logo.png").write_bytes(issued.processed_logo)
		(assets_dir / f"{design_id}-confirm.pdf").write_bytes(issued.confirm_pdf)
		(assets_dir / f"{design_id}-engrave.pdf").write_bytes(issued.engrave_pdf)
		record_path = designs_dir / f"{design_id}.json"
		text = json.dumps(design_to_dict(issued.design), indent=2, sort_keys=True)
		record_path.write_text(text, encoding="utf-8")
		return record_path


#============================================
def read_number(raw: dict, key: str, context: str) -> float:
	value = raw.get(key)
	if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
		raise ValidationError(f"{context}.{key} must be a finite number")
	return float(value)


#============================================
def crop_from_dict(raw: dict) -> CropRect:
	"""
	Parse a normalized crop from its wire shape.

	Args:
		raw: Dict with x, y, w, h in [0, 1].

	Returns:
		Validated CropRect.
	"""
	crop = CropRect(
		x=read_number(raw, "x", "crop"),
		y=read_number(raw, "y", "crop"),
		w=read_number(raw, "w", "crop"),
		h=read_number(raw, "h", "crop"),
	)
	lep.logo.validate_crop(crop)
	return crop


#============================================
def placement_from_dict(raw: dict) -> DesignPlacement:
	"""
	Parse a placement from its wire shape.

	Args:
		raw: Dict with x, y, w, h and optional rotationDeg.

	Returns:
		DesignPlacement instance.
	"""
	width = read_number(raw, "w", "placement")
	height = read_number(raw, "h", "placement")
	if width <= 0 or height <= 0:
		raise ValidationError("placement size must be positive")
	rotation = raw.get("rotationDeg", 0)
	if rotation not in lep.config.ALLOWED_ROTATIONS:
		raise ValidationError(f"placement.rotationDeg must be one of {lep.config.ALLOWED_ROTATIONS}")
	return DesignPlacement(
		x=read_number(raw, "x", "placement"),
		y=read_number(raw, "y", "placement"),
		w=width,
		h=height,
		rotation_deg=int(rotation),
	)


#============================================
def placement_to_dict(placement: DesignPlacement) -> dict:
	result = {"x": placement.x, "y": placement.y, "w": placement.w, "h": placement.h}
	if placement.rotation_deg:
		result["rotationDeg"] = placement.rotation_deg
	return result


#============================================
def design_to_dict(design: Design) -> dict:
	"""
	Serialize a Design record to the storage wire shape.

	Args:
		design: Design record.

	Returns:
		JSON-ready dict.
	"""
	settings = design.logo.settings
	return {
		"designId": design.design_id,
		"templateKey": design.template_key,
		"createdAt": design.created_at,
		"logo": {
			"fileName": design.logo.file_name,
			"mimeType": design.logo.mime_type,
			"sizeBytes": design.logo.size_bytes,
			"crop": dataclasses.asdict(settings.crop),
			"transparentLevel": settings.transparent_level,
			"monochrome": settings.monochrome,
		},
		"placement": placement_to_dict(design.placement),
		"pdf": {
			"confirmAssetId": f"{design.design_id}-confirm.pdf",
			"engraveAssetId": f"{design.design_id}-engrave.pdf",
		},
	}


#============================================
def base_logo_size(processed_logo: bytes) -> BaseLogoSize:
	"""
	Read the native pixel size of a processed logo.
	"""
	surface = lep.raster.RasterSurface.decode(processed_logo)
	return BaseLogoSize(w=surface.width, h=surface.height)


#============================================
def check_placement(template: Template, placement: DesignPlacement) -> None:
	"""
	Reject a placement that may not be issued for this template.

	Args:
		template: Template record.
		placement: Final placement.
	"""
	if placement.rotation_deg and not template.placement_rules.allow_rotate:
		raise ValidationError(f"template {template.template_key} does not allow rotation")
	if not template.placement_rules.keep_inside_engraving_area:
		return
	if not lep.placement.is_inside_area(placement, template.engraving_area):
		raise ValidationError(
			f"placement {placement_to_dict(placement)} is outside the engraving area"
		)


#============================================
def guess_mime_type(data: bytes) -> str:
	if data.startswith(b"\x89PNG\r\n\x1a\n"):
		return "image/png"
	if data.startswith(b"\xff\xd8"):
		return "image/jpeg"
	return "application/octet-stream"


#============================================
def issue_design(
	template: Template,
	upload_bytes: bytes,
	settings: LogoSettings,
	placement: DesignPlacement,
	existing_ids: set[str],
	background_bytes: bytes | None = None,
	file_name: str = "logo.png",
	rng: random.Random | None = None,
	now: datetime.datetime | None = None,
) -> IssuedDesign:
	"""
	Issue a design: process the logo, assign an ID, and render both PDFs.

	The processed logo is capped at the placement size in pixels so the
	embedded raster never carries more pixels than it is drawn at.

	Args:
		template: Template record.
		upload_bytes: Original uploaded logo bytes.
		settings: Logo crop, transparent level, and monochrome flag.
		placement: Final placement in canvas pixels.
		existing_ids: Design IDs already issued.
		background_bytes: Template background raster, or None.
		file_name: Original upload file name for the record.
		rng: Optional random source for the design ID.
		now: Optional issuance time.

	Returns:
		IssuedDesign with the record and all generated bytes.
	"""
	check_placement(template, placement)
	if now is None:
		now = datetime.datetime.now().astimezone()
	# the logo is processed unrotated, so quarter turns swap the caps
	cap = lep.placement.effective_base_size(
		BaseLogoSize(w=placement.w, h=placement.h),
		placement.rotation_deg,
	)
	processed = lep.logo.process_logo(
		upload_bytes,
		settings,
		max_output_width=lep.frame.round_half_up(cap.w),
		max_output_height=lep.frame.round_half_up(cap.h),
	)
	design_id = lep.design_id.generate_design_id(existing_ids, rng=rng, now=now)
	created_at = now.isoformat()
	confirm_pdf = lep.render.render_confirm_pdf(
		template,
		background_bytes,
		processed,
		placement,
		design_id,
	)
	engrave_pdf = lep.render.render_engrave_pdf(
		template,
		processed,
		placement,
		design_id,
		created_at,
	)
	design = Design(
		design_id=design_id,
		template_key=template.template_key,
		created_at=created_at,
		logo=DesignLogo(
			file_name=file_name,
			mime_type=guess_mime_type(upload_bytes),
			size_bytes=len(upload_bytes),
			settings=settings,
		),
		placement=placement,
	)
	return IssuedDesign(
		design=design,
		processed_logo=processed,
		confirm_pdf=confirm_pdf,
		engrave_pdf=engrave_pdf,
	)

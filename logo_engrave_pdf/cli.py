"""
CLI entry points for issuing engrave designs.
"""

# Standard Library
import argparse
import dataclasses
import pathlib
import time

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.errors
import logo_engrave_pdf.inspect_pdf
import logo_engrave_pdf.issue
import logo_engrave_pdf.logo
import logo_engrave_pdf.placement
import logo_engrave_pdf.template_lib


LogoSettings = lep.config.LogoSettings
DesignPlacement = lep.config.DesignPlacement
TRANSPARENT_THRESHOLDS = lep.config.TRANSPARENT_THRESHOLDS
DEFAULT_TRANSPARENT_LEVEL = lep.config.DEFAULT_TRANSPARENT_LEVEL


#============================================
def parse_rect(value: str) -> dict:
	"""
	Parse "x,y,w,h" into a wire-shape dict.

	Args:
		value: Comma separated numbers.

	Returns:
		Dict with x, y, w, h floats.
	"""
	parts = [part.strip() for part in value.split(",")]
	if len(parts) != 4:
		raise argparse.ArgumentTypeError(f"expected x,y,w,h, got {value!r}")
	try:
		numbers = [float(part) for part in parts]
	except ValueError as error:
		raise argparse.ArgumentTypeError(str(error)) from error
	return dict(zip(("x", "y", "w", "h"), numbers))


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Place a logo on a template and issue confirm and engrave PDFs.")
	parser.add_argument("logo_path", help="Uploaded logo image (PNG or JPEG).")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-t", "--template", dest="template_path", required=True, help="Template JSON path.")
	input_group.add_argument(
		"-b",
		"--background",
		dest="background_path",
		default=None,
		help="Background image path (default: background.fileName next to the template).",
	)

	output_group = parser.add_argument_group("Output")
	output_group.add_argument(
		"-o",
		"--output-dir",
		dest="output_dir",
		required=True,
		help="Store directory; existing designs there are never reissued.",
	)

	logo_group = parser.add_argument_group("Logo")
	logo_group.add_argument("-c", "--crop", dest="crop", type=parse_rect, default=None, help="Normalized crop x,y,w,h.")
	logo_group.add_argument(
		"-l",
		"--transparent-level",
		dest="transparent_level",
		choices=sorted(TRANSPARENT_THRESHOLDS),
		default=DEFAULT_TRANSPARENT_LEVEL,
		help="Background removal strength.",
	)
	logo_group.add_argument("-m", "--monochrome", dest="monochrome", action="store_true", help="Convert to black and white.")
	logo_group.add_argument("-M", "--no-monochrome", dest="monochrome", action="store_false", help="Keep logo colors.")

	placement_group = parser.add_argument_group("Placement")
	placement_group.add_argument(
		"-p",
		"--placement",
		dest="placement",
		type=parse_rect,
		default=None,
		help="Placement x,y,w,h in canvas pixels (default: centered in the engraving area).",
	)
	placement_group.add_argument(
		"-r",
		"--rotation",
		dest="rotation",
		type=int,
		choices=list(lep.config.ALLOWED_ROTATIONS),
		default=0,
		help="Logo rotation in degrees.",
	)

	parser.set_defaults(monochrome=None)
	args = parser.parse_args(argv)
	return args


#============================================
def resolve_background(args: argparse.Namespace, template: lep.config.Template) -> bytes | None:
	"""
	Read the background image, or None when it is missing.
	"""
	if args.background_path:
		path = pathlib.Path(args.background_path)
	else:
		path = pathlib.Path(args.template_path).parent / template.background.file_name
	if not path.is_file():
		print(f"Background not found, using white page: {path}")
		return None
	return path.read_bytes()


#============================================
def resolve_placement(
	args: argparse.Namespace,
	template: lep.config.Template,
	base_size: lep.config.BaseLogoSize,
) -> DesignPlacement:
	"""
	Build the requested or initial placement, then clamp it.

	Args:
		args: Parsed argparse namespace.
		template: Template record.
		base_size: Processed logo size before rotation.

	Returns:
		Clamped DesignPlacement.
	"""
	area = template.engraving_area
	rules = template.placement_rules
	rotation = args.rotation if rules.allow_rotate else 0
	if args.rotation and not rules.allow_rotate:
		print(f"Template {template.template_key} does not allow rotation; ignoring --rotation")
	if args.placement is None:
		effective = lep.placement.effective_base_size(base_size, rotation)
		placement = lep.placement.initial_placement(area, effective)
		placement = dataclasses.replace(placement, rotation_deg=rotation)
	else:
		raw = dict(args.placement)
		raw["rotationDeg"] = rotation
		placement = lep.issue.placement_from_dict(raw)
	clamped = lep.placement.apply_clamp(placement, base_size, rules, area)
	if clamped != placement:
		print(f"Placement clamped: {lep.issue.placement_to_dict(placement)} -> {lep.issue.placement_to_dict(clamped)}")
	return clamped


#============================================
def run_pipeline(args: argparse.Namespace) -> lep.issue.IssuedDesign | None:
	"""
	Run the full pipeline from upload to stored PDFs.

	Args:
		args: Parsed argparse namespace.

	Returns:
		IssuedDesign that was stored, or None when the placement was rejected.
	"""
	start_time = time.perf_counter()
	template_path = pathlib.Path(args.template_path)
	template = lep.template_lib.load_template(template_path)
	print("Logo engrave pipeline")
	print(f"Template: {template.template_key} ({template.name})")
	print(f"Canvas: {template.background.canvas_width_px}x{template.background.canvas_height_px}px")
	area = template.engraving_area
	print(f"Engraving area: x={area.x} y={area.y} w={area.w} h={area.h}")

	logo_path = pathlib.Path(args.logo_path)
	upload_bytes = logo_path.read_bytes()
	crop = lep.config.CropRect()
	if args.crop is not None:
		crop = lep.issue.crop_from_dict(args.crop)
	monochrome = template.default_monochrome if args.monochrome is None else args.monochrome
	settings = LogoSettings(crop=crop, transparent_level=args.transparent_level, monochrome=monochrome)
	print(f"Transparent level: {settings.transparent_level}")
	print(f"Monochrome: {settings.monochrome}")

	preview = lep.logo.process_logo(upload_bytes, settings)
	base_size = lep.issue.base_logo_size(preview)
	print(f"Base logo size: {base_size.w}x{base_size.h}px")
	placement = resolve_placement(args, template, base_size)

	store = lep.issue.DirectoryDesignStore(pathlib.Path(args.output_dir))
	existing_ids = store.list_existing_design_ids()
	print(f"Existing designs: {len(existing_ids)}")

	try:
		issued = lep.issue.issue_design(
			template,
			upload_bytes,
			settings,
			placement,
			existing_ids,
			background_bytes=resolve_background(args, template),
			file_name=logo_path.name,
		)
	except lep.errors.ValidationError as error:
		print(f"Design not issued: {error}")
		return None
	record_path = store.save_issued(issued)
	print(f"Design ID: {issued.design.design_id}")
	for label, pdf_bytes in (("Confirm", issued.confirm_pdf), ("Engrave", issued.engrave_pdf)):
		summary = lep.inspect_pdf.read_pdf_summary(pdf_bytes)
		print(f"{label} PDF: {summary.page_width:.2f}x{summary.page_height:.2f}pt, {len(pdf_bytes)} bytes")
		for line in summary.lines:
			print(f"  {line}")
	print(f"Design record written: {record_path}")
	print(f"Timing: total={time.perf_counter() - start_time:.2f}s")
	return issued


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	if run_pipeline(args) is None:
		raise SystemExit(1)

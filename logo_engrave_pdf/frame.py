"""
Coordinate frames shared by the logo, placement, and PDF stages.

Four spaces are involved: upload pixels, processed-logo pixels, template
canvas pixels (top-left origin, y down), and PDF points (bottom-left origin,
y up). Millimeters are only used for human-readable text.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config


MM_PER_INCH = lep.config.MM_PER_INCH
CropRect = lep.config.CropRect


@dataclasses.dataclass(frozen=True)
class CoordinateFrame:
	"""
	Maps template canvas pixels onto a PDF page.

	The canvas is scaled uniformly to fit the page and centered on it.
	"""
	canvas_width: float
	canvas_height: float
	page_width: float
	page_height: float

	@property
	def scale(self) -> float:
		return min(self.page_width / self.canvas_width, self.page_height / self.canvas_height)

	@property
	def offset_x(self) -> float:
		return (self.page_width - self.canvas_width * self.scale) / 2.0

	@property
	def offset_y(self) -> float:
		return (self.page_height - self.canvas_height * self.scale) / 2.0

	#============================================
	def x_to_page(self, x: float) -> float:
		"""
		Convert a canvas x coordinate to a page x coordinate.
		"""
		return self.offset_x + x * self.scale

	#============================================
	def rect_to_page(self, x: float, y: float, w: float, h: float) -> tuple[float, float, float, float]:
		"""
		Convert a canvas rect to a PDF rect anchored at its bottom-left corner.

		Args:
			x: Canvas left edge.
			y: Canvas top edge.
			w: Canvas width.
			h: Canvas height.

		Returns:
			Tuple of (x, y, width, height) in points.
		"""
		page_x = self.x_to_page(x)
		page_y = self.offset_y + (self.canvas_height - (y + h)) * self.scale
		return (page_x, page_y, w * self.scale, h * self.scale)


#============================================
def frame_for_template(template: lep.config.Template) -> CoordinateFrame:
	"""
	Build the canvas to page frame for a template.

	Args:
		template: Template record.

	Returns:
		CoordinateFrame instance.
	"""
	page_width, page_height = lep.config.page_dimensions(template.pdf)
	return CoordinateFrame(
		canvas_width=template.background.canvas_width_px,
		canvas_height=template.background.canvas_height_px,
		page_width=page_width,
		page_height=page_height,
	)


#============================================
def round_half_up(value: float) -> int:
	"""
	Round to the nearest integer with halves going up.
	"""
	return int(math.floor(value + 0.5))


#============================================
def px_to_mm(value: float, dpi: float) -> float:
	"""
	Convert canvas pixels to millimeters at the template dpi.
	"""
	return value * MM_PER_INCH / dpi


#============================================
def format_mm(value: float, dpi: float) -> str:
	"""
	Format a pixel length as millimeters with one decimal.

	Halves round up, and whole numbers drop the decimal, so 100 px at
	300 dpi reads "8.5mm" and 118.11 px reads "10mm".

	Args:
		value: Length in canvas pixels.
		dpi: Template dpi.

	Returns:
		Formatted string with an "mm" suffix.
	"""
	rounded = round_half_up(px_to_mm(value, dpi) * 10.0) / 10.0
	if rounded.is_integer():
		return f"{int(rounded)}mm"
	return f"{rounded}mm"


#============================================
def fit_into_box(
	width: float,
	height: float,
	box_width: float,
	box_height: float,
) -> tuple[float, float, float, float]:
	"""
	Fit a raster into a box, preserving aspect and centering it.

	Args:
		width: Raster width.
		height: Raster height.
		box_width: Box width.
		box_height: Box height.

	Returns:
		Tuple of (offset_x, offset_y, draw_width, draw_height) in box units.
	"""
	scale = min(box_width / width, box_height / height)
	draw_width = width * scale
	draw_height = height * scale
	return ((box_width - draw_width) / 2.0, (box_height - draw_height) / 2.0, draw_width, draw_height)


#============================================
def crop_source_box(crop: CropRect, width: int, height: int) -> tuple[float, float, int, int]:
	"""
	Convert a normalized crop into an upload pixel source rect.

	Args:
		crop: Normalized crop rect.
		width: Upload width in pixels.
		height: Upload height in pixels.

	Returns:
		Tuple of (sx, sy, sw, sh); the size is rounded, the origin is not.
	"""
	sw = round_half_up(crop.w * width)
	sh = round_half_up(crop.h * height)
	return (crop.x * width, crop.y * height, sw, sh)


#============================================
def bounded_output_size(
	width: int,
	height: int,
	max_width: float | None,
	max_height: float | None,
) -> tuple[int, int]:
	"""
	Compute the processed-logo size for a crop, downscaling only.

	Args:
		width: Source rect width.
		height: Source rect height.
		max_width: Optional width cap.
		max_height: Optional height cap.

	Returns:
		Tuple of (width, height), each at least 1.
	"""
	scale_x = 1.0
	scale_y = 1.0
	if max_width:
		scale_x = min(1.0, max_width / width)
	if max_height:
		scale_y = min(1.0, max_height / height)
	scale = min(scale_x, scale_y)
	return (max(1, round_half_up(width * scale)), max(1, round_half_up(height * scale)))

"""
Single-page PDF building on top of ReportLab.
"""

# Standard Library
import io

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.errors


EmbedError = lep.errors.EmbedError
DEFAULT_FONT_REGULAR = lep.config.DEFAULT_FONT_REGULAR

Color = tuple[float, float, float]


class EmbeddedRaster:
	"""
	A raster decoded for drawing, with its native pixel size.
	"""

	def __init__(self, image: PIL.Image.Image, image_format: str) -> None:
		self.image = image
		self.image_format = image_format
		self.width = image.width
		self.height = image.height
		self.reader = reportlab.lib.utils.ImageReader(image)


#============================================
def open_as(data: bytes, image_format: str) -> PIL.Image.Image:
	"""
	Open image bytes, accepting only the given format.

	Args:
		data: Encoded image bytes.
		image_format: Pillow format name such as "PNG".

	Returns:
		Loaded PIL image.
	"""
	image = PIL.Image.open(io.BytesIO(data), formats=[image_format])
	image.load()
	return image


class DocumentBuilder:
	"""
	Builds one PDF page in memory.

	All coordinates are PDF points with a bottom-left origin.
	"""

	def __init__(self) -> None:
		self.buffer = io.BytesIO()
		self.pdf: reportlab.pdfgen.canvas.Canvas | None = None
		self.page_width = 0.0
		self.page_height = 0.0

	#============================================
	def add_page(self, width: float, height: float) -> None:
		"""
		Start the page with the given size in points.
		"""
		if self.pdf is not None:
			raise lep.errors.GenerationError("documents hold a single page")
		self.page_width = width
		self.page_height = height
		self.pdf = reportlab.pdfgen.canvas.Canvas(self.buffer, pagesize=(width, height))

	#============================================
	def require_page(self) -> reportlab.pdfgen.canvas.Canvas:
		if self.pdf is None:
			raise lep.errors.GenerationError("add_page must be called before drawing")
		return self.pdf

	#============================================
	def embed_raster(self, data: bytes) -> EmbeddedRaster:
		"""
		Decode raster bytes for drawing, trying PNG first and then JPEG.

		Args:
			data: Encoded image bytes.

		Returns:
			EmbeddedRaster instance.
		"""
		failures = []
		for image_format in ("PNG", "JPEG"):
			try:
				image = open_as(data, image_format)
			except (PIL.UnidentifiedImageError, OSError, SyntaxError) as error:
				failures.append(f"{image_format}: {error}")
				continue
			if image.mode not in ("RGB", "RGBA", "L"):
				image = image.convert("RGBA")
			return EmbeddedRaster(image, image_format)
		raise EmbedError("raster is neither PNG nor JPEG (" + "; ".join(failures) + ")")

	#============================================
	def draw_image(
		self,
		raster: EmbeddedRaster,
		x: float,
		y: float,
		width: float,
		height: float,
	) -> None:
		"""
		Draw an embedded raster stretched into a rect.

		Args:
			raster: EmbeddedRaster to draw.
			x: Left edge in points.
			y: Bottom edge in points.
			width: Width in points.
			height: Height in points.
		"""
		pdf = self.require_page()
		pdf.drawImage(
			raster.reader,
			x,
			y,
			width=width,
			height=height,
			mask="auto",
			preserveAspectRatio=False,
			anchor="sw",
		)

	#============================================
	def draw_rect(
		self,
		x: float,
		y: float,
		width: float,
		height: float,
		fill_color: Color | None = None,
		stroke_color: Color | None = None,
		line_width: float = 1.0,
	) -> None:
		"""
		Draw a rectangle, filled and/or stroked.
		"""
		pdf = self.require_page()
		if fill_color is not None:
			pdf.setFillColorRGB(fill_color[0], fill_color[1], fill_color[2])
		if stroke_color is not None:
			pdf.setStrokeColorRGB(stroke_color[0], stroke_color[1], stroke_color[2])
			pdf.setLineWidth(line_width)
		pdf.rect(
			x,
			y,
			width,
			height,
			stroke=1 if stroke_color is not None else 0,
			fill=1 if fill_color is not None else 0,
		)

	#============================================
	def draw_line(
		self,
		start: tuple[float, float],
		end: tuple[float, float],
		color: Color,
		thickness: float,
	) -> None:
		pdf = self.require_page()
		pdf.setStrokeColorRGB(color[0], color[1], color[2])
		pdf.setLineWidth(thickness)
		pdf.line(start[0], start[1], end[0], end[1])

	#============================================
	def draw_text(
		self,
		text: str,
		x: float,
		y: float,
		size: float,
		color: Color,
		font_name: str = DEFAULT_FONT_REGULAR,
	) -> None:
		"""
		Draw a single line of text with its baseline at y.

		Args:
			text: Text to draw.
			x: Left edge in points.
			y: Baseline in points.
			size: Font size in points.
			color: RGB fill color in 0.0-1.0 range.
			font_name: ReportLab font name.
		"""
		pdf = self.require_page()
		pdf.setFont(font_name, size)
		pdf.setFillColorRGB(color[0], color[1], color[2])
		pdf.drawString(x, y, text)

	#============================================
	def save(self) -> bytes:
		"""
		Finish the page and return the PDF bytes.
		"""
		pdf = self.require_page()
		pdf.showPage()
		pdf.save()
		return self.buffer.getvalue()

"""
Confirm and engrave PDF composition.
"""

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.document
import logo_engrave_pdf.errors
import logo_engrave_pdf.frame
import logo_engrave_pdf.logo


Template = lep.config.Template
DesignPlacement = lep.config.DesignPlacement
CoordinateFrame = lep.frame.CoordinateFrame
DocumentBuilder = lep.document.DocumentBuilder
EmbedError = lep.errors.EmbedError
GenerationError = lep.errors.GenerationError

FOOTER_MARGIN = lep.config.FOOTER_MARGIN
FOOTER_LINE_STEP = lep.config.FOOTER_LINE_STEP
CONFIRM_TEXT_SIZE = lep.config.CONFIRM_TEXT_SIZE
ENGRAVE_TEXT_SIZE = lep.config.ENGRAVE_TEXT_SIZE
CONFIRM_TEXT_COLOR = lep.config.CONFIRM_TEXT_COLOR
ENGRAVE_TEXT_COLOR = lep.config.ENGRAVE_TEXT_COLOR
CORNER_MARK_COLOR = lep.config.CORNER_MARK_COLOR
CORNER_MARK_THICKNESS = lep.config.CORNER_MARK_THICKNESS
CORNER_MARK_LENGTH = lep.config.CORNER_MARK_LENGTH
ENGRAVE_OUTLINE_COLOR = lep.config.ENGRAVE_OUTLINE_COLOR
ENGRAVE_OUTLINE_WIDTH = lep.config.ENGRAVE_OUTLINE_WIDTH
WHITE = (1.0, 1.0, 1.0)


#============================================
def format_placement_footer(placement: DesignPlacement, dpi: float) -> str:
	"""
	Build the human-readable position and size line.

	Args:
		placement: Placement in canvas pixels.
		dpi: Template dpi.

	Returns:
		Footer text such as "Pos(mm): x=70.6mm y=105.6mm / Size(mm): w=21.3mm h=10.7mm".
	"""
	fmt = lep.frame.format_mm
	return (
		f"Pos(mm): x={fmt(placement.x, dpi)} y={fmt(placement.y, dpi)}"
		f" / Size(mm): w={fmt(placement.w, dpi)} h={fmt(placement.h, dpi)}"
	)


#============================================
def engrave_footer_lines(design_id: str, template_key: str, created_at: str) -> list[str]:
	"""
	Build the engrave PDF metadata lines, bottom line first.
	"""
	return [
		f"Design ID: {design_id}",
		f"Template: {template_key}",
		f"Created at: {created_at}",
	]


#============================================
def draw_corner_marks(
	builder: DocumentBuilder,
	rect: tuple[float, float, float, float],
	color: tuple[float, float, float],
	thickness: float,
	corner_length: float,
) -> None:
	"""
	Draw L-shaped marks at the four corners of a page rect.

	The marks sit just outside the rect so its inner edge stays exact.

	Args:
		builder: DocumentBuilder with an open page.
		rect: (x, y, width, height) in points.
		color: Stroke color.
		thickness: Stroke width.
		corner_length: Length of each mark arm.
	"""
	x0, y0, width, height = rect
	x1 = x0 + width
	y1 = y0 + height
	length = max(1.0, min(corner_length, width / 2.0, height / 2.0))
	half = max(0.0, thickness / 2.0)

	segments = [
		# bottom-left
		((x0, y0 - half), (x0 + length, y0 - half)),
		((x0 - half, y0), (x0 - half, y0 + length)),
		# bottom-right
		((x1, y0 - half), (x1 - length, y0 - half)),
		((x1 + half, y0), (x1 + half, y0 + length)),
		# top-left
		((x0, y1 + half), (x0 + length, y1 + half)),
		((x0 - half, y1), (x0 - half, y1 - length)),
		# top-right
		((x1, y1 + half), (x1 - length, y1 + half)),
		((x1 + half, y1), (x1 + half, y1 - length)),
	]
	for start, end in segments:
		builder.draw_line(start, end, color, thickness)


#============================================
def draw_background(
	builder: DocumentBuilder,
	frame: CoordinateFrame,
	background_bytes: bytes | None,
) -> bool:
	"""
	Draw the template background fitted into the canvas box.

	Falls back to a white page when the background is missing or cannot
	be embedded.

	Args:
		builder: DocumentBuilder with an open page.
		frame: Canvas to page frame.
		background_bytes: Encoded background raster, or None.

	Returns:
		True if the background raster was drawn.
	"""
	raster = None
	if background_bytes:
		try:
			raster = builder.embed_raster(background_bytes)
		except EmbedError:
			raster = None
	if raster is None:
		builder.draw_rect(0.0, 0.0, frame.page_width, frame.page_height, fill_color=WHITE)
		return False
	offset_x, offset_y, draw_width, draw_height = lep.frame.fit_into_box(
		raster.width,
		raster.height,
		frame.canvas_width,
		frame.canvas_height,
	)
	page_rect = frame.rect_to_page(offset_x, offset_y, draw_width, draw_height)
	builder.draw_image(raster, *page_rect)
	return True


#============================================
def draw_logo(
	builder: DocumentBuilder,
	frame: CoordinateFrame,
	logo_bytes: bytes | None,
	placement: DesignPlacement,
) -> bool:
	"""
	Draw the logo pre-rotated into its placement rect.

	Args:
		builder: DocumentBuilder with an open page.
		frame: Canvas to page frame.
		logo_bytes: Processed logo bytes, or None to skip.
		placement: Placement in canvas pixels.

	Returns:
		True if a logo was drawn.
	"""
	if not logo_bytes:
		return False
	rotated = lep.logo.rotate_logo(logo_bytes, placement.rotation_deg)
	try:
		raster = builder.embed_raster(rotated)
	except EmbedError as error:
		raise GenerationError(f"EmbedError: logo could not be embedded: {error}") from error
	page_rect = frame.rect_to_page(placement.x, placement.y, placement.w, placement.h)
	builder.draw_image(raster, *page_rect)
	return True


#============================================
def render_confirm_pdf(
	template: Template,
	background_bytes: bytes | None,
	logo_bytes: bytes | None,
	placement: DesignPlacement,
	design_id: str,
) -> bytes:
	"""
	Render the customer-facing confirm PDF.

	Args:
		template: Template record.
		background_bytes: Encoded background raster, or None.
		logo_bytes: Processed logo bytes, or None.
		placement: Final placement in canvas pixels.
		design_id: Issued design ID.

	Returns:
		PDF bytes.
	"""
	try:
		frame = lep.frame.frame_for_template(template)
		builder = DocumentBuilder()
		builder.add_page(frame.page_width, frame.page_height)
		draw_background(builder, frame, background_bytes)
		draw_logo(builder, frame, logo_bytes, placement)

		area = template.engraving_area
		area_rect = frame.rect_to_page(area.x, area.y, area.w, area.h)
		# marks go last so the logo never covers them
		draw_corner_marks(
			builder,
			area_rect,
			CORNER_MARK_COLOR,
			CORNER_MARK_THICKNESS,
			min(CORNER_MARK_LENGTH, min(area_rect[2], area_rect[3]) * 0.25),
		)

		footer = format_placement_footer(placement, template.pdf.dpi)
		builder.draw_text(
			footer,
			FOOTER_MARGIN,
			FOOTER_MARGIN + FOOTER_LINE_STEP,
			CONFIRM_TEXT_SIZE,
			CONFIRM_TEXT_COLOR,
		)
		builder.draw_text(design_id, FOOTER_MARGIN, FOOTER_MARGIN, CONFIRM_TEXT_SIZE, CONFIRM_TEXT_COLOR)
		return builder.save()
	except GenerationError:
		raise
	except Exception as error:
		raise lep.errors.wrap_generation_error(error) from error


#============================================
def render_engrave_pdf(
	template: Template,
	logo_bytes: bytes | None,
	placement: DesignPlacement,
	design_id: str,
	created_at: str,
) -> bytes:
	"""
	Render the production engrave PDF.

	Args:
		template: Template record.
		logo_bytes: Processed logo bytes, or None.
		placement: Final placement in canvas pixels.
		design_id: Issued design ID.
		created_at: ISO-8601 issuance timestamp.

	Returns:
		PDF bytes.
	"""
	try:
		frame = lep.frame.frame_for_template(template)
		builder = DocumentBuilder()
		builder.add_page(frame.page_width, frame.page_height)
		builder.draw_rect(0.0, 0.0, frame.page_width, frame.page_height, fill_color=WHITE)

		area = template.engraving_area
		builder.draw_rect(
			*frame.rect_to_page(area.x, area.y, area.w, area.h),
			stroke_color=ENGRAVE_OUTLINE_COLOR,
			line_width=ENGRAVE_OUTLINE_WIDTH,
		)
		draw_logo(builder, frame, logo_bytes, placement)

		lines = engrave_footer_lines(design_id, template.template_key, created_at)
		for index, line in enumerate(lines):
			builder.draw_text(
				line,
				FOOTER_MARGIN,
				FOOTER_MARGIN + index * FOOTER_LINE_STEP,
				ENGRAVE_TEXT_SIZE,
				ENGRAVE_TEXT_COLOR,
			)
		return builder.save()
	except GenerationError:
		raise
	except Exception as error:
		raise lep.errors.wrap_generation_error(error) from error

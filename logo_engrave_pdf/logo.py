"""
Logo raster processing: crop, background removal, monochrome, rotation.
"""

# Standard Library
import math

# PIP3 modules
import numpy

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config
import logo_engrave_pdf.errors
import logo_engrave_pdf.frame
import logo_engrave_pdf.raster


RasterSurface = lep.raster.RasterSurface
CropRect = lep.config.CropRect
LogoSettings = lep.config.LogoSettings
ValidationError = lep.errors.ValidationError
CanvasContextError = lep.errors.CanvasContextError

SOFT_EDGE_RANGE = lep.config.SOFT_EDGE_RANGE
ALPHA_CUTOFF = lep.config.ALPHA_CUTOFF
ENGRAVE_COLOR_THRESHOLD = lep.config.ENGRAVE_COLOR_THRESHOLD
MONOCHROME_CUTOFF = lep.config.MONOCHROME_CUTOFF
DEFAULT_BACKGROUND_COLOR = lep.config.DEFAULT_BACKGROUND_COLOR
ALLOWED_ROTATIONS = lep.config.ALLOWED_ROTATIONS


#============================================
def validate_crop(crop: CropRect) -> None:
	"""
	Check that a normalized crop lies inside the unit square.

	Args:
		crop: Normalized crop rect.
	"""
	values = (crop.x, crop.y, crop.w, crop.h)
	if not all(math.isfinite(value) for value in values):
		raise ValidationError(f"crop values must be finite: {crop}")
	if crop.x < 0.0 or crop.y < 0.0:
		raise ValidationError(f"crop origin must be >= 0: {crop}")
	if crop.w <= 0.0 or crop.h <= 0.0:
		raise ValidationError(f"crop size must be > 0: {crop}")
	epsilon = 1e-9
	if crop.x + crop.w > 1.0 + epsilon or crop.y + crop.h > 1.0 + epsilon:
		raise ValidationError(f"crop extends past the image: {crop}")


#============================================
def crop_logo(
	surface: RasterSurface,
	crop: CropRect,
	max_output_width: float | None = None,
	max_output_height: float | None = None,
) -> RasterSurface:
	"""
	Cut the crop rect out of an upload, downscaling to the output caps.

	Args:
		surface: Decoded upload.
		crop: Normalized crop rect.
		max_output_width: Optional output width cap in pixels.
		max_output_height: Optional output height cap in pixels.

	Returns:
		New RasterSurface in processed-logo pixels.
	"""
	validate_crop(crop)
	sx, sy, sw, sh = lep.frame.crop_source_box(crop, surface.width, surface.height)
	if sw <= 0 or sh <= 0:
		raise ValidationError(f"crop selects no pixels on a {surface.width}x{surface.height} image")
	size = lep.frame.bounded_output_size(sw, sh, max_output_width, max_output_height)
	# rounded sizes can reach past the far edge; clip like a canvas draw
	right = min(sx + sw, surface.width)
	bottom = min(sy + sh, surface.height)
	return surface.draw_region((sx, sy, right, bottom), size)


#============================================
def sample_background_color(surface: RasterSurface) -> tuple[int, int, int]:
	"""
	Average the RGB of the non-transparent corner pixels.

	Args:
		surface: Surface to sample.

	Returns:
		Reference (r, g, b); white when every corner is transparent.
	"""
	corners = [
		(0, 0),
		(surface.width - 1, 0),
		(0, surface.height - 1),
		(surface.width - 1, surface.height - 1),
	]
	sum_r = 0
	sum_g = 0
	sum_b = 0
	count = 0
	for x, y in corners:
		red, green, blue, alpha = surface.pixel_at(x, y)
		if alpha == 0:
			continue
		sum_r += red
		sum_g += green
		sum_b += blue
		count += 1
	if count == 0:
		return DEFAULT_BACKGROUND_COLOR
	return (
		lep.frame.round_half_up(sum_r / count),
		lep.frame.round_half_up(sum_g / count),
		lep.frame.round_half_up(sum_b / count),
	)


#============================================
def color_distance(pixels: numpy.ndarray, reference: tuple[int, int, int]) -> numpy.ndarray:
	"""
	Euclidean RGB distance between each pixel and a reference color.

	Args:
		pixels: Array whose last axis holds at least r, g, b.
		reference: Reference (r, g, b).

	Returns:
		Float array with the pixel axis dropped.
	"""
	rgb = numpy.asarray(pixels, dtype=numpy.float64)[..., :3]
	difference = rgb - numpy.asarray(reference, dtype=numpy.float64)
	return numpy.sqrt(numpy.sum(difference * difference, axis=-1))


#============================================
def remove_background(surface: RasterSurface, threshold: float) -> RasterSurface:
	"""
	Make pixels close to the corner background color transparent.

	Pixels with alpha at or below the alpha cutoff are cleared. Pixels
	within threshold of the reference color are cleared, and pixels in
	the soft band just past the threshold keep a proportional alpha.
	A zero threshold disables color removal and the soft band.

	Args:
		surface: Surface to edit in place.
		threshold: Color distance threshold.

	Returns:
		The same surface.
	"""
	reference = sample_background_color(surface)
	pixels = surface.read_pixels()
	alpha = pixels[..., 3].astype(numpy.float64)
	faint = alpha <= ALPHA_CUTOFF
	if threshold > 0:
		distance = color_distance(pixels, reference)
		ratio = (distance - threshold) / SOFT_EDGE_RANGE
		# halves round up
		faded = numpy.floor(alpha * ratio + 0.5)
		in_band = (distance >= threshold) & (distance < threshold + SOFT_EDGE_RANGE)
		alpha = numpy.where(in_band, faded, alpha)
		alpha[distance < threshold] = 0.0
	alpha[faint] = 0.0
	pixels[..., 3] = alpha.astype(numpy.uint8)
	surface.write_pixels(pixels)
	return surface


#============================================
def prepare_engrave_surface(
	surface: RasterSurface,
	threshold: float = ENGRAVE_COLOR_THRESHOLD,
) -> RasterSurface:
	"""
	Turn a logo into a black silhouette for engraving.

	Args:
		surface: Surface to edit in place.
		threshold: Color distance threshold for background pixels.

	Returns:
		The same surface.
	"""
	reference = sample_background_color(surface)
	pixels = surface.read_pixels()
	keep = pixels[..., 3] > ALPHA_CUTOFF
	if threshold > 0:
		keep &= color_distance(pixels, reference) >= threshold
	pixels[~keep, 3] = 0
	pixels[keep, :3] = 0
	surface.write_pixels(pixels)
	return surface


#============================================
def apply_monochrome(surface: RasterSurface) -> RasterSurface:
	"""
	Threshold luminance to pure black or white, leaving alpha alone.

	Args:
		surface: Surface to edit in place.

	Returns:
		The same surface.
	"""
	pixels = surface.read_pixels()
	rgb = pixels[..., :3].astype(numpy.float64)
	gray = 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]
	value = numpy.where(gray >= MONOCHROME_CUTOFF, 255, 0).astype(numpy.uint8)
	pixels[..., :3] = value[..., numpy.newaxis]
	surface.write_pixels(pixels)
	return surface


#============================================
def rotate_90(surface: RasterSurface) -> RasterSurface:
	"""
	Rotate a surface a quarter turn clockwise into a new surface.
	"""
	return surface.rotated_quarter()


#============================================
def rotation_steps(degrees: int) -> int:
	"""
	Convert a rotation in degrees to a count of quarter turns.

	Args:
		degrees: One of 0, 90, 180, 270.

	Returns:
		Quarter-turn count.
	"""
	if degrees not in ALLOWED_ROTATIONS:
		raise ValidationError(f"rotation must be one of {ALLOWED_ROTATIONS}, got {degrees}")
	return degrees // 90


#============================================
def rotate_logo(data: bytes, degrees: int) -> bytes:
	"""
	Rotate encoded logo bytes clockwise by a multiple of 90 degrees.

	Args:
		data: Encoded image bytes.
		degrees: One of 0, 90, 180, 270.

	Returns:
		PNG bytes, or the input bytes when no rotation is needed or no
		drawable surface is available.
	"""
	steps = rotation_steps(degrees)
	if steps == 0:
		return data
	try:
		surface = RasterSurface.decode(data)
	except CanvasContextError:
		return data
	for _ in range(steps):
		surface = rotate_90(surface)
	return surface.encode_png()


#============================================
def prepare_engrave_logo(data: bytes) -> bytes:
	"""
	Convert encoded logo bytes into an engrave-ready black silhouette.

	Args:
		data: Encoded image bytes.

	Returns:
		PNG bytes, or the input bytes when no drawable surface is available.
	"""
	try:
		surface = RasterSurface.decode(data)
	except CanvasContextError:
		return data
	prepare_engrave_surface(surface)
	return surface.encode_png()


#============================================
def process_logo(
	data: bytes,
	settings: LogoSettings,
	max_output_width: float | None = None,
	max_output_height: float | None = None,
) -> bytes:
	"""
	Run the full upload to processed-logo pipeline.

	Args:
		data: Uploaded image bytes.
		settings: Crop, transparent level, and monochrome flag.
		max_output_width: Optional output width cap.
		max_output_height: Optional output height cap.

	Returns:
		Processed logo PNG bytes.
	"""
	threshold = lep.config.threshold_for_level(settings.transparent_level)
	surface = RasterSurface.decode(data)
	surface = crop_logo(surface, settings.crop, max_output_width, max_output_height)
	remove_background(surface, threshold)
	if settings.monochrome:
		apply_monochrome(surface)
	return surface.encode_png()

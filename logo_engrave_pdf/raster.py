"""
Pixel surfaces backed by Pillow.
"""

# Standard Library
import io

# PIP3 modules
import numpy
import PIL.Image

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.errors


ImageDecodeError = lep.errors.ImageDecodeError
CanvasContextError = lep.errors.CanvasContextError

Pixel = tuple[int, int, int, int]


class RasterSurface:
	"""
	An RGBA scratch surface owned by a single call.

	Surfaces are never shared between calls; every operation that changes
	size returns a new surface.
	"""

	def __init__(self, image: PIL.Image.Image) -> None:
		if image.width <= 0 or image.height <= 0:
			raise CanvasContextError(f"cannot draw on a {image.width}x{image.height} surface")
		if image.mode != "RGBA":
			try:
				image = image.convert("RGBA")
			except ValueError as error:
				raise CanvasContextError(f"cannot draw {image.mode} pixels: {error}") from error
		self.image = image

	@property
	def width(self) -> int:
		return self.image.width

	@property
	def height(self) -> int:
		return self.image.height

	#============================================
	@classmethod
	def decode(cls, data: bytes) -> "RasterSurface":
		"""
		Decode encoded image bytes into a surface.

		Args:
			data: PNG, JPEG, or other Pillow-readable bytes.

		Returns:
			RasterSurface instance.
		"""
		try:
			image = PIL.Image.open(io.BytesIO(data))
			image.load()
		except (
			PIL.UnidentifiedImageError,
			PIL.Image.DecompressionBombError,
			OSError,
			SyntaxError,
			ValueError,
		) as error:
			raise ImageDecodeError(f"cannot decode image: {error}") from error
		return cls(image)

	#============================================
	@classmethod
	def blank(cls, width: int, height: int) -> "RasterSurface":
		"""
		Allocate a fully transparent surface.
		"""
		if width <= 0 or height <= 0:
			raise CanvasContextError(f"cannot draw on a {width}x{height} surface")
		return cls(PIL.Image.new("RGBA", (width, height), (0, 0, 0, 0)))

	#============================================
	def draw_region(
		self,
		source_box: tuple[float, float, float, float],
		size: tuple[int, int],
	) -> "RasterSurface":
		"""
		Draw a source region scaled into a new surface of the given size.

		Args:
			source_box: (left, top, right, bottom) in this surface's pixels;
				fractional edges are sampled, not rounded.
			size: Output (width, height).

		Returns:
			New RasterSurface.
		"""
		if size[0] <= 0 or size[1] <= 0:
			raise CanvasContextError(f"cannot draw on a {size[0]}x{size[1]} surface")
		region = self.image.resize(size, PIL.Image.Resampling.LANCZOS, box=source_box)
		return RasterSurface(region)

	#============================================
	def rotated_quarter(self) -> "RasterSurface":
		"""
		Return a new surface rotated a quarter turn clockwise.
		"""
		return RasterSurface(self.image.transpose(PIL.Image.Transpose.ROTATE_270))

	#============================================
	def read_pixels(self) -> numpy.ndarray:
		"""
		Copy the pixels into a writable (height, width, 4) uint8 array.
		"""
		return numpy.array(self.image, dtype=numpy.uint8)

	#============================================
	def write_pixels(self, pixels: numpy.ndarray) -> None:
		"""
		Replace all pixels from a (height, width, 4) array.
		"""
		expected = (self.height, self.width, 4)
		if pixels.shape != expected:
			raise ValueError(f"expected pixel array of shape {expected}, got {pixels.shape}")
		self.image = PIL.Image.fromarray(numpy.ascontiguousarray(pixels, dtype=numpy.uint8))

	#============================================
	def pixel_at(self, x: int, y: int) -> Pixel:
		return self.image.getpixel((x, y))

	#============================================
	def encode_png(self) -> bytes:
		"""
		Encode the surface as PNG bytes.

		Returns:
			PNG bytes.
		"""
		buffer = io.BytesIO()
		try:
			self.image.save(buffer, format="PNG")
		except (OSError, ValueError) as error:
			raise ImageDecodeError(f"cannot encode PNG: {error}") from error
		return buffer.getvalue()

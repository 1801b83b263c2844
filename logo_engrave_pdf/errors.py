"""
Exception types raised by the logo and PDF pipeline.
"""


class LogoEngraveError(Exception):
	"""
	Base class for pipeline errors.
	"""


class ValidationError(LogoEngraveError, ValueError):
	"""
	A crop, placement, or template value is out of range.
	"""


class ImageDecodeError(LogoEngraveError):
	"""
	An image could not be decoded or encoded.
	"""


class CanvasContextError(LogoEngraveError):
	"""
	No drawable pixel surface could be created for an image.
	"""


class EmbedError(LogoEngraveError):
	"""
	A raster could be embedded neither as PNG nor as JPEG.
	"""


class GenerationError(LogoEngraveError):
	"""
	A PDF document could not be built.
	"""


#============================================
def wrap_generation_error(error: Exception) -> GenerationError:
	"""
	Wrap an arbitrary failure as a GenerationError.

	Args:
		error: Underlying exception.

	Returns:
		GenerationError whose message carries the cause name and message.
	"""
	return GenerationError(f"{type(error).__name__}: {error}")

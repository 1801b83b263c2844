"""
Shared configuration, constants, and record types.
"""

# Standard Library
import dataclasses

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.errors


A4_WIDTH = 595.28
A4_HEIGHT = 841.89
MM_PER_INCH = 25.4

TRANSPARENT_THRESHOLDS = {
	"weak": 24,
	"medium": 40,
	"strong": 64,
}
DEFAULT_TRANSPARENT_LEVEL = "medium"
SOFT_EDGE_RANGE = 12
ALPHA_CUTOFF = 8
ENGRAVE_COLOR_THRESHOLD = 40
MONOCHROME_CUTOFF = 160
DEFAULT_BACKGROUND_COLOR = (255, 255, 255)

MIN_LOGO_SIZE = 10.0
INITIAL_FILL_RATIO = 0.9
ALLOWED_ROTATIONS = (0, 90, 180, 270)

DEFAULT_FONT_REGULAR = "Helvetica"
FOOTER_MARGIN = 24.0
FOOTER_LINE_STEP = 12.0
CONFIRM_TEXT_SIZE = 8.0
ENGRAVE_TEXT_SIZE = 10.0
CONFIRM_TEXT_COLOR = (0.1, 0.1, 0.1)
ENGRAVE_TEXT_COLOR = (0.2, 0.2, 0.2)
CORNER_MARK_COLOR = (0.1, 0.4, 0.9)
CORNER_MARK_THICKNESS = 1.0
CORNER_MARK_LENGTH = 14.0
ENGRAVE_OUTLINE_COLOR = (0.7, 0.7, 0.7)
ENGRAVE_OUTLINE_WIDTH = 1.0

DESIGN_ID_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
DESIGN_ID_LENGTH = 8

TEMPLATE_KEY_PATTERN = r"^[a-zA-Z0-9_-]{3,64}$"
TEMPLATE_STATUSES = ("draft", "tested", "published")
CANVAS_MIN_PX = 200
CANVAS_MAX_PX = 20000


@dataclasses.dataclass(frozen=True)
class BaseLogoSize:
	w: float
	h: float


@dataclasses.dataclass(frozen=True)
class EngravingArea:
	x: float
	y: float
	w: float
	h: float
	label: str = ""


@dataclasses.dataclass(frozen=True)
class TemplateBackground:
	file_name: str
	canvas_width_px: int
	canvas_height_px: int


@dataclasses.dataclass(frozen=True)
class PlacementRules:
	allow_rotate: bool
	keep_inside_engraving_area: bool
	min_scale: float
	max_scale: float


@dataclasses.dataclass(frozen=True)
class TemplatePdfSettings:
	page_size: str
	orientation: str
	dpi: float


@dataclasses.dataclass(frozen=True)
class Template:
	template_key: str
	name: str
	status: str
	updated_at: str
	background: TemplateBackground
	engraving_area: EngravingArea
	placement_rules: PlacementRules
	pdf: TemplatePdfSettings
	default_monochrome: bool = False


@dataclasses.dataclass(frozen=True)
class CropRect:
	x: float = 0.0
	y: float = 0.0
	w: float = 1.0
	h: float = 1.0


@dataclasses.dataclass(frozen=True)
class LogoSettings:
	crop: CropRect = CropRect()
	transparent_level: str = DEFAULT_TRANSPARENT_LEVEL
	monochrome: bool = False


@dataclasses.dataclass(frozen=True)
class DesignPlacement:
	x: float
	y: float
	w: float
	h: float
	rotation_deg: int = 0


@dataclasses.dataclass(frozen=True)
class DesignLogo:
	file_name: str
	mime_type: str
	size_bytes: int
	settings: LogoSettings


@dataclasses.dataclass(frozen=True)
class Design:
	design_id: str
	template_key: str
	created_at: str
	logo: DesignLogo
	placement: DesignPlacement


#============================================
def threshold_for_level(level: str) -> int:
	"""
	Map a transparent level name to its color distance threshold.

	Args:
		level: One of weak, medium, strong.

	Returns:
		Distance threshold in RGB units.
	"""
	if level not in TRANSPARENT_THRESHOLDS:
		raise lep.errors.ValidationError(f"unknown transparent level: {level}")
	return TRANSPARENT_THRESHOLDS[level]


#============================================
def page_dimensions(pdf_settings: TemplatePdfSettings) -> tuple[float, float]:
	"""
	Get the page size in points for the template PDF settings.

	Args:
		pdf_settings: Template PDF settings.

	Returns:
		Tuple of (width, height) in points.
	"""
	if pdf_settings.orientation == "landscape":
		return (A4_HEIGHT, A4_WIDTH)
	return (A4_WIDTH, A4_HEIGHT)

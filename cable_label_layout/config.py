"""
Shared configuration and constants.
"""

import dataclasses


MM_TO_PT = 2.83465
POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4
CSS_PX_PER_INCH = 96.0
CSS_PX_PER_MM = CSS_PX_PER_INCH / MM_PER_INCH
CSS_PX_PER_PT = CSS_PX_PER_INCH / POINTS_PER_INCH

CABLE_PAGE_WIDTH_MM = 38.1
CABLE_PAGE_HEIGHT_MM = 101.6
SEGMENT_HEIGHT_MM = 25.4

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_FONT_WEIGHT = "normal"
DEFAULT_ALIGN = "center"
TEXT_COLOR = "#000000"

DIVIDER_STYLE = "dashed"
DIVIDER_COLOR = "#94a3b8"
DIVIDER_LINE_WIDTH_PT = 0.5
DIVIDER_DASH_MM = 1.0
PREVIEW_DIVIDER_THICKNESS_MM = 0.2

DECORATOR_DIVIDER_LINE = "dividerLine"
DECORATOR_COLOR = "#000000"
DECORATOR_THICKNESS_MM = 0.3
DECORATOR_GAP_MM = 1.0
DECORATOR_MIN_LINE_WIDTH_PT = 0.5
# Rule sits at this fraction of the font size below the text top.
DECORATOR_MID_RATIO = 0.45

QR_ERROR_LEVEL = "M"
QR_PLACEHOLDER_TEXT = "QR"
QR_PLACEHOLDER_COLOR = "#94a3b8"
QR_PLACEHOLDER_TEXT_COLOR = "#64748b"
QR_PLACEHOLDER_FONT_PT = 7.0

PAGE_FRAME_COLOR = "#64748b"
PAGE_COLOR = "#ffffff"

FALLBACK_FONT_SIZE = 10.0
FALLBACK_MARGIN_PT = 36.0

MAX_LABELS_PER_REQUEST = 2000
MAX_SHEET_ROWS = 2000
CELL_LIMITS = {
	"aSide": 100,
	"portA": 20,
	"zSide": 100,
	"portB": 20,
	"serial": 50,
	"additionalText": 100,
}
SHEET_REQUIRED_COLUMNS = ("aSideBase", "aSidePort", "bSideBase", "bSidePort")
# Label keys and the sheet column each one is read from.
SHEET_COLUMN_FOR_KEY = {
	"aSide": "aSideBase",
	"portA": "aSidePort",
	"zSide": "bSideBase",
	"portB": "bSidePort",
	"serial": "lineId",
	"additionalText": "notes",
}
PROGRESS_UPDATE_EVERY = 50


@dataclasses.dataclass
class RenderConfig:
	draw_background: bool = False
	verbose: bool = False


@dataclasses.dataclass
class PreviewConfig:
	device_pixel_ratio: float = 1.0
	show_frame: bool = True


@dataclasses.dataclass
class BatchResult:
	schema_key: str
	rows: int
	pages: int
	failed_rows: list[int] = dataclasses.field(default_factory=list)


#============================================
def mm_to_pt(value: float | None) -> float:
	"""
	Convert millimetres to PDF points.

	Args:
		value: Millimetre value, None counts as zero.

	Returns:
		Points value.
	"""
	if value is None:
		return 0.0
	return float(value) * MM_TO_PT


#============================================
def mm_to_px(value: float, device_pixel_ratio: float = 1.0) -> float:
	"""
	Convert millimetres to preview pixels.
	"""
	return value * CSS_PX_PER_MM * device_pixel_ratio


#============================================
def pt_to_px(value: float, device_pixel_ratio: float = 1.0) -> float:
	"""
	Convert typographic points to preview pixels.
	"""
	return value * CSS_PX_PER_PT * device_pixel_ratio

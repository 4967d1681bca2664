"""
Font state, colours and decorator geometry shared by both render targets.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import cable_label_layout as cll
import cable_label_layout.config
import cable_label_layout.schema


TextInstruction = cll.schema.TextInstruction

MM_TO_PT = cll.config.MM_TO_PT
DEFAULT_FONT_REGULAR = cll.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = cll.config.DEFAULT_FONT_BOLD
DECORATOR_MID_RATIO = cll.config.DECORATOR_MID_RATIO
DECORATOR_GAP_MM = cll.config.DECORATOR_GAP_MM

FONT_MAP = {
	"bold": DEFAULT_FONT_BOLD,
	"normal": DEFAULT_FONT_REGULAR,
}


@dataclasses.dataclass(frozen=True)
class FontState:
	font_name: str
	size_pt: float

	def apply(self, pdf: reportlab.pdfgen.canvas.Canvas) -> None:
		"""
		Set this font and size on a canvas.
		"""
		pdf.setFont(self.font_name, self.size_pt)

	def string_width_pt(self, text: str) -> float:
		return reportlab.pdfbase.pdfmetrics.stringWidth(text, self.font_name, self.size_pt)

	def string_width_mm(self, text: str) -> float:
		return self.string_width_pt(text) / MM_TO_PT

	def ascent_pt(self) -> float:
		return reportlab.pdfbase.pdfmetrics.getAscent(self.font_name) * self.size_pt / 1000.0

	def is_bold(self) -> bool:
		return self.font_name == DEFAULT_FONT_BOLD


@dataclasses.dataclass(frozen=True)
class RuleSpan:
	x0_mm: float
	x1_mm: float
	y_mm: float


#============================================
def map_font_name(font_weight: str | None) -> str:
	"""
	Map an element font weight to a PDF base font name.

	Args:
		font_weight: "bold", "normal" or None.

	Returns:
		ReportLab font name, regular for unknown weights.
	"""
	return FONT_MAP.get(font_weight or "", DEFAULT_FONT_REGULAR)


#============================================
def lock_font(instruction: TextInstruction) -> FontState:
	"""
	Resolve the font state for a text instruction once.

	The returned state is used for measuring and for drawing the same
	instruction, so flanking rules always line up with the drawn text.

	Args:
		instruction: Text instruction.

	Returns:
		FontState.
	"""
	return FontState(
		font_name=map_font_name(instruction.font_weight),
		size_pt=float(instruction.font_size_pt),
	)


#============================================
def parse_hex_color(value: str | None) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range, black when unparseable.
	"""
	if not value or not value.startswith("#") or len(value) != 7:
		return (0.0, 0.0, 0.0)
	try:
		red = int(value[1:3], 16) / 255.0
		green = int(value[3:5], 16) / 255.0
		blue = int(value[5:7], 16) / 255.0
	except ValueError:
		return (0.0, 0.0, 0.0)
	return (red, green, blue)


#============================================
def hex_to_rgb255(value: str | None) -> tuple[int, int, int]:
	"""
	Parse a hex color string into 0-255 RGB integers.
	"""
	red, green, blue = parse_hex_color(value)
	return (int(round(red * 255)), int(round(green * 255)), int(round(blue * 255)))


#============================================
def compute_flanking_rules(instruction: TextInstruction, font: FontState) -> list[RuleSpan]:
	"""
	Compute the rule segments drawn beside a dividerLine decorated text.

	The text is centered in the instruction region with a gap on each
	side; a rule is only kept when there is room for it. Empty text gets a
	single rule across the whole region.

	Args:
		instruction: Decorated text instruction.
		font: Locked font state for this instruction.

	Returns:
		Zero, one or two rule spans in mm.
	"""
	decorator = instruction.decorator
	gap_mm = decorator.gap_mm if decorator is not None else DECORATOR_GAP_MM
	region_x = instruction.x_mm
	region_end = instruction.x_mm + instruction.width_mm
	mid_y = instruction.y_mm + font.size_pt * DECORATOR_MID_RATIO / MM_TO_PT

	if not instruction.text:
		return [RuleSpan(x0_mm=region_x, x1_mm=region_end, y_mm=mid_y)]

	text_width = font.string_width_mm(instruction.text)
	center_x = region_x + instruction.width_mm / 2.0
	spans: list[RuleSpan] = []
	left_end = center_x - text_width / 2.0 - gap_mm
	if left_end > region_x:
		spans.append(RuleSpan(x0_mm=region_x, x1_mm=left_end, y_mm=mid_y))
	right_start = center_x + text_width / 2.0 + gap_mm
	if right_start < region_end:
		spans.append(RuleSpan(x0_mm=right_start, x1_mm=region_end, y_mm=mid_y))
	return spans

"""
Layout schema model and render instruction types.

Schemas describe one printable label variant in millimetres and points.
Instructions are the resolved output of the layout engine and the only
thing the render adapters read.
"""

# Standard Library
import collections.abc
import dataclasses
import typing

# local repo modules
import cable_label_layout as cll
import cable_label_layout.config


DEFAULT_FONT_WEIGHT = cll.config.DEFAULT_FONT_WEIGHT
DEFAULT_ALIGN = cll.config.DEFAULT_ALIGN
DIVIDER_STYLE = cll.config.DIVIDER_STYLE
DIVIDER_COLOR = cll.config.DIVIDER_COLOR
DECORATOR_COLOR = cll.config.DECORATOR_COLOR
DECORATOR_THICKNESS_MM = cll.config.DECORATOR_THICKNESS_MM
DECORATOR_GAP_MM = cll.config.DECORATOR_GAP_MM

SEGMENT_BLOCK = "block"
SEGMENT_DIVIDER = "divider"
SEGMENT_QR = "qr"
SEGMENT_GRID = "grid"
POSITIONING_FLOW = "flow"
POSITIONING_CENTERED = "centered"

DataRow = collections.abc.Mapping[str, typing.Any]


@dataclasses.dataclass(frozen=True)
class Page:
	width_mm: float
	height_mm: float


@dataclasses.dataclass(frozen=True)
class BackgroundRegion:
	y_mm: float
	height_mm: float
	color: str


@dataclasses.dataclass(frozen=True)
class Decorator:
	kind: str
	color: str = DECORATOR_COLOR
	thickness_mm: float = DECORATOR_THICKNESS_MM
	gap_mm: float = DECORATOR_GAP_MM


@dataclasses.dataclass(frozen=True)
class Element:
	id: str
	static_text: typing.Any = None
	key: str | None = None
	resolve_keys: tuple[str, ...] | None = None
	prefix: str = ""
	font_size_pt: float = 8.0
	font_weight: str = DEFAULT_FONT_WEIGHT
	align: str = DEFAULT_ALIGN
	conditional: bool = False
	decorator: Decorator | None = None
	height_mm: float = 0.0
	spacing_after_mm: float = 0.0
	offset_mm: float = 0.0


@dataclasses.dataclass(frozen=True)
class Block:
	content_width_ratio: float
	elements: tuple[Element, ...]
	positioning: str = POSITIONING_FLOW
	padding_top_mm: float = 0.0
	content_height_mm: float = 0.0


@dataclasses.dataclass(frozen=True)
class CardTemplate:
	width_mm: float
	height_mm: float
	elements: tuple[Element, ...]


@dataclasses.dataclass(frozen=True)
class GridDefinition:
	rows: int
	cols: int
	card: CardTemplate


@dataclasses.dataclass(frozen=True)
class QrField:
	key: str | None = None
	resolve_keys: tuple[str, ...] | None = None
	prefix: str = ""


@dataclasses.dataclass(frozen=True)
class QrDefinition:
	size_mm: float
	payload_fields: tuple[QrField, ...]


@dataclasses.dataclass(frozen=True)
class Segment:
	kind: str
	y_mm: float
	height_mm: float = 0.0
	block: Block | None = None
	qr: QrDefinition | None = None
	grid: GridDefinition | None = None
	style: str = DIVIDER_STYLE
	color: str = DIVIDER_COLOR


@dataclasses.dataclass(frozen=True)
class Schema:
	id: str
	name: str
	page: Page
	segments: tuple[Segment, ...]
	background: tuple[BackgroundRegion, ...] = ()


@dataclasses.dataclass(frozen=True)
class TextInstruction:
	type: typing.ClassVar[str] = "text"
	id: str
	text: str
	x_mm: float
	y_mm: float
	width_mm: float
	font_size_pt: float
	font_weight: str
	align: str
	decorator: Decorator | None = None


@dataclasses.dataclass(frozen=True)
class DividerInstruction:
	type: typing.ClassVar[str] = "divider"
	y_mm: float
	width_mm: float
	style: str
	color: str


@dataclasses.dataclass(frozen=True)
class QrInstruction:
	type: typing.ClassVar[str] = "qr"
	payload: str
	x_mm: float
	y_mm: float
	size_mm: float


Instruction = TextInstruction | DividerInstruction | QrInstruction


@dataclasses.dataclass(frozen=True)
class ComputedLayout:
	page: Page
	background: tuple[BackgroundRegion, ...]
	instructions: tuple[Instruction, ...]


#============================================
def coerce_page(override: typing.Any, fallback: Page) -> Page:
	"""
	Resolve a page override against a schema default.

	Accepts a Page or a stored page configuration mapping such as
	{"widthMm": 50, "heightMm": 120}. Anything without a usable width
	falls back to the schema page; an unusable height keeps the schema
	height.

	Args:
		override: Page, mapping, or None.
		fallback: Schema default page.

	Returns:
		Page to lay out on.
	"""
	if isinstance(override, Page):
		width = override.width_mm
		height = override.height_mm
	elif isinstance(override, collections.abc.Mapping):
		width = override.get("widthMm", override.get("width_mm"))
		height = override.get("heightMm", override.get("height_mm"))
	else:
		return fallback
	try:
		width_mm = float(width) if width else 0.0
	except (TypeError, ValueError):
		return fallback
	if width_mm <= 0.0:
		return fallback
	try:
		height_mm = float(height) if height else fallback.height_mm
	except (TypeError, ValueError):
		height_mm = fallback.height_mm
	if height_mm <= 0.0:
		height_mm = fallback.height_mm
	return Page(width_mm=width_mm, height_mm=height_mm)


#============================================
def _keys_tuple(value: typing.Any) -> tuple[str, ...] | None:
	if not value:
		return None
	return tuple(str(item) for item in value)


#============================================
def decorator_from_wire(data: collections.abc.Mapping[str, typing.Any]) -> Decorator | None:
	"""
	Build a decorator from the flattened element fields.

	Args:
		data: Element mapping with decorator, decoratorColor,
			decoratorThicknessMm and decoratorGapMm keys.

	Returns:
		Decorator or None when the element has none.
	"""
	kind = data.get("decorator")
	if not kind:
		return None
	return Decorator(
		kind=str(kind),
		color=data.get("decoratorColor") or DECORATOR_COLOR,
		thickness_mm=float(data.get("decoratorThicknessMm") or DECORATOR_THICKNESS_MM),
		gap_mm=float(data.get("decoratorGapMm") or DECORATOR_GAP_MM),
	)


#============================================
def element_from_wire(data: collections.abc.Mapping[str, typing.Any]) -> Element:
	"""
	Build an element from its camelCase mapping.

	Args:
		data: Element mapping.

	Returns:
		Element.
	"""
	return Element(
		id=str(data.get("id", "")),
		static_text=data.get("staticText"),
		key=data.get("key"),
		resolve_keys=_keys_tuple(data.get("resolveKeys")),
		prefix=data.get("prefix") or "",
		font_size_pt=float(data.get("fontSizePt", 8.0)),
		font_weight=data.get("fontWeight") or DEFAULT_FONT_WEIGHT,
		align=data.get("align") or DEFAULT_ALIGN,
		conditional=bool(data.get("conditional", False)),
		decorator=decorator_from_wire(data),
		height_mm=float(data.get("heightMm") or 0.0),
		spacing_after_mm=float(data.get("spacingAfterMm") or 0.0),
		offset_mm=float(data.get("offsetMm") or 0.0),
	)


#============================================
def segment_from_wire(data: collections.abc.Mapping[str, typing.Any]) -> Segment:
	"""
	Build a segment from its camelCase mapping.

	Unknown segment types are kept with their type string and no payload.

	Args:
		data: Segment mapping.

	Returns:
		Segment.
	"""
	kind = str(data.get("type", ""))
	y_mm = float(data.get("yMm") or 0.0)
	height_mm = float(data.get("heightMm") or 0.0)
	if kind == SEGMENT_BLOCK:
		block_data = data.get("block") or {}
		block = Block(
			content_width_ratio=float(block_data.get("contentWidthRatio", 1.0)),
			elements=tuple(element_from_wire(item) for item in block_data.get("elements", [])),
			positioning=block_data.get("positioning") or POSITIONING_FLOW,
			padding_top_mm=float(block_data.get("paddingTopMm") or 0.0),
			content_height_mm=float(block_data.get("contentHeightMm") or 0.0),
		)
		return Segment(kind=kind, y_mm=y_mm, height_mm=height_mm, block=block)
	if kind == SEGMENT_DIVIDER:
		return Segment(
			kind=kind,
			y_mm=y_mm,
			height_mm=height_mm,
			style=data.get("style") or DIVIDER_STYLE,
			color=data.get("color") or DIVIDER_COLOR,
		)
	if kind == SEGMENT_QR:
		qr_data = data.get("qr") or {}
		fields = tuple(
			QrField(
				key=item.get("key"),
				resolve_keys=_keys_tuple(item.get("resolveKeys")),
				prefix=item.get("prefix") or "",
			)
			for item in qr_data.get("payloadFields", [])
		)
		qr = QrDefinition(size_mm=float(qr_data.get("sizeMm", 0.0)), payload_fields=fields)
		return Segment(kind=kind, y_mm=y_mm, height_mm=height_mm, qr=qr)
	if kind == SEGMENT_GRID:
		card_data = data.get("card") or {}
		card = CardTemplate(
			width_mm=float(card_data.get("widthMm", 0.0)),
			height_mm=float(card_data.get("heightMm", 0.0)),
			elements=tuple(element_from_wire(item) for item in card_data.get("elements", [])),
		)
		grid = GridDefinition(
			rows=int(data.get("rows", 1)),
			cols=int(data.get("cols", 1)),
			card=card,
		)
		return Segment(kind=kind, y_mm=y_mm, height_mm=height_mm, grid=grid)
	return Segment(kind=kind, y_mm=y_mm, height_mm=height_mm)


#============================================
def schema_from_wire(data: collections.abc.Mapping[str, typing.Any]) -> Schema:
	"""
	Build a schema from its camelCase mapping.

	Args:
		data: Schema mapping as stored alongside templates.

	Returns:
		Schema.
	"""
	page_data = data.get("page") or {}
	page = Page(
		width_mm=float(page_data.get("widthMm", 0.0)),
		height_mm=float(page_data.get("heightMm", 0.0)),
	)
	background = tuple(
		BackgroundRegion(
			y_mm=float(item.get("yMm", 0.0)),
			height_mm=float(item.get("heightMm", 0.0)),
			color=str(item.get("color", "")),
		)
		for item in data.get("background") or []
	)
	segments = tuple(segment_from_wire(item) for item in data.get("segments", []))
	return Schema(
		id=str(data.get("id", "")),
		name=str(data.get("name", "")),
		page=page,
		segments=segments,
		background=background,
	)


#============================================
def instruction_to_wire(instruction: Instruction) -> dict[str, typing.Any]:
	"""
	Convert an instruction to its camelCase wire form.

	Args:
		instruction: Text, divider or QR instruction.

	Returns:
		Dictionary with a "type" tag.
	"""
	if isinstance(instruction, TextInstruction):
		decorator = instruction.decorator
		return {
			"type": instruction.type,
			"id": instruction.id,
			"text": instruction.text,
			"xMm": instruction.x_mm,
			"yMm": instruction.y_mm,
			"widthMm": instruction.width_mm,
			"fontSizePt": instruction.font_size_pt,
			"fontWeight": instruction.font_weight,
			"align": instruction.align,
			"decorator": decorator.kind if decorator else None,
			"decoratorColor": decorator.color if decorator else None,
			"decoratorThicknessMm": decorator.thickness_mm if decorator else None,
			"decoratorGapMm": decorator.gap_mm if decorator else None,
		}
	if isinstance(instruction, DividerInstruction):
		return {
			"type": instruction.type,
			"yMm": instruction.y_mm,
			"style": instruction.style,
			"color": instruction.color,
			"widthMm": instruction.width_mm,
		}
	return {
		"type": instruction.type,
		"payload": instruction.payload,
		"xMm": instruction.x_mm,
		"yMm": instruction.y_mm,
		"sizeMm": instruction.size_mm,
	}


#============================================
def layout_to_wire(layout: ComputedLayout) -> dict[str, typing.Any]:
	"""
	Convert a computed layout to its wire form.

	Args:
		layout: ComputedLayout.

	Returns:
		Dictionary with page, background and instructions.
	"""
	return {
		"page": {"widthMm": layout.page.width_mm, "heightMm": layout.page.height_mm},
		"background": [
			{"yMm": region.y_mm, "heightMm": region.height_mm, "color": region.color}
			for region in layout.background
		],
		"instructions": [instruction_to_wire(item) for item in layout.instructions],
	}

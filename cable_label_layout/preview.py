"""
On-screen preview of computed label layouts.

The preview reads the same instructions as the PDF renderer and turns them
into a tree of absolutely positioned boxes in pixels, scaled from mm by a
fixed device-independent ratio. A tree can also be painted to a PIL image.
"""

# Standard Library
import collections.abc
import dataclasses
import typing

# PIP3 modules
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import qrcode
import qrcode.constants
import qrcode.exceptions

# local repo modules
import cable_label_layout as cll
import cable_label_layout.cable_schemas
import cable_label_layout.config
import cable_label_layout.fonts
import cable_label_layout.layout
import cable_label_layout.schema


ComputedLayout = cll.schema.ComputedLayout
TextInstruction = cll.schema.TextInstruction
DividerInstruction = cll.schema.DividerInstruction
QrInstruction = cll.schema.QrInstruction
SchemaRegistry = cll.cable_schemas.SchemaRegistry
PreviewConfig = cll.config.PreviewConfig

mm_to_px = cll.config.mm_to_px
pt_to_px = cll.config.pt_to_px
lock_font = cll.fonts.lock_font
compute_flanking_rules = cll.fonts.compute_flanking_rules
hex_to_rgb255 = cll.fonts.hex_to_rgb255
compute_layout = cll.layout.compute_layout

DECORATOR_DIVIDER_LINE = cll.config.DECORATOR_DIVIDER_LINE
DECORATOR_THICKNESS_MM = cll.config.DECORATOR_THICKNESS_MM
PREVIEW_DIVIDER_THICKNESS_MM = cll.config.PREVIEW_DIVIDER_THICKNESS_MM
TEXT_COLOR = cll.config.TEXT_COLOR
PAGE_COLOR = cll.config.PAGE_COLOR
PAGE_FRAME_COLOR = cll.config.PAGE_FRAME_COLOR
QR_PLACEHOLDER_TEXT = cll.config.QR_PLACEHOLDER_TEXT
QR_PLACEHOLDER_COLOR = cll.config.QR_PLACEHOLDER_COLOR
QR_PLACEHOLDER_TEXT_COLOR = cll.config.QR_PLACEHOLDER_TEXT_COLOR
QR_PLACEHOLDER_FONT_PT = cll.config.QR_PLACEHOLDER_FONT_PT
DASH_LENGTH_PX = 4
DASH_GAP_PX = 3

NODE_PAGE = "page"
NODE_BACKGROUND = "background"
NODE_TEXT = "text"
NODE_DECORATED_TEXT = "decorated_text"
NODE_RULE = "rule"
NODE_DIVIDER = "divider"
NODE_QR = "qr"
NODE_QR_PLACEHOLDER = "qr_placeholder"


@dataclasses.dataclass
class PreviewNode:
	kind: str
	left_px: float
	top_px: float
	width_px: float
	height_px: float
	node_id: str = ""
	text: str = ""
	font_size_px: float = 0.0
	font_weight: int = 400
	align: str = "center"
	color: str = TEXT_COLOR
	border_style: str = ""
	matrix: list[list[bool]] | None = None
	children: list["PreviewNode"] = dataclasses.field(default_factory=list)


#============================================
def iter_nodes(node: PreviewNode) -> collections.abc.Iterator[PreviewNode]:
	"""
	Walk a preview tree depth-first, parents before children.
	"""
	yield node
	for child in node.children:
		yield from iter_nodes(child)


#============================================
def encode_qr_matrix(payload: str) -> list[list[bool]] | None:
	"""
	Encode a payload with the qrcode library.

	Args:
		payload: Text to encode.

	Returns:
		Module matrix without quiet zone, or None when the payload is
		empty or cannot be encoded.
	"""
	if not payload:
		return None
	qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=0)
	try:
		qr.add_data(payload)
		qr.make(fit=True)
	except (qrcode.exceptions.DataOverflowError, ValueError):
		return None
	return [[bool(cell) for cell in row] for row in qr.get_matrix()]


#============================================
def build_text_node(instruction: TextInstruction, ratio: float) -> PreviewNode:
	"""
	Build the node for a text instruction.

	A dividerLine decorator becomes a container holding the rule nodes
	and the text node, with rule spans measured from the locked font.

	Args:
		instruction: Text instruction.
		ratio: Device pixel ratio.

	Returns:
		PreviewNode.
	"""
	font = lock_font(instruction)
	font_size_px = pt_to_px(font.size_pt, ratio)
	text_node = PreviewNode(
		kind=NODE_TEXT,
		node_id=instruction.id,
		left_px=mm_to_px(instruction.x_mm, ratio),
		top_px=mm_to_px(instruction.y_mm, ratio),
		width_px=mm_to_px(instruction.width_mm, ratio),
		height_px=font_size_px,
		text=instruction.text,
		font_size_px=font_size_px,
		font_weight=700 if font.is_bold() else 400,
		align=instruction.align or "center",
	)
	decorator = instruction.decorator
	if decorator is None or decorator.kind != DECORATOR_DIVIDER_LINE:
		return text_node

	thickness_px = mm_to_px(decorator.thickness_mm or DECORATOR_THICKNESS_MM, ratio)
	container = dataclasses.replace(text_node, kind=NODE_DECORATED_TEXT, text="", children=[])
	for span in compute_flanking_rules(instruction, font):
		container.children.append(
			PreviewNode(
				kind=NODE_RULE,
				left_px=mm_to_px(span.x0_mm, ratio),
				top_px=mm_to_px(span.y_mm, ratio) - thickness_px / 2.0,
				width_px=mm_to_px(span.x1_mm - span.x0_mm, ratio),
				height_px=thickness_px,
				color=decorator.color,
			)
		)
	if instruction.text:
		container.children.append(dataclasses.replace(text_node, align="center"))
	return container


#============================================
def build_divider_node(instruction: DividerInstruction, ratio: float) -> PreviewNode:
	"""
	Build a full-width divider node, one preview thickness high.
	"""
	return PreviewNode(
		kind=NODE_DIVIDER,
		left_px=0.0,
		top_px=mm_to_px(instruction.y_mm, ratio),
		width_px=mm_to_px(instruction.width_mm, ratio),
		height_px=mm_to_px(PREVIEW_DIVIDER_THICKNESS_MM, ratio),
		color=instruction.color,
		border_style=instruction.style,
	)


#============================================
def build_qr_node(instruction: QrInstruction, ratio: float) -> PreviewNode:
	"""
	Build the node for a QR instruction.

	Args:
		instruction: QR instruction.
		ratio: Device pixel ratio.

	Returns:
		QR node with a module matrix, or a dashed placeholder box when
		there is nothing to encode or encoding failed.
	"""
	size_px = mm_to_px(instruction.size_mm, ratio)
	left_px = mm_to_px(instruction.x_mm, ratio)
	top_px = mm_to_px(instruction.y_mm, ratio)
	matrix = encode_qr_matrix(instruction.payload)
	if matrix is None:
		return PreviewNode(
			kind=NODE_QR_PLACEHOLDER,
			left_px=left_px,
			top_px=top_px,
			width_px=size_px,
			height_px=size_px,
			text=QR_PLACEHOLDER_TEXT,
			font_size_px=pt_to_px(QR_PLACEHOLDER_FONT_PT, ratio),
			color=QR_PLACEHOLDER_TEXT_COLOR,
			border_style="dashed",
		)
	return PreviewNode(
		kind=NODE_QR,
		left_px=left_px,
		top_px=top_px,
		width_px=size_px,
		height_px=size_px,
		text=instruction.payload,
		matrix=matrix,
	)


#============================================
def render_computed(computed: ComputedLayout, config: PreviewConfig | None = None) -> PreviewNode:
	"""
	Turn a computed layout into a preview tree.

	Args:
		computed: Engine output for one row.
		config: Preview configuration.

	Returns:
		Page node with background and instruction children.
	"""
	if config is None:
		config = PreviewConfig()
	ratio = config.device_pixel_ratio
	page_width_px = mm_to_px(computed.page.width_mm, ratio)
	page = PreviewNode(
		kind=NODE_PAGE,
		left_px=0.0,
		top_px=0.0,
		width_px=page_width_px,
		height_px=mm_to_px(computed.page.height_mm, ratio),
		color=PAGE_COLOR,
		border_style="solid" if config.show_frame else "",
	)
	for region in computed.background:
		page.children.append(
			PreviewNode(
				kind=NODE_BACKGROUND,
				left_px=0.0,
				top_px=mm_to_px(region.y_mm, ratio),
				width_px=page_width_px,
				height_px=mm_to_px(region.height_mm, ratio),
				color=region.color,
			)
		)
	for instruction in computed.instructions:
		if instruction.type == "text":
			page.children.append(build_text_node(instruction, ratio))
		elif instruction.type == "divider":
			page.children.append(build_divider_node(instruction, ratio))
		elif instruction.type == "qr":
			page.children.append(build_qr_node(instruction, ratio))
	return page


#============================================
def render_row(
	registry: SchemaRegistry,
	schema_key: str,
	row: typing.Any,
	page_config: typing.Any = None,
	config: PreviewConfig | None = None,
) -> PreviewNode | None:
	"""
	Preview one data row in a layout.

	Args:
		registry: Schema registry.
		schema_key: Layout key.
		row: Label data.
		page_config: Optional page override.
		config: Preview configuration.

	Returns:
		Preview tree, or None for an unknown layout key.
	"""
	schema = registry.get_schema(schema_key)
	if schema is None:
		return None
	computed = compute_layout(schema, row, page_config)
	return render_computed(computed, config)


#============================================
def _box(node: PreviewNode) -> tuple[int, int, int, int]:
	x0 = int(round(node.left_px))
	y0 = int(round(node.top_px))
	x1 = int(round(node.left_px + node.width_px))
	y1 = int(round(node.top_px + node.height_px))
	return (x0, y0, max(x0, x1 - 1), max(y0, y1 - 1))


#============================================
def _draw_dashed_line(
	draw: PIL.ImageDraw.ImageDraw,
	x0: int,
	y: int,
	x1: int,
	fill: tuple[int, int, int],
	width: int,
) -> None:
	position = x0
	while position < x1:
		end = min(position + DASH_LENGTH_PX, x1)
		draw.line((position, y, end, y), fill=fill, width=width)
		position = end + DASH_GAP_PX


#============================================
def _draw_dashed_rect(
	draw: PIL.ImageDraw.ImageDraw,
	box: tuple[int, int, int, int],
	fill: tuple[int, int, int],
) -> None:
	x0, y0, x1, y1 = box
	_draw_dashed_line(draw, x0, y0, x1, fill, 1)
	_draw_dashed_line(draw, x0, y1, x1, fill, 1)
	position = y0
	while position < y1:
		end = min(position + DASH_LENGTH_PX, y1)
		draw.line((x0, position, x0, end), fill=fill, width=1)
		draw.line((x1, position, x1, end), fill=fill, width=1)
		position = end + DASH_GAP_PX


#============================================
def _draw_text(draw: PIL.ImageDraw.ImageDraw, node: PreviewNode) -> None:
	if not node.text or node.font_size_px <= 0.0:
		return
	font = PIL.ImageFont.load_default(size=max(1.0, node.font_size_px))
	text_width = draw.textlength(node.text, font=font)
	align = node.align.lower()
	if align == "left":
		text_x = node.left_px
	elif align == "right":
		text_x = node.left_px + node.width_px - text_width
	else:
		text_x = node.left_px + (node.width_px - text_width) / 2.0
	draw.text((text_x, node.top_px), node.text, fill=hex_to_rgb255(node.color), font=font)


#============================================
def _paint_node(draw: PIL.ImageDraw.ImageDraw, node: PreviewNode) -> None:
	if node.kind in (NODE_BACKGROUND, NODE_RULE):
		draw.rectangle(_box(node), fill=hex_to_rgb255(node.color))
	elif node.kind == NODE_TEXT:
		_draw_text(draw, node)
	elif node.kind == NODE_DIVIDER:
		x0, y0, x1, _y1 = _box(node)
		line_width = max(1, int(round(node.height_px)))
		if node.border_style == "dashed":
			_draw_dashed_line(draw, x0, y0, x1, hex_to_rgb255(node.color), line_width)
		else:
			draw.line((x0, y0, x1, y0), fill=hex_to_rgb255(node.color), width=line_width)
	elif node.kind == NODE_QR and node.matrix:
		draw.rectangle(_box(node), fill=(255, 255, 255))
		module_px = node.width_px / len(node.matrix)
		for row_index, row in enumerate(node.matrix):
			for col_index, dark in enumerate(row):
				if not dark:
					continue
				x0 = node.left_px + col_index * module_px
				y0 = node.top_px + row_index * module_px
				draw.rectangle(
					(x0, y0, x0 + max(0.0, module_px - 1.0), y0 + max(0.0, module_px - 1.0)),
					fill=(0, 0, 0),
				)
	elif node.kind == NODE_QR_PLACEHOLDER:
		_draw_dashed_rect(draw, _box(node), hex_to_rgb255(QR_PLACEHOLDER_COLOR))
		centered = dataclasses.replace(
			node,
			top_px=node.top_px + (node.height_px - node.font_size_px) / 2.0,
			align="center",
		)
		_draw_text(draw, centered)
	for child in node.children:
		_paint_node(draw, child)


#============================================
def rasterize_preview(tree: PreviewNode) -> PIL.Image.Image:
	"""
	Paint a preview tree to an RGB image.

	Args:
		tree: Page node from render_row or render_computed.

	Returns:
		PIL image the size of the page in pixels.
	"""
	width = max(1, int(round(tree.width_px)))
	height = max(1, int(round(tree.height_px)))
	image = PIL.Image.new("RGB", (width, height), hex_to_rgb255(tree.color))
	draw = PIL.ImageDraw.Draw(image)
	for child in tree.children:
		_paint_node(draw, child)
	if tree.border_style:
		draw.rectangle((0, 0, width - 1, height - 1), outline=hex_to_rgb255(PAGE_FRAME_COLOR))
	return image

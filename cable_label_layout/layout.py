"""
Layout computation engine.

Turns a schema and a data row into absolutely positioned instructions in
millimetres. Both the PDF renderer and the preview read this output and
never recompute positions themselves.
"""

# Standard Library
import typing

# local repo modules
import cable_label_layout as cll
import cable_label_layout.resolver
import cable_label_layout.schema


Page = cll.schema.Page
Schema = cll.schema.Schema
Segment = cll.schema.Segment
Block = cll.schema.Block
Element = cll.schema.Element
GridDefinition = cll.schema.GridDefinition
QrDefinition = cll.schema.QrDefinition
DataRow = cll.schema.DataRow
ComputedLayout = cll.schema.ComputedLayout
Instruction = cll.schema.Instruction
TextInstruction = cll.schema.TextInstruction
DividerInstruction = cll.schema.DividerInstruction
QrInstruction = cll.schema.QrInstruction

resolve_text = cll.resolver.resolve_text
compute_qr_payload = cll.resolver.compute_qr_payload
normalize_row = cll.resolver.normalize_row


#============================================
def block_content_box(block: Block, page: Page) -> tuple[float, float]:
	"""
	Compute the horizontally centered content box of a block.

	Args:
		block: Block definition.
		page: Page being laid out.

	Returns:
		Tuple of (x_mm, width_mm).
	"""
	content_width = page.width_mm * block.content_width_ratio
	x_mm = (page.width_mm - content_width) / 2.0
	return (x_mm, content_width)


#============================================
def text_instruction(
	element: Element,
	text: str,
	x_mm: float,
	y_mm: float,
	width_mm: float,
	id_suffix: str = "",
) -> TextInstruction:
	"""
	Build a text instruction for a resolved element.
	"""
	return TextInstruction(
		id=element.id + id_suffix,
		text=text,
		x_mm=x_mm,
		y_mm=y_mm,
		width_mm=width_mm,
		font_size_pt=element.font_size_pt,
		font_weight=element.font_weight,
		align=element.align,
		decorator=element.decorator,
	)


#============================================
def compute_flow_block(
	block: Block,
	segment_y_mm: float,
	row: DataRow,
	page: Page,
) -> list[TextInstruction]:
	"""
	Stack block elements top-down from the segment origin.

	A conditional element that resolves to empty text is dropped together
	with its height and spacing, so the elements after it move up.

	Args:
		block: Flow block definition.
		segment_y_mm: Segment top in mm.
		row: Label data.
		page: Page being laid out.

	Returns:
		Text instructions in element order.
	"""
	x_mm, content_width = block_content_box(block, page)
	cursor_y = segment_y_mm + block.padding_top_mm
	instructions: list[TextInstruction] = []
	for element in block.elements:
		text = resolve_text(row, element)
		if element.conditional and not text:
			continue
		instructions.append(text_instruction(element, text, x_mm, cursor_y, content_width))
		cursor_y += element.height_mm + element.spacing_after_mm
	return instructions


#============================================
def compute_centered_block(
	block: Block,
	segment_y_mm: float,
	segment_height_mm: float,
	row: DataRow,
	page: Page,
) -> list[TextInstruction]:
	"""
	Place block elements at fixed offsets inside a vertically centered box.

	Every element is emitted at its offset, conditional ones included.
	Overlapping offsets are the schema author's problem and are not
	detected here.

	Args:
		block: Centered block definition.
		segment_y_mm: Segment top in mm.
		segment_height_mm: Segment height in mm.
		row: Label data.
		page: Page being laid out.

	Returns:
		Text instructions in element order.
	"""
	x_mm, content_width = block_content_box(block, page)
	y_start = segment_y_mm + (segment_height_mm - block.content_height_mm) / 2.0
	instructions: list[TextInstruction] = []
	for element in block.elements:
		text = resolve_text(row, element)
		y_mm = y_start + element.offset_mm
		instructions.append(text_instruction(element, text, x_mm, y_mm, content_width))
	return instructions


#============================================
def compute_qr_segment(
	qr_def: QrDefinition,
	segment_y_mm: float,
	segment_height_mm: float,
	row: DataRow,
	page: Page,
) -> list[QrInstruction]:
	"""
	Center a QR region inside its segment and attach the composed payload.
	"""
	size_mm = qr_def.size_mm
	x_mm = (page.width_mm - size_mm) / 2.0
	y_mm = segment_y_mm + (segment_height_mm - size_mm) / 2.0
	instruction = QrInstruction(
		payload=compute_qr_payload(qr_def, row),
		x_mm=x_mm,
		y_mm=y_mm,
		size_mm=size_mm,
	)
	return [instruction]


#============================================
def compute_grid_segment(
	grid: GridDefinition,
	segment_y_mm: float,
	segment_height_mm: float,
	row: DataRow,
	page: Page,
) -> list[TextInstruction]:
	"""
	Repeat a card template in every cell of a rows x cols grid.

	Element ids get a _r{row}c{col} suffix so they stay unique in the
	flattened instruction list. Every card element is emitted in every
	cell, conditional ones included.

	Args:
		grid: Grid definition.
		segment_y_mm: Segment top in mm.
		segment_height_mm: Segment height in mm.
		row: Label data.
		page: Page being laid out.

	Returns:
		Text instructions, row-major.
	"""
	if grid.rows <= 0 or grid.cols <= 0:
		return []
	cell_width = page.width_mm / grid.cols
	cell_height = segment_height_mm / grid.rows
	card = grid.card
	instructions: list[TextInstruction] = []
	for grid_row in range(grid.rows):
		for grid_col in range(grid.cols):
			card_x = grid_col * cell_width + (cell_width - card.width_mm) / 2.0
			card_y = segment_y_mm + grid_row * cell_height + (cell_height - card.height_mm) / 2.0
			suffix = f"_r{grid_row}c{grid_col}"
			for element in card.elements:
				text = resolve_text(row, element)
				y_mm = card_y + element.offset_mm
				instructions.append(
					text_instruction(element, text, card_x, y_mm, card.width_mm, id_suffix=suffix)
				)
	return instructions


#============================================
def compute_segment(segment: Segment, row: DataRow, page: Page) -> list[Instruction]:
	"""
	Dispatch one segment to its positioning algorithm.

	Segment kinds without a known algorithm, or missing their payload,
	produce nothing.

	Args:
		segment: Schema segment.
		row: Label data.
		page: Page being laid out.

	Returns:
		Instructions for the segment.
	"""
	if segment.kind == cll.schema.SEGMENT_BLOCK and segment.block is not None:
		block = segment.block
		if block.positioning == cll.schema.POSITIONING_CENTERED:
			return compute_centered_block(block, segment.y_mm, segment.height_mm, row, page)
		return compute_flow_block(block, segment.y_mm, row, page)
	if segment.kind == cll.schema.SEGMENT_DIVIDER:
		divider = DividerInstruction(
			y_mm=segment.y_mm,
			width_mm=page.width_mm,
			style=segment.style,
			color=segment.color,
		)
		return [divider]
	if segment.kind == cll.schema.SEGMENT_QR and segment.qr is not None:
		return compute_qr_segment(segment.qr, segment.y_mm, segment.height_mm, row, page)
	if segment.kind == cll.schema.SEGMENT_GRID and segment.grid is not None:
		return compute_grid_segment(segment.grid, segment.y_mm, segment.height_mm, row, page)
	return []


#============================================
def compute_layout(
	schema: Schema,
	row: typing.Any = None,
	page_override: typing.Any = None,
) -> ComputedLayout:
	"""
	Compute the full instruction list for a schema and a data row.

	The function is pure: the same schema, row and override always give an
	equal result. Missing row keys resolve to empty text and a None row is
	treated as empty.

	Args:
		schema: Layout schema.
		row: Label data mapping, None allowed.
		page_override: Optional Page or {"widthMm", "heightMm"} mapping.

	Returns:
		ComputedLayout with page, background and instructions.
	"""
	page = cll.schema.coerce_page(page_override, schema.page)
	safe_row = normalize_row(row)
	instructions: list[Instruction] = []
	for segment in schema.segments:
		instructions.extend(compute_segment(segment, safe_row, page))
	result = ComputedLayout(
		page=page,
		background=tuple(schema.background),
		instructions=tuple(instructions),
	)
	return result

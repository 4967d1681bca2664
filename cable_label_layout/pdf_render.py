"""
PDF rendering of computed label layouts.

Every row becomes one page sized to the label. This module only
interprets instructions; positions come from the layout engine.
"""

# Standard Library
import collections.abc
import io
import typing

# PIP3 modules
import pypdf
import reportlab.graphics.barcode.qrencoder
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas

# local repo modules
import cable_label_layout as cll
import cable_label_layout.cable_schemas
import cable_label_layout.config
import cable_label_layout.fonts
import cable_label_layout.layout
import cable_label_layout.schema


Page = cll.schema.Page
Schema = cll.schema.Schema
ComputedLayout = cll.schema.ComputedLayout
TextInstruction = cll.schema.TextInstruction
DividerInstruction = cll.schema.DividerInstruction
QrInstruction = cll.schema.QrInstruction
SchemaRegistry = cll.cable_schemas.SchemaRegistry
FontState = cll.fonts.FontState
RenderConfig = cll.config.RenderConfig
BatchResult = cll.config.BatchResult

mm_to_pt = cll.config.mm_to_pt
lock_font = cll.fonts.lock_font
parse_hex_color = cll.fonts.parse_hex_color
compute_flanking_rules = cll.fonts.compute_flanking_rules
compute_layout = cll.layout.compute_layout

DECORATOR_DIVIDER_LINE = cll.config.DECORATOR_DIVIDER_LINE
DECORATOR_MIN_LINE_WIDTH_PT = cll.config.DECORATOR_MIN_LINE_WIDTH_PT
DIVIDER_LINE_WIDTH_PT = cll.config.DIVIDER_LINE_WIDTH_PT
DIVIDER_DASH_MM = cll.config.DIVIDER_DASH_MM
DIVIDER_COLOR = cll.config.DIVIDER_COLOR
TEXT_COLOR = cll.config.TEXT_COLOR
DEFAULT_FONT_REGULAR = cll.config.DEFAULT_FONT_REGULAR
FALLBACK_FONT_SIZE = cll.config.FALLBACK_FONT_SIZE
FALLBACK_MARGIN_PT = cll.config.FALLBACK_MARGIN_PT
PROGRESS_UPDATE_EVERY = cll.config.PROGRESS_UPDATE_EVERY
PROGRESS_BAR_WIDTH = 20

CompletionHook = collections.abc.Callable[[BatchResult], typing.Any]


class LayoutNotFoundError(LookupError):
	"""
	Raised when a batch names a layout key the registry does not hold.
	"""


#============================================
def page_size_pt(page: Page) -> tuple[float, float]:
	"""
	Convert a page size to points.

	Args:
		page: Page in mm.

	Returns:
		Tuple of (width_pt, height_pt).
	"""
	return (mm_to_pt(page.width_mm), mm_to_pt(page.height_mm))


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def draw_aligned_text(
	pdf: reportlab.pdfgen.canvas.Canvas,
	instruction: TextInstruction,
	font: FontState,
	page_height_pt: float,
) -> None:
	"""
	Draw instruction text inside its region with the current font.

	The instruction y is the top of the text; the baseline sits one
	ascent below it.

	Args:
		pdf: ReportLab canvas with the font already applied.
		instruction: Text instruction.
		font: Locked font state for this instruction.
		page_height_pt: Page height for the y flip.
	"""
	text = str(instruction.text or "")
	if not text:
		return
	region_x = mm_to_pt(instruction.x_mm)
	region_width = mm_to_pt(instruction.width_mm)
	baseline_y = page_height_pt - mm_to_pt(instruction.y_mm) - font.ascent_pt()
	align = (instruction.align or "center").lower()
	if align == "left":
		pdf.drawString(region_x, baseline_y, text)
	elif align == "right":
		pdf.drawRightString(region_x + region_width, baseline_y, text)
	else:
		pdf.drawCentredString(region_x + region_width / 2.0, baseline_y, text)


#============================================
def draw_divider_line_decorator(
	pdf: reportlab.pdfgen.canvas.Canvas,
	instruction: TextInstruction,
	font: FontState,
	page_height_pt: float,
) -> None:
	"""
	Draw text with flanking horizontal rules, like -- LINE-001 --.

	Measurement and drawing share one locked font state so the rules
	cannot drift from the text.

	Args:
		pdf: ReportLab canvas with the font already applied.
		instruction: Decorated text instruction.
		font: Locked font state for this instruction.
		page_height_pt: Page height for the y flip.
	"""
	decorator = instruction.decorator
	line_color = parse_hex_color(decorator.color if decorator else TEXT_COLOR)
	thickness_pt = mm_to_pt(decorator.thickness_mm if decorator else 0.0)
	line_width = max(thickness_pt, DECORATOR_MIN_LINE_WIDTH_PT)

	for span in compute_flanking_rules(instruction, font):
		line_y = page_height_pt - mm_to_pt(span.y_mm)
		pdf.saveState()
		pdf.setStrokeColorRGB(line_color[0], line_color[1], line_color[2])
		pdf.setLineWidth(line_width)
		pdf.line(mm_to_pt(span.x0_mm), line_y, mm_to_pt(span.x1_mm), line_y)
		pdf.restoreState()

	if instruction.text:
		text_color = parse_hex_color(TEXT_COLOR)
		pdf.setFillColorRGB(text_color[0], text_color[1], text_color[2])
		centered = TextInstruction(
			id=instruction.id,
			text=instruction.text,
			x_mm=instruction.x_mm,
			y_mm=instruction.y_mm,
			width_mm=instruction.width_mm,
			font_size_pt=instruction.font_size_pt,
			font_weight=instruction.font_weight,
			align="center",
			decorator=instruction.decorator,
		)
		draw_aligned_text(pdf, centered, font, page_height_pt)


#============================================
def draw_text_instruction(
	pdf: reportlab.pdfgen.canvas.Canvas,
	instruction: TextInstruction,
	page_height_pt: float,
) -> None:
	"""
	Draw a text instruction, with its decorator when it has one.

	Args:
		pdf: ReportLab canvas.
		instruction: Text instruction.
		page_height_pt: Page height for the y flip.
	"""
	font = lock_font(instruction)
	font.apply(pdf)
	decorator = instruction.decorator
	if decorator is not None and decorator.kind == DECORATOR_DIVIDER_LINE:
		draw_divider_line_decorator(pdf, instruction, font, page_height_pt)
		return
	color = parse_hex_color(TEXT_COLOR)
	pdf.setFillColorRGB(color[0], color[1], color[2])
	draw_aligned_text(pdf, instruction, font, page_height_pt)


#============================================
def draw_divider_instruction(
	pdf: reportlab.pdfgen.canvas.Canvas,
	instruction: DividerInstruction,
	page_height_pt: float,
) -> None:
	"""
	Draw a full-width divider rule.

	Args:
		pdf: ReportLab canvas.
		instruction: Divider instruction.
		page_height_pt: Page height for the y flip.
	"""
	line_y = page_height_pt - mm_to_pt(instruction.y_mm)
	color = parse_hex_color(instruction.color or DIVIDER_COLOR)
	pdf.saveState()
	if instruction.style == "dashed":
		pdf.setDash(mm_to_pt(DIVIDER_DASH_MM), mm_to_pt(DIVIDER_DASH_MM))
	pdf.setStrokeColorRGB(color[0], color[1], color[2])
	pdf.setLineWidth(DIVIDER_LINE_WIDTH_PT)
	pdf.line(0.0, line_y, mm_to_pt(instruction.width_mm), line_y)
	pdf.restoreState()


#============================================
def build_qr_matrix(payload: str) -> list[list[bool]]:
	"""
	Encode a payload into a QR module matrix without quiet zone.

	Args:
		payload: Text to encode.

	Returns:
		Square matrix of dark-module flags, row-major from the top.
	"""
	level = getattr(
		reportlab.graphics.barcode.qrencoder.QRErrorCorrectLevel,
		cll.config.QR_ERROR_LEVEL,
	)
	qr = reportlab.graphics.barcode.qrencoder.QRCode(None, level)
	qr.addData(payload)
	qr.make()
	count = qr.getModuleCount()
	return [[bool(qr.isDark(row, col)) for col in range(count)] for row in range(count)]


#============================================
def draw_qr_instruction(
	pdf: reportlab.pdfgen.canvas.Canvas,
	instruction: QrInstruction,
	page_height_pt: float,
) -> None:
	"""
	Draw a QR matrix as filled squares on a white backing square.

	Empty payloads draw nothing.

	Args:
		pdf: ReportLab canvas.
		instruction: QR instruction.
		page_height_pt: Page height for the y flip.
	"""
	if not instruction.payload:
		return
	matrix = build_qr_matrix(instruction.payload)
	module_count = len(matrix)
	if module_count == 0:
		return
	module_mm = instruction.size_mm / module_count
	module_pt = mm_to_pt(module_mm)

	pdf.saveState()
	pdf.setFillColorRGB(1.0, 1.0, 1.0)
	size_pt = mm_to_pt(instruction.size_mm)
	top_pt = page_height_pt - mm_to_pt(instruction.y_mm)
	pdf.rect(mm_to_pt(instruction.x_mm), top_pt - size_pt, size_pt, size_pt, stroke=0, fill=1)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	for row_index, row in enumerate(matrix):
		for col_index, dark in enumerate(row):
			if not dark:
				continue
			module_x = mm_to_pt(instruction.x_mm + col_index * module_mm)
			module_top = page_height_pt - mm_to_pt(instruction.y_mm + row_index * module_mm)
			pdf.rect(module_x, module_top - module_pt, module_pt, module_pt, stroke=0, fill=1)
	pdf.restoreState()


#============================================
def draw_background(
	pdf: reportlab.pdfgen.canvas.Canvas,
	computed: ComputedLayout,
	page_height_pt: float,
) -> None:
	"""
	Fill the background regions of a layout across the page width.
	"""
	width_pt = mm_to_pt(computed.page.width_mm)
	for region in computed.background:
		color = parse_hex_color(region.color)
		pdf.setFillColorRGB(color[0], color[1], color[2])
		top_pt = page_height_pt - mm_to_pt(region.y_mm)
		height_pt = mm_to_pt(region.height_mm)
		pdf.rect(0.0, top_pt - height_pt, width_pt, height_pt, stroke=0, fill=1)


#============================================
def draw_computed_layout(
	pdf: reportlab.pdfgen.canvas.Canvas,
	computed: ComputedLayout,
	config: RenderConfig,
) -> None:
	"""
	Draw one computed layout onto the current canvas page.

	Args:
		pdf: ReportLab canvas sized to the layout page.
		computed: Engine output for one row.
		config: Render configuration.
	"""
	page_height_pt = mm_to_pt(computed.page.height_mm)
	if config.draw_background:
		draw_background(pdf, computed, page_height_pt)
	for instruction in computed.instructions:
		if instruction.type == "text":
			draw_text_instruction(pdf, instruction, page_height_pt)
		elif instruction.type == "divider":
			draw_divider_instruction(pdf, instruction, page_height_pt)
		elif instruction.type == "qr":
			draw_qr_instruction(pdf, instruction, page_height_pt)


#============================================
def render_layout_pdf(computed: ComputedLayout, config: RenderConfig) -> bytes:
	"""
	Render one computed layout to a single-page PDF.

	Args:
		computed: Engine output for one row.
		config: Render configuration.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=page_size_pt(computed.page))
	draw_computed_layout(pdf, computed, config)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def render_fallback_pdf(index: int, error: Exception) -> bytes:
	"""
	Render a visible A4 error page for a row that failed to draw.

	Args:
		index: Zero-based row index.
		error: Exception raised while rendering.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	page_width, page_height = reportlab.lib.pagesizes.A4
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	pdf.setFont(DEFAULT_FONT_REGULAR, FALLBACK_FONT_SIZE)
	message = f"Error rendering item {index + 1}: {error}"
	pdf.drawString(FALLBACK_MARGIN_PT, page_height - FALLBACK_MARGIN_PT, message)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def first_page(data: bytes) -> pypdf.PageObject:
	reader = pypdf.PdfReader(io.BytesIO(data))
	return reader.pages[0]


#============================================
def iter_row_pages(
	schema: Schema,
	rows: collections.abc.Iterable[typing.Any],
	page_config: typing.Any = None,
	config: RenderConfig | None = None,
) -> collections.abc.Iterator[tuple[int, pypdf.PageObject, bool]]:
	"""
	Lay out and render rows one at a time.

	Rows are pulled lazily, so a caller that stops iterating stops the
	rendering. A row that fails is replaced by a fallback page.

	Args:
		schema: Layout schema.
		rows: Iterable of data rows.
		page_config: Optional page override.
		config: Render configuration.

	Yields:
		Tuples of (row_index, page, rendered_ok).
	"""
	if config is None:
		config = RenderConfig()
	for index, row in enumerate(rows):
		try:
			computed = compute_layout(schema, row, page_config)
			page = first_page(render_layout_pdf(computed, config))
		except Exception as error:
			print(f"[LabelEngine] Error rendering item {index}: {error}")
			yield (index, first_page(render_fallback_pdf(index, error)), False)
			continue
		yield (index, page, True)


#============================================
def _as_hooks(on_complete: typing.Any) -> list[CompletionHook]:
	if on_complete is None:
		return []
	if callable(on_complete):
		return [on_complete]
	return list(on_complete)


#============================================
def write_batch(
	registry: SchemaRegistry,
	schema_key: str,
	rows: collections.abc.Iterable[typing.Any],
	output: typing.BinaryIO,
	page_config: typing.Any = None,
	on_complete: typing.Any = None,
	config: RenderConfig | None = None,
) -> BatchResult:
	"""
	Render a batch of rows for one layout into a PDF stream.

	Completion hooks run after the document has been fully written; a
	failing hook is reported and does not fail the batch.

	Args:
		registry: Schema registry.
		schema_key: Layout key.
		rows: Iterable of data rows.
		output: Writable binary stream.
		page_config: Optional page override, defaults to the layout page.
		on_complete: Callable or iterable of callables taking the result.
		config: Render configuration.

	Returns:
		BatchResult.
	"""
	schema = registry.get_schema(schema_key)
	if schema is None:
		raise LayoutNotFoundError(f"Layout not found: {schema_key}")
	if config is None:
		config = RenderConfig()
	if page_config is None:
		info = registry.layouts.get(schema_key)
		page_config = info.page_defaults if info is not None else schema.page

	total = len(rows) if isinstance(rows, collections.abc.Sized) else 0
	writer = pypdf.PdfWriter()
	failed_rows: list[int] = []
	row_count = 0
	for index, page, rendered_ok in iter_row_pages(schema, rows, page_config, config):
		writer.add_page(page)
		row_count += 1
		if not rendered_ok:
			failed_rows.append(index)
		if config.verbose and (row_count % PROGRESS_UPDATE_EVERY == 0 or row_count == total):
			print_progress("Labels", row_count, total)
	if config.verbose and total > 0:
		print()

	writer.write(output)
	result = BatchResult(
		schema_key=schema_key,
		rows=row_count,
		pages=len(writer.pages),
		failed_rows=failed_rows,
	)
	for hook in _as_hooks(on_complete):
		try:
			hook(result)
		except Exception as error:
			print(f"[LabelEngine] onComplete hook failed: {error}")
	return result


#============================================
def render_batch(
	registry: SchemaRegistry,
	schema_key: str,
	rows: collections.abc.Iterable[typing.Any],
	page_config: typing.Any = None,
	on_complete: typing.Any = None,
	config: RenderConfig | None = None,
) -> io.BytesIO:
	"""
	Render a batch of rows into an in-memory PDF stream.

	Args:
		registry: Schema registry.
		schema_key: Layout key.
		rows: Iterable of data rows.
		page_config: Optional page override.
		on_complete: Completion hook or hooks.
		config: Render configuration.

	Returns:
		BytesIO positioned at the start of the PDF.
	"""
	output = io.BytesIO()
	write_batch(
		registry,
		schema_key,
		rows,
		output,
		page_config=page_config,
		on_complete=on_complete,
		config=config,
	)
	output.seek(0)
	return output

"""
CLI entry points for cable label printing.
"""

# Standard Library
import argparse
import json
import pathlib
import time

# local repo modules
import cable_label_layout as cll
import cable_label_layout.cable_schemas
import cable_label_layout.config
import cable_label_layout.layout
import cable_label_layout.pdf_render
import cable_label_layout.preview
import cable_label_layout.rows
import cable_label_layout.schema


Page = cll.schema.Page
RenderConfig = cll.config.RenderConfig
PreviewConfig = cll.config.PreviewConfig
CableBatchConfig = cll.rows.CableBatchConfig
SchemaRegistry = cll.cable_schemas.SchemaRegistry


#============================================
def build_page_override(args: argparse.Namespace) -> Page | None:
	"""
	Build a page override from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Page or None when no width was given.
	"""
	if not args.page_width:
		return None
	height = args.page_height
	if not height:
		height = cll.config.CABLE_PAGE_HEIGHT_MM
	return Page(width_mm=args.page_width, height_mm=height)


#============================================
def build_batch_config(args: argparse.Namespace) -> CableBatchConfig:
	"""
	Build a numbered batch configuration from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		CableBatchConfig.
	"""
	return CableBatchConfig(
		a_side_base=args.a_side,
		z_side_base=args.z_side,
		start_number=args.start,
		end_number=args.end,
		step=args.step,
		pad_length=args.pad_length,
		serial_prefix=args.serial_prefix,
		serial_suffix=args.serial_suffix,
		line_prefix=args.line_prefix,
		port_a_start=args.port_a_start,
		port_b_start=args.port_b_start,
		port_step=args.port_step,
	)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render cable labels to a print-ready PDF.")
	parser.add_argument("-L", "--layout", dest="layout", default="layout-a", help="Layout key.")
	parser.add_argument("--list-layouts", dest="list_layouts", action="store_true", help="List layouts and exit.")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-i", "--input", dest="input_path", default=None, help="Rows as JSON list, .xlsx workbook or CSV sheet.")
	input_group.add_argument("-a", "--a-side", dest="a_side", default="", help="A-side device base name.")
	input_group.add_argument("-z", "--z-side", dest="z_side", default="", help="Z-side device base name.")
	input_group.add_argument("--start", dest="start", type=int, default=1, help="First serial number.")
	input_group.add_argument("--end", dest="end", type=int, default=1, help="Last serial number.")
	input_group.add_argument("--step", dest="step", type=int, default=1, help="Serial number step.")
	input_group.add_argument("--pad-length", dest="pad_length", type=int, default=3, help="Zero padding of serials.")
	input_group.add_argument("--serial-prefix", dest="serial_prefix", default="", help="Serial prefix.")
	input_group.add_argument("--serial-suffix", dest="serial_suffix", default="", help="Serial suffix.")
	input_group.add_argument("--line-prefix", dest="line_prefix", default="LINE-", help="Line id prefix.")
	input_group.add_argument("--port-a-start", dest="port_a_start", type=int, default=1, help="First A-side port.")
	input_group.add_argument("--port-b-start", dest="port_b_start", type=int, default=1, help="First B-side port.")
	input_group.add_argument("--port-step", dest="port_step", type=int, default=1, help="Port step per label.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-j", "--instructions", dest="instructions_path", default=None, help="Write first-row instructions as JSON.")
	output_group.add_argument("-p", "--preview", dest="preview_path", default=None, help="Write first-row preview PNG.")
	output_group.add_argument("-r", "--pixel-ratio", dest="pixel_ratio", type=float, default=2.0, help="Preview device pixel ratio.")

	page_group = parser.add_argument_group("Page")
	page_group.add_argument("-W", "--page-width", dest="page_width", type=float, default=None, help="Page width override in mm.")
	page_group.add_argument("-H", "--page-height", dest="page_height", type=float, default=None, help="Page height override in mm.")
	page_group.add_argument("-b", "--draw-background", dest="draw_background", action="store_true", help="Print background regions.")

	args = parser.parse_args(argv)
	return args


#============================================
def print_layouts(registry: SchemaRegistry) -> None:
	"""
	Print the registered layouts.
	"""
	for info in registry.list_layouts():
		page = info.page_defaults
		print(f"{info.key}: {info.name} ({page.width_mm}mm x {page.height_mm}mm)")
		print(f"  {info.description}")
		print(f"  Columns: {', '.join(info.preview_columns)}")


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the full pipeline from input rows to PDF and preview.

	Args:
		args: Parsed argparse namespace.
	"""
	registry = cll.cable_schemas.build_cable_registry()
	if args.list_layouts:
		print_layouts(registry)
		return

	schema = registry.get_schema(args.layout)
	if schema is None:
		print(f"Unknown layout: {args.layout}")
		print(f"Known layouts: {', '.join(registry.keys())}")
		return

	print("Cable label pipeline")
	print(f"Layout: {schema.id} ({schema.name})")
	page_override = build_page_override(args)
	if page_override is not None:
		print(f"Page override: {page_override.width_mm}mm x {page_override.height_mm}mm")

	start_time = time.perf_counter()
	if args.input_path:
		rows = cll.rows.load_rows(pathlib.Path(args.input_path))
	else:
		rows = cll.rows.build_cable_rows(schema.id, build_batch_config(args))
	print(f"Rows loaded: {len(rows)}")

	first_row = rows[0] if rows else cll.rows.sample_row(schema.id)
	if args.instructions_path:
		computed = cll.layout.compute_layout(schema, first_row, page_override)
		instructions_path = pathlib.Path(args.instructions_path)
		with instructions_path.open("w", encoding="utf-8") as handle:
			json.dump(cll.schema.layout_to_wire(computed), handle, indent=2, sort_keys=True)
		print(f"Instructions written: {instructions_path}")

	if args.preview_path:
		preview_config = PreviewConfig(device_pixel_ratio=args.pixel_ratio)
		tree = cll.preview.render_row(registry, schema.id, first_row, page_override, preview_config)
		image = cll.preview.rasterize_preview(tree)
		image.save(args.preview_path)
		print(f"Preview written: {args.preview_path}")

	if args.output_path:
		output_path = pathlib.Path(args.output_path)
		render_config = RenderConfig(draw_background=args.draw_background, verbose=True)
		with output_path.open("wb") as handle:
			result = cll.pdf_render.write_batch(
				registry,
				schema.id,
				rows,
				handle,
				page_config=page_override,
				config=render_config,
			)
		print(f"Output PDF: {output_path}")
		print(f"Pages written: {result.pages}")
		if result.failed_rows:
			print(f"Rows failed: {len(result.failed_rows)}")

	total_time = time.perf_counter() - start_time
	print(f"Timing: total={total_time:.2f}s")


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	run_pipeline(args)

"""
Cable label layout schemas and the schema registry.

All dimensions are millimetres, all font sizes points. No rendering logic
lives here, only data.
"""

# Standard Library
import dataclasses
import types
import typing

# local repo modules
import cable_label_layout as cll
import cable_label_layout.config
import cable_label_layout.schema


Page = cll.schema.Page
BackgroundRegion = cll.schema.BackgroundRegion
Decorator = cll.schema.Decorator
Element = cll.schema.Element
Block = cll.schema.Block
CardTemplate = cll.schema.CardTemplate
GridDefinition = cll.schema.GridDefinition
QrField = cll.schema.QrField
QrDefinition = cll.schema.QrDefinition
Segment = cll.schema.Segment
Schema = cll.schema.Schema

SEGMENT_HEIGHT_MM = cll.config.SEGMENT_HEIGHT_MM
DIVIDER_STYLE = cll.config.DIVIDER_STYLE
DIVIDER_COLOR = cll.config.DIVIDER_COLOR

CABLE_PAGE = Page(
	width_mm=cll.config.CABLE_PAGE_WIDTH_MM,
	height_mm=cll.config.CABLE_PAGE_HEIGHT_MM,
)

SERIAL_KEYS = ("additionalText", "serial", "lineId")

#============================================
# Layout A - standard cable

LAYOUT_A_BLOCK = Block(
	content_width_ratio=0.92,
	padding_top_mm=2.0,
	positioning=cll.schema.POSITIONING_FLOW,
	elements=(
		Element(
			id="additionalText",
			resolve_keys=SERIAL_KEYS,
			font_size_pt=6.2,
			font_weight="bold",
			height_mm=2.2,
			spacing_after_mm=1.6,
			conditional=True,
			decorator=Decorator(
				kind=cll.config.DECORATOR_DIVIDER_LINE,
				color="#000000",
				thickness_mm=0.3,
				gap_mm=1.0,
			),
		),
		Element(id="aSide", key="aSide", font_size_pt=8.0, font_weight="bold", height_mm=2.8, spacing_after_mm=1.2),
		Element(
			id="portA",
			key="portA",
			prefix="Port ",
			font_size_pt=6.0,
			height_mm=2.1,
			spacing_after_mm=1.2,
			conditional=True,
		),
		Element(id="arrow", static_text="<->", font_size_pt=6.5, height_mm=2.3, spacing_after_mm=1.2),
		Element(id="zSide", key="zSide", font_size_pt=8.0, font_weight="bold", height_mm=2.8, spacing_after_mm=1.2),
		Element(
			id="portB",
			key="portB",
			prefix="Port ",
			font_size_pt=6.0,
			height_mm=2.1,
			spacing_after_mm=0.0,
			conditional=True,
		),
	),
)

#============================================
# Layout B - compact cable

LAYOUT_B_BLOCK = Block(
	content_width_ratio=0.86,
	positioning=cll.schema.POSITIONING_CENTERED,
	content_height_mm=12.8,
	elements=(
		Element(id="aSide", key="aSide", font_size_pt=7.6, font_weight="bold", offset_mm=0.0),
		Element(id="arrow", static_text="<->", font_size_pt=6.6, offset_mm=4.2),
		Element(id="zSide", key="zSide", font_size_pt=7.6, font_weight="bold", offset_mm=8.5),
	),
)

#============================================
# Layout C - 2 x 2 grid cards

LAYOUT_C_CARD = CardTemplate(
	width_mm=16.0,
	height_mm=13.0,
	elements=(
		Element(id="lineName", key="lineName", font_size_pt=5.8, font_weight="bold", offset_mm=0.0),
		Element(id="aSide", key="aSide", font_size_pt=5.4, offset_mm=4.1),
		Element(id="zSide", key="zSide", font_size_pt=5.4, offset_mm=8.2),
	),
)

#============================================
# QR payload

QR_SEGMENT_DEF = QrDefinition(
	size_mm=21.0,
	payload_fields=(
		QrField(resolve_keys=SERIAL_KEYS),
		QrField(key="aSide", prefix="Device A: "),
		QrField(key="portA", prefix="Port A: "),
		QrField(key="zSide", prefix="Device B: "),
		QrField(key="portB", prefix="Port B: "),
	),
)

DIVIDER_SEGMENT = Segment(
	kind=cll.schema.SEGMENT_DIVIDER,
	y_mm=SEGMENT_HEIGHT_MM,
	style=DIVIDER_STYLE,
	color=DIVIDER_COLOR,
)

# Lower half of the page wraps under the laminate.
LAMINATE_BACKGROUND = (
	BackgroundRegion(y_mm=50.8, height_mm=50.8, color="#f1f5f9"),
)

LAYOUT_A = Schema(
	id="layout-a",
	name="Standard Cable (A)",
	page=CABLE_PAGE,
	background=LAMINATE_BACKGROUND,
	segments=(
		Segment(kind="block", y_mm=0.0, height_mm=SEGMENT_HEIGHT_MM, block=LAYOUT_A_BLOCK),
		DIVIDER_SEGMENT,
		Segment(kind="block", y_mm=SEGMENT_HEIGHT_MM, height_mm=SEGMENT_HEIGHT_MM, block=LAYOUT_A_BLOCK),
	),
)

LAYOUT_A_QR = Schema(
	id="layout-a-qr",
	name="Standard Cable Label + QR",
	page=CABLE_PAGE,
	background=LAMINATE_BACKGROUND,
	segments=(
		Segment(kind="block", y_mm=0.0, height_mm=SEGMENT_HEIGHT_MM, block=LAYOUT_A_BLOCK),
		DIVIDER_SEGMENT,
		Segment(kind="qr", y_mm=SEGMENT_HEIGHT_MM, height_mm=SEGMENT_HEIGHT_MM, qr=QR_SEGMENT_DEF),
	),
)

LAYOUT_B = Schema(
	id="layout-b",
	name="Compact Cable (B)",
	page=CABLE_PAGE,
	segments=(
		Segment(kind="block", y_mm=0.0, height_mm=SEGMENT_HEIGHT_MM, block=LAYOUT_B_BLOCK),
		Segment(kind="block", y_mm=SEGMENT_HEIGHT_MM, height_mm=SEGMENT_HEIGHT_MM, block=LAYOUT_B_BLOCK),
	),
)

LAYOUT_C = Schema(
	id="layout-c",
	name="Grid Cable (C)",
	page=CABLE_PAGE,
	segments=(
		Segment(
			kind="grid",
			y_mm=0.0,
			height_mm=SEGMENT_HEIGHT_MM * 2.0,
			grid=GridDefinition(rows=2, cols=2, card=LAYOUT_C_CARD),
		),
	),
)


@dataclasses.dataclass(frozen=True)
class LayoutInfo:
	key: str
	name: str
	description: str
	page_defaults: Page
	preview_columns: tuple[str, ...]
	print_half_mm: float = SEGMENT_HEIGHT_MM


@dataclasses.dataclass(frozen=True)
class SchemaRegistry:
	schemas: typing.Mapping[str, Schema]
	layouts: typing.Mapping[str, LayoutInfo]

	def get_schema(self, key: str | None) -> Schema | None:
		"""
		Look up a schema by layout key.

		Args:
			key: Layout key such as "layout-a".

		Returns:
			Schema or None for unknown keys.
		"""
		if key is None:
			return None
		return self.schemas.get(key)

	def list_layouts(self) -> list[LayoutInfo]:
		"""
		List layout metadata in registration order.
		"""
		return list(self.layouts.values())

	def keys(self) -> list[str]:
		"""
		Layout keys in registration order.
		"""
		return list(self.schemas.keys())


#============================================
def build_registry(entries: typing.Iterable[tuple[Schema, LayoutInfo]]) -> SchemaRegistry:
	"""
	Build a read-only registry from schema and metadata pairs.

	Args:
		entries: Pairs of (schema, layout info), later keys win.

	Returns:
		SchemaRegistry.
	"""
	schemas: dict[str, Schema] = {}
	layouts: dict[str, LayoutInfo] = {}
	for schema, info in entries:
		if schema.id in schemas:
			print(f"[LabelRegistry] Overwriting layout: {schema.id}")
		schemas[schema.id] = schema
		layouts[schema.id] = info
	return SchemaRegistry(
		schemas=types.MappingProxyType(schemas),
		layouts=types.MappingProxyType(layouts),
	)


#============================================
def build_cable_registry() -> SchemaRegistry:
	"""
	Build the registry of the shipped cable layouts.

	Returns:
		SchemaRegistry with layout-a, layout-a-qr, layout-b and layout-c.
	"""
	entries = [
		(
			LAYOUT_A,
			LayoutInfo(
				key=LAYOUT_A.id,
				name=LAYOUT_A.name,
				description="A/B port mapping with separate port lines.",
				page_defaults=LAYOUT_A.page,
				preview_columns=("A-Side", "Port A", "Z-Side", "Port B", "Line ID"),
			),
		),
		(
			LAYOUT_A_QR,
			LayoutInfo(
				key=LAYOUT_A_QR.id,
				name=LAYOUT_A_QR.name,
				description="Standard A layout with QR code at bottom.",
				page_defaults=LAYOUT_A_QR.page,
				preview_columns=("A-Side", "Port A", "Z-Side", "Port B", "Line ID"),
			),
		),
		(
			LAYOUT_B,
			LayoutInfo(
				key=LAYOUT_B.id,
				name=LAYOUT_B.name,
				description="Compact A/Z endpoint layout with inline port mapping.",
				page_defaults=LAYOUT_B.page,
				preview_columns=("A-Side", "Z-Side", "Line ID"),
			),
		),
		(
			LAYOUT_C,
			LayoutInfo(
				key=LAYOUT_C.id,
				name=LAYOUT_C.name,
				description="Four-up compact card layout with line name and endpoints.",
				page_defaults=LAYOUT_C.page,
				preview_columns=("Line Name", "A-Side", "Z-Side"),
			),
		),
	]
	return build_registry(entries)

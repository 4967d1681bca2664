import pytest

import cable_label_layout.fonts
import cable_label_layout.schema

fonts = cable_label_layout.fonts


#============================================
def _decorated(text: str, width_mm: float = 30.0):
	return cable_label_layout.schema.TextInstruction(
		id="serial",
		text=text,
		x_mm=4.0,
		y_mm=2.0,
		width_mm=width_mm,
		font_size_pt=6.2,
		font_weight="bold",
		align="center",
		decorator=cable_label_layout.schema.Decorator(kind="dividerLine", gap_mm=1.0),
	)


#============================================
def test_font_weight_mapping() -> None:
	assert fonts.map_font_name("bold") == "Helvetica-Bold"
	assert fonts.map_font_name("normal") == "Helvetica"
	assert fonts.map_font_name(None) == "Helvetica"
	assert fonts.map_font_name("heavy") == "Helvetica"
	state = fonts.lock_font(_decorated("X"))
	assert state == fonts.FontState("Helvetica-Bold", 6.2)
	assert state.is_bold()


#============================================
def test_flanking_rules_surround_text() -> None:
	"""
	Two rules sit gap_mm away from the centered text width.
	"""
	instruction = _decorated("LINE-001")
	state = fonts.lock_font(instruction)
	left, right = fonts.compute_flanking_rules(instruction, state)
	text_width = state.string_width_mm("LINE-001")
	center = 4.0 + 15.0
	assert left.x0_mm == pytest.approx(4.0)
	assert left.x1_mm == pytest.approx(center - text_width / 2.0 - 1.0)
	assert right.x0_mm == pytest.approx(center + text_width / 2.0 + 1.0)
	assert right.x1_mm == pytest.approx(34.0)
	assert left.y_mm == right.y_mm
	assert left.y_mm > 2.0


#============================================
def test_flanking_rules_edge_cases() -> None:
	empty = _decorated("")
	spans = fonts.compute_flanking_rules(empty, fonts.lock_font(empty))
	assert len(spans) == 1
	assert spans[0].x1_mm - spans[0].x0_mm == pytest.approx(30.0)
	crowded = _decorated("A VERY LONG SERIAL NUMBER TEXT", width_mm=10.0)
	assert fonts.compute_flanking_rules(crowded, fonts.lock_font(crowded)) == []


#============================================
def test_parse_hex_color() -> None:
	assert fonts.parse_hex_color("#ff0000") == (1.0, 0.0, 0.0)
	assert fonts.parse_hex_color("#zzzzzz") == (0.0, 0.0, 0.0)
	assert fonts.parse_hex_color(None) == (0.0, 0.0, 0.0)
	assert fonts.hex_to_rgb255("#94a3b8") == (148, 163, 184)

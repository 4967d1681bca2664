import pytest

import cable_label_layout.cable_schemas
import cable_label_layout.layout
import cable_label_layout.schema

compute_layout = cable_label_layout.layout.compute_layout
Page = cable_label_layout.schema.Page
LAYOUT_A = cable_label_layout.cable_schemas.LAYOUT_A
LAYOUT_A_QR = cable_label_layout.cable_schemas.LAYOUT_A_QR
LAYOUT_B = cable_label_layout.cable_schemas.LAYOUT_B
LAYOUT_C = cable_label_layout.cable_schemas.LAYOUT_C
SEGMENT_HEIGHT_MM = cable_label_layout.cable_schemas.SEGMENT_HEIGHT_MM

PORT_ROW = {"aSide": "Switch-A", "portA": "1/0/1", "zSide": "Switch-B", "portB": "1/0/2"}


#============================================
def _by_type(result, kind: str) -> list:
	return [item for item in result.instructions if item.type == kind]


#============================================
def test_layout_a_port_row_counts() -> None:
	"""
	Layout A with ports but no serial gives 10 texts and 1 divider.
	"""
	result = compute_layout(LAYOUT_A, PORT_ROW)
	texts = _by_type(result, "text")
	assert len(texts) == 10
	assert len(_by_type(result, "divider")) == 1
	assert len(result.instructions) == 11
	assert "additionalText" not in [item.id for item in texts]


#============================================
def test_layout_a_flow_positions() -> None:
	"""
	Flow elements stack from the padded segment top.
	"""
	result = compute_layout(LAYOUT_A, PORT_ROW)
	texts = _by_type(result, "text")
	first_block = texts[:5]
	assert [item.id for item in first_block] == ["aSide", "portA", "arrow", "zSide", "portB"]
	expected_y = [2.0, 6.0, 9.3, 12.8, 16.8]
	for item, y_mm in zip(first_block, expected_y):
		assert item.y_mm == pytest.approx(y_mm)
		assert item.x_mm == pytest.approx(38.1 * 0.04)
		assert item.width_mm == pytest.approx(38.1 * 0.92)
	second_block = texts[5:]
	for upper, lower in zip(first_block, second_block):
		assert lower.y_mm == pytest.approx(upper.y_mm + SEGMENT_HEIGHT_MM)
	assert texts[1].text == "Port 1/0/1"
	assert texts[2].text == "<->"


#============================================
def test_layout_a_elision_closes_gaps() -> None:
	"""
	Missing conditional fields vanish along with their vertical space.
	"""
	result = compute_layout(LAYOUT_A, {"aSide": "A", "zSide": "B"})
	ids = [item.id for item in _by_type(result, "text")]
	assert "portA" not in ids
	assert "portB" not in ids
	assert "additionalText" not in ids
	first_block = _by_type(result, "text")[:3]
	assert [item.id for item in first_block] == ["aSide", "arrow", "zSide"]
	assert first_block[0].y_mm == pytest.approx(2.0)
	assert first_block[1].y_mm == pytest.approx(2.0 + 2.8 + 1.2)
	assert first_block[2].y_mm == pytest.approx(2.0 + 2.8 + 1.2 + 2.3 + 1.2)


#============================================
def test_layout_a_serial_gets_decorator() -> None:
	"""
	A resolved serial line is emitted first with its decorator.
	"""
	result = compute_layout(LAYOUT_A, dict(PORT_ROW, lineId="LINE-001"))
	first = result.instructions[0]
	assert first.id == "additionalText"
	assert first.text == "LINE-001"
	assert first.decorator is not None
	assert first.decorator.kind == "dividerLine"
	assert first.decorator.gap_mm == pytest.approx(1.0)
	assert result.instructions[1].y_mm == pytest.approx(2.0 + 2.2 + 1.6)


#============================================
def test_layout_a_background_and_divider() -> None:
	"""
	Layout A carries the laminate region and a dashed divider.
	"""
	result = compute_layout(LAYOUT_A, PORT_ROW)
	assert result.page == Page(38.1, 101.6)
	assert len(result.background) == 1
	assert result.background[0].y_mm == pytest.approx(50.8)
	divider = _by_type(result, "divider")[0]
	assert divider.y_mm == pytest.approx(SEGMENT_HEIGHT_MM)
	assert divider.width_mm == pytest.approx(38.1)
	assert divider.style == "dashed"
	assert divider.color == "#94a3b8"


#============================================
def test_layout_a_qr_empty_row() -> None:
	"""
	An empty row still yields exactly one QR instruction, empty payload.
	"""
	result = compute_layout(LAYOUT_A_QR, {})
	codes = _by_type(result, "qr")
	assert len(codes) == 1
	assert codes[0].payload == ""
	assert codes[0].size_mm == pytest.approx(21.0)
	assert codes[0].x_mm == pytest.approx((38.1 - 21.0) / 2.0)
	assert codes[0].y_mm == pytest.approx(SEGMENT_HEIGHT_MM + (SEGMENT_HEIGHT_MM - 21.0) / 2.0)


#============================================
def test_layout_a_qr_payload_is_composed() -> None:
	"""
	The QR instruction carries the already composed payload.
	"""
	result = compute_layout(LAYOUT_A_QR, dict(PORT_ROW, serial="SN-1"))
	code = _by_type(result, "qr")[0]
	assert code.payload.splitlines() == [
		"SN-1",
		"Device A: Switch-A",
		"Port A: 1/0/1",
		"Device B: Switch-B",
		"Port B: 1/0/2",
	]


#============================================
def test_layout_b_geometry_ignores_content_length() -> None:
	"""
	Centered layout coordinates do not depend on text length.
	"""
	short = compute_layout(LAYOUT_B, {"aSide": "A", "zSide": "Z"})
	long = compute_layout(LAYOUT_B, {"aSide": "A" * 200, "zSide": "Z"})
	assert len(short.instructions) == len(long.instructions) == 6

	def geometry(result) -> list[tuple]:
		return [(item.id, item.x_mm, item.y_mm, item.width_mm) for item in result.instructions]

	assert geometry(short) == geometry(long)


#============================================
def test_layout_b_centered_offsets() -> None:
	"""
	Centered blocks start at the vertically centered content box.
	"""
	result = compute_layout(LAYOUT_B, {"aSide": "A", "zSide": "Z"})
	y_start = (SEGMENT_HEIGHT_MM - 12.8) / 2.0
	offsets = [item.y_mm - y_start for item in result.instructions[:3]]
	assert offsets == pytest.approx([0.0, 4.2, 8.5])
	assert result.instructions[0].x_mm == pytest.approx(38.1 * 0.07)


#============================================
def test_layout_c_grid_ids() -> None:
	"""
	Layout C yields 12 text instructions with unique row/col ids.
	"""
	result = compute_layout(LAYOUT_C, {"lineName": "LINE-1", "aSide": "A", "zSide": "Z"})
	texts = _by_type(result, "text")
	assert len(texts) == 12
	ids = [item.id for item in texts]
	assert len(set(ids)) == 12
	for grid_row in range(2):
		for grid_col in range(2):
			suffix = f"_r{grid_row}c{grid_col}"
			assert sum(1 for item_id in ids if item_id.endswith(suffix)) == 3
	assert "lineName_r1c0" in ids


#============================================
def test_layout_c_card_centering() -> None:
	"""
	Cards are centered in each grid cell.
	"""
	result = compute_layout(LAYOUT_C, {})
	by_id = {item.id: item for item in result.instructions}
	cell_width = 38.1 / 2.0
	assert by_id["lineName_r0c0"].x_mm == pytest.approx((cell_width - 16.0) / 2.0)
	assert by_id["lineName_r0c1"].x_mm == pytest.approx(cell_width + (cell_width - 16.0) / 2.0)
	assert by_id["lineName_r1c0"].y_mm == pytest.approx(SEGMENT_HEIGHT_MM + (SEGMENT_HEIGHT_MM - 13.0) / 2.0)
	assert by_id["zSide_r0c0"].y_mm == pytest.approx((SEGMENT_HEIGHT_MM - 13.0) / 2.0 + 8.2)

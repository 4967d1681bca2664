import pytest

import cable_label_layout.config
import cable_label_layout.preview

preview = cable_label_layout.preview


#============================================
def _nodes(tree, kind: str) -> list:
	return [node for node in preview.iter_nodes(tree) if node.kind == kind]


#============================================
def test_page_scaled_to_pixels(registry, full_row) -> None:
	"""
	Page size follows 96 px per inch times the device pixel ratio.
	"""
	config = cable_label_layout.config.PreviewConfig(device_pixel_ratio=2.0)
	tree = preview.render_row(registry, "layout-a", full_row, config=config)
	assert tree.kind == "page"
	assert tree.width_px == pytest.approx(288.0)
	assert tree.height_px == pytest.approx(768.0)
	background = _nodes(tree, "background")
	assert len(background) == 1
	assert background[0].top_px == pytest.approx(384.0)


#============================================
def test_text_nodes_match_instructions(registry) -> None:
	tree = preview.render_row(registry, "layout-b", {"aSide": "A", "zSide": "Z"})
	texts = _nodes(tree, "text")
	assert [node.node_id for node in texts] == ["aSide", "arrow", "zSide"] * 2
	first = texts[0]
	assert first.font_weight == 700
	assert first.font_size_px == pytest.approx(7.6 * 96.0 / 72.0)
	assert texts[1].font_weight == 400


#============================================
def test_decorated_text_has_flanking_rules(registry, full_row) -> None:
	"""
	A serial line gets two rules around its text.
	"""
	tree = preview.render_row(registry, "layout-a", full_row)
	decorated = _nodes(tree, "decorated_text")
	assert len(decorated) == 2
	container = decorated[0]
	kinds = [child.kind for child in container.children]
	assert kinds == ["rule", "rule", "text"]
	left_rule, right_rule, text = container.children
	assert text.text == "LINE-001"
	assert left_rule.left_px == pytest.approx(container.left_px)
	assert right_rule.left_px + right_rule.width_px == pytest.approx(container.left_px + container.width_px)
	assert left_rule.left_px + left_rule.width_px < right_rule.left_px


#============================================
def test_qr_node_has_matrix(registry, full_row) -> None:
	tree = preview.render_row(registry, "layout-a-qr", full_row)
	codes = _nodes(tree, "qr")
	assert len(codes) == 1
	matrix = codes[0].matrix
	assert len(matrix) >= 21
	assert all(len(row) == len(matrix) for row in matrix)
	assert codes[0].width_px == pytest.approx(21.0 * 96.0 / 25.4)


#============================================
def test_empty_qr_payload_shows_placeholder(registry) -> None:
	tree = preview.render_row(registry, "layout-a-qr", {})
	assert _nodes(tree, "qr") == []
	placeholders = _nodes(tree, "qr_placeholder")
	assert len(placeholders) == 1
	assert placeholders[0].text == "QR"
	assert placeholders[0].border_style == "dashed"


#============================================
def test_oversized_qr_payload_shows_placeholder() -> None:
	assert preview.encode_qr_matrix("x" * 5000) is None
	assert preview.encode_qr_matrix("") is None


#============================================
def test_divider_node(registry, full_row) -> None:
	tree = preview.render_row(registry, "layout-a", full_row)
	dividers = _nodes(tree, "divider")
	assert len(dividers) == 1
	assert dividers[0].border_style == "dashed"
	assert dividers[0].top_px == pytest.approx(96.0)


#============================================
def test_unknown_layout_returns_none(registry, full_row) -> None:
	assert preview.render_row(registry, "layout-z", full_row) is None


#============================================
@pytest.mark.parametrize("schema_key", ["layout-a", "layout-a-qr", "layout-b", "layout-c"])
def test_rasterize_preview(registry, full_row, schema_key: str) -> None:
	"""
	Painting a tree gives an image the size of the page with some ink.
	"""
	config = cable_label_layout.config.PreviewConfig(device_pixel_ratio=2.0)
	tree = preview.render_row(registry, schema_key, full_row, config=config)
	image = preview.rasterize_preview(tree)
	assert image.size == (288, 768)
	assert image.convert("L").getextrema()[0] < 128

import cable_label_layout.cable_schemas
import cable_label_layout.resolver
import cable_label_layout.schema

Element = cable_label_layout.schema.Element
resolve_text = cable_label_layout.resolver.resolve_text
compute_qr_payload = cable_label_layout.resolver.compute_qr_payload
QR_SEGMENT_DEF = cable_label_layout.cable_schemas.QR_SEGMENT_DEF

SERIAL_KEYS = ("additionalText", "serial", "lineId")


#============================================
def test_static_text_ignores_row() -> None:
	"""
	Static text is returned as-is, numbers stringified.
	"""
	assert resolve_text({"arrow": "x"}, Element(id="arrow", static_text="<->")) == "<->"
	assert resolve_text({}, Element(id="n", static_text=42)) == "42"


#============================================
def test_single_key_trims_and_prefixes() -> None:
	"""
	Single-key lookup trims whitespace and applies the prefix.
	"""
	assert resolve_text({"aSide": "  Switch-A  "}, Element(id="aSide", key="aSide")) == "Switch-A"
	element = Element(id="portA", key="portA", prefix="Port ")
	assert resolve_text({"portA": "1/0/1"}, element) == "Port 1/0/1"


#============================================
def test_missing_and_none_values_are_empty() -> None:
	"""
	Missing keys and None values resolve to empty text.
	"""
	element = Element(id="aSide", key="aSide")
	assert resolve_text({}, element) == ""
	assert resolve_text({"aSide": None}, element) == ""


#============================================
def test_non_conditional_keeps_bare_prefix() -> None:
	"""
	A non-conditional element with no value keeps its prefix visible.
	"""
	assert resolve_text({}, Element(id="portA", key="portA", prefix="Port ")) == "Port "


#============================================
def test_conditional_empty_returns_empty() -> None:
	"""
	A conditional element with no value resolves to empty text.
	"""
	element = Element(id="portA", key="portA", prefix="Port ", conditional=True)
	assert resolve_text({}, element) == ""
	assert resolve_text({"portA": "3"}, element) == "Port 3"


#============================================
def test_fallback_chain_uses_first_non_empty() -> None:
	"""
	Only lineId set resolves through the fallback chain.
	"""
	element = Element(id="additionalText", resolve_keys=SERIAL_KEYS)
	assert resolve_text({"lineId": "FALLBACK"}, element) == "FALLBACK"
	assert resolve_text({"serial": "", "lineId": "L-42"}, element) == "L-42"
	assert resolve_text({"serial": " ", "lineId": ""}, element) == ""


#============================================
def test_fallback_chain_applies_prefix() -> None:
	"""
	The prefix is applied to the resolved fallback value.
	"""
	element = Element(id="sn", resolve_keys=("serial",), prefix="SN: ")
	assert resolve_text({"serial": "SN-100"}, element) == "SN: SN-100"


#============================================
def test_qr_payload_full_row() -> None:
	"""
	All fields present produce a five-line payload.
	"""
	row = {
		"additionalText": "DC-01",
		"aSide": "Switch-A",
		"portA": "1/0/1",
		"zSide": "Switch-B",
		"portB": "1/0/2",
	}
	expected = "DC-01\nDevice A: Switch-A\nPort A: 1/0/1\nDevice B: Switch-B\nPort B: 1/0/2"
	assert compute_qr_payload(QR_SEGMENT_DEF, row) == expected


#============================================
def test_qr_payload_skips_empty_fields() -> None:
	"""
	Empty fields are dropped and the fallback group resolves serial.
	"""
	row = {"serial": "SN-999", "aSide": "A", "zSide": "B"}
	assert compute_qr_payload(QR_SEGMENT_DEF, row) == "SN-999\nDevice A: A\nDevice B: B"
	assert compute_qr_payload(QR_SEGMENT_DEF, {}) == ""

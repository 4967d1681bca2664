"""
Text resolution for schema elements and QR payloads.
"""

# Standard Library
import collections.abc
import typing

# local repo modules
import cable_label_layout as cll
import cable_label_layout.schema


Element = cll.schema.Element
QrDefinition = cll.schema.QrDefinition
DataRow = cll.schema.DataRow


#============================================
def normalize_row(row: typing.Any) -> DataRow:
	"""
	Return the row itself when it is a mapping, otherwise an empty dict.

	Args:
		row: Caller-supplied label data.

	Returns:
		String-keyed mapping.
	"""
	if isinstance(row, collections.abc.Mapping):
		return row
	return {}


#============================================
def row_value(row: DataRow, key: str | None) -> str:
	"""
	Look up a row value as trimmed text.

	Args:
		row: Label data.
		key: Row key, None yields empty text.

	Returns:
		Trimmed string, empty for missing or None values.
	"""
	if key is None:
		return ""
	value = row.get(key)
	if value is None:
		return ""
	return str(value).strip()


#============================================
def first_value(row: DataRow, keys: collections.abc.Iterable[str]) -> str:
	"""
	Return the first non-empty value from an ordered key list.

	Args:
		row: Label data.
		keys: Fallback key chain.

	Returns:
		Trimmed value or empty string.
	"""
	for key in keys:
		value = row_value(row, key)
		if value:
			return value
	return ""


#============================================
def resolve_text(row: DataRow, element: Element) -> str:
	"""
	Resolve the display text for an element.

	Resolution order is static text, then the resolve_keys fallback chain,
	then the single key. A non-conditional element with an empty value
	still returns its bare prefix so its slot stays visible; a conditional
	one returns an empty string so the layout can elide it.

	Args:
		row: Label data.
		element: Schema element.

	Returns:
		Display text.
	"""
	if element.static_text is not None:
		return str(element.static_text)

	if element.resolve_keys:
		value = first_value(row, element.resolve_keys)
		if value:
			return element.prefix + value
		return ""

	value = row_value(row, element.key)
	if not value and element.conditional:
		return ""
	return element.prefix + value


#============================================
def compute_qr_payload(qr_def: QrDefinition, row: DataRow) -> str:
	"""
	Compose the multi-line text encoded into a QR segment.

	Fallback groups contribute their first non-empty value, single-key
	fields their own value, each behind the field prefix when it has one.
	Empty fields are dropped.

	Args:
		qr_def: QR segment definition.
		row: Label data.

	Returns:
		Newline-joined payload, empty when nothing resolved.
	"""
	lines: list[str] = []
	for field in qr_def.payload_fields:
		if field.resolve_keys:
			value = first_value(row, field.resolve_keys)
			if value:
				lines.append(field.prefix + value)
			continue
		if field.key:
			value = row_value(row, field.key)
			if value:
				lines.append(field.prefix + value)
	return "\n".join(lines)

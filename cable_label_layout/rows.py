"""
Row sources for cable labels: numbered batches, cable sheets and files.
"""

# Standard Library
import csv
import dataclasses
import json
import pathlib
import typing

# PIP3 modules
import openpyxl

# local repo modules
import cable_label_layout as cll
import cable_label_layout.config


MAX_LABELS_PER_REQUEST = cll.config.MAX_LABELS_PER_REQUEST
MAX_SHEET_ROWS = cll.config.MAX_SHEET_ROWS
CELL_LIMITS = cll.config.CELL_LIMITS
SHEET_REQUIRED_COLUMNS = cll.config.SHEET_REQUIRED_COLUMNS
SHEET_COLUMN_FOR_KEY = cll.config.SHEET_COLUMN_FOR_KEY
XLSX_SUFFIXES = (".xlsx", ".xlsm")


@dataclasses.dataclass
class CableBatchConfig:
	a_side_base: str
	z_side_base: str
	start_number: int = 1
	end_number: int = 120
	step: int = 1
	pad_length: int = 3
	serial_prefix: str = ""
	serial_suffix: str = ""
	line_prefix: str = "LINE-"
	port_a_start: int = 1
	port_b_start: int = 1
	port_step: int = 1


@dataclasses.dataclass
class SheetIssue:
	row: int
	message: str
	kind: str
	value: str = ""


@dataclasses.dataclass
class SheetResult:
	valid_rows: list[dict[str, str]]
	errors: list[SheetIssue]


SAMPLE_BATCH = CableBatchConfig(
	a_side_base="FRA1-LEAF-01",
	z_side_base="FRA1-SPINE-01",
	start_number=1,
	end_number=24,
	pad_length=3,
	serial_prefix="FRA1-",
	serial_suffix="-A",
	line_prefix="LINE-",
)


#============================================
def validate_batch(batch: CableBatchConfig) -> list[str]:
	"""
	Check a batch configuration for inconsistent ranges.

	Args:
		batch: Batch configuration.

	Returns:
		List of issue messages, empty when valid.
	"""
	issues: list[str] = []
	if batch.step < 1:
		issues.append("step must be >= 1")
	if batch.pad_length < 1 or batch.pad_length > 8:
		issues.append("padLength must be between 1 and 8")
	if batch.port_step < 0:
		issues.append("portStep must be >= 0")
	if batch.end_number < batch.start_number:
		issues.append("endNumber must be >= startNumber")
	elif batch.step >= 1:
		count = (batch.end_number - batch.start_number) // batch.step + 1
		if count > MAX_LABELS_PER_REQUEST:
			issues.append(f"Batch size must be between 1 and {MAX_LABELS_PER_REQUEST}")
	return issues


#============================================
def build_cable_rows(layout_key: str, batch: CableBatchConfig) -> list[dict[str, str]]:
	"""
	Generate numbered rows for a layout from a batch configuration.

	Each step advances the serial number by batch.step and both ports by
	batch.port_step. Row keys follow what the layout reads.

	Args:
		layout_key: Layout key such as "layout-a".
		batch: Batch configuration.

	Returns:
		List of data rows.

	Raises:
		ValueError: When the batch configuration is invalid.
	"""
	issues = validate_batch(batch)
	if issues:
		raise ValueError("Invalid cable batch: " + "; ".join(issues))

	rows: list[dict[str, str]] = []
	for current in range(batch.start_number, batch.end_number + 1, batch.step):
		index = len(rows)
		padded = str(current).zfill(batch.pad_length)
		additional_text = f"{batch.serial_prefix}{padded}{batch.serial_suffix}"
		line_id = f"{batch.line_prefix}{padded}"
		port_a = str(batch.port_a_start + index * batch.port_step)
		port_b = str(batch.port_b_start + index * batch.port_step)
		a_side = f"{batch.a_side_base} {port_a}"
		z_side = f"{batch.z_side_base} {port_b}"
		if layout_key in ("layout-a", "layout-a-qr"):
			row = {
				"aSide": a_side,
				"portA": port_a,
				"zSide": z_side,
				"portB": port_b,
				"additionalText": additional_text,
				"lineId": line_id,
			}
		elif layout_key == "layout-b":
			row = {
				"aSide": a_side,
				"zSide": z_side,
				"additionalText": additional_text,
				"lineId": line_id,
			}
		else:
			row = {
				"lineName": line_id,
				"aSide": a_side,
				"zSide": z_side,
				"additionalText": additional_text,
				"lineId": line_id,
			}
		rows.append(row)
	return rows


#============================================
def sample_row(layout_key: str) -> dict[str, str]:
	"""
	First row of the sample batch, used as the default preview content.
	"""
	batch = dataclasses.replace(SAMPLE_BATCH, end_number=SAMPLE_BATCH.start_number)
	return build_cable_rows(layout_key, batch)[0]


#============================================
def _cell(raw: dict[str, typing.Any], column: str) -> str:
	value = raw.get(column)
	if value is None:
		return ""
	# spreadsheet numbers arrive as floats, 2.0 is the quantity 2
	if isinstance(value, float) and value.is_integer():
		value = int(value)
	return str(value).strip()


#============================================
def read_xlsx_records(path: pathlib.Path) -> tuple[list[str], list[dict[str, typing.Any]]]:
	"""
	Read the first worksheet of an .xlsx workbook as header-keyed records.

	Args:
		path: Workbook path.

	Returns:
		Tuple of (column names, records). Fully blank rows are dropped.
	"""
	workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
	try:
		worksheet = workbook.worksheets[0]
		row_iter = worksheet.iter_rows(values_only=True)
		header = next(row_iter, None) or ()
		columns = [str(value).strip() if value is not None else "" for value in header]
		records: list[dict[str, typing.Any]] = []
		for values in row_iter:
			if all(value is None or str(value).strip() == "" for value in values):
				continue
			record = {
				column: value
				for column, value in zip(columns, values)
				if column
			}
			records.append(record)
	finally:
		workbook.close()
	return ([column for column in columns if column], records)


#============================================
def read_csv_records(path: pathlib.Path) -> tuple[list[str], list[dict[str, typing.Any]]]:
	"""
	Read a CSV sheet with a header row as records.
	"""
	with path.open("r", encoding="utf-8-sig", newline="") as handle:
		reader = csv.DictReader(handle)
		columns = list(reader.fieldnames or [])
		records = list(reader)
	return (columns, records)


#============================================
def validate_sheet_row(item: dict[str, str], quantity: str, row_number: int) -> SheetIssue | None:
	"""
	Check one mapped sheet row.

	Args:
		item: Row mapped to label keys.
		quantity: Raw quantity cell.
		row_number: 1-based sheet row number.

	Returns:
		SheetIssue or None when the row is valid.
	"""
	missing = [
		column
		for key, column in SHEET_COLUMN_FOR_KEY.items()
		if column in SHEET_REQUIRED_COLUMNS and not item[key]
	]
	if missing:
		return SheetIssue(row_number, f"Missing required fields: {', '.join(missing)}", "MISSING_FIELDS")

	for key, limit in CELL_LIMITS.items():
		if len(item[key]) > limit:
			column = SHEET_COLUMN_FOR_KEY[key]
			return SheetIssue(row_number, f"{column} too long (max {limit})", "INVALID_LENGTH", item[key])

	if quantity and (not quantity.isdigit() or int(quantity) < 1):
		return SheetIssue(row_number, f"Invalid quantity: {quantity}", "INVALID_VALUE", quantity)
	return None


#============================================
def parse_cable_sheet(path: pathlib.Path) -> SheetResult:
	"""
	Read an .xlsx workbook or a CSV file of cables into label rows.

	Completely empty rows are skipped. Valid rows are repeated by their
	quantity column; invalid rows are reported and skipped.

	Args:
		path: Sheet with aSideBase, aSidePort, bSideBase, bSidePort and
			optional lineId, notes and quantity columns.

	Returns:
		SheetResult.

	Raises:
		ValueError: When required columns are missing or the sheet has too
			many rows.
	"""
	if path.suffix.lower() in XLSX_SUFFIXES:
		columns, raw_rows = read_xlsx_records(path)
	else:
		columns, raw_rows = read_csv_records(path)

	if not raw_rows:
		return SheetResult([], [SheetIssue(0, "File is empty", "EMPTY_FILE")])
	if len(raw_rows) > MAX_SHEET_ROWS:
		raise ValueError(
			f"Too many rows. Maximum allowed is {MAX_SHEET_ROWS}. File has {len(raw_rows)}."
		)
	missing_columns = [column for column in SHEET_REQUIRED_COLUMNS if column not in columns]
	if missing_columns:
		raise ValueError(f"Invalid sheet. Missing required columns: {', '.join(missing_columns)}")

	valid_rows: list[dict[str, str]] = []
	errors: list[SheetIssue] = []
	for index, raw in enumerate(raw_rows):
		line_id = _cell(raw, "lineId")
		item = {
			"aSide": _cell(raw, "aSideBase"),
			"portA": _cell(raw, "aSidePort"),
			"zSide": _cell(raw, "bSideBase"),
			"portB": _cell(raw, "bSidePort"),
			"serial": line_id,
			"lineId": line_id,
			"lineName": line_id,
			"additionalText": _cell(raw, "notes"),
		}
		if not (item["aSide"] or item["portA"] or item["zSide"] or item["portB"]):
			continue
		quantity = _cell(raw, "quantity")
		issue = validate_sheet_row(item, quantity, index + 1)
		if issue is not None:
			errors.append(issue)
			continue
		copies = int(quantity) if quantity else 1
		for _copy in range(copies):
			valid_rows.append(dict(item))
	return SheetResult(valid_rows, errors)


#============================================
def load_rows(path: pathlib.Path) -> list[dict[str, typing.Any]]:
	"""
	Load label rows from a JSON list, an .xlsx workbook or a CSV sheet.

	Args:
		path: .json file holding a list of objects, or a cable sheet.

	Returns:
		List of data rows.
	"""
	if path.suffix.lower() == ".json":
		with path.open("r", encoding="utf-8") as handle:
			data = json.load(handle)
		if isinstance(data, dict):
			data = data.get("rows", [])
		return [item for item in data if isinstance(item, dict)]

	result = parse_cable_sheet(path)
	for issue in result.errors:
		print(f"Sheet row {issue.row}: {issue.message}")
	return result.valid_rows

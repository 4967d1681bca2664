import json
import pathlib

import PIL.Image
import pypdf

import cable_label_layout.cli


#============================================
def test_cli_batch_writes_all_outputs(tmp_path: pathlib.Path) -> None:
	"""
	A numbered batch writes the PDF, instructions JSON and preview PNG.
	"""
	pdf_path = tmp_path / "labels.pdf"
	json_path = tmp_path / "first.json"
	png_path = tmp_path / "first.png"
	args = cable_label_layout.cli.parse_args([
		"-L", "layout-a-qr",
		"-a", "FRA1-LEAF-01",
		"-z", "FRA1-SPINE-01",
		"--start", "1",
		"--end", "4",
		"--serial-prefix", "FRA1-",
		"-o", str(pdf_path),
		"-j", str(json_path),
		"-p", str(png_path),
		"-r", "1",
	])
	cable_label_layout.cli.run_pipeline(args)

	assert len(pypdf.PdfReader(str(pdf_path)).pages) == 4
	wire = json.loads(json_path.read_text(encoding="utf-8"))
	assert wire["page"]["widthMm"] == 38.1
	assert wire["instructions"][0]["text"] == "FRA1-001"
	with PIL.Image.open(png_path) as image:
		assert image.size == (144, 384)


#============================================
def test_cli_page_override_and_input(tmp_path: pathlib.Path) -> None:
	rows_path = tmp_path / "rows.json"
	rows_path.write_text(json.dumps([{"aSide": "A", "zSide": "Z"}]), encoding="utf-8")
	pdf_path = tmp_path / "labels.pdf"
	args = cable_label_layout.cli.parse_args([
		"-L", "layout-b", "-i", str(rows_path), "-o", str(pdf_path), "-W", "50",
	])
	page_override = cable_label_layout.cli.build_page_override(args)
	assert page_override.width_mm == 50.0
	assert page_override.height_mm == 101.6
	cable_label_layout.cli.run_pipeline(args)
	page = pypdf.PdfReader(str(pdf_path)).pages[0]
	assert float(page.mediabox.width) > 140.0


#============================================
def test_cli_lists_layouts(capsys) -> None:
	cable_label_layout.cli.run_pipeline(cable_label_layout.cli.parse_args(["--list-layouts"]))
	output = capsys.readouterr().out
	for key in ("layout-a", "layout-a-qr", "layout-b", "layout-c"):
		assert f"{key}: " in output


#============================================
def test_cli_unknown_layout(capsys) -> None:
	cable_label_layout.cli.run_pipeline(cable_label_layout.cli.parse_args(["-L", "nope"]))
	assert "Unknown layout: nope" in capsys.readouterr().out

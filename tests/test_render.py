import io
import json
import pathlib

import pypdf
import pytest

import address_label_merger as alm
import address_label_merger.config
import address_label_merger.csv_lib
import address_label_merger.formats
import address_label_merger.render


LabelOptions = alm.config.LabelOptions
ValidationError = alm.config.ValidationError
RenderError = alm.config.RenderError

SAMPLE_CSV = (
	"First Name,Last Name,Address,City,State,Zip\n"
	"John,Doe,12 Main St,Springfield,IL,62701\n"
	"Jane,Smith,\"400 Oak Ave, Apt 2\",Portland,OR,97201\n"
	"Ana,Lopez,9 Elm Rd,Austin,TX,73301\n"
)
SAMPLE_TEMPLATE = "**<<FirstName>> <<LastName>>**\n<<Address>>\n<<City>>, <<State>> <<Zip>>"


#============================================
def page_count(pdf_bytes: bytes) -> int:
	"""
	Count pages in PDF bytes.
	"""
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	return len(reader.pages)


#============================================
def test_map_font_name() -> None:
	"""
	Style flags map onto the Helvetica family.
	"""
	assert alm.render.map_font_name(False, False) == alm.config.DEFAULT_FONT_REGULAR
	assert alm.render.map_font_name(True, False) == alm.config.DEFAULT_FONT_BOLD
	assert alm.render.map_font_name(False, True) == alm.config.DEFAULT_FONT_ITALIC
	assert alm.render.map_font_name(True, True) == alm.config.DEFAULT_FONT_BOLD_ITALIC


#============================================
def test_measure_text() -> None:
	"""
	Bold text measures wider and width scales with size.
	"""
	regular = alm.render.measure_text("Hello", False, False, 10.0)
	bold = alm.render.measure_text("Hello", True, False, 10.0)
	assert regular > 0.0
	assert bold > regular
	assert alm.render.measure_text("Hello", False, False, 20.0) == pytest.approx(regular * 2.0)
	assert alm.render.measure_text("", False, False, 10.0) == 0.0


#============================================
def test_parse_hex_color() -> None:
	"""
	Hex colors parse to unit floats with black as fallback.
	"""
	assert alm.render.parse_hex_color("#FF0000") == (1.0, 0.0, 0.0)
	assert alm.render.parse_hex_color("#CCCCCC") == pytest.approx((0.8, 0.8, 0.8))
	assert alm.render.parse_hex_color("red") == (0.0, 0.0, 0.0)


#============================================
def test_generate_pdf_pages() -> None:
	"""
	Generation returns PDF bytes and a matching result.
	"""
	dataset = alm.csv_lib.parse_csv(SAMPLE_CSV)
	paper = alm.formats.get_paper_format("avery-5164")
	options = LabelOptions(show_borders=True, show_cut_marks=True)
	records = list(dataset.rows) * 3
	pdf_bytes, result = alm.render.generate_pdf(records, SAMPLE_TEMPLATE, paper, options)
	assert pdf_bytes.startswith(b"%PDF")
	assert result.total_records == 9
	assert result.labels_per_page == 6
	assert result.pages == 2
	assert len(result.placements) == 9
	assert page_count(pdf_bytes) == 2


#============================================
def test_generate_pdf_with_calibration() -> None:
	"""
	The calibration page is added in front of the label pages.
	"""
	dataset = alm.csv_lib.parse_csv(SAMPLE_CSV)
	paper = alm.formats.get_paper_format("avery-5160")
	options = LabelOptions(calibration=True, text_align="center", vertical_align="middle")
	pdf_bytes, result = alm.render.generate_pdf(list(dataset.rows), SAMPLE_TEMPLATE, paper, options)
	assert result.pages == 2
	assert result.calibration is True
	assert page_count(pdf_bytes) == 2


#============================================
def test_generate_pdf_page_size() -> None:
	"""
	Pages use the paper format size.
	"""
	dataset = alm.csv_lib.parse_csv(SAMPLE_CSV)
	paper = alm.formats.get_paper_format("avery-l7160")
	pdf_bytes, _result = alm.render.generate_pdf(list(dataset.rows), SAMPLE_TEMPLATE, paper, LabelOptions())
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	box = reader.pages[0].mediabox
	assert float(box.width) == pytest.approx(paper.page_width, abs=0.01)
	assert float(box.height) == pytest.approx(paper.page_height, abs=0.01)


#============================================
def test_validation_errors() -> None:
	"""
	Missing format or data is rejected before layout.
	"""
	paper = alm.formats.get_paper_format("avery-5160")
	with pytest.raises(ValidationError):
		alm.render.generate_pdf([], "<<Name>>", paper, LabelOptions())
	with pytest.raises(ValidationError):
		alm.render.generate_pdf([{"Name": "Ann"}], "<<Name>>", None, LabelOptions())
	with pytest.raises(ValidationError):
		alm.render.generate_pdf([{"Name": "Ann"}], "<<Name>>", paper, LabelOptions(font_size=0.0))
	with pytest.raises(ValidationError):
		alm.render.generate_pdf([{"Name": "Ann"}], "<<Name>>", paper, LabelOptions(text_align="justify"))


#============================================
def test_backend_failure_is_wrapped() -> None:
	"""
	Measurement failures surface as one RenderError with the cause.
	"""
	def broken_measure(text: str, bold: bool, italic: bool, font_size: float) -> float:
		raise RuntimeError("no metrics")

	paper = alm.formats.get_paper_format("avery-5160")
	with pytest.raises(RenderError) as excinfo:
		alm.render.generate_pdf([{"Name": "Ann"}], "<<Name>>", paper, LabelOptions(), measure=broken_measure)
	assert isinstance(excinfo.value.__cause__, RuntimeError)


#============================================
def test_write_manifest(tmp_path: pathlib.Path) -> None:
	"""
	The manifest records layout and placements.
	"""
	dataset = alm.csv_lib.parse_csv(SAMPLE_CSV)
	paper = alm.formats.get_paper_format("avery-5163")
	options = LabelOptions()
	_pdf_bytes, result = alm.render.generate_pdf(list(dataset.rows), SAMPLE_TEMPLATE, paper, options)
	manifest_path = tmp_path / "labels.pdf.json"
	alm.render.write_manifest(manifest_path, "sample.csv", dataset, SAMPLE_TEMPLATE, paper, options, result)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["headers"] == ["FirstName", "LastName", "Address", "City", "State", "Zip"]
	assert data["has_headers"] is True
	assert data["pages"] == 1
	assert data["paper_format"]["id"] == "avery-5163"
	assert len(data["placements"]) == 3
	assert data["placements"][2]["row"] == 1
	assert data["placements"][2]["column"] == 0


#============================================
def test_alignment_names_ignore_case() -> None:
	"""
	Alignment names are accepted in any case, as the layout reads them.
	"""
	paper = alm.formats.get_paper_format("avery-5160")
	options = LabelOptions(text_align="Center", vertical_align=" BOTTOM ")
	pdf_bytes, result = alm.render.generate_pdf([{"Name": "Ann"}], "<<Name>>", paper, options)
	assert pdf_bytes.startswith(b"%PDF")
	assert result.pages == 1


#============================================
def test_default_vertical_alignment_is_middle() -> None:
	"""
	Labels are vertically centered unless told otherwise.
	"""
	assert LabelOptions().vertical_align == "middle"

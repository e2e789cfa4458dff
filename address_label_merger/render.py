"""
PDF rendering backend and generation pipeline.
"""

# Standard Library
import dataclasses
import io
import json
import pathlib

# PIP3 modules
import pypdf
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import address_label_merger as alm
import address_label_merger.config
import address_label_merger.csv_lib
import address_label_merger.layout
import address_label_merger.paginate


PaperFormat = alm.config.PaperFormat
LabelOptions = alm.config.LabelOptions
MergeResult = alm.config.MergeResult
ValidationError = alm.config.ValidationError
RenderError = alm.config.RenderError
Dataset = alm.csv_lib.Dataset
RectOp = alm.layout.RectOp
TextOp = alm.layout.TextOp
LineOp = alm.layout.LineOp
MeasureFunc = alm.layout.MeasureFunc
PageInstructions = alm.paginate.PageInstructions

POINTS_PER_INCH = alm.config.POINTS_PER_INCH
DEFAULT_FONT_REGULAR = alm.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = alm.config.DEFAULT_FONT_BOLD
DEFAULT_FONT_ITALIC = alm.config.DEFAULT_FONT_ITALIC
DEFAULT_FONT_BOLD_ITALIC = alm.config.DEFAULT_FONT_BOLD_ITALIC
TEXT_ALIGNMENTS = alm.config.TEXT_ALIGNMENTS
VERTICAL_ALIGNMENTS = alm.config.VERTICAL_ALIGNMENTS
PROGRESS_BAR_WIDTH = alm.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = alm.config.PROGRESS_UPDATE_EVERY
PRODUCER = "address-label-merger"


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	if not value or not value.startswith("#") or len(value) != 7:
		return (0.0, 0.0, 0.0)
	red = int(value[1:3], 16) / 255.0
	green = int(value[3:5], 16) / 255.0
	blue = int(value[5:7], 16) / 255.0
	return (red, green, blue)


#============================================
def map_font_name(bold: bool, italic: bool) -> str:
	"""
	Map style flags to a standard PDF font name.

	Args:
		bold: Bold flag.
		italic: Italic flag.

	Returns:
		ReportLab font name.
	"""
	if italic and bold:
		return DEFAULT_FONT_BOLD_ITALIC
	if italic:
		return DEFAULT_FONT_ITALIC
	if bold:
		return DEFAULT_FONT_BOLD
	return DEFAULT_FONT_REGULAR


#============================================
def measure_text(text: str, bold: bool, italic: bool, font_size: float) -> float:
	"""
	Measure a string with the Helvetica family.

	Args:
		text: Text to measure.
		bold: Bold flag.
		italic: Italic flag.
		font_size: Font size in points.

	Returns:
		Width in points.
	"""
	font_name = map_font_name(bold, italic)
	return reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)


#============================================
def compute_ascent(font_name: str, font_size: float) -> float:
	"""
	Font ascent in points.
	"""
	return reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0


#============================================
def draw_operation(
	pdf: reportlab.pdfgen.canvas.Canvas,
	operation: RectOp | TextOp | LineOp,
	page_height: float,
) -> None:
	"""
	Draw one operation, flipping top-down y into PDF space.

	Args:
		pdf: ReportLab canvas.
		operation: Draw operation.
		page_height: Page height in points.
	"""
	if isinstance(operation, TextOp):
		font_name = map_font_name(operation.bold, operation.italic)
		pdf.setFont(font_name, operation.font_size)
		color = parse_hex_color(operation.color)
		pdf.setFillColorRGB(color[0], color[1], color[2])
		baseline_y = operation.y + compute_ascent(font_name, operation.font_size)
		pdf.drawString(operation.x, page_height - baseline_y, operation.text)
		return
	if isinstance(operation, LineOp):
		color = parse_hex_color(operation.color)
		pdf.setStrokeColorRGB(color[0], color[1], color[2])
		pdf.setLineWidth(operation.line_width)
		pdf.line(
			operation.x0,
			page_height - operation.y0,
			operation.x1,
			page_height - operation.y1,
		)
		return
	if isinstance(operation, RectOp):
		stroke = parse_hex_color(operation.stroke_color)
		pdf.setStrokeColorRGB(stroke[0], stroke[1], stroke[2])
		pdf.setLineWidth(operation.line_width)
		fill = 0
		if operation.fill_color:
			fill_color = parse_hex_color(operation.fill_color)
			pdf.setFillColorRGB(fill_color[0], fill_color[1], fill_color[2])
			fill = 1
		pdf.rect(
			operation.x,
			page_height - operation.y - operation.height,
			operation.width,
			operation.height,
			stroke=1,
			fill=fill,
		)
		return
	raise TypeError(f"Unsupported draw operation: {operation!r}")


#============================================
def draw_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	page: PageInstructions,
	page_height: float,
) -> None:
	"""
	Draw all operations of one page in order.

	Args:
		pdf: ReportLab canvas.
		page: Page instructions.
		page_height: Page height in points.
	"""
	for operation in page.operations:
		draw_operation(pdf, operation, page_height)


#============================================
def draw_label_outlines(pdf: reportlab.pdfgen.canvas.Canvas, paper: PaperFormat) -> None:
	"""
	Draw every label slot outline on the current page.

	Args:
		pdf: ReportLab canvas.
		paper: Paper format.
	"""
	pdf.setLineWidth(0.3)
	pdf.setStrokeColorRGB(0.6, 0.6, 0.6)
	for row in range(paper.rows):
		for column in range(paper.columns):
			x, y = alm.paginate.compute_cell_origin(paper, row, column)
			pdf.rect(
				x,
				paper.page_height - y - paper.label_height,
				paper.label_width,
				paper.label_height,
				stroke=1,
				fill=0,
			)


#============================================
def build_calibration_page(paper: PaperFormat) -> pypdf.PageObject:
	"""
	Build a calibration page with slot outlines, corner crosshairs,
	and a 1 inch ruler.

	Args:
		paper: Paper format.

	Returns:
		PDF page object.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(paper.page_width, paper.page_height))
	draw_label_outlines(pdf, paper)

	pdf.setLineWidth(0.6)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	size = 6.0
	for row in sorted({0, paper.rows - 1}):
		for column in sorted({0, paper.columns - 1}):
			x, y = alm.paginate.compute_cell_origin(paper, row, column)
			center_x = x + paper.label_width / 2.0
			center_y = paper.page_height - y - paper.label_height / 2.0
			pdf.line(center_x - size, center_y, center_x + size, center_y)
			pdf.line(center_x, center_y - size, center_x, center_y + size)

	ruler_x = paper.margin_left
	ruler_y = paper.page_height - paper.margin_top + 10.0
	pdf.line(ruler_x, ruler_y, ruler_x + POINTS_PER_INCH, ruler_y)
	pdf.setFont(DEFAULT_FONT_REGULAR, 8)
	pdf.drawString(ruler_x, ruler_y + 4.0, "1 in")

	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def validate_request(
	records: list[dict[str, str]],
	paper: PaperFormat | None,
	options: LabelOptions,
) -> None:
	"""
	Reject requests that cannot be laid out.

	Alignment names are matched ignoring case and surrounding spaces,
	the same way the layout helpers read them.

	Args:
		records: Records to print.
		paper: Selected paper format.
		options: Label options.
	"""
	if paper is None:
		raise ValidationError("Please select a paper format")
	if not records:
		raise ValidationError("Please enter some data")
	if paper.columns <= 0 or paper.rows <= 0:
		raise ValidationError(f"Paper format {paper.id} has no label slots")
	if options.font_size <= 0:
		raise ValidationError("Font size must be positive")
	if options.text_align.strip().lower() not in TEXT_ALIGNMENTS:
		raise ValidationError(f"Unknown text alignment: {options.text_align}")
	if options.vertical_align.strip().lower() not in VERTICAL_ALIGNMENTS:
		raise ValidationError(f"Unknown vertical alignment: {options.vertical_align}")


#============================================
def render_label_pages(
	pages: list[PageInstructions],
	paper: PaperFormat,
	verbose: bool = False,
) -> bytes:
	"""
	Render page instructions into an in-memory PDF.

	Args:
		pages: Page instructions.
		paper: Paper format.
		verbose: Print a progress bar.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(paper.page_width, paper.page_height))
	total = sum(len(page.placements) for page in pages)
	drawn = 0
	for page in pages:
		draw_page(pdf, page, paper.page_height)
		pdf.showPage()
		drawn += len(page.placements)
		if verbose and (page.page_index % PROGRESS_UPDATE_EVERY == 0 or drawn == total):
			print_progress("Labels", drawn, total)
	if verbose and total > 0:
		print()
	pdf.save()
	return buffer.getvalue()


#============================================
def assemble_pdf(
	label_pdf: bytes,
	paper: PaperFormat,
	calibration: bool,
	title: str,
) -> bytes:
	"""
	Assemble the final document with pypdf.

	Args:
		label_pdf: Rendered label pages.
		paper: Paper format.
		calibration: Prepend a calibration page.
		title: Document title metadata.

	Returns:
		PDF bytes.
	"""
	writer = pypdf.PdfWriter()
	if calibration:
		writer.add_page(build_calibration_page(paper))
	reader = pypdf.PdfReader(io.BytesIO(label_pdf))
	for page in reader.pages:
		writer.add_page(page)
	writer.add_metadata({"/Title": title, "/Producer": PRODUCER})
	buffer = io.BytesIO()
	writer.write(buffer)
	return buffer.getvalue()


#============================================
def generate_pdf(
	records: list[dict[str, str]],
	template: str,
	paper: PaperFormat | None,
	options: LabelOptions,
	measure: MeasureFunc | None = None,
	verbose: bool = False,
) -> tuple[bytes, MergeResult]:
	"""
	Merge records into a label sheet PDF.

	Either the whole document is returned or an error is raised; there
	is no partial output.

	Args:
		records: Records in print order.
		template: Label template.
		paper: Paper format.
		options: Label options.
		measure: Optional width measurement override.
		verbose: Print a progress bar.

	Returns:
		Tuple of (PDF bytes, MergeResult).
	"""
	validate_request(records, paper, options)
	if measure is None:
		measure = measure_text
	try:
		pages = alm.paginate.build_pages(records, template, paper, options, measure)
		label_pdf = render_label_pages(pages, paper, verbose=verbose)
		pdf_bytes = assemble_pdf(label_pdf, paper, options.calibration, paper.name)
	except Exception as error:
		raise RenderError(f"Failed to generate PDF: {error}") from error

	placements = []
	for page in pages:
		placements.extend(page.placements)
	page_count = len(pages)
	if options.calibration:
		page_count += 1
	result = MergeResult(
		total_records=len(records),
		pages=page_count,
		labels_per_page=alm.paginate.labels_per_page(paper),
		placements=placements,
		calibration=options.calibration,
	)
	return (pdf_bytes, result)


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	input_path: str,
	dataset: Dataset,
	template: str,
	paper: PaperFormat,
	options: LabelOptions,
	result: MergeResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		input_path: Data file path.
		dataset: Parsed dataset.
		template: Label template.
		paper: Paper format.
		options: Label options.
		result: Merge result.
	"""
	data = {
		"input": input_path,
		"headers": list(dataset.headers),
		"has_headers": dataset.has_headers,
		"delimiter": dataset.delimiter,
		"template": template,
		"total_records": result.total_records,
		"pages": result.pages,
		"labels_per_page": result.labels_per_page,
		"calibration": result.calibration,
		"paper_format": dataclasses.asdict(paper),
		"options": dataclasses.asdict(options),
		"fonts": {
			"regular": DEFAULT_FONT_REGULAR,
			"bold": DEFAULT_FONT_BOLD,
			"italic": DEFAULT_FONT_ITALIC,
			"bold_italic": DEFAULT_FONT_BOLD_ITALIC,
		},
		"placements": [dataclasses.asdict(placement) for placement in result.placements],
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)

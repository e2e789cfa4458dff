"""
Grid placement of labels across pages.
"""

# Standard Library
import dataclasses

# local repo modules
import address_label_merger as alm
import address_label_merger.config
import address_label_merger.layout
import address_label_merger.markup
import address_label_merger.template


PaperFormat = alm.config.PaperFormat
LabelOptions = alm.config.LabelOptions
RectOp = alm.layout.RectOp
LineOp = alm.layout.LineOp
MeasureFunc = alm.layout.MeasureFunc

BORDER_COLOR = alm.config.BORDER_COLOR
BORDER_LINE_WIDTH = alm.config.BORDER_LINE_WIDTH
CUT_MARK_COLOR = alm.config.CUT_MARK_COLOR
CUT_MARK_LINE_WIDTH = alm.config.CUT_MARK_LINE_WIDTH
CUT_MARK_LENGTH = alm.config.CUT_MARK_LENGTH
CUT_MARK_OFFSET = alm.config.CUT_MARK_OFFSET


@dataclasses.dataclass(frozen=True)
class LabelPlacement:
	page_index: int
	row: int
	column: int
	record_index: int
	x: float
	y: float


@dataclasses.dataclass
class PageInstructions:
	page_index: int
	placements: list[LabelPlacement] = dataclasses.field(default_factory=list)
	operations: list = dataclasses.field(default_factory=list)


#============================================
def labels_per_page(paper: PaperFormat) -> int:
	"""
	Number of label slots on one sheet.
	"""
	return paper.columns * paper.rows


#============================================
def count_pages(record_count: int, paper: PaperFormat) -> int:
	"""
	Number of sheets needed for a record count.

	Args:
		record_count: Number of records.
		paper: Paper format.

	Returns:
		Page count, zero for no records.
	"""
	if record_count <= 0:
		return 0
	per_page = labels_per_page(paper)
	return (record_count + per_page - 1) // per_page


#============================================
def compute_cell_origin(paper: PaperFormat, row: int, column: int) -> tuple[float, float]:
	"""
	Top-left corner of a grid slot.

	Args:
		paper: Paper format.
		row: Row index.
		column: Column index.

	Returns:
		Tuple of (x, y) in top-down page points.
	"""
	x = paper.margin_left + column * (paper.label_width + paper.horizontal_gap)
	y = paper.margin_top + row * (paper.label_height + paper.vertical_gap)
	return (x, y)


#============================================
def compute_placement(index: int, paper: PaperFormat) -> LabelPlacement:
	"""
	Map a record index to its page and grid slot, row-major.

	Args:
		index: Zero-based record index.
		paper: Paper format.

	Returns:
		LabelPlacement.
	"""
	per_page = labels_per_page(paper)
	page_index = index // per_page
	slot = index % per_page
	row = slot // paper.columns
	column = slot % paper.columns
	x, y = compute_cell_origin(paper, row, column)
	return LabelPlacement(
		page_index=page_index,
		row=row,
		column=column,
		record_index=index,
		x=x,
		y=y,
	)


#============================================
def compute_placements(record_count: int, paper: PaperFormat) -> list[LabelPlacement]:
	"""
	Placements for every record in order.

	Args:
		record_count: Number of records.
		paper: Paper format.

	Returns:
		List of LabelPlacement entries.
	"""
	return [compute_placement(index, paper) for index in range(record_count)]


#============================================
def build_mark(
	x0: float,
	y0: float,
	x1: float,
	y1: float,
) -> LineOp:
	return LineOp(
		x0=x0,
		y0=y0,
		x1=x1,
		y1=y1,
		color=CUT_MARK_COLOR,
		line_width=CUT_MARK_LINE_WIDTH,
	)


#============================================
def compute_cut_marks(
	paper: PaperFormat,
	mark_length: float = CUT_MARK_LENGTH,
	mark_offset: float = CUT_MARK_OFFSET,
) -> list[LineOp]:
	"""
	Compute cut mark segments around the label grid.

	Each grid intersection sits in the middle of the adjoining gaps.
	Top and left edge points get marks pointing left and up, the right
	column points right and up, the bottom row points left and down, and
	the bottom-right corner also points right and down. Interior
	intersections get no marks.

	Args:
		paper: Paper format.
		mark_length: Length of each mark.
		mark_offset: Distance between the point and the mark start.

	Returns:
		List of LineOp segments.
	"""
	near = mark_offset
	far = mark_offset + mark_length
	marks: list[LineOp] = []
	for row in range(paper.rows + 1):
		for column in range(paper.columns + 1):
			x, y = compute_cell_origin(paper, row, column)
			if column > 0:
				x -= paper.horizontal_gap / 2.0
			if row > 0:
				y -= paper.vertical_gap / 2.0

			if row == 0 or column == 0:
				marks.append(build_mark(x - far, y, x - near, y))
				marks.append(build_mark(x, y - far, x, y - near))
			if column == paper.columns:
				marks.append(build_mark(x + near, y, x + far, y))
				marks.append(build_mark(x, y - far, x, y - near))
			if row == paper.rows:
				marks.append(build_mark(x - far, y, x - near, y))
				marks.append(build_mark(x, y + near, x, y + far))
			if column == paper.columns and row == paper.rows:
				marks.append(build_mark(x + near, y, x + far, y))
				marks.append(build_mark(x, y + near, x, y + far))
	return marks


#============================================
def build_label_operations(
	record: dict[str, str],
	template: str,
	placement: LabelPlacement,
	paper: PaperFormat,
	options: LabelOptions,
	measure: MeasureFunc,
) -> list:
	"""
	Draw operations for one label.

	Args:
		record: Record values.
		template: Label template.
		placement: Slot for the record.
		paper: Paper format.
		options: Label options.
		measure: Width measurement callable.

	Returns:
		Border (optional) followed by text and underline operations.
	"""
	operations: list = []
	if options.show_borders:
		operations.append(
			RectOp(
				x=placement.x,
				y=placement.y,
				width=paper.label_width,
				height=paper.label_height,
				stroke_color=BORDER_COLOR,
				line_width=BORDER_LINE_WIDTH,
			)
		)
	content = alm.template.apply_template(template, record)
	runs = alm.markup.parse_inline_styles(content)
	operations.extend(
		alm.layout.layout_label_text(
			runs,
			placement.x + options.padding,
			placement.y + options.padding,
			paper.label_width - options.padding * 2.0,
			paper.label_height - options.padding * 2.0,
			options.font_size,
			options.text_align,
			options.vertical_align,
			measure,
		)
	)
	return operations


#============================================
def build_pages(
	records: list[dict[str, str]],
	template: str,
	paper: PaperFormat,
	options: LabelOptions,
	measure: MeasureFunc,
) -> list[PageInstructions]:
	"""
	Build draw instructions for every page.

	Args:
		records: Records in print order.
		template: Label template.
		paper: Paper format.
		options: Label options.
		measure: Width measurement callable.

	Returns:
		One PageInstructions per sheet.
	"""
	total_pages = count_pages(len(records), paper)
	cut_marks: list[LineOp] = []
	if options.show_cut_marks:
		cut_marks = compute_cut_marks(paper)
	pages = []
	for page_index in range(total_pages):
		page = PageInstructions(page_index=page_index)
		page.operations.extend(cut_marks)
		pages.append(page)

	for placement in compute_placements(len(records), paper):
		page = pages[placement.page_index]
		page.placements.append(placement)
		page.operations.extend(
			build_label_operations(
				records[placement.record_index],
				template,
				placement,
				paper,
				options,
				measure,
			)
		)
	return pages

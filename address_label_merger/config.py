"""
Shared configuration, constants, and value types.
"""

import dataclasses


POINTS_PER_INCH = 72.0
POINTS_PER_MM = POINTS_PER_INCH / 25.4

DEFAULT_FORMAT_ID = "avery-5160"

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_FONT_ITALIC = "Helvetica-Oblique"
DEFAULT_FONT_BOLD_ITALIC = "Helvetica-BoldOblique"
DEFAULT_FONT_SIZE = 10.0
DEFAULT_PADDING = 5.0
LINE_HEIGHT_FACTOR = 1.2

TEXT_COLOR = "#000000"
BORDER_COLOR = "#CCCCCC"
BORDER_LINE_WIDTH = 0.5
UNDERLINE_WIDTH = 0.5
CUT_MARK_COLOR = "#000000"
CUT_MARK_LINE_WIDTH = 0.5
CUT_MARK_LENGTH = 10.0
CUT_MARK_OFFSET = 2.0

PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

TEXT_ALIGNMENTS = ("left", "center", "right")
VERTICAL_ALIGNMENTS = ("top", "middle", "bottom")


#============================================
class LabelMergeError(Exception):
	"""
	Base error for label merging.
	"""


#============================================
class ValidationError(LabelMergeError):
	"""
	Raised when required configuration is missing before layout starts.
	"""


#============================================
class RenderError(LabelMergeError):
	"""
	Raised when the PDF backend fails while measuring or drawing.
	"""


@dataclasses.dataclass(frozen=True)
class PaperFormat:
	id: str
	name: str
	description: str
	page_width: float
	page_height: float
	columns: int
	rows: int
	label_width: float
	label_height: float
	margin_left: float
	margin_top: float
	horizontal_gap: float
	vertical_gap: float


@dataclasses.dataclass
class LabelOptions:
	font_size: float = DEFAULT_FONT_SIZE
	padding: float = DEFAULT_PADDING
	text_align: str = "left"
	vertical_align: str = "middle"
	show_borders: bool = False
	show_cut_marks: bool = False
	calibration: bool = False


@dataclasses.dataclass
class MergeResult:
	total_records: int
	pages: int
	labels_per_page: int
	placements: list
	calibration: bool


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeter value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_MM

"""
Word wrapping, alignment, and draw instructions for label text.

All coordinates are top-down page points: the origin is the top-left
corner of the page and y grows downward.
"""

# Standard Library
import dataclasses
import re
from typing import Callable

# local repo modules
import address_label_merger as alm
import address_label_merger.config
import address_label_merger.markup


StyledRun = alm.markup.StyledRun

LINE_HEIGHT_FACTOR = alm.config.LINE_HEIGHT_FACTOR
TEXT_COLOR = alm.config.TEXT_COLOR
UNDERLINE_WIDTH = alm.config.UNDERLINE_WIDTH

# measure(text, bold, italic, font_size) -> width in points
MeasureFunc = Callable[[str, bool, bool, float], float]

TOKEN_SPLIT_PATTERN = re.compile(r"(\s+)")


@dataclasses.dataclass(frozen=True)
class TextFragment:
	text: str
	bold: bool
	italic: bool
	underline: bool
	width: float


@dataclasses.dataclass(frozen=True)
class WrappedLine:
	fragments: tuple[TextFragment, ...]
	width: float


@dataclasses.dataclass(frozen=True)
class RectOp:
	x: float
	y: float
	width: float
	height: float
	stroke_color: str
	line_width: float
	fill_color: str | None = None


@dataclasses.dataclass(frozen=True)
class TextOp:
	text: str
	x: float
	y: float
	font_size: float
	bold: bool = False
	italic: bool = False
	color: str = TEXT_COLOR


@dataclasses.dataclass(frozen=True)
class LineOp:
	x0: float
	y0: float
	x1: float
	y1: float
	color: str
	line_width: float


#============================================
def tokenize_run_text(text: str) -> list[str]:
	"""
	Split text into alternating whitespace and word tokens.

	Args:
		text: Run text.

	Returns:
		Non-empty tokens in order, whitespace kept.
	"""
	return [token for token in TOKEN_SPLIT_PATTERN.split(text) if token]


#============================================
def wrap_runs(
	runs: list[StyledRun],
	max_width: float,
	font_size: float,
	measure: MeasureFunc,
) -> list[WrappedLine]:
	"""
	Greedy word wrap of styled runs.

	A token that does not fit moves to a new line unless the current line
	is empty, so a single oversized word gets a line of its own. Lines
	never start with whitespace.

	Args:
		runs: Styled runs for one label.
		max_width: Available width in points.
		font_size: Font size in points.
		measure: Width measurement callable.

	Returns:
		Wrapped lines.
	"""
	lines: list[WrappedLine] = []
	current: list[TextFragment] = []
	current_width = 0.0

	for run in runs:
		if run.is_line_break:
			if current:
				lines.append(WrappedLine(fragments=tuple(current), width=current_width))
			current = []
			current_width = 0.0
			continue

		for token in tokenize_run_text(run.text):
			token_width = measure(token, run.bold, run.italic, font_size)
			if current_width + token_width > max_width and current:
				lines.append(WrappedLine(fragments=tuple(current), width=current_width))
				current = []
				current_width = 0.0
			if not current and token.strip() == "":
				continue
			current.append(
				TextFragment(
					text=token,
					bold=run.bold,
					italic=run.italic,
					underline=run.underline,
					width=token_width,
				)
			)
			current_width += token_width

	if current:
		lines.append(WrappedLine(fragments=tuple(current), width=current_width))
	return lines


#============================================
def compute_line_height(font_size: float) -> float:
	"""
	Line advance for a font size.
	"""
	return font_size * LINE_HEIGHT_FACTOR


#============================================
def compute_block_top(
	top: float,
	box_height: float,
	block_height: float,
	vertical_align: str,
) -> float:
	"""
	Compute the y of the first line for a vertical alignment.

	Args:
		top: Box top.
		box_height: Box height.
		block_height: Height of all wrapped lines.
		vertical_align: top, middle, or bottom.

	Returns:
		Top y of the text block. May lie outside the box.
	"""
	normalized = vertical_align.strip().lower()
	if normalized == "top":
		return top
	if normalized == "middle":
		return top + (box_height - block_height) / 2.0
	if normalized == "bottom":
		return top + box_height - block_height
	raise ValueError(f"Unknown vertical alignment: {vertical_align}")


#============================================
def compute_line_left(
	left: float,
	box_width: float,
	line_width: float,
	text_align: str,
) -> float:
	"""
	Compute the x of a line for a horizontal alignment.

	Args:
		left: Box left.
		box_width: Box width.
		line_width: Measured line width.
		text_align: left, center, or right.

	Returns:
		Left x of the line.
	"""
	normalized = text_align.strip().lower()
	if normalized == "left":
		return left
	if normalized == "center":
		return left + (box_width - line_width) / 2.0
	if normalized == "right":
		return left + box_width - line_width
	raise ValueError(f"Unknown text alignment: {text_align}")


#============================================
def layout_label_text(
	runs: list[StyledRun],
	x: float,
	y: float,
	width: float,
	height: float,
	font_size: float,
	text_align: str,
	vertical_align: str,
	measure: MeasureFunc,
) -> list[TextOp | LineOp]:
	"""
	Wrap and position styled runs inside a box.

	Args:
		runs: Styled runs for one label.
		x: Box left.
		y: Box top.
		width: Box width.
		height: Box height.
		font_size: Font size in points.
		text_align: Horizontal alignment.
		vertical_align: Vertical alignment.
		measure: Width measurement callable.

	Returns:
		Text operations, each underlined fragment followed by its line.
	"""
	lines = wrap_runs(runs, width, font_size, measure)
	line_height = compute_line_height(font_size)
	block_height = len(lines) * line_height
	line_top = compute_block_top(y, height, block_height, vertical_align)

	operations: list[TextOp | LineOp] = []
	for line in lines:
		cursor_x = compute_line_left(x, width, line.width, text_align)
		for fragment in line.fragments:
			operations.append(
				TextOp(
					text=fragment.text,
					x=cursor_x,
					y=line_top,
					font_size=font_size,
					bold=fragment.bold,
					italic=fragment.italic,
				)
			)
			if fragment.underline:
				underline_y = line_top + font_size
				operations.append(
					LineOp(
						x0=cursor_x,
						y0=underline_y,
						x1=cursor_x + fragment.width,
						y1=underline_y,
						color=TEXT_COLOR,
						line_width=UNDERLINE_WIDTH,
					)
				)
			cursor_x += fragment.width
		line_top += line_height
	return operations

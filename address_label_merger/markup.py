"""
Inline style segmentation for label text.

Supported markers:
	**text** or __text__  bold
	*text* or _text_      italic
	~~text~~              underline
	newline               forced line break

Markers toggle independent style flags. A marker that is never closed
keeps its style on until the end of the text.
"""

# Standard Library
import dataclasses


@dataclasses.dataclass(frozen=True)
class StyledRun:
	text: str
	bold: bool = False
	italic: bool = False
	underline: bool = False
	is_line_break: bool = False


LINE_BREAK = StyledRun(text="", is_line_break=True)


#============================================
def parse_inline_styles(text: str) -> list[StyledRun]:
	"""
	Split merged label text into styled runs.

	Args:
		text: Label text after placeholder substitution.

	Returns:
		Ordered list of StyledRun entries.
	"""
	runs: list[StyledRun] = []
	buffer: list[str] = []
	bold = False
	italic = False
	underline = False

	def flush() -> None:
		if not buffer:
			return
		runs.append(
			StyledRun(
				text="".join(buffer),
				bold=bold,
				italic=italic,
				underline=underline,
			)
		)
		buffer.clear()

	index = 0
	length = len(text)
	while index < length:
		char = text[index]
		next_char = text[index + 1] if index + 1 < length else ""

		if char == "\n":
			flush()
			runs.append(LINE_BREAK)
			index += 1
			continue

		if char in ("*", "_") and next_char == char:
			flush()
			bold = not bold
			index += 2
			continue

		if char in ("*", "_"):
			prev_char = text[index - 1] if index > 0 else ""
			if prev_char != "\\":
				flush()
				italic = not italic
				index += 1
				continue

		if char == "~" and next_char == "~":
			flush()
			underline = not underline
			index += 2
			continue

		buffer.append(char)
		index += 1

	flush()
	return runs


#============================================
def runs_to_plain_text(runs: list[StyledRun]) -> str:
	"""
	Join run text back together without markers.

	Args:
		runs: Styled runs.

	Returns:
		Plain text with newlines for line breaks.
	"""
	parts = []
	for run in runs:
		if run.is_line_break:
			parts.append("\n")
		else:
			parts.append(run.text)
	return "".join(parts)

import address_label_merger as alm
import address_label_merger.markup


StyledRun = alm.markup.StyledRun
LINE_BREAK = alm.markup.LINE_BREAK


#============================================
def test_bold_round_trip() -> None:
	"""
	A closed bold marker leaves no bold state behind.
	"""
	runs = alm.markup.parse_inline_styles("**bold** plain")
	assert runs == [
		StyledRun(text="bold", bold=True),
		StyledRun(text=" plain"),
	]


#============================================
def test_unterminated_bold_runs_to_end() -> None:
	"""
	An unclosed marker keeps its style for the rest of the text.
	"""
	runs = alm.markup.parse_inline_styles("**bold\nnext line")
	assert runs == [
		StyledRun(text="bold", bold=True),
		LINE_BREAK,
		StyledRun(text="next line", bold=True),
	]


#============================================
def test_marker_variants() -> None:
	"""
	Underscore and tilde markers map to bold, italic, and underline.
	"""
	assert alm.markup.parse_inline_styles("__b__") == [StyledRun(text="b", bold=True)]
	assert alm.markup.parse_inline_styles("_i_") == [StyledRun(text="i", italic=True)]
	assert alm.markup.parse_inline_styles("*i*") == [StyledRun(text="i", italic=True)]
	assert alm.markup.parse_inline_styles("~~u~~") == [StyledRun(text="u", underline=True)]


#============================================
def test_overlapping_markers() -> None:
	"""
	Markers are independent toggles and may nest.
	"""
	runs = alm.markup.parse_inline_styles("**bold *both***")
	assert runs == [
		StyledRun(text="bold ", bold=True),
		StyledRun(text="both", bold=True, italic=True),
	]


#============================================
def test_word_internal_underscores_toggle_italic() -> None:
	"""
	Single underscores inside a word still toggle italic.
	"""
	runs = alm.markup.parse_inline_styles("snake_case_word")
	assert runs == [
		StyledRun(text="snake"),
		StyledRun(text="case", italic=True),
		StyledRun(text="word"),
	]


#============================================
def test_escaped_star_is_literal() -> None:
	"""
	A backslash before a single star keeps both characters.
	"""
	runs = alm.markup.parse_inline_styles("5 \\* 3")
	assert runs == [StyledRun(text="5 \\* 3")]


#============================================
def test_line_breaks() -> None:
	"""
	Newlines become line break runs.
	"""
	assert alm.markup.parse_inline_styles("a\nb") == [
		StyledRun(text="a"),
		LINE_BREAK,
		StyledRun(text="b"),
	]
	assert alm.markup.parse_inline_styles("\n") == [LINE_BREAK]
	assert alm.markup.parse_inline_styles("") == []
	assert LINE_BREAK.text == ""
	assert LINE_BREAK.is_line_break is True


#============================================
def test_each_call_starts_fresh() -> None:
	"""
	Style state does not leak between labels.
	"""
	alm.markup.parse_inline_styles("**open")
	assert alm.markup.parse_inline_styles("plain") == [StyledRun(text="plain")]


#============================================
def test_runs_to_plain_text() -> None:
	"""
	Markers are removed and line breaks kept.
	"""
	runs = alm.markup.parse_inline_styles("**Jane** _Doe_\n~~12 Main St~~")
	assert alm.markup.runs_to_plain_text(runs) == "Jane Doe\n12 Main St"

"""
Built-in paper formats and custom format loading.
"""

# Standard Library
import json
import pathlib

# local repo modules
import address_label_merger as alm
import address_label_merger.config


PaperFormat = alm.config.PaperFormat
ValidationError = alm.config.ValidationError

inches_to_points = alm.config.inches_to_points
mm_to_points = alm.config.mm_to_points

LETTER_WIDTH = inches_to_points(8.5)
LETTER_HEIGHT = inches_to_points(11.0)
A4_WIDTH = mm_to_points(210.0)
A4_HEIGHT = mm_to_points(297.0)

NUMERIC_FIELDS = (
	"page_width",
	"page_height",
	"label_width",
	"label_height",
	"margin_left",
	"margin_top",
	"horizontal_gap",
	"vertical_gap",
)
COUNT_FIELDS = ("columns", "rows")


PAPER_FORMATS = (
	PaperFormat(
		id="avery-5160",
		name="Avery 5160",
		description="Address labels, 30 per sheet, 2-5/8 x 1 in, US Letter",
		page_width=LETTER_WIDTH,
		page_height=LETTER_HEIGHT,
		columns=3,
		rows=10,
		label_width=inches_to_points(2.625),
		label_height=inches_to_points(1.0),
		margin_left=inches_to_points(0.1875),
		margin_top=inches_to_points(0.5),
		horizontal_gap=inches_to_points(0.125),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-5161",
		name="Avery 5161",
		description="Address labels, 20 per sheet, 4 x 1 in, US Letter",
		page_width=LETTER_WIDTH,
		page_height=LETTER_HEIGHT,
		columns=2,
		rows=10,
		label_width=inches_to_points(4.0),
		label_height=inches_to_points(1.0),
		margin_left=inches_to_points(0.15625),
		margin_top=inches_to_points(0.5),
		horizontal_gap=inches_to_points(0.1875),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-5162",
		name="Avery 5162",
		description="Address labels, 14 per sheet, 4 x 1-1/3 in, US Letter",
		page_width=LETTER_WIDTH,
		page_height=LETTER_HEIGHT,
		columns=2,
		rows=7,
		label_width=inches_to_points(4.0),
		label_height=96.0,
		margin_left=inches_to_points(0.15625),
		margin_top=60.0,
		horizontal_gap=inches_to_points(0.1875),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-5163",
		name="Avery 5163",
		description="Shipping labels, 10 per sheet, 4 x 2 in, US Letter",
		page_width=LETTER_WIDTH,
		page_height=LETTER_HEIGHT,
		columns=2,
		rows=5,
		label_width=inches_to_points(4.0),
		label_height=inches_to_points(2.0),
		margin_left=inches_to_points(0.15625),
		margin_top=inches_to_points(0.5),
		horizontal_gap=inches_to_points(0.1875),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-5164",
		name="Avery 5164",
		description="Shipping labels, 6 per sheet, 4 x 3-1/3 in, US Letter",
		page_width=LETTER_WIDTH,
		page_height=LETTER_HEIGHT,
		columns=2,
		rows=3,
		label_width=inches_to_points(4.0),
		label_height=240.0,
		margin_left=inches_to_points(0.15625),
		margin_top=inches_to_points(0.5),
		horizontal_gap=inches_to_points(0.1875),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-5167",
		name="Avery 5167",
		description="Return address labels, 80 per sheet, 1-3/4 x 1/2 in, US Letter",
		page_width=LETTER_WIDTH,
		page_height=LETTER_HEIGHT,
		columns=4,
		rows=20,
		label_width=inches_to_points(1.75),
		label_height=inches_to_points(0.5),
		margin_left=21.6,
		margin_top=inches_to_points(0.5),
		horizontal_gap=21.6,
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-l7160",
		name="Avery L7160",
		description="Address labels, 21 per sheet, 63.5 x 38.1 mm, A4",
		page_width=A4_WIDTH,
		page_height=A4_HEIGHT,
		columns=3,
		rows=7,
		label_width=mm_to_points(63.5),
		label_height=mm_to_points(38.1),
		margin_left=mm_to_points(7.2),
		margin_top=mm_to_points(15.1),
		horizontal_gap=mm_to_points(2.5),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="avery-l7163",
		name="Avery L7163",
		description="Address labels, 14 per sheet, 99.1 x 38.1 mm, A4",
		page_width=A4_WIDTH,
		page_height=A4_HEIGHT,
		columns=2,
		rows=7,
		label_width=mm_to_points(99.1),
		label_height=mm_to_points(38.1),
		margin_left=mm_to_points(4.65),
		margin_top=mm_to_points(15.1),
		horizontal_gap=mm_to_points(2.5),
		vertical_gap=0.0,
	),
	PaperFormat(
		id="a4-3x8",
		name="A4 24 labels",
		description="Generic labels, 24 per sheet, 70 x 37 mm, A4",
		page_width=A4_WIDTH,
		page_height=A4_HEIGHT,
		columns=3,
		rows=8,
		label_width=mm_to_points(70.0),
		label_height=mm_to_points(37.0),
		margin_left=0.0,
		margin_top=mm_to_points(0.5),
		horizontal_gap=0.0,
		vertical_gap=0.0,
	),
)


#============================================
def get_paper_format(format_id: str) -> PaperFormat | None:
	"""
	Look up a built-in format by id.

	Args:
		format_id: Format id such as "avery-5160".

	Returns:
		PaperFormat or None when the id is unknown.
	"""
	wanted = format_id.strip().lower()
	for paper in PAPER_FORMATS:
		if paper.id == wanted:
			return paper
	return None


#============================================
def search_formats(query: str) -> list[PaperFormat]:
	"""
	Filter built-in formats by search terms.

	Every whitespace separated term must appear in the id, name, or
	description, ignoring case.

	Args:
		query: Search text, empty for all formats.

	Returns:
		Matching formats in catalog order.
	"""
	terms = query.lower().split()
	matches = []
	for paper in PAPER_FORMATS:
		haystack = f"{paper.id} {paper.name} {paper.description}".lower()
		if all(term in haystack for term in terms):
			matches.append(paper)
	return matches


#============================================
def paper_format_from_dict(data: dict) -> PaperFormat:
	"""
	Build a PaperFormat from a JSON object.

	Args:
		data: Mapping with PaperFormat field names.

	Returns:
		PaperFormat.
	"""
	if not isinstance(data, dict):
		raise ValidationError("Paper format must be a JSON object")
	missing = [name for name in NUMERIC_FIELDS + COUNT_FIELDS if name not in data]
	if missing:
		raise ValidationError(f"Paper format is missing fields: {', '.join(missing)}")
	values: dict[str, object] = {}
	try:
		for name in NUMERIC_FIELDS:
			values[name] = float(data[name])
		for name in COUNT_FIELDS:
			values[name] = int(data[name])
	except (TypeError, ValueError) as error:
		raise ValidationError(f"Paper format has an invalid value: {error}") from error
	if values["columns"] <= 0 or values["rows"] <= 0:
		raise ValidationError("Paper format needs at least one column and one row")
	format_id = str(data.get("id", "custom"))
	return PaperFormat(
		id=format_id,
		name=str(data.get("name", format_id)),
		description=str(data.get("description", "")),
		**values,
	)


#============================================
def load_paper_format(path: pathlib.Path) -> PaperFormat:
	"""
	Load a custom paper format from a JSON file.

	Args:
		path: JSON file path.

	Returns:
		PaperFormat.
	"""
	try:
		data = json.loads(path.read_text(encoding="utf-8"))
	except json.JSONDecodeError as error:
		raise ValidationError(f"Invalid paper format file {path}: {error}") from error
	except (OSError, UnicodeDecodeError) as error:
		raise ValidationError(f"Cannot read paper format file {path}: {error}") from error
	return paper_format_from_dict(data)

"""
Delimited text parsing and header inference.
"""

# Standard Library
import dataclasses
import pathlib
import re
import types
from typing import Mapping

# local repo modules
import address_label_merger as alm
import address_label_merger.config


ValidationError = alm.config.ValidationError

KNOWN_HEADERS = frozenset({
	"name", "first name", "firstname", "first_name", "fname",
	"last name", "lastname", "last_name", "lname", "surname",
	"full name", "fullname", "full_name",
	"address", "address1", "address 1", "address_1",
	"street", "street address", "street_address",
	"address2", "address 2", "address_2", "apt", "apartment", "suite", "unit",
	"city", "town",
	"state", "province", "region",
	"zip", "zipcode", "zip code", "zip_code",
	"postal", "postal code", "postal_code", "postcode",
	"country", "nation",
	"email", "e-mail", "email address", "email_address",
	"phone", "telephone", "phone number", "phone_number", "tel",
	"company", "organization", "org", "business",
	"title", "prefix", "suffix", "salutation",
	"department", "dept",
})

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
HEADER_STRIP_PATTERN = re.compile(r"[^a-zA-Z0-9\s_-]")
HEADER_WORD_PATTERN = re.compile(r"[\s_-]+")


@dataclasses.dataclass(frozen=True)
class Dataset:
	headers: tuple[str, ...]
	rows: tuple[Mapping[str, str], ...]
	has_headers: bool
	delimiter: str = ","


#============================================
def split_lines(text: str) -> list[str]:
	"""
	Split raw text into non-blank lines.

	Args:
		text: Raw input text.

	Returns:
		Lines that are not empty after trimming.
	"""
	lines = LINE_SPLIT_PATTERN.split(text)
	return [line for line in lines if line.strip() != ""]


#============================================
def detect_delimiter(line: str) -> str:
	"""
	Pick tab or comma by majority count in a line.

	Args:
		line: First data line.

	Returns:
		Tab when tabs strictly outnumber commas, else comma.
	"""
	tab_count = line.count("\t")
	comma_count = line.count(",")
	if tab_count > comma_count:
		return "\t"
	return ","


#============================================
def parse_line(line: str, delimiter: str) -> list[str]:
	"""
	Split one line into fields.

	Quoted sections may contain the delimiter, and a doubled quote inside
	a quoted section is a literal quote. Unbalanced quotes never fail.

	Args:
		line: Line text without the line ending.
		delimiter: Field delimiter.

	Returns:
		List of trimmed field strings.
	"""
	fields: list[str] = []
	current: list[str] = []
	in_quotes = False
	index = 0
	length = len(line)
	while index < length:
		char = line[index]
		if in_quotes:
			if char == '"' and index + 1 < length and line[index + 1] == '"':
				current.append('"')
				index += 2
				continue
			if char == '"':
				in_quotes = False
			else:
				current.append(char)
			index += 1
			continue
		if char == '"':
			in_quotes = True
		elif char == delimiter:
			fields.append("".join(current).strip())
			current = []
		else:
			current.append(char)
		index += 1
	fields.append("".join(current).strip())
	return fields


#============================================
def count_header_matches(first_row: list[str]) -> int:
	"""
	Count fields that look like known address headers.

	Args:
		first_row: Parsed first row.

	Returns:
		Number of fields found in KNOWN_HEADERS.
	"""
	return sum(1 for field in first_row if field.strip().lower() in KNOWN_HEADERS)


#============================================
def detect_headers(first_row: list[str]) -> bool:
	"""
	Decide whether the first row is a header row.

	Args:
		first_row: Parsed first row.

	Returns:
		True for two or more matches, or at least half the fields matching.
	"""
	match_count = count_header_matches(first_row)
	if match_count >= 2:
		return True
	return match_count > 0 and match_count >= len(first_row) * 0.5


#============================================
def generate_column_headers(count: int) -> list[str]:
	"""
	Build synthetic Column1..ColumnN headers.

	Args:
		count: Number of columns.

	Returns:
		List of header names.
	"""
	return [f"Column{index + 1}" for index in range(count)]


#============================================
def capitalize_word(word: str) -> str:
	"""
	Uppercase the first letter and keep inner capitals.

	An all-caps word such as "ZIP" becomes "Zip".
	"""
	if word.isupper():
		word = word.lower()
	return word[:1].upper() + word[1:]


#============================================
def normalize_header(header: str) -> str:
	"""
	Convert a header cell into a PascalCase placeholder name.

	Args:
		header: Raw header text.

	Returns:
		Name made of ASCII letters and digits, possibly empty.
	"""
	cleaned = HEADER_STRIP_PATTERN.sub("", header).strip()
	words = HEADER_WORD_PATTERN.split(cleaned)
	return "".join(capitalize_word(word) for word in words)


#============================================
def make_unique_headers(headers: list[str]) -> list[str]:
	"""
	Suffix repeated headers with their occurrence count.

	The second "City" becomes "City2", the third "City3". A suffixed
	name that collides with a header already emitted keeps counting up.

	Args:
		headers: Header names in column order.

	Returns:
		Unique header names in the same order.
	"""
	counts: dict[str, int] = {}
	used: set[str] = set()
	unique: list[str] = []
	for header in headers:
		count = counts.get(header, 0) + 1
		counts[header] = count
		candidate = header
		if count > 1:
			candidate = f"{header}{count}"
		while candidate in used:
			count += 1
			candidate = f"{header}{count}"
		used.add(candidate)
		unique.append(candidate)
	return unique


#============================================
def build_headers(first_row: list[str], has_headers: bool) -> list[str]:
	"""
	Build the unique header list for a dataset.

	Args:
		first_row: Parsed first row.
		has_headers: Whether the first row is a header row.

	Returns:
		Unique, placeholder-safe header names.
	"""
	if not has_headers:
		return make_unique_headers(generate_column_headers(len(first_row)))
	headers = []
	for index, field in enumerate(first_row):
		name = normalize_header(field)
		if not name:
			# nothing usable left, fall back to the positional name
			name = f"Column{index + 1}"
		headers.append(name)
	return make_unique_headers(headers)


#============================================
def build_record(headers: list[str], fields: list[str]) -> dict[str, str]:
	"""
	Map fields onto headers, padding or truncating as needed.

	Args:
		headers: Header names.
		fields: Parsed field values.

	Returns:
		Record with a value for every header.
	"""
	record: dict[str, str] = {}
	for index, header in enumerate(headers):
		if index < len(fields):
			record[header] = fields[index]
		else:
			record[header] = ""
	return record


#============================================
def parse_csv(text: str) -> Dataset:
	"""
	Parse delimited text into a Dataset.

	Args:
		text: Raw comma or tab separated text.

	Returns:
		Dataset with headers and read-only records.
	"""
	lines = split_lines(text)
	if not lines:
		return Dataset(headers=(), rows=(), has_headers=False)

	delimiter = detect_delimiter(lines[0])
	first_row = parse_line(lines[0], delimiter)
	has_headers = detect_headers(first_row)
	headers = build_headers(first_row, has_headers)

	data_start = 1 if has_headers else 0
	rows = []
	for line in lines[data_start:]:
		fields = parse_line(line, delimiter)
		rows.append(types.MappingProxyType(build_record(headers, fields)))

	return Dataset(
		headers=tuple(headers),
		rows=tuple(rows),
		has_headers=has_headers,
		delimiter=delimiter,
	)


#============================================
def read_data_file(path: pathlib.Path) -> Dataset:
	"""
	Read and parse a data file.

	Args:
		path: CSV or TSV file path.

	Returns:
		Parsed Dataset.

	Raises:
		ValidationError: The file cannot be read as UTF-8 text.
	"""
	try:
		text = path.read_text(encoding="utf-8-sig")
	except UnicodeDecodeError as error:
		raise ValidationError(f"Data file {path} is not UTF-8 text: {error}") from error
	except OSError as error:
		raise ValidationError(f"Cannot read data file {path}: {error}") from error
	return parse_csv(text)

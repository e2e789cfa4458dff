"""
CLI entry points for merging address data into label sheets.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# local repo modules
import address_label_merger as alm
import address_label_merger.config
import address_label_merger.csv_lib
import address_label_merger.formats
import address_label_merger.markup
import address_label_merger.render
import address_label_merger.template


LabelOptions = alm.config.LabelOptions
PaperFormat = alm.config.PaperFormat
Dataset = alm.csv_lib.Dataset
LabelMergeError = alm.config.LabelMergeError
ValidationError = alm.config.ValidationError

DEFAULT_FORMAT_ID = alm.config.DEFAULT_FORMAT_ID
DEFAULT_FONT_SIZE = alm.config.DEFAULT_FONT_SIZE
DEFAULT_PADDING = alm.config.DEFAULT_PADDING
TEXT_ALIGNMENTS = alm.config.TEXT_ALIGNMENTS
VERTICAL_ALIGNMENTS = alm.config.VERTICAL_ALIGNMENTS


#============================================
def build_options(args: argparse.Namespace) -> LabelOptions:
	"""
	Build label options from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LabelOptions.
	"""
	return LabelOptions(
		font_size=args.font_size,
		padding=args.padding,
		text_align=args.text_align,
		vertical_align=args.vertical_align,
		show_borders=args.show_borders,
		show_cut_marks=args.show_cut_marks,
		calibration=args.calibration,
	)


#============================================
def resolve_paper_format(args: argparse.Namespace) -> PaperFormat:
	"""
	Pick the paper format from a format file or the catalog.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PaperFormat.
	"""
	if args.format_file:
		return alm.formats.load_paper_format(pathlib.Path(args.format_file))
	paper = alm.formats.get_paper_format(args.format_id)
	if paper is None:
		raise ValidationError(f"Unknown paper format: {args.format_id} (see --list-formats)")
	return paper


#============================================
def resolve_template(args: argparse.Namespace, dataset: Dataset) -> str:
	"""
	Pick the template text.

	A literal backslash-n in --template becomes a line break.

	Args:
		args: Parsed argparse namespace.
		dataset: Parsed dataset.

	Returns:
		Template text.
	"""
	if args.template_file:
		template_path = pathlib.Path(args.template_file)
		try:
			return template_path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as error:
			raise ValidationError(f"Cannot read template file {template_path}: {error}") from error
	if args.template is not None:
		return args.template.replace("\\n", "\n")
	return alm.template.build_default_template(list(dataset.headers))


#============================================
def read_input(input_path: str) -> Dataset:
	"""
	Read the data file, or stdin for "-".

	Args:
		input_path: Data file path.

	Returns:
		Parsed Dataset.
	"""
	if input_path == "-":
		try:
			text = sys.stdin.read()
		except UnicodeDecodeError as error:
			raise ValidationError(f"Standard input is not valid text: {error}") from error
		return alm.csv_lib.parse_csv(text)
	return alm.csv_lib.read_data_file(pathlib.Path(input_path))


#============================================
def print_formats(query: str) -> None:
	"""
	Print catalog formats matching a query.

	Args:
		query: Search text.
	"""
	matches = alm.formats.search_formats(query)
	for paper in matches:
		per_page = paper.columns * paper.rows
		print(f"{paper.id}\t{paper.name}\t{per_page} per sheet\t{paper.description}")
	if not matches:
		print(f"No paper formats match: {query}")


#============================================
def print_preview(dataset: Dataset, template: str, count: int) -> None:
	"""
	Print merged plain text for the first labels.

	Args:
		dataset: Parsed dataset.
		template: Label template.
		count: Number of labels to show.
	"""
	for index, record in enumerate(dataset.rows[:count], start=1):
		merged = alm.template.apply_template(template, record)
		runs = alm.markup.parse_inline_styles(merged)
		print(f"--- Label {index} ---")
		print(alm.markup.runs_to_plain_text(runs))


#============================================
def parse_args() -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Merge CSV or TSV address data into label sheet PDFs.")
	parser.add_argument("input_path", nargs="?", default=None, help="CSV/TSV data file, or - for stdin.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	template_group = parser.add_argument_group("Template")
	template_group.add_argument("-t", "--template", dest="template", default=None, help="Template text with <<Field>> placeholders.")
	template_group.add_argument("-T", "--template-file", dest="template_file", default=None, help="Read the template from a file.")

	format_group = parser.add_argument_group("Paper format")
	format_group.add_argument("-f", "--format", dest="format_id", default=DEFAULT_FORMAT_ID, help="Paper format id.")
	format_group.add_argument("-F", "--format-file", dest="format_file", default=None, help="Custom paper format JSON file.")
	format_group.add_argument(
		"--list-formats",
		dest="list_formats",
		nargs="?",
		const="",
		default=None,
		metavar="QUERY",
		help="List paper formats, optionally filtered, and exit.",
	)

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-s", "--font-size", dest="font_size", type=float, default=DEFAULT_FONT_SIZE, help="Font size in points.")
	layout_group.add_argument("--padding", dest="padding", type=float, default=DEFAULT_PADDING, help="Label padding in points.")
	layout_group.add_argument("-a", "--align", dest="text_align", choices=TEXT_ALIGNMENTS, default="left", help="Horizontal text alignment.")
	layout_group.add_argument("-v", "--valign", dest="vertical_align", choices=VERTICAL_ALIGNMENTS, default="middle", help="Vertical text alignment.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-b", "--borders", dest="show_borders", action="store_true", help="Draw label borders.")
	behavior_group.add_argument("-B", "--no-borders", dest="show_borders", action="store_false", help="Disable label borders.")
	behavior_group.add_argument("-k", "--cut-marks", dest="show_cut_marks", action="store_true", help="Draw cut marks.")
	behavior_group.add_argument("-K", "--no-cut-marks", dest="show_cut_marks", action="store_false", help="Disable cut marks.")
	behavior_group.add_argument("-c", "--calibration", dest="calibration", action="store_true", help="Add a calibration page.")
	behavior_group.add_argument("-C", "--no-calibration", dest="calibration", action="store_false", help="Disable calibration page.")
	behavior_group.add_argument("--list-fields", dest="list_fields", action="store_true", help="Print placeholders for the data and exit.")
	behavior_group.add_argument(
		"--preview",
		dest="preview",
		type=int,
		default=None,
		metavar="N",
		help="Print merged text of the first N labels and stop before rendering.",
	)

	parser.set_defaults(
		show_borders=False,
		show_cut_marks=False,
		calibration=False,
		list_fields=False,
	)

	args = parser.parse_args()
	if args.list_formats is None and args.input_path is None:
		parser.error("the following arguments are required: input_path")
	needs_output = not args.list_fields and args.preview is None
	if args.list_formats is None and needs_output and args.output_path is None:
		parser.error("the following arguments are required: -o/--output")
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the full pipeline from data file to label PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	if args.list_formats is not None:
		print_formats(args.list_formats)
		return

	start_time = time.perf_counter()
	dataset = read_input(args.input_path)
	parse_end = time.perf_counter()
	print(f"Input: {args.input_path}")
	delimiter_name = "tab" if dataset.delimiter == "\t" else "comma"
	print(f"Delimiter: {delimiter_name}")
	print(f"Header row detected: {dataset.has_headers}")
	print(f"Fields: {', '.join(dataset.headers)}")
	print(f"Records: {len(dataset.rows)}")

	if args.list_fields:
		for placeholder in alm.template.get_placeholders(list(dataset.headers)):
			print(placeholder)
		return

	template = resolve_template(args, dataset)
	unresolved = alm.template.find_unresolved_placeholders(template, list(dataset.headers))
	if unresolved:
		print(f"Unknown placeholders left as-is: {', '.join(unresolved)}")

	if args.preview is not None:
		print("Stopping before rendering.")
		print_preview(dataset, template, args.preview)
		return

	paper = resolve_paper_format(args)
	options = build_options(args)
	print(f"Paper format: {paper.name} ({paper.columns} x {paper.rows})")
	print(f"Output PDF: {args.output_path}")
	print(f"Draw borders: {options.show_borders}")
	print(f"Cut marks: {options.show_cut_marks}")
	print(f"Calibration: {options.calibration}")

	render_start = time.perf_counter()
	pdf_bytes, result = alm.render.generate_pdf(
		list(dataset.rows),
		template,
		paper,
		options,
		verbose=True,
	)
	render_end = time.perf_counter()

	output_path = pathlib.Path(args.output_path)
	output_path.write_bytes(pdf_bytes)
	print(f"Pages written: {result.pages}")
	print(f"Labels printed: {result.total_records}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	alm.render.write_manifest(
		pathlib.Path(manifest_path),
		args.input_path,
		dataset,
		template,
		paper,
		options,
		result,
	)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: parse={:.2f}s render={:.2f}s total={:.2f}s".format(
			parse_end - start_time,
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	try:
		run_pipeline(args)
	except LabelMergeError as error:
		print(f"Error: {error}", file=sys.stderr)
		raise SystemExit(1) from error

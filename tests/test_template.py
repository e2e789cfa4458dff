import address_label_merger as alm
import address_label_merger.template


RECORD = {"FirstName": "John", "LastName": "Doe", "City": ""}


#============================================
def test_apply_template_scenario() -> None:
	"""
	Known placeholders are replaced with record values.
	"""
	merged = alm.template.apply_template("<<FirstName>> <<LastName>>", RECORD)
	assert merged == "John Doe"


#============================================
def test_template_without_placeholders_is_unchanged() -> None:
	"""
	Plain text passes through as-is.
	"""
	text = "Resident\n**Main Street** < 5 > 3"
	assert alm.template.apply_template(text, RECORD) == text


#============================================
def test_unknown_placeholder_left_literal() -> None:
	"""
	Unknown names are neither blanked nor an error.
	"""
	merged = alm.template.apply_template("<<FirstName>> <<Unknown>>", RECORD)
	assert merged == "John <<Unknown>>"


#============================================
def test_placeholder_name_is_trimmed() -> None:
	"""
	Whitespace around the name inside the markers is ignored.
	"""
	merged = alm.template.apply_template("<< LastName >>, <<City>>!", RECORD)
	assert merged == "Doe, !"


#============================================
def test_substitution_is_single_pass() -> None:
	"""
	Substituted values are not expanded again.
	"""
	record = {"A": "<<B>>", "B": "x"}
	assert alm.template.apply_template("<<A>>/<<B>>", record) == "<<B>>/x"


#============================================
def test_find_placeholders() -> None:
	"""
	Referenced names are listed once in first-use order.
	"""
	template = "<<City>> <<Name>>\n<< City >> <<Zip>>"
	assert alm.template.find_placeholders(template) == ["City", "Name", "Zip"]
	unresolved = alm.template.find_unresolved_placeholders(template, ["Name", "City"])
	assert unresolved == ["Zip"]


#============================================
def test_placeholder_helpers() -> None:
	"""
	Placeholder tokens and the default template follow header order.
	"""
	headers = ["Name", "City"]
	assert alm.template.get_placeholders(headers) == ["<<Name>>", "<<City>>"]
	assert alm.template.build_default_template(headers) == "<<Name>>\n<<City>>"

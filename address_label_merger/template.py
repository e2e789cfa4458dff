"""
Placeholder substitution for label templates.
"""

# Standard Library
import re


PLACEHOLDER_PATTERN = re.compile(r"<<([^>]+)>>")


#============================================
def apply_template(template: str, record: dict[str, str]) -> str:
	"""
	Replace <<Name>> tokens with record values.

	Unknown names are left in the output untouched. Substituted values
	are not scanned again.

	Args:
		template: Template text.
		record: Field values keyed by header.

	Returns:
		Merged text.
	"""
	def replace(match: re.Match) -> str:
		key = match.group(1).strip()
		if key in record:
			return record[key]
		return match.group(0)

	return PLACEHOLDER_PATTERN.sub(replace, template)


#============================================
def get_placeholders(headers: list[str]) -> list[str]:
	"""
	Format headers as placeholder tokens.

	Args:
		headers: Header names.

	Returns:
		List like ["<<FirstName>>", ...].
	"""
	return [f"<<{header}>>" for header in headers]


#============================================
def find_placeholders(template: str) -> list[str]:
	"""
	List the names referenced by a template.

	Args:
		template: Template text.

	Returns:
		Trimmed names in first-use order, without duplicates.
	"""
	names: list[str] = []
	for match in PLACEHOLDER_PATTERN.finditer(template):
		name = match.group(1).strip()
		if name not in names:
			names.append(name)
	return names


#============================================
def find_unresolved_placeholders(template: str, headers: list[str]) -> list[str]:
	"""
	List template names that no header provides.

	Args:
		template: Template text.
		headers: Dataset headers.

	Returns:
		Names that will pass through unchanged.
	"""
	known = set(headers)
	return [name for name in find_placeholders(template) if name not in known]


#============================================
def build_default_template(headers: list[str]) -> str:
	"""
	Build a template with one placeholder per line.

	Args:
		headers: Header names.

	Returns:
		Template text.
	"""
	return "\n".join(get_placeholders(headers))

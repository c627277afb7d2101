"""
Translation of request `options` objects into pymongo keyword arguments.

Requests use the camelCase option names of the MongoDB shell and Node driver (`arrayFilters`, `returnDocument`, ...).
Each helper accepts only the options that make sense for its operation and raises ValidationError for anything else,
so a typo in an option name is reported instead of being silently ignored.
"""

from typing import Any

from pymongo import ASCENDING

from .return_document import ReturnDocumentOption
from ..utilities.validation_error import ValidationError


# Request option name -> pymongo keyword
_OPTION_NAMES: dict[str, str] = {
	"upsert": "upsert",
	"arrayFilters": "array_filters",
	"hint": "hint",
	"collation": "collation",
	"bypassDocumentValidation": "bypass_document_validation",
	"sort": "sort",
	"projection": "projection",
	"returnDocument": "return_document",
	"ordered": "ordered",
}

UPDATE_OPTIONS = frozenset({"upsert", "arrayFilters", "hint", "collation", "bypassDocumentValidation"})
REPLACE_OPTIONS = frozenset({"upsert", "hint", "collation", "bypassDocumentValidation"})
FIND_ONE_AND_UPDATE_OPTIONS = frozenset({"upsert", "arrayFilters", "hint", "collation", "sort", "projection", "returnDocument", "bypassDocumentValidation"})
FIND_ONE_AND_REPLACE_OPTIONS = frozenset({"upsert", "hint", "collation", "sort", "projection", "returnDocument", "bypassDocumentValidation"})
FIND_ONE_AND_DELETE_OPTIONS = frozenset({"hint", "collation", "sort", "projection"})
BULK_WRITE_OPTIONS = frozenset({"ordered", "bypassDocumentValidation"})


def key_direction_list(spec: Any, *, what: str) -> list[tuple[str, Any]]:
	""" Accepts { "field": 1 }, [["field", 1], ...] or "field" and returns pymongo's list of (key, direction) pairs. """
	if isinstance(spec, str):
		return [(spec, ASCENDING)]
	if isinstance(spec, dict):
		if not spec:
			raise ValidationError(f"{what} must name at least one field.")
		return list(spec.items())
	if isinstance(spec, list):
		pairs: list[tuple[str, Any]] = []
		for item in spec:
			if isinstance(item, str):
				pairs.append((item, ASCENDING))
			elif isinstance(item, list) and len(item) == 2 and isinstance(item[0], str):
				pairs.append((item[0], item[1]))
			else:
				raise ValidationError(f"Invalid {what} entry: {item!r}. Expected a field name or a [field, direction] pair.")
		if not pairs:
			raise ValidationError(f"{what} must name at least one field.")
		return pairs
	raise ValidationError(f"{what} must be an object, a list of [field, direction] pairs, or a field name.")

def _as_int(value: Any, name: str) -> int:
	if isinstance(value, bool):
		raise ValidationError(f"{name} must be an integer.")
	try:
		return int(value)
	except (TypeError, ValueError):
		raise ValidationError(f"{name} must be an integer, got {value!r}.")

def projection_option(projection: Any) -> dict[str, Any] | list[str] | None:
	""" A projection is an object ({ "name": 1 }) or a list of field names. Missing is None. """
	if projection is None:
		return None
	if isinstance(projection, dict) or (isinstance(projection, list) and all(isinstance(field, str) for field in projection)):
		return projection
	raise ValidationError("projection must be an object or a list of field names.")

def require_options_dict(options: Any) -> dict[str, Any]:
	""" Missing options are treated as {}. """
	if options is None:
		return {}
	if not isinstance(options, dict):
		raise ValidationError("options must be an object.")
	return options

def cursor_options(options: Any) -> dict[str, Any]:
	""" Options applied to a find() cursor: sort, limit, skip and projection. Zero limit/skip is ignored. """
	options = require_options_dict(options)
	unknown = set(options) - {"sort", "limit", "skip", "projection"}
	if unknown:
		raise ValidationError(f"Unsupported find option(s): {', '.join(sorted(unknown))}")

	kwargs: dict[str, Any] = {}
	if options.get("sort"):
		kwargs["sort"] = key_direction_list(options["sort"], what="sort")
	if options.get("limit"):
		kwargs["limit"] = _as_int(options["limit"], "limit")
	if options.get("skip"):
		kwargs["skip"] = _as_int(options["skip"], "skip")
	if options.get("projection") is not None:
		kwargs["projection"] = projection_option(options["projection"])
	return kwargs

def driver_kwargs(options: Any, allowed: frozenset[str], operation: str) -> dict[str, Any]:
	""" Maps request options onto pymongo keyword arguments for the given operation. """
	options = require_options_dict(options)
	unknown = set(options) - allowed
	if unknown:
		raise ValidationError(f"Unsupported {operation} option(s): {', '.join(sorted(unknown))}")

	kwargs: dict[str, Any] = {}
	for name, value in options.items():
		if name == "returnDocument":
			try:
				value = ReturnDocumentOption(value).to_pymongo()
			except ValueError:
				raise ValidationError(f"returnDocument must be 'before' or 'after', got {value!r}.")
		elif name == "sort":
			value = key_direction_list(value, what="sort")
		elif name == "projection":
			value = projection_option(value)
		elif name in ("upsert", "ordered"):
			value = bool(value)
		kwargs[_OPTION_NAMES[name]] = value
	return kwargs

from collections import Counter
from typing import Any

from bidict import bidict
from pymongo import DeleteMany, DeleteOne, InsertOne, ReplaceOne, UpdateMany, UpdateOne

from .object_id import normalize_object_ids
from ..utilities.validation_error import ValidationError


BulkOperation = InsertOne | UpdateOne | UpdateMany | ReplaceOne | DeleteOne | DeleteMany

# Request operation name <-> pymongo request class
BULK_OPERATIONS: bidict[str, type] = bidict({
	"insertOne": InsertOne,
	"updateOne": UpdateOne,
	"updateMany": UpdateMany,
	"replaceOne": ReplaceOne,
	"deleteOne": DeleteOne,
	"deleteMany": DeleteMany,
})

# Request field name -> pymongo keyword, per operation. Fields not listed here are rejected.
_OPERATION_FIELDS: dict[str, dict[str, str]] = {
	"insertOne": {"document": "document"},
	"updateOne": {"filter": "filter", "update": "update", "upsert": "upsert", "arrayFilters": "array_filters", "collation": "collation", "hint": "hint"},
	"updateMany": {"filter": "filter", "update": "update", "upsert": "upsert", "arrayFilters": "array_filters", "collation": "collation", "hint": "hint"},
	"replaceOne": {"filter": "filter", "replacement": "replacement", "upsert": "upsert", "collation": "collation", "hint": "hint"},
	"deleteOne": {"filter": "filter", "collation": "collation", "hint": "hint"},
	"deleteMany": {"filter": "filter", "collation": "collation", "hint": "hint"},
}

# Required field -> accepted types. An update may be an update document or an aggregation pipeline.
_REQUIRED_FIELDS: dict[str, tuple[str, tuple[type, ...]]] = {
	"insertOne": ("document", (dict,)),
	"updateOne": ("update", (dict, list)),
	"updateMany": ("update", (dict, list)),
	"replaceOne": ("replacement", (dict,)),
}

# Operations whose filter has no {} default
_FILTER_REQUIRED = frozenset({"updateOne", "updateMany", "replaceOne"})


def parse_bulk_operation(operation: Any, idx: int) -> BulkOperation:
	""" Converts one { "<operationName>": { ...args } } entry into a pymongo request object. Filters are normalized. """
	if not isinstance(operation, dict) or len(operation) != 1:
		raise ValidationError(f"operations[{idx}] must be an object with exactly one key naming the operation.")

	name, args = next(iter(operation.items()))
	if name not in BULK_OPERATIONS:
		raise ValidationError(f"operations[{idx}]: unsupported bulk operation '{name}'. Expected one of: {', '.join(BULK_OPERATIONS)}")
	if not isinstance(args, dict):
		raise ValidationError(f"operations[{idx}].{name} must be an object.")

	fields = _OPERATION_FIELDS[name]
	unknown = set(args) - set(fields)
	if unknown:
		raise ValidationError(f"operations[{idx}].{name}: unsupported field(s): {', '.join(sorted(unknown))}")

	if name in _REQUIRED_FIELDS:
		required, types = _REQUIRED_FIELDS[name]
		if not isinstance(args.get(required), types):
			raise ValidationError(f"operations[{idx}].{name}.{required} is required.")

	kwargs = {fields[key]: value for key, value in args.items()}
	if "filter" in fields:
		filter = args.get("filter")
		if filter is None and name in _FILTER_REQUIRED:
			raise ValidationError(f"operations[{idx}].{name}.filter is required.")
		if filter is None:
			filter = {}
		if not isinstance(filter, dict):
			raise ValidationError(f"operations[{idx}].{name}.filter must be an object.")
		kwargs["filter"] = normalize_object_ids(filter)
	if "upsert" in kwargs:
		kwargs["upsert"] = bool(kwargs["upsert"])

	return BULK_OPERATIONS[name](**kwargs)

def parse_bulk_operations(operations: Any) -> list[BulkOperation]:
	""" Parses the `operations` list of a bulkWrite request. """
	if operations is None:
		operations = []
	if not isinstance(operations, list):
		raise ValidationError("operations must be a list.")
	return [parse_bulk_operation(operation, idx) for idx, operation in enumerate(operations)]

def describe_bulk_operations(operations: list[BulkOperation]) -> str:
	""" A short summary for logs, e.g. "updateOne x2, deleteMany x1". """
	counts = Counter(BULK_OPERATIONS.inverse[type(op)] for op in operations)
	return ", ".join(f"{name} x{count}" for name, count in counts.items())

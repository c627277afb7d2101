import re
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from ..utilities.logger import logger


OPERATOR_PREFIX = "$"
MAX_NORMALIZE_DEPTH = 100

_OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


def is_id_key(key: Any) -> bool:
	""" True for `_id` and for keys ending in `Id` or `_id` (case-sensitive). """
	if not isinstance(key, str):
		return False
	return key == "_id" or key.endswith("Id") or key.endswith("_id")

def is_object_id_str(value: Any) -> bool:
	""" True if value is a string of exactly 24 hex characters. """
	return isinstance(value, str) and _OBJECT_ID_PATTERN.fullmatch(value) is not None

def _is_composite(value: Any) -> bool:
	return isinstance(value, (dict, list, tuple))

def _to_object_id(key: str, value: str) -> ObjectId | None:
	""" Returns the ObjectId for value, or None if the driver rejects it. """
	try:
		return ObjectId(value)
	except (InvalidId, TypeError) as e:
		logger.warning(f"Could not convert {key} to ObjectId: {e}")
		return None


def normalize_object_ids(value: Any, *, max_depth: int = MAX_NORMALIZE_DEPTH) -> Any:
	""" Returns a copy of a query/filter document in which identifier-shaped fields hold ObjectIds.

	A string is converted when its key is `_id` or ends in `Id`/`_id` and it is exactly 24 hex characters.
	Lists are walked element by element, but bare list elements are never converted since they have no key.
	So { "_id": { "$in": [...] } } keeps its strings.

	Never raises. Anything that can't be converted is returned as-is, including values nested deeper than max_depth.
	The input is not modified.
	"""
	depth_exceeded = False

	def normalize(value: Any, depth: int) -> Any:
		nonlocal depth_exceeded

		if value is None or not _is_composite(value):
			return value

		if depth > max_depth:
			if not depth_exceeded:
				logger.warning(f"Query document nested deeper than {max_depth} levels; leaving the remainder unnormalized.")
				depth_exceeded = True
			return value

		if isinstance(value, (list, tuple)):
			return [normalize(item, depth + 1) for item in value]

		result: dict[Any, Any] = {}
		for key, item in value.items():
			# Identifier-shaped key holding a hex string
			if is_id_key(key) and is_object_id_str(item):
				object_id = _to_object_id(key, item)
				if object_id is not None:
					result[key] = object_id
					continue

			# Query operators like $in, $or, $elemMatch
			if isinstance(key, str) and key.startswith(OPERATOR_PREFIX) and _is_composite(item):
				result[key] = normalize(item, depth + 1)
				continue

			# Nested documents and arrays
			if _is_composite(item):
				result[key] = normalize(item, depth + 1)
			else:
				result[key] = item

		return result

	return normalize(value, 0)


def normalize_pipeline(pipeline: list[Any]) -> list[Any]:
	""" Normalizes the $match clause of each top-level stage. Other stages are passed through untouched. """
	normalized: list[Any] = []
	for stage in pipeline:
		if isinstance(stage, dict) and "$match" in stage:
			stage = {**stage, "$match": normalize_object_ids(stage["$match"])}
		normalized.append(stage)
	return normalized

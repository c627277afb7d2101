""" Atomic single-document find-and-modify routes. Each one responds with `result: null` and a message when nothing matched. """

from typing import Any

from flask import jsonify

from ..framework.context import get_collection
from ..framework.filter_logging import NO_MATCH_MESSAGE, log_filter, log_no_match
from ..framework.request_body import get_document, get_json_body, get_update
from ..framework.route import api_route
from ...document.driver_options import FIND_ONE_AND_DELETE_OPTIONS, FIND_ONE_AND_REPLACE_OPTIONS, FIND_ONE_AND_UPDATE_OPTIONS, driver_kwargs
from ...document.object_id import normalize_object_ids


def _respond(operation: str, document: Any, parsed_filter: dict):
	if document is None:
		log_no_match(operation, parsed_filter)
		return jsonify(success=True, result=None, message=NO_MATCH_MESSAGE)
	return jsonify(success=True, result=document)

@api_route("findOneAndUpdate")
def find_one_and_update_rt():
	body = get_json_body(dict)
	filter = get_document(body, "filter", required=True)
	update = get_update(body)
	kwargs = driver_kwargs(body.get("options"), FIND_ONE_AND_UPDATE_OPTIONS, "findOneAndUpdate")

	parsed_filter = normalize_object_ids(filter)
	log_filter("findOneAndUpdate", filter, parsed_filter)

	document = get_collection().find_one_and_update(parsed_filter, update, **kwargs)
	return _respond("findOneAndUpdate", document, parsed_filter)

@api_route("findOneAndDelete")
def find_one_and_delete_rt():
	body = get_json_body(dict)
	filter = get_document(body, "filter")
	kwargs = driver_kwargs(body.get("options"), FIND_ONE_AND_DELETE_OPTIONS, "findOneAndDelete")

	parsed_filter = normalize_object_ids(filter)
	log_filter("findOneAndDelete", filter, parsed_filter)

	document = get_collection().find_one_and_delete(parsed_filter, **kwargs)
	return _respond("findOneAndDelete", document, parsed_filter)

@api_route("findOneAndReplace")
def find_one_and_replace_rt():
	body = get_json_body(dict)
	filter = get_document(body, "filter", required=True)
	replacement = get_document(body, "replacement", required=True)
	kwargs = driver_kwargs(body.get("options"), FIND_ONE_AND_REPLACE_OPTIONS, "findOneAndReplace")

	parsed_filter = normalize_object_ids(filter)
	log_filter("findOneAndReplace", filter, parsed_filter)

	document = get_collection().find_one_and_replace(parsed_filter, replacement, **kwargs)
	return _respond("findOneAndReplace", document, parsed_filter)

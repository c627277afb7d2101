from flask import jsonify

from ..framework.context import get_collection
from ..framework.request_body import get_json_body
from ..framework.route import Method, api_route
from ...document.driver_options import key_direction_list, require_options_dict
from ...utilities.validation_error import ValidationError


@api_route("createIndex")
def create_index_rt():
    """ Options (unique, name, sparse, expireAfterSeconds, ...) are passed to the server as given. """
    body = get_json_body(dict)
    if body.get("keys") is None:
        raise ValidationError("keys is required.")
    keys = key_direction_list(body["keys"], what="keys")
    options = require_options_dict(body.get("options"))

    index_name = get_collection().create_index(keys, **options)
    return jsonify(success=True, indexName=index_name)

@api_route("dropIndex")
def drop_index_rt():
    body = get_json_body(dict)
    index = body.get("indexName")
    if not index:
        raise ValidationError("indexName is required.")
    if not isinstance(index, str):
        index = key_direction_list(index, what="indexName")

    get_collection().drop_index(index)
    return jsonify(success=True, result={"dropped": body["indexName"]})

@api_route("getIndexes", methods=[Method.GET])
def get_indexes_rt():
    indexes = list(get_collection().list_indexes())
    return jsonify(success=True, indexes=indexes)

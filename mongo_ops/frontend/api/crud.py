from flask import jsonify

from ..framework.context import get_collection
from ..framework.filter_logging import NO_MATCH_MESSAGE, log_filter, log_no_match
from ..framework.request_body import get_document, get_json_body, get_str, get_update
from ..framework.route import api_route
from ...document.driver_options import REPLACE_OPTIONS, UPDATE_OPTIONS, cursor_options, driver_kwargs, projection_option
from ...document.object_id import normalize_object_ids
from ...utilities.validation_error import ValidationError


# region: Insert
@api_route("insertOne")
def insert_one_rt():
    document = get_json_body(dict)
    result = get_collection().insert_one(document)
    return jsonify(success=True, insertedId=result.inserted_id)

@api_route("insertMany")
def insert_many_rt():
    documents = get_json_body(list)
    if not documents:
        raise ValidationError("Request body must be a non-empty array of documents.")
    if not all(isinstance(document, dict) for document in documents):
        raise ValidationError("Every element of the request body must be a document.")

    result = get_collection().insert_many(documents)
    return jsonify(success=True, insertedCount=len(result.inserted_ids), insertedIds=result.inserted_ids)
# endregion

# region: Read
@api_route("find")
def find_rt():
    """ find() with optional sort, limit, skip and projection. Covers find().limit(), find().skip() and find().sort(). """
    body = get_json_body(dict)
    query = normalize_object_ids(get_document(body, "query"))
    kwargs = cursor_options(body.get("options"))

    documents = list(get_collection().find(query, **kwargs))
    return jsonify(success=True, documents=documents)

@api_route("findOne")
def find_one_rt():
    body = get_json_body(dict)
    query = normalize_object_ids(get_document(body, "query"))

    projection = projection_option(body.get("projection"))

    document = get_collection().find_one(query, projection=projection)
    return jsonify(success=True, document=document)

@api_route("distinct")
def distinct_rt():
    body = get_json_body(dict)
    field = get_str(body, "field")
    query = normalize_object_ids(get_document(body, "query"))

    values = get_collection().distinct(field, query)
    return jsonify(success=True, values=values)

@api_route("countDocuments")
def count_documents_rt():
    body = get_json_body(dict)
    query = normalize_object_ids(get_document(body, "query"))

    count = get_collection().count_documents(query)
    return jsonify(success=True, count=count)
# endregion

# region: Update
@api_route("updateOne")
def update_one_rt():
    body = get_json_body(dict)
    filter = get_document(body, "filter", required=True)
    update = get_update(body)
    kwargs = driver_kwargs(body.get("options"), UPDATE_OPTIONS, "updateOne")

    parsed_filter = normalize_object_ids(filter)
    log_filter("updateOne", filter, parsed_filter)

    result = get_collection().update_one(parsed_filter, update, **kwargs)

    if result.matched_count == 0 and result.upserted_id is None:
        log_no_match("update", parsed_filter)
        return jsonify(success=True, matchedCount=0, modifiedCount=0, message=NO_MATCH_MESSAGE)
    return jsonify(success=True, matchedCount=result.matched_count, modifiedCount=result.modified_count, upsertedId=result.upserted_id)

@api_route("updateMany")
def update_many_rt():
    body = get_json_body(dict)
    filter = normalize_object_ids(get_document(body, "filter", required=True))
    update = get_update(body)
    kwargs = driver_kwargs(body.get("options"), UPDATE_OPTIONS, "updateMany")

    result = get_collection().update_many(filter, update, **kwargs)
    return jsonify(success=True, matchedCount=result.matched_count, modifiedCount=result.modified_count, upsertedId=result.upserted_id)

@api_route("replaceOne")
def replace_one_rt():
    body = get_json_body(dict)
    filter = normalize_object_ids(get_document(body, "filter", required=True))
    replacement = get_document(body, "replacement", required=True)
    kwargs = driver_kwargs(body.get("options"), REPLACE_OPTIONS, "replaceOne")

    result = get_collection().replace_one(filter, replacement, **kwargs)
    return jsonify(success=True, matchedCount=result.matched_count, modifiedCount=result.modified_count, upsertedId=result.upserted_id)
# endregion

# region: Delete
@api_route("deleteOne")
def delete_one_rt():
    body = get_json_body(dict)
    filter = get_document(body, "filter")

    parsed_filter = normalize_object_ids(filter)
    log_filter("deleteOne", filter, parsed_filter)

    result = get_collection().delete_one(parsed_filter)

    if result.deleted_count == 0:
        log_no_match("deletion", parsed_filter)
        return jsonify(success=True, deletedCount=0, message=NO_MATCH_MESSAGE)
    return jsonify(success=True, deletedCount=result.deleted_count)

@api_route("deleteMany")
def delete_many_rt():
    body = get_json_body(dict)
    filter = normalize_object_ids(get_document(body, "filter"))

    result = get_collection().delete_many(filter)
    return jsonify(success=True, deletedCount=result.deleted_count)
# endregion

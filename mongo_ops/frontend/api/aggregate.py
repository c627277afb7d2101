from flask import jsonify

from ..framework.context import get_collection
from ..framework.request_body import get_json_body
from ..framework.route import api_route
from ...document.bulk_operations import describe_bulk_operations, parse_bulk_operations
from ...document.driver_options import BULK_WRITE_OPTIONS, driver_kwargs
from ...document.object_id import normalize_pipeline
from ...utilities.logger import logger
from ...utilities.validation_error import ValidationError


@api_route("aggregate")
def aggregate_rt():
    """ Runs an aggregation pipeline. ObjectIds are parsed in each top-level $match stage. """
    body = get_json_body(dict)
    pipeline = body.get("pipeline") or []
    if not isinstance(pipeline, list) or not all(isinstance(stage, dict) for stage in pipeline):
        raise ValidationError("pipeline must be a list of stage documents.")

    result = list(get_collection().aggregate(normalize_pipeline(pipeline)))
    return jsonify(success=True, result=result)

@api_route("bulkWrite")
def bulk_write_rt():
    body = get_json_body(dict)
    operations = parse_bulk_operations(body.get("operations"))
    if not operations:
        raise ValidationError("operations must contain at least one operation.")
    kwargs = driver_kwargs(body.get("options"), BULK_WRITE_OPTIONS, "bulkWrite")

    logger.debug(f"bulkWrite: {describe_bulk_operations(operations)}")
    result = get_collection().bulk_write(operations, **kwargs)
    return jsonify(
        success=True,
        insertedCount=result.inserted_count,
        matchedCount=result.matched_count,
        modifiedCount=result.modified_count,
        deletedCount=result.deleted_count,
        upsertedCount=result.upserted_count
    )

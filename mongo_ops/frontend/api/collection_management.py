from flask import jsonify

from ..framework.context import get_store
from ..framework.request_body import get_json_body, get_str
from ..framework.route import Method, api_route
from ...utilities.logger import logger


@api_route("renameCollection")
def rename_collection_rt():
    """ Renames the working collection. Later requests operate on the new name. """
    body = get_json_body(dict)
    new_name = get_str(body, "newName")

    get_store().rename(new_name)
    logger.info(f"Collection renamed to {new_name}")
    return jsonify(success=True, message=f"Collection renamed to {new_name}")

@api_route("drop")
def drop_rt():
    """ Drops the working collection. Later requests operate on the default collection again. """
    store = get_store()
    existed = store.drop()
    if not existed:
        return jsonify(success=True, message="Collection already dropped")
    return jsonify(success=True, result=True)

@api_route("listCollections", methods=[Method.GET])
def list_collections_rt():
    collections = list(get_store().db.list_collections())
    return jsonify(success=True, collections=collections)

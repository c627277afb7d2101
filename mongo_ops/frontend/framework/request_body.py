from typing import Any

from flask import request

from ...utilities.validation_error import ValidationError


_TYPE_NAMES: dict[type, str] = {dict: "object", list: "array"}


def get_json_body(expected: type = dict) -> Any:
    """ Returns the decoded JSON body. An empty body counts as an empty object/array. """
    if not request.get_data():
        return expected()
    
    body = request.get_json(force=True, silent=True)
    if body is None:
        raise ValidationError("Request body must be valid JSON.")
    if not isinstance(body, expected):
        raise ValidationError(f"Request body must be a JSON {_TYPE_NAMES[expected]}.")
    return body

def get_document(body: dict, name: str, *, required: bool = False) -> dict:
    """ Returns body[name] as a document. Missing values are {} unless required. """
    value = body.get(name)
    if value is None:
        if required:
            raise ValidationError(f"{name} is required.")
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{name} must be an object.")
    return value

def get_update(body: dict) -> dict | list:
    """ An update is either an update document ({ "$set": ... }) or an aggregation pipeline. """
    update = body.get("update")
    if not isinstance(update, (dict, list)) or not update:
        raise ValidationError("update is required and must be an update document or a pipeline.")
    return update

def get_str(body: dict, name: str) -> str:
    value = body.get(name)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name} is required and must be a string.")
    return value

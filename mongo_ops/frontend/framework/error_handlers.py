import traceback

from flask import Flask, jsonify
from pymongo.errors import OperationFailure
from werkzeug.exceptions import HTTPException

from .context import get_settings
from ...utilities.logger import logger
from ...utilities.validation_error import ValidationError


def register_error_handlers(app: Flask) -> None:
    """ Translates exceptions raised by routes into the { success: false, error } envelope.
    Driver errors (and pymongo's TypeError/ValueError for malformed documents) become 500s. """

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        logger.info(f"Rejected request: {e.message}")
        return jsonify(success=False, error=e.message), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify(success=False, error=e.description), e.code

    @app.errorhandler(Exception)
    def handle_operation_error(e: Exception):
        logger.error(f"Database operation failed: {e}", exc_info=e)
        payload = {"success": False, "error": str(e)}
        if isinstance(e, OperationFailure) and e.code is not None:
            payload["code"] = e.code
        if get_settings().debug:
            payload["stack"] = "".join(traceback.format_exception(e))
        return jsonify(payload), 500

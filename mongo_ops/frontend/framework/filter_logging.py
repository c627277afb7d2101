from typing import Any

from bson import json_util

from ...utilities.logger import logger


NO_MATCH_MESSAGE = "No document found with the specified ID or criteria"


def log_filter(operation: str, original: Any, parsed: Any) -> None:
    """ Logs a filter before and after ObjectId normalization. ObjectIds print as {"$oid": ...}. """
    logger.debug(f"{operation} original filter: {json_util.dumps(original)}")
    logger.debug(f"{operation} parsed filter: {json_util.dumps(parsed)}")

def log_no_match(operation: str, parsed: Any) -> None:
    logger.info(f"No document found for {operation} with filter: {json_util.dumps(parsed)}")

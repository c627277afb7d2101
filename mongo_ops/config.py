import logging
import os
from dataclasses import dataclass

from .utilities.setup_error import SetupError


DEFAULT_MONGO_URL = "mongodb://localhost:27017"
DEFAULT_MONGO_DB_NAME = "mongoOperationsDB"
DEFAULT_COLLECTION_NAME = "items"
DEFAULT_PORT = 3000

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    mongo_url: str = DEFAULT_MONGO_URL
    mongo_db_name: str = DEFAULT_MONGO_DB_NAME
    collection_name: str = DEFAULT_COLLECTION_NAME
    """ The working collection the API operates on until it is renamed. """
    port: int = DEFAULT_PORT
    debug: bool = False
    """ When set, 500 responses include the stack trace. """
    log_level: str = "INFO"


def load_settings() -> Settings:
    """ Reads settings from the environment. Raises SetupError for values that can't be used. """
    PORT = os.environ.get("PORT", str(DEFAULT_PORT))
    try:
        port = int(PORT)
    except ValueError:
        raise SetupError(f"PORT must be an integer, got {PORT!r}.")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(LOG_LEVEL), int):
        raise SetupError(f"Unknown LOG_LEVEL {LOG_LEVEL!r}.")

    COLLECTION_NAME = os.environ.get("MONGO_COLLECTION_NAME") or DEFAULT_COLLECTION_NAME
    if COLLECTION_NAME.startswith("system."):
        raise SetupError("MONGO_COLLECTION_NAME may not be a system collection.")

    return Settings(
        mongo_url=os.environ.get("MONGO_URL") or DEFAULT_MONGO_URL,
        mongo_db_name=os.environ.get("MONGO_DB_NAME") or DEFAULT_MONGO_DB_NAME,
        collection_name=COLLECTION_NAME,
        port=port,
        debug=os.environ.get("DEBUG", "").lower() in _TRUE_VALUES,
        log_level=LOG_LEVEL,
    )

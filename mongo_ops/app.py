import logging

from flask import Flask

from .config import Settings, load_settings
from .document.mongo_db import CollectionStore
from .frontend import register_flask_routes
from .frontend.framework.context import SETTINGS_CONFIG_KEY, STORE_EXTENSION
from .frontend.framework.error_handlers import register_error_handlers
from .frontend.framework.json_provider import MongoJSONProvider
from .utilities.logger import set_log_level


def create_app(settings: Settings | None = None, store: CollectionStore | None = None) -> Flask:
    """ Builds the Flask app. Pass a store to run against a specific database (tests pass one wrapping a mock). """
    if settings is None:
        settings = load_settings()
    if store is None:
        store = CollectionStore.from_settings(settings)

    set_log_level(settings.log_level)

    app = Flask(__name__)
    app.json = MongoJSONProvider(app)
    app.config[SETTINGS_CONFIG_KEY] = settings
    app.extensions[STORE_EXTENSION] = store

    register_error_handlers(app)
    register_flask_routes(app)
    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    from .document.mongo_db import close_mongo_clients
    from .utilities.logger import logger

    settings = load_settings()
    store = CollectionStore.from_settings(settings)
    store.ensure_default_indexes()
    logger.info(f"Connected to MongoDB database {settings.mongo_db_name}")

    app = create_app(settings, store)
    try:
        logger.info(f"Server running on http://localhost:{settings.port}")
        app.run(port=settings.port, debug=settings.debug)
    finally:
        close_mongo_clients()

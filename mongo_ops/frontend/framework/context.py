from flask import current_app
from pymongo.collection import Collection

from ...config import Settings
from ...document.mongo_db import CollectionStore


STORE_EXTENSION = "mongo_ops.store"
SETTINGS_CONFIG_KEY = "MONGO_OPS_SETTINGS"


def get_store() -> CollectionStore:
    return current_app.extensions[STORE_EXTENSION]

def get_collection() -> Collection:
    return get_store().get_collection()

def get_settings() -> Settings:
    return current_app.config[SETTINGS_CONFIG_KEY]

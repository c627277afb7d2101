"""Pytest configuration and fixtures.

Route tests run against a MagicMock database, so no MongoDB server is needed.
Every `db[name]` lookup returns the same mock collection.
"""

from unittest.mock import MagicMock

import pytest

from mongo_ops.app import create_app
from mongo_ops.config import Settings
from mongo_ops.document.mongo_db import CollectionStore


OID = "507f1f77bcf86cd799439011"
OID_2 = "507f1f77bcf86cd799439012"


@pytest.fixture
def settings():
    return Settings(mongo_db_name="mongoOpsTest")


@pytest.fixture
def db():
    db = MagicMock(name="db")
    db.name = "mongoOpsTest"
    return db


@pytest.fixture
def collection(db):
    return db.__getitem__.return_value


@pytest.fixture
def store(db, settings):
    return CollectionStore(db, settings.collection_name)


@pytest.fixture
def app(settings, store):
    app = create_app(settings, store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()

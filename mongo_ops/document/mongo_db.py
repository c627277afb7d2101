import threading

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from ..config import Settings
from ..utilities.logger import logger

# Module-level cache for client instances, keyed by connection string
_mongo_clients: dict[str, MongoClient] = {}
_mongo_clients_lock = threading.Lock()

def create_mongo_client(mongo_url: str) -> MongoClient:
    """ Returns the process-wide MongoClient for mongo_url. The client is thread-safe and pools its own connections. """
    with _mongo_clients_lock:
        client = _mongo_clients.get(mongo_url)
        if client is None:
            client = MongoClient(mongo_url)
            _mongo_clients[mongo_url] = client
        return client

def create_mongo_db(settings: Settings) -> Database:
    return create_mongo_client(settings.mongo_url)[settings.mongo_db_name]

def close_mongo_clients() -> None:
    with _mongo_clients_lock:
        for client in _mongo_clients.values():
            client.close()
        _mongo_clients.clear()
    logger.info("MongoDB connection closed")


class CollectionStore:
    """ Holds the working collection that the API operates on.
    Renaming re-points the store to the new name, and dropping re-points it to the default name. """

    def __init__(self, db: Database, default_collection_name: str) -> None:
        self.db = db
        self.default_collection_name = default_collection_name
        self._collection_name = default_collection_name
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CollectionStore":
        return cls(create_mongo_db(settings), settings.collection_name)

    @property
    def collection_name(self) -> str:
        with self._lock:
            return self._collection_name

    def get_collection(self) -> Collection:
        """ Returns the corresponding Pymongo Collection. """
        return self.db[self.collection_name]

    def rename(self, new_name: str) -> None:
        """ Renames the working collection in the db and points the store at it. """
        with self._lock:
            self.db[self._collection_name].rename(new_name)
            self._collection_name = new_name

    def drop(self) -> bool:
        """ Drops the working collection and points the store back at the default name.
        Returns False if the collection did not exist. """
        with self._lock:
            existed = self._collection_name in self.db.list_collection_names()
            self.db[self._collection_name].drop()
            self._collection_name = self.default_collection_name
            return existed

    def ensure_default_indexes(self) -> None:
        """ Create an index on the 'name' field for better search performance. """
        index_name = self.get_collection().create_index([("name", ASCENDING)])
        logger.info(f"Ensured index {index_name} on {self.db.name}.{self.collection_name}")

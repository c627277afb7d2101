from datetime import datetime
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import DESCENDING, DeleteOne, ReturnDocument, UpdateOne
from pymongo.errors import DuplicateKeyError, OperationFailure

from mongo_ops.app import create_app
from mongo_ops.config import Settings
from mongo_ops.frontend.framework.filter_logging import NO_MATCH_MESSAGE

from .conftest import OID, OID_2


def update_result(matched: int, modified: int, upserted_id=None) -> MagicMock:
    return MagicMock(matched_count=matched, modified_count=modified, upserted_id=upserted_id)


class TestInsert:
    def test_insert_one(self, client, collection):
        collection.insert_one.return_value = MagicMock(inserted_id=ObjectId(OID))

        response = client.post("/api/insertOne", json={"name": "widget", "price": 5})

        assert response.status_code == 200
        assert response.get_json() == {"success": True, "insertedId": OID}
        collection.insert_one.assert_called_once_with({"name": "widget", "price": 5})

    def test_insert_one_rejects_non_object_body(self, client, collection):
        response = client.post("/api/insertOne", json=[{"name": "widget"}])

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": "Request body must be a JSON object."}
        collection.insert_one.assert_not_called()

    def test_insert_many(self, client, collection):
        collection.insert_many.return_value = MagicMock(inserted_ids=[ObjectId(OID), ObjectId(OID_2)])

        response = client.post("/api/insertMany", json=[{"name": "a"}, {"name": "b"}])

        assert response.get_json() == {"success": True, "insertedCount": 2, "insertedIds": [OID, OID_2]}

    @pytest.mark.parametrize("body", [[], [1, 2], {"name": "a"}])
    def test_insert_many_rejects_bad_bodies(self, client, collection, body):
        response = client.post("/api/insertMany", json=body)

        assert response.status_code == 400
        collection.insert_many.assert_not_called()


class TestRead:
    def test_find_normalizes_query_and_applies_options(self, client, collection):
        created = datetime(2024, 1, 2, 3, 4, 5)
        collection.find.return_value = [{"_id": ObjectId(OID), "name": "widget", "createdAt": created}]

        response = client.post("/api/find", json={
            "query": {"_id": OID},
            "options": {"sort": {"price": -1}, "limit": "2", "skip": 1},
        })

        assert response.get_json() == {
            "success": True,
            "documents": [{"_id": OID, "name": "widget", "createdAt": "2024-01-02T03:04:05.000Z"}],
        }
        collection.find.assert_called_once_with({"_id": ObjectId(OID)}, sort=[("price", DESCENDING)], limit=2, skip=1)

    def test_find_with_empty_body_matches_everything(self, client, collection):
        collection.find.return_value = []

        response = client.post("/api/find")

        assert response.get_json() == {"success": True, "documents": []}
        collection.find.assert_called_once_with({})

    def test_find_rejects_non_integer_limit(self, client, collection):
        response = client.post("/api/find", json={"options": {"limit": "many"}})

        assert response.status_code == 400
        assert "limit must be an integer" in response.get_json()["error"]

    def test_find_one_returns_null_when_missing(self, client, collection):
        collection.find_one.return_value = None

        response = client.post("/api/findOne", json={"query": {"_id": OID}})

        assert response.get_json() == {"success": True, "document": None}
        collection.find_one.assert_called_once_with({"_id": ObjectId(OID)}, projection=None)

    @pytest.mark.parametrize("projection", ["name", 5])
    def test_find_one_rejects_invalid_projection(self, client, collection, projection):
        response = client.post("/api/findOne", json={"query": {}, "projection": projection})

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": "projection must be an object or a list of field names."}
        collection.find_one.assert_not_called()

    def test_distinct(self, client, collection):
        collection.distinct.return_value = ["books", "tools"]

        response = client.post("/api/distinct", json={"field": "category", "query": {"ownerId": OID}})

        assert response.get_json() == {"success": True, "values": ["books", "tools"]}
        collection.distinct.assert_called_once_with("category", {"ownerId": ObjectId(OID)})

    def test_distinct_requires_field(self, client):
        response = client.post("/api/distinct", json={})

        assert response.status_code == 400
        assert response.get_json()["error"] == "field is required and must be a string."

    def test_count_documents(self, client, collection):
        collection.count_documents.return_value = 3

        response = client.post("/api/countDocuments", json={"query": {"$or": [{"_id": OID}, {"inStock": True}]}})

        assert response.get_json() == {"success": True, "count": 3}
        collection.count_documents.assert_called_once_with({"$or": [{"_id": ObjectId(OID)}, {"inStock": True}]})


class TestUpdate:
    def test_update_one(self, client, collection):
        collection.update_one.return_value = update_result(1, 1)

        response = client.post("/api/updateOne", json={
            "filter": {"_id": OID},
            "update": {"$set": {"price": 9}},
            "options": {"upsert": False},
        })

        assert response.get_json() == {"success": True, "matchedCount": 1, "modifiedCount": 1, "upsertedId": None}
        collection.update_one.assert_called_once_with({"_id": ObjectId(OID)}, {"$set": {"price": 9}}, upsert=False)

    def test_update_one_without_match_reports_message(self, client, collection):
        collection.update_one.return_value = update_result(0, 0)

        response = client.post("/api/updateOne", json={"filter": {"_id": OID}, "update": {"$set": {"a": 1}}})

        assert response.get_json() == {"success": True, "matchedCount": 0, "modifiedCount": 0, "message": NO_MATCH_MESSAGE}

    def test_update_one_upsert_reports_upserted_id(self, client, collection):
        collection.update_one.return_value = update_result(0, 0, upserted_id=ObjectId(OID_2))

        response = client.post("/api/updateOne", json={"filter": {"name": "new"}, "update": {"$set": {"a": 1}}, "options": {"upsert": True}})

        assert response.get_json()["upsertedId"] == OID_2
        assert "message" not in response.get_json()

    @pytest.mark.parametrize("body, error", [
        ({"update": {"$set": {"a": 1}}}, "filter is required."),
        ({"filter": {}}, "update is required and must be an update document or a pipeline."),
        ({"filter": "x", "update": {"$set": {"a": 1}}}, "filter must be an object."),
        ({"filter": {}, "update": {"$set": {"a": 1}}, "options": {"multi": True}}, "Unsupported updateOne option(s): multi"),
    ])
    def test_update_one_validation(self, client, collection, body, error):
        response = client.post("/api/updateOne", json=body)

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": error}
        collection.update_one.assert_not_called()

    def test_update_many_accepts_pipeline_updates(self, client, collection):
        collection.update_many.return_value = update_result(4, 3)
        pipeline = [{"$set": {"total": {"$multiply": ["$price", "$qty"]}}}]

        response = client.post("/api/updateMany", json={"filter": {"categoryId": OID}, "update": pipeline})

        assert response.get_json() == {"success": True, "matchedCount": 4, "modifiedCount": 3, "upsertedId": None}
        collection.update_many.assert_called_once_with({"categoryId": ObjectId(OID)}, pipeline)

    def test_replace_one(self, client, collection):
        collection.replace_one.return_value = update_result(1, 1)

        response = client.post("/api/replaceOne", json={"filter": {"_id": OID}, "replacement": {"name": "new"}})

        assert response.get_json()["matchedCount"] == 1
        collection.replace_one.assert_called_once_with({"_id": ObjectId(OID)}, {"name": "new"})


class TestDelete:
    def test_delete_one(self, client, collection):
        collection.delete_one.return_value = MagicMock(deleted_count=1)

        response = client.post("/api/deleteOne", json={"filter": {"_id": OID}})

        assert response.get_json() == {"success": True, "deletedCount": 1}
        collection.delete_one.assert_called_once_with({"_id": ObjectId(OID)})

    def test_delete_one_without_match_reports_message(self, client, collection):
        collection.delete_one.return_value = MagicMock(deleted_count=0)

        response = client.post("/api/deleteOne", json={"filter": {"_id": "not-an-id"}})

        assert response.get_json() == {"success": True, "deletedCount": 0, "message": NO_MATCH_MESSAGE}
        collection.delete_one.assert_called_once_with({"_id": "not-an-id"})

    def test_delete_many_defaults_to_empty_filter(self, client, collection):
        collection.delete_many.return_value = MagicMock(deleted_count=7)

        response = client.post("/api/deleteMany", json={})

        assert response.get_json() == {"success": True, "deletedCount": 7}
        collection.delete_many.assert_called_once_with({})


class TestFindAndModify:
    def test_find_one_and_update(self, client, collection):
        collection.find_one_and_update.return_value = {"_id": ObjectId(OID), "price": 9}

        response = client.post("/api/findOneAndUpdate", json={
            "filter": {"_id": OID},
            "update": {"$set": {"price": 9}},
            "options": {"returnDocument": "after"},
        })

        assert response.get_json() == {"success": True, "result": {"_id": OID, "price": 9}}
        collection.find_one_and_update.assert_called_once_with(
            {"_id": ObjectId(OID)}, {"$set": {"price": 9}}, return_document=ReturnDocument.AFTER
        )

    def test_find_one_and_delete_without_match(self, client, collection):
        collection.find_one_and_delete.return_value = None

        response = client.post("/api/findOneAndDelete", json={"filter": {"_id": OID}})

        assert response.get_json() == {"success": True, "result": None, "message": NO_MATCH_MESSAGE}
        collection.find_one_and_delete.assert_called_once_with({"_id": ObjectId(OID)})

    def test_find_one_and_replace(self, client, collection):
        collection.find_one_and_replace.return_value = {"_id": ObjectId(OID), "name": "old"}

        response = client.post("/api/findOneAndReplace", json={"filter": {"_id": OID}, "replacement": {"name": "new"}})

        assert response.get_json() == {"success": True, "result": {"_id": OID, "name": "old"}}
        collection.find_one_and_replace.assert_called_once_with({"_id": ObjectId(OID)}, {"name": "new"})

    def test_find_one_and_update_rejects_bad_return_document(self, client, collection):
        response = client.post("/api/findOneAndUpdate", json={"filter": {}, "update": {"$set": {"a": 1}}, "options": {"returnDocument": "new"}})

        assert response.status_code == 400
        collection.find_one_and_update.assert_not_called()


class TestAggregateAndBulk:
    def test_aggregate_normalizes_match_stages(self, client, collection):
        collection.aggregate.return_value = iter([{"_id": "books", "total": 12}])

        response = client.post("/api/aggregate", json={"pipeline": [
            {"$match": {"ownerId": OID}},
            {"$group": {"_id": "$category", "total": {"$sum": "$price"}}},
        ]})

        assert response.get_json() == {"success": True, "result": [{"_id": "books", "total": 12}]}
        collection.aggregate.assert_called_once_with([
            {"$match": {"ownerId": ObjectId(OID)}},
            {"$group": {"_id": "$category", "total": {"$sum": "$price"}}},
        ])

    def test_aggregate_rejects_non_list_pipeline(self, client):
        response = client.post("/api/aggregate", json={"pipeline": {"$match": {}}})
        assert response.status_code == 400

    def test_bulk_write(self, client, collection):
        collection.bulk_write.return_value = MagicMock(
            inserted_count=0, matched_count=1, modified_count=1, deleted_count=1, upserted_count=0
        )

        response = client.post("/api/bulkWrite", json={
            "operations": [
                {"updateOne": {"filter": {"_id": OID}, "update": {"$set": {"a": 1}}}},
                {"deleteOne": {"filter": {"_id": OID_2}}},
            ],
            "options": {"ordered": False},
        })

        assert response.get_json() == {
            "success": True, "insertedCount": 0, "matchedCount": 1, "modifiedCount": 1, "deletedCount": 1, "upsertedCount": 0
        }
        collection.bulk_write.assert_called_once_with(
            [UpdateOne({"_id": ObjectId(OID)}, {"$set": {"a": 1}}), DeleteOne({"_id": ObjectId(OID_2)})],
            ordered=False,
        )

    def test_bulk_write_requires_operations(self, client, collection):
        response = client.post("/api/bulkWrite", json={"operations": []})

        assert response.status_code == 400
        collection.bulk_write.assert_not_called()

    def test_bulk_write_rejects_non_object_delete_filter(self, client, collection):
        response = client.post("/api/bulkWrite", json={"operations": [{"deleteMany": {"filter": []}}]})

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": "operations[0].deleteMany.filter must be an object."}
        collection.bulk_write.assert_not_called()


class TestIndexes:
    def test_create_index(self, client, collection):
        collection.create_index.return_value = "name_1"

        response = client.post("/api/createIndex", json={"keys": {"name": 1}, "options": {"unique": True}})

        assert response.get_json() == {"success": True, "indexName": "name_1"}
        collection.create_index.assert_called_once_with([("name", 1)], unique=True)

    def test_create_index_requires_keys(self, client):
        response = client.post("/api/createIndex", json={})
        assert response.get_json() == {"success": False, "error": "keys is required."}

    def test_drop_index(self, client, collection):
        response = client.post("/api/dropIndex", json={"indexName": "name_1"})

        assert response.get_json() == {"success": True, "result": {"dropped": "name_1"}}
        collection.drop_index.assert_called_once_with("name_1")

    def test_get_indexes(self, client, collection):
        collection.list_indexes.return_value = iter([{"v": 2, "key": {"_id": 1}, "name": "_id_"}])

        response = client.get("/api/getIndexes")

        assert response.get_json() == {"success": True, "indexes": [{"v": 2, "key": {"_id": 1}, "name": "_id_"}]}


class TestCollections:
    def test_rename_collection_repoints_store(self, client, db, store, collection):
        collection.count_documents.return_value = 0

        response = client.post("/api/renameCollection", json={"newName": "products"})

        assert response.get_json() == {"success": True, "message": "Collection renamed to products"}
        db["items"].rename.assert_called_once_with("products")
        assert store.collection_name == "products"

        client.post("/api/countDocuments", json={})
        db.__getitem__.assert_called_with("products")

    def test_drop_repoints_store_to_default(self, client, db, store, collection):
        db.list_collection_names.return_value = ["products"]
        client.post("/api/renameCollection", json={"newName": "products"})

        response = client.post("/api/drop")

        assert response.get_json() == {"success": True, "result": True}
        collection.drop.assert_called_once_with()
        assert store.collection_name == "items"

    def test_drop_missing_collection(self, client, db):
        db.list_collection_names.return_value = []

        response = client.post("/api/drop")

        assert response.get_json() == {"success": True, "message": "Collection already dropped"}

    def test_list_collections(self, client, db):
        db.list_collections.return_value = iter([{"name": "items", "type": "collection"}])

        response = client.get("/api/listCollections")

        assert response.get_json() == {"success": True, "collections": [{"name": "items", "type": "collection"}]}


class TestErrors:
    def test_driver_errors_become_500_envelopes(self, client, collection):
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error", code=11000)

        response = client.post("/api/insertOne", json={"_id": 1})

        assert response.status_code == 500
        body = response.get_json()
        assert body["success"] is False
        assert "E11000" in body["error"]
        assert body["code"] == 11000
        assert "stack" not in body

    def test_debug_mode_includes_stack(self, store, collection):
        app = create_app(Settings(debug=True), store)
        collection.count_documents.side_effect = OperationFailure("unknown operator: $bogus", code=2)

        response = app.test_client().post("/api/countDocuments", json={"query": {"$bogus": 1}})

        assert response.status_code == 500
        assert "Traceback" in response.get_json()["stack"]

    def test_invalid_json_is_rejected(self, client):
        response = client.post("/api/find", data="{not json", content_type="application/json")

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": "Request body must be valid JSON."}

    def test_unknown_route_is_json(self, client):
        response = client.post("/api/dropDatabase")

        assert response.status_code == 404
        assert response.get_json()["success"] is False

    def test_wrong_method_is_json(self, client):
        response = client.get("/api/find")

        assert response.status_code == 405
        assert response.get_json()["success"] is False


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}


def test_index_lists_endpoints(client):
    body = client.get("/").get_json()

    assert body["database"] == "mongoOpsTest"
    assert body["collection"] == "items"
    assert "POST /api/findOneAndUpdate" in body["endpoints"]
    assert "GET /api/getIndexes" in body["endpoints"]
    assert len(body["endpoints"]) == 22

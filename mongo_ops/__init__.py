"""
mongo_ops exposes a MongoDB collection's CRUD, query, aggregation, index and collection-management operations over REST.

Filters arriving as JSON have their identifier-shaped string fields converted to ObjectIds before reaching the driver.
See document.object_id.normalize_object_ids.
"""

from .document.object_id import normalize_object_ids, normalize_pipeline

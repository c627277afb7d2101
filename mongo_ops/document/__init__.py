"""
Document module for database interactions.

This module provides functionality for:
- ObjectId normalization of query, filter and pipeline documents
- Translation of request options and bulk operations into pymongo calls
- MongoDB connection and working-collection management
"""

from .object_id import normalize_object_ids, normalize_pipeline, is_id_key, is_object_id_str
from .bulk_operations import parse_bulk_operations
from .mongo_db import CollectionStore

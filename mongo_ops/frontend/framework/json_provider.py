from datetime import datetime, timezone
from typing import Any

from bson import ObjectId, json_util
from flask.json.provider import DefaultJSONProvider


class MongoJSONProvider(DefaultJSONProvider):
    """ Flask JSON provider that can serialize documents returned by pymongo.
    ObjectIds become their hex string so a client can send them straight back in a filter. Datetimes become ISO 8601 UTC with millisecond precision and a Z suffix.
    Any other BSON type falls back to its relaxed Extended JSON form. """

    sort_keys = False  # Preserve document field order

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, ObjectId):
            return str(o)
        if isinstance(o, datetime):
            # pymongo hands back naive datetimes that are already UTC
            if o.tzinfo is not None:
                o = o.astimezone(timezone.utc).replace(tzinfo=None)
            return o.isoformat(timespec="milliseconds") + "Z"
        try:
            return DefaultJSONProvider.default(o)
        except TypeError:
            return json_util.default(o, json_util.RELAXED_JSON_OPTIONS)

from flask import current_app, jsonify

from ..framework.context import get_store
from ..framework.route import app_route


@app_route("/health")
def health_rt():
    return jsonify(ok=True)

@app_route("/")
def index_rt():
    """ Lists the available API endpoints. """
    store = get_store()
    endpoints = sorted(
        f"{' '.join(sorted(rule.methods - {'HEAD', 'OPTIONS'}))} {rule.rule}"
        for rule in current_app.url_map.iter_rules()
        if rule.rule.startswith("/api/")
    )
    return jsonify(
        service="mongo_ops",
        database=store.db.name,
        collection=store.collection_name,
        endpoints=endpoints
    )

from enum import StrEnum

from .. import routes


class Method(StrEnum):
    GET = "GET"
    POST = "POST"

def app_route(rule: str, *, methods: list[Method] | None = None, strict_slashes: bool | None = None):
    """ Records a Flask route in the module-level route table. register_flask_routes() adds them to the app. """
    kwoptions = {
        "methods": [m.value for m in methods] if methods is not None else [Method.GET.value],
        "strict_slashes": strict_slashes
    }
    
    def decorator(f):
        if f not in routes:
            routes[f] = []
        routes[f].append((rule, kwoptions))
        return f
    return decorator

def api_route(operation: str, *, methods: list[Method] | None = None):
    """ Registers a route under /api/<operation>. API routes default to POST. """
    return app_route(f"/api/{operation}", methods=methods if methods is not None else [Method.POST])

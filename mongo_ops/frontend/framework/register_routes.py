from flask import Flask

from ...utilities.logger import logger


def register_flask_routes(app: Flask) -> None:
    """ Registers all Flask routes. Make sure you import any routes here that you want Flask to know about. """
    from .. import routes
    from ..api import aggregate, collection_management, crud, find_and_modify, health, indexes  # noqa: F401  (registers routes)

    # Actually register the routes with Flask using the global routes variable
    for func, rules in routes.items():
        for rule, options in rules:
            try:
                app.add_url_rule(rule, func.__name__, func, **options)
            except AssertionError as e:
                if "View function mapping is overwriting an existing endpoint function" in str(e):
                    logger.error(f"Route registration error: {e}\nRule: {rule}\nFunction: {func.__name__}\nOptions: {options}")
                raise
    logger.debug(f"Registered {len(routes)} routes")

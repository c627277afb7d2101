from typing import Callable

# Module state
routes: dict[Callable, list[tuple[str, dict]]] = {}

# Set Up: run this function after creating the Flask app
from .framework.register_routes import register_flask_routes

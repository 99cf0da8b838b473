"""ASGI entrypoint for the food guard API."""

from food_guard.api.app import create_app
from food_guard.containers import build_container

app = create_app(build_container())

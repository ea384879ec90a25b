"""ASGI entrypoint for the Momentarium API."""

from momentarium.api.app import create_app
from momentarium.containers import build_container

app = create_app(build_container())

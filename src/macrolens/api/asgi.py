"""ASGI entrypoint for the MacroLens API."""

from macrolens.api.app import create_app
from macrolens.containers import build_container

app = create_app(build_container())

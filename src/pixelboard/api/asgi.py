"""ASGI entrypoint for the PixelBoard API."""

from pixelboard.api.app import create_app
from pixelboard.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the HomeLife API."""

from homelife.api.app import create_app
from homelife.containers import build_container

app = create_app(build_container())

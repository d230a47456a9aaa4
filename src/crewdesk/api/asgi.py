"""ASGI entrypoint for the crewdesk API."""

from crewdesk.api.app import create_app
from crewdesk.containers import build_container

app = create_app(build_container())

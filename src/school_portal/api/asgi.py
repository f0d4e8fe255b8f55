"""ASGI entrypoint for the school portal."""

from school_portal.api.app import create_app
from school_portal.containers import build_container

app = create_app(build_container())

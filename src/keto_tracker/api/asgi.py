"""ASGI entrypoint for the keto tracker API."""

from keto_tracker.api.app import create_app
from keto_tracker.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the nutrition insights API."""

from nutrition_insights.api.app import create_app
from nutrition_insights.containers import build_container

app = create_app(build_container())

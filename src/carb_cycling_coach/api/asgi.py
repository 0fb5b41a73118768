"""ASGI entrypoint for the carb cycling coach API."""

from carb_cycling_coach.api.app import create_app
from carb_cycling_coach.containers import build_container

app = create_app(build_container())

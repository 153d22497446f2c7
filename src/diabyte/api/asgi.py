"""ASGI entrypoint."""

from diabyte.api.app import create_app
from diabyte.config import Settings
from diabyte.containers import build_container

settings = Settings()
app = create_app(build_container(settings))

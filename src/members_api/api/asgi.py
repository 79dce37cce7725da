"""ASGI entrypoint, served with `uvicorn members_api.api.asgi:app`."""

from members_api.api.app import create_app
from members_api.config import Settings
from members_api.containers import build_container

settings = Settings()
app = create_app(build_container(settings))

"""ASGI application served by uvicorn or any ASGI host.

Run with ``uvicorn recipe_discovery.api.asgi:app``; settings come from the
environment and ``.env`` files.
"""

from recipe_discovery.api.app import create_app
from recipe_discovery.config import Settings
from recipe_discovery.containers import build_container

settings = Settings()
app = create_app(build_container(settings))

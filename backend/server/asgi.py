"""
ASGI entry point: `uvicorn server.asgi:app --app-dir backend`.

Environment variables may come from a local .env file.
"""

from dotenv import load_dotenv

load_dotenv()

# pylint: disable=wrong-import-position
from observability.logger import log_event
from server.app import create_app

app = create_app()

log_event({
    "event_type": "APP_CREATED",
    "env": app.state.config.env,
    "platform": app.state.config.platform,
})

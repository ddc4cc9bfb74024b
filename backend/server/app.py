"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Set up middleware
- Validate configuration and configure logging once per process
- Register routes
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapters.capabilities import validate_config
from config import AppConfig
from observability import logger

from server.routes import register_routes


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Passing `config` skips the environment (tests, embedding).
    """
    config = config or AppConfig.load_from_env()
    validate_config(config)
    logger.configure(enable_json_logs=config.enable_json_logs)

    app = FastAPI(title="Assist Feedback API")

    app.state.config = config

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten later
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    register_routes(app)

    return app

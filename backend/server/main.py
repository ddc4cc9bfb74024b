"""
Development entry point.

    python backend/server/main.py

Production deployments point uvicorn at server.asgi:app instead.
"""

from __future__ import annotations

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


if __name__ == "__main__":
    load_dotenv()

    uvicorn.run(
        "server.asgi:app",
        app_dir=str(Path(__file__).resolve().parents[1]),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_level="info",
        reload=os.environ.get("ENV", "dev") == "dev",  # Dev mode only
    )

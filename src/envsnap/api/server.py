"""
ASGI entry point for the envsnap API.

This module exposes the `app` object required by ASGI servers (Uvicorn).
It loads `.env` before building the application so the settings singleton
sees the configured debounce window and history cap.

Usage
-----
Run via the module entry point:
    $ python -m envsnap.api.server

Or via uvicorn directly:
    $ uvicorn envsnap.api.server:app --reload
"""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(".env"))

from envsnap.api.app import create_app  # noqa: E402
from envsnap.core.settings import load_settings  # noqa: E402

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    settings = load_settings()
    print(f"{'[ envsnap ]':=^60}")
    print(f"{'environment':<20} : {settings.environment}")
    print(f"{'scroll debounce':<20} : {settings.scroll_debounce_ms} ms")
    print(f"{'history limit':<20} : {settings.history_limit}")
    print(f"{'='*60}\n")

    uvicorn.run(
        "envsnap.api.server:app",
        host=os.getenv("ENVSNAP_HOST", "127.0.0.1"),
        port=int(os.getenv("ENVSNAP_PORT", "8000")),
        reload=settings.is_dev,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

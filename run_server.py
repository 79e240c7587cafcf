"""Launch the AlumniConnect API with Uvicorn.

``SERVER_HOST``/``SERVER_PORT`` pick the bind address and ``UVICORN_RELOAD``
toggles auto-reload for local development.
"""
from __future__ import annotations

import os

import uvicorn

APP_IMPORT_PATH = "alumniconnect.main:app"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def main() -> None:
    host = os.getenv("SERVER_HOST", "0.0.0.0")
    port = int(os.getenv("SERVER_PORT", "8000"))
    uvicorn.run(APP_IMPORT_PATH, host=host, port=port, reload=_env_flag("UVICORN_RELOAD", "true"))


if __name__ == "__main__":
    main()

"""Run the runpace API with uvicorn.

Run with:  python3 serve.py
Host and port come from RUNPACE_HOST / RUNPACE_PORT (default 127.0.0.1:8000).
Under APP_ENV=dev the server reloads on code changes.
"""

from __future__ import annotations

import os

import uvicorn

from runpace.config import get_settings


def main() -> None:
    settings = get_settings()
    host = os.getenv("RUNPACE_HOST", "127.0.0.1")
    port = int(os.getenv("RUNPACE_PORT", "8000"))
    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=settings.is_dev,
        log_level="warning",
    )


if __name__ == "__main__":
    main()

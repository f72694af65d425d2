#!/usr/bin/env python3
"""Start the pin-lerna preview service."""

import os

import uvicorn

if __name__ == "__main__":
    host = os.environ.get("PIN_LERNA_HOST", "127.0.0.1")
    port = int(os.environ.get("PIN_LERNA_PORT", "8000"))

    print(f"Preview service: http://{host}:{port}/api/pin")
    print(f"API docs: http://{host}:{port}/docs")

    uvicorn.run(
        "apps.web.main:app",
        host=host,
        port=port,
        reload=True,
        reload_dirs=["apps", "pinlerna"],
    )

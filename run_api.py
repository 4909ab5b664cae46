"""Serve the validation API for local development.

    TRUSTVALIDATOR_FORMS_PATH=forms python run_api.py

Environment:
    TRUSTVALIDATOR_HOST       bind address (default 127.0.0.1)
    TRUSTVALIDATOR_PORT       port (default 8000)
    TRUSTVALIDATOR_RELOAD     "0" disables auto-reload
    TRUSTVALIDATOR_LOG_LEVEL  uvicorn log level (default info)
"""

import os

import uvicorn


def main() -> None:
    reload = os.environ.get("TRUSTVALIDATOR_RELOAD", "1") != "0"
    uvicorn.run(
        "trustvalidator.api.app:app",
        host=os.environ.get("TRUSTVALIDATOR_HOST", "127.0.0.1"),
        port=int(os.environ.get("TRUSTVALIDATOR_PORT", "8000")),
        reload=reload,
        log_level=os.environ.get("TRUSTVALIDATOR_LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()

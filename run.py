"""
Uvicorn server runner with configurable logging.

Usage:
    python run.py

Environment variables (set in .env file):
    DEBUG=true - Enable debug logging
    PORT=8000 - Set server port (default: 8000)
    HOST=127.0.0.1 - Set server host (default: 127.0.0.1)
    GITHUB_TOKEN=... - Optional token for higher GitHub API rate limits
"""

import uvicorn
from repotriage.config import get_settings

if __name__ == "__main__":
    import os

    settings = get_settings()

    # HOST and PORT can be overridden via environment variables
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))

    log_level = "debug" if settings.debug else "info"

    print(f"Starting {settings.app_name} server...")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Log Level: {log_level}")
    print(f"Account age gate: {'on' if settings.account_age_gate_enabled else 'off'}")
    print(f"API available at: http://{host}:{port}/api?url=<github url>")

    uvicorn.run(
        "repotriage.main:app",
        host=host,
        port=port,
        reload=settings.debug,
        log_level=log_level,
        access_log=True,
    )

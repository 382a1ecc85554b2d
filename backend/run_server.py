"""Standalone script to run the MindfulSpace API server.

    python backend/run_server.py

Host and port come from HOST / PORT (defaults 0.0.0.0:8000).
"""

import logging
import os
import sys
from pathlib import Path

import uvicorn

# Add backend directory to path
backend_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(backend_dir))

from mindfulspace.config import settings  # noqa: E402

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the API server."""
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    logger.info("Starting %s on %s:%d", settings.app_name, host, port)
    uvicorn.run(
        "mindfulspace.main:app",
        host=host,
        port=port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""
pokeroster.__main__ — Entry point for ``python -m pokeroster``
===============================================================

Wiring:
1. Load .env (secrets).
2. Configure logging.
3. Serve the FastAPI app with uvicorn; the app lifespan creates tables
   and seeds the master account.
"""

from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("pokeroster")


def main() -> None:
    """Run the Poké Roster API server."""
    load_dotenv()

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3001"))
    logger.info("Starting Poké Roster API on %s:%d…", host, port)
    uvicorn.run("pokeroster.api.main:app", host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()

"""
Main entrypoint: decode API served by uvicorn.

Env: PORT (default 5173), API_HOST, UPSTREAM_API_URL, SOLANA_RPC_URL, HTTP_TIMEOUT_SEC,
CORS_ALLOW_ORIGINS, FRONTEND_DIR, LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn txdecoder.api_server.app:app --host 0.0.0.0 --port 5173
"""

import os

# Configure structured JSON logging before other imports that may log
from txdecoder.decoder_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the FastAPI server in the main thread."""
    from txdecoder.config import env
    from txdecoder.api_server.app import app
    import uvicorn

    api_host = env.get_api_host()
    api_port = env.get_port()
    logger.info("main_server_starting", host=api_host, port=api_port, url=f"http://localhost:{api_port}")
    uvicorn.run(app, host=api_host, port=api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()

"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn txdecoder.api_server.app:app --host 0.0.0.0 --port 5173
"""

from txdecoder.api_server.server import app

__all__ = ["app"]

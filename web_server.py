#!/usr/bin/env python3
"""Web server entry point for the AI debate arena."""

from main import setup_logging

from web.api import app


if __name__ == "__main__":
    setup_logging()

    import uvicorn

    print("Starting AI Debate Arena Web Server...")
    print("API Documentation: http://localhost:8000/docs")
    print("WebSocket: ws://localhost:8000/ws/debate/{id}")

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info", access_log=True)

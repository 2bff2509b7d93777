"""FastAPI web layer: debate arenas, REST endpoints and WebSocket feed."""

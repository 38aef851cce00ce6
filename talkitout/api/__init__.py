"""
API module - FastAPI application, REST routes, and WebSocket endpoint.
"""

"""
Agentic UI Server Package.

This package contains the web server implementation for the agent-component bridge.
It exposes the chat gateway the agent talks through and the status endpoints.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and constants.
    schemas: Pydantic schemas for API request/response validation and SSE events.
    services: The request gateway and its dependencies.
"""

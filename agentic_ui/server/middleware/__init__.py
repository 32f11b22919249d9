"""
Middleware modules for the Agentic UI server.

Request timing and Logfire reporting for every HTTP request.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]

"""
Core utilities and configuration for the Agentic UI bridge.

This package provides shared functionality such as logging configuration
and Logfire monitoring helpers.
"""

from agentic_ui.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]

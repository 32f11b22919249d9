"""Server-wide constants."""

PROJECT_NAME = "Agentic UI Bridge"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
COPILOTKIT_PATH = "/api/copilotkit"

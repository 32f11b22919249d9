"""Service layer: the request gateway and its FastAPI dependencies."""

"""API package - Request/response schemas and FastAPI dependencies."""

"""Serving package - FastAPI application, proxy and workflow routes."""

"""
Pawzr API package.

The FastAPI application lives in api.app (served as "api.app:app").
"""

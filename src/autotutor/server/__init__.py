"""Outer surfaces: HTTP API, Celery worker, MCP server, and Lambda handler."""

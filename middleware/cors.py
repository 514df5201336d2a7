"""CORS middleware configuration for FastMCP server."""

import os

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

# MCP Inspector
DEFAULT_ALLOWED_ORIGINS = "http://localhost:6274"


def get_allowed_origins() -> list[str]:
    """Origins allowed to call the server, from CORS_ALLOW_ORIGINS (comma separated)."""
    origins = os.environ.get("CORS_ALLOW_ORIGINS", DEFAULT_ALLOWED_ORIGINS)
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


def get_cors_middleware() -> Middleware:
    """
    Create and return CORS middleware configuration.

    Returns:
        Middleware: Configured CORS middleware for FastMCP server
    """
    return Middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(),
        allow_methods=["POST", "OPTIONS", "GET"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
        allow_credentials=True,
    )

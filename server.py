"""MCP server exposing the dashboard widget field validation tools."""

import os
import sys
import logging
import uvicorn
from dotenv import load_dotenv
from fastmcp import FastMCP
from loader import load_tools_from_directory
from middleware import get_cors_middleware

load_dotenv()

MCP_HOST = os.environ.get("MCP_HOST", "127.0.0.1")
MCP_PORT = int(os.environ.get("MCP_PORT", "5001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logger = logging.getLogger(__name__)
logging.basicConfig(level=LOG_LEVEL)

mcp = FastMCP("widget-field-validation")

cors = get_cors_middleware()

try:
    load_tools_from_directory(mcp)
    logger.info("Successfully loaded tools from directory")
except Exception as e:
    logger.error("Failed to load tools: %s", e)
    raise

app = mcp.http_app(path="/mcp", middleware=[cors])


def main():
    mode = sys.argv[1] if len(sys.argv) > 1 else "http"

    if mode == "stdio":
        print("Running MCP in stdio mode...")
        mcp.run()

    elif mode in ("http", "sse"):
        print("Running MCP over HTTP streaming...")
        uvicorn.run(app, host=MCP_HOST, port=MCP_PORT)

    else:
        raise ValueError(f"Unknown mode: {mode}")


if __name__ == "__main__":
    main()

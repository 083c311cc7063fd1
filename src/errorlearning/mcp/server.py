"""MCP server implementation using FastMCP.

Creates and configures the MCP server with:
    - Tool auto-discovery
    - Runtime context establishment (one registry per server process)
    - Configuration loading
"""

from __future__ import annotations

import contextvars
import inspect
from uuid import uuid4

from mcp.server.fastmcp import FastMCP

from errorlearning.core.config import AppConfig, load_config
from errorlearning.core.console import setup_logging
from errorlearning.core.runtime import RuntimeContext, set_runtime_context
from errorlearning.mcp import get_tool_metadata, logger
from errorlearning.mcp.tools import discover_tools

# Token for the long-running runtime context
_runtime_token: contextvars.Token[RuntimeContext | None] | None = None


def _establish_runtime_context(cfg: AppConfig) -> RuntimeContext:
    """Establish the long-running runtime context for the MCP server.

    MCP servers run indefinitely, so the context is set at startup and
    never reset. The registry it owns lives as long as the process.
    """
    global _runtime_token

    ctx = RuntimeContext(config=cfg, trace_id=f"mcp-{uuid4().hex[:8]}")
    _runtime_token = set_runtime_context(ctx)
    logger.info("Runtime context established: trace_id=%s", ctx.trace_id)
    return ctx


def register_tools(mcp: FastMCP) -> int:
    """Register all discovered tools with the MCP server."""
    registered_count = 0

    for tool_name, func in discover_tools().items():
        metadata = get_tool_metadata(func) or {}

        signature = inspect.signature(func)
        for param_name, param in signature.parameters.items():
            if param.annotation is inspect.Parameter.empty:
                raise RuntimeError(
                    f"MCP tool '{tool_name}' argument '{param_name}' is missing a type hint."
                )

        mcp.add_tool(func, name=tool_name, **metadata)
        registered_count += 1

    logger.info("Registered %d MCP tools", registered_count)
    return registered_count


def create_server(cfg: AppConfig | None = None) -> FastMCP:
    if cfg is None:
        cfg, meta = load_config()
        if meta.error:
            logger.warning("Configuration error, using defaults: %s", meta.error)
    _establish_runtime_context(cfg)
    server = FastMCP(cfg.mcp.server_name)
    register_tools(server)
    return server


def main() -> None:
    cfg, _ = load_config()
    setup_logging(level=cfg.log_level)
    create_server(cfg).run()


if __name__ == "__main__":
    main()
